"""
Reflector: generates JSON Schema (draft-07) documents from Python types.

If "json" tags are present on dataclass fields they are used to infer property
names and whether a property is required (omitempty makes it optional).

Usage:
```python
from dataclasses import dataclass
from typing import List, Optional
from schema_reflector import Reflector, schema_field, to_json

@dataclass
class Pet:
    name: str = schema_field(json="name", jsonschema="minLength=1")
    tags: List[str] = schema_field(json="tags,omitempty", jsonschema="uniqueItems")
    owner: Optional["Pet"] = schema_field(json="owner,omitempty")

document = Reflector().reflect_from_type(Pet)
# {"$schema": "http://json-schema.org/draft-07/schema#",
#  "$ref": "#/definitions/models.Pet",
#  "definitions": {"models.Pet": {"type": "object", ...}}}
print(to_json(document))
```
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, get_origin
import json

from .config import reflector_settings
from .errors import Diagnostic
from .fields import is_record, qualified_name, unwrap_optional
from .overrides import SchemaTagOverrides
from .reflector_logging import create_logger
from .walker import TypeWalker
from .wellknown import VERSION

logger = create_logger(__name__)


@dataclass(frozen=True)
class Reflector:
    """Generation-wide options. Immutable, so one Reflector can serve many calls.

    allow_additional_properties: every generated record schema sets
        additionalProperties to true instead of false.
    required_from_tags: require only fields tagged "required" in their schema tag,
        instead of every field whose wire tag lacks omitempty.
    expanded_top_level: inline the root record instead of referencing its definition.
    overrides: schema tags that replace the declared ones for specific fields.
    """

    allow_additional_properties: bool = False
    required_from_tags: bool = False
    expanded_top_level: bool = False
    overrides: Optional[SchemaTagOverrides] = None

    @classmethod
    def from_env(cls, overrides: Optional[SchemaTagOverrides] = None) -> "Reflector":
        return cls(overrides=overrides, **reflector_settings())

    def reflect(self, value: Any) -> Dict[str, Any]:
        """Generate the schema of a value's type. Types and type annotations are used as is."""
        if isinstance(value, type) or get_origin(value) is not None or value is Any:
            return self.reflect_from_type(value)
        return self.reflect_from_type(type(value))

    def reflect_from_type(self, tp: Any) -> Dict[str, Any]:
        document, _ = self.reflect_with_diagnostics(tp)
        return document

    def reflect_with_diagnostics(self, tp: Any) -> Tuple[Dict[str, Any], List[Diagnostic]]:
        """Generate the schema document for `tp`.

        Returns:
            Tuple of (document, diagnostics). Diagnostics list the malformed tag
            directives that were skipped; they never abort generation.

        Raises:
            UnsupportedTypeError: a type reachable from `tp` cannot be mapped.
            ReflectionError: two distinct types map to one definition name.
            InvalidCompositionError: a composition hook is malformed.
        """
        walker = TypeWalker(self)
        root = walker.expand(tp)
        if self.expanded_top_level:
            root = self._inline_root(walker, tp, root)

        document: Dict[str, Any] = {"$schema": VERSION}
        for key, value in root.items():
            if key != "$schema":
                document[key] = value
        if len(walker.definitions):
            document["definitions"] = walker.definitions.as_dict()

        if walker.diagnostics:
            logger.info("Generated schema for %r with %d diagnostic(s)", tp, len(walker.diagnostics))
        return document, walker.diagnostics

    @staticmethod
    def _inline_root(walker: TypeWalker, tp: Any, root: Dict[str, Any]) -> Dict[str, Any]:
        tp = unwrap_optional(tp)
        if not is_record(tp):
            return root
        name = qualified_name(tp)
        node = walker.definitions.get(name)
        if node is None or "$ref" not in root:
            # exclusive combinators are already inline
            return root
        if walker.definitions.is_referenced(name):
            logger.debug("Keeping definition %s: the root type refers to itself", name)
        else:
            walker.definitions.pop(name)
        return dict(node)


_default_reflector = Reflector()


def reflect(value: Any) -> Dict[str, Any]:
    """Generate a schema using the default Reflector."""
    return _default_reflector.reflect(value)


def reflect_from_type(tp: Any) -> Dict[str, Any]:
    """Generate a schema for a type using the default Reflector."""
    return _default_reflector.reflect_from_type(tp)


def to_json(document: Dict[str, Any], indent: Optional[int] = 2) -> str:
    """Serialize a schema document. Key order is generation order, so equal inputs give equal output.

    Raises:
        ValueError: the document holds a float that JSON cannot represent (inf, nan).
    """
    return json.dumps(document, indent=indent, allow_nan=False)
