"""Generate JSON Schema (draft-07) documents from Python dataclasses."""

from .composition import Composition, SchemaCondition, SchemaSwitch, capabilities
from .definitions import DefinitionsTable
from .errors import Diagnostic, InvalidCompositionError, ReflectionError, UnsupportedTypeError
from .fields import FieldDescriptor, field_of, schema_field
from .overrides import SchemaTagOverrides, get_schema_tag_override
from .reflector import Reflector, reflect, reflect_from_type, to_json
from .tags import Directive, parse_tag
from .wellknown import VERSION, RawMessage

__all__ = [
    "Composition",
    "DefinitionsTable",
    "Diagnostic",
    "Directive",
    "FieldDescriptor",
    "InvalidCompositionError",
    "RawMessage",
    "ReflectionError",
    "Reflector",
    "SchemaCondition",
    "SchemaSwitch",
    "SchemaTagOverrides",
    "UnsupportedTypeError",
    "VERSION",
    "capabilities",
    "field_of",
    "get_schema_tag_override",
    "parse_tag",
    "reflect",
    "reflect_from_type",
    "schema_field",
    "to_json",
]
