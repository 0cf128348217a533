"""
Subschema composition for record types.

A dataclass opts into composition by defining one or more of these classmethods
(or staticmethods). Capabilities are looked up once per class and cached as a
`Composition` flag set.

Exclusive hooks replace the record's generated schema entirely; only the listed
slots are expanded (priority anyOf, then oneOf, then allOf):

    json_schema_any_of() / json_schema_one_of() / json_schema_all_of()
        -> list of slots: a type, a FieldDescriptor, or None for {"type": "null"}

    @dataclass
    class StringOrNull:
        value: str

        @classmethod
        def json_schema_one_of(cls):
            return [str, None]      # {"oneOf": [{"type": "string"}, {"type": "null"}]}

Augmenting hooks keep the record's properties and add a combinator next to them:

    json_schema_and_any_of() / json_schema_and_one_of() / json_schema_and_all_of()

    # {"type": "object", "properties": {...}, "oneOf": [<Laptop>, <Desktop>]}

Conditional hook (draft-07 section 6.6), keyed on a single field:

    json_schema_if_then_else() -> SchemaCondition
    # {"if": {"properties": {"type": {"enum": ["web"]}}}, "then": <WebApp>, "else": <MobileApp>}

Switch hook, a shorthand for a switch without default over one field's value:

    json_schema_case() -> SchemaSwitch
    # {"oneOf": [
    #    {"if": {"properties": {"type": {"enum": ["apple"]}}},
    #     "then": {"$schema": "...", "$ref": "#/definitions/models.Apple"},
    #     "else": {"properties": {"type": {"enum": ["apple"]}}}},
    #    ...]}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Flag
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence
from weakref import WeakKeyDictionary
import copy
import inspect
import logging

from .errors import InvalidCompositionError
from .fields import FieldDescriptor, qualified_name
from .wellknown import JsonSchemaTypes

if TYPE_CHECKING:
    from .walker import TypeWalker

logger = logging.getLogger(__name__)


class Composition(Flag):
    NONE = 0
    ANY_OF = 1
    ONE_OF = 2
    ALL_OF = 4
    AND_ANY_OF = 8
    AND_ONE_OF = 16
    AND_ALL_OF = 32
    IF_THEN_ELSE = 64
    SWITCH = 128
    EXCLUSIVE = 7


CAPABILITY_METHODS = MappingProxyType({
    Composition.ANY_OF: "json_schema_any_of",
    Composition.ONE_OF: "json_schema_one_of",
    Composition.ALL_OF: "json_schema_all_of",
    Composition.AND_ANY_OF: "json_schema_and_any_of",
    Composition.AND_ONE_OF: "json_schema_and_one_of",
    Composition.AND_ALL_OF: "json_schema_and_all_of",
    Composition.IF_THEN_ELSE: "json_schema_if_then_else",
    Composition.SWITCH: "json_schema_case",
})

# keyword written by each combinator capability, in priority order
EXCLUSIVE_KEYWORDS = ((Composition.ANY_OF, "anyOf"), (Composition.ONE_OF, "oneOf"), (Composition.ALL_OF, "allOf"))
AUGMENTING_KEYWORDS = ((Composition.AND_ANY_OF, "anyOf"), (Composition.AND_ONE_OF, "oneOf"), (Composition.AND_ALL_OF, "allOf"))


@dataclass(frozen=True)
class SchemaCondition:
    """if/then/else data.

    if_field: the field whose schema tag defines the condition (see `field_of`).
    then: type expanded and evaluated when the condition holds (None to omit).
    else_: type expanded and evaluated when it does not (None to omit).
    """

    if_field: FieldDescriptor
    then: Any = None
    else_: Any = None


@dataclass(frozen=True)
class SchemaSwitch:
    """Switch over the value of one field.

    by_field: wire name of the field to evaluate (ex: "species").
    cases: field value -> type to validate against for that value (ex: "turtle" -> Turtle).
    order: keys of `cases` in output order; when empty the keys are sorted.
    """

    by_field: str
    cases: Mapping[Any, Any]
    order: Sequence[Any] = field(default_factory=tuple)

    def ordered_keys(self) -> List[Any]:
        if self.order:
            missing = [key for key in self.order if key not in self.cases]
            if missing:
                raise InvalidCompositionError(f"switch on '{self.by_field}' orders unknown cases {missing!r}")
            return list(self.order)
        return sorted(self.cases, key=lambda key: (type(key).__name__, key))


# inspected classes, weakly held so dynamically created classes can be collected
_capabilities_cache: WeakKeyDictionary[type, Composition] = WeakKeyDictionary()


def capabilities(cls: type) -> Composition:
    """Resolve which composition hooks a record class implements. Cached per class.

    Raises:
        InvalidCompositionError: a hook is a plain instance method; hooks are
            called on the class and must be classmethods or staticmethods.
    """
    found = _capabilities_cache.get(cls)
    if found is None:
        found = _find_capabilities(cls)
        _capabilities_cache[cls] = found
    return found


def clear_capabilities_cache() -> None:
    _capabilities_cache.clear()


def _find_capabilities(cls: type) -> Composition:
    found = Composition.NONE
    for capability, method_name in CAPABILITY_METHODS.items():
        if not callable(getattr(cls, method_name, None)):
            continue
        raw = inspect.getattr_static(cls, method_name)
        if not isinstance(raw, (classmethod, staticmethod)):
            raise InvalidCompositionError(f"{cls.__name__}.{method_name}() must be a classmethod or staticmethod")
        found |= capability
    exclusive = found & Composition.EXCLUSIVE
    if exclusive and exclusive not in (Composition.ANY_OF, Composition.ONE_OF, Composition.ALL_OF):
        logger.warning("%s implements several exclusive combinators; only the first of anyOf/oneOf/allOf is used", cls.__name__)
    return found


def _call_hook(cls: type, capability: Composition) -> Any:
    return getattr(cls, CAPABILITY_METHODS[capability])()


def _slot_schemas(walker: TypeWalker, cls: type, slots: Sequence[Any]) -> List[Dict[str, Any]]:
    schemas: List[Dict[str, Any]] = []
    for slot in slots:
        if slot is None:
            schemas.append({"type": JsonSchemaTypes.NULL.value})
        elif isinstance(slot, FieldDescriptor):
            schemas.append(walker.expand(slot.type, f"{qualified_name(cls)}.{slot.name}"))
        else:
            schemas.append(walker.expand(slot, qualified_name(cls)))
    return schemas


def exclusive_subschema(walker: TypeWalker, cls: type) -> Optional[Dict[str, Any]]:
    """Combinator node that supplants the record's schema, or None when the class has no exclusive hook."""
    found = capabilities(cls)
    for capability, keyword in EXCLUSIVE_KEYWORDS:
        if capability in found:
            return {keyword: _slot_schemas(walker, cls, _call_hook(cls, capability))}
    return None


def add_boolean_subschemas(walker: TypeWalker, node: Dict[str, Any], cls: type) -> None:
    found = capabilities(cls)
    for capability, keyword in AUGMENTING_KEYWORDS:
        if capability in found:
            node[keyword] = _slot_schemas(walker, cls, _call_hook(cls, capability))


def add_conditional_subschemas(walker: TypeWalker, node: Dict[str, Any], cls: type) -> None:
    if Composition.IF_THEN_ELSE not in capabilities(cls):
        return
    condition = _call_hook(cls, Composition.IF_THEN_ELSE)
    if not isinstance(condition, SchemaCondition):
        raise InvalidCompositionError(f"{cls.__name__}.json_schema_if_then_else() must return a SchemaCondition, got {type(condition).__name__}")

    trigger = condition.if_field
    node["if"] = {"properties": {trigger.wire_name: walker.condition_node(trigger)}}
    path = qualified_name(cls)
    if condition.then is not None:
        node["then"] = walker.expand(condition.then, path)
    if condition.else_ is not None:
        node["else"] = walker.expand(condition.else_, path)


def add_switch_subschemas(walker: TypeWalker, node: Dict[str, Any], cls: type) -> None:
    if Composition.SWITCH not in capabilities(cls):
        return
    switch = _call_hook(cls, Composition.SWITCH)
    if not isinstance(switch, SchemaSwitch):
        raise InvalidCompositionError(f"{cls.__name__}.json_schema_case() must return a SchemaSwitch, got {type(switch).__name__}")
    if "oneOf" in node:
        logger.warning("%s: json_schema_case() replaces the oneOf from json_schema_and_one_of()", cls.__name__)

    path = qualified_name(cls)
    cases: List[Dict[str, Any]] = []
    for value in switch.ordered_keys():
        if_clause = {"properties": {switch.by_field: {"enum": [value]}}}
        cases.append({
            "if": if_clause,
            "then": walker.expand(switch.cases[value], f"{path}[{value!r}]"),
            "else": copy.deepcopy(if_clause),
        })
    node["oneOf"] = cases
