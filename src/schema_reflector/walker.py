"""
Type walker: recursive expansion of Python types into JSON Schema nodes.

One walker serves one generation call. It owns the definitions table that makes
recursive record graphs terminate and collects the non-fatal diagnostics raised
by malformed tag directives.
"""

from __future__ import annotations

from collections import abc
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union, get_args, get_origin

from .composition import add_boolean_subschemas, add_conditional_subschemas, add_switch_subschemas, exclusive_subschema
from .definitions import DefinitionsTable
from .errors import Diagnostic, ReflectionError, UnsupportedTypeError
from .fields import FieldDescriptor, collect_fields, embedded_records, is_record, qualified_name, unwrap_optional
from .keywords import Reporter, apply_keywords
from .reflector_logging import create_logger
from .tags import parse_tag
from .wellknown import BYTE_TYPES, FORMAT_TYPES, JsonSchemaTypes, RawMessage

if TYPE_CHECKING:
    from .reflector import Reflector

logger = create_logger(__name__)

SEQUENCE_ORIGINS = (list, tuple, set, frozenset, abc.Sequence, abc.MutableSequence, abc.Set, abc.MutableSet, abc.Collection, abc.Iterable)
UNIQUE_ORIGINS = (set, frozenset, abc.Set, abc.MutableSet)
MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def _primitive_kind(tp: Any) -> Optional[str]:
    if not isinstance(tp, type):
        return None
    # bool is an int subclass
    if issubclass(tp, bool):
        return JsonSchemaTypes.BOOLEAN.value
    if issubclass(tp, int):
        return JsonSchemaTypes.INTEGER.value
    if issubclass(tp, float):
        return JsonSchemaTypes.NUMBER.value
    if issubclass(tp, str):
        return JsonSchemaTypes.STRING.value
    return None


def _generic_base(cls: type) -> Tuple[Any, Tuple[Any, ...]]:
    """(origin, args) of the first parameterized base of a container subclass, e.g. class Tags(List[str])."""
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            origin = get_origin(base)
            if origin is not None:
                return origin, get_args(base)
    for builtin in (list, tuple, set, frozenset, dict):
        if issubclass(cls, builtin):
            return builtin, ()
    return cls, ()


def _container_origin(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    origin = get_origin(tp)
    if origin is not None:
        return origin, get_args(tp)
    if isinstance(tp, type) and issubclass(tp, (list, tuple, set, frozenset, dict)):
        if tp in (list, tuple, set, frozenset, dict):
            return tp, ()
        return _generic_base(tp)
    return None, ()


class TypeWalker:
    """Expands types for a single Reflector.reflect_* call."""

    def __init__(self, reflector: Reflector) -> None:
        self.reflector = reflector
        self.overrides = reflector.overrides
        self.definitions = DefinitionsTable()
        self.diagnostics: List[Diagnostic] = []
        # records whose exclusive combinator is being expanded right now
        self.__expanding: Dict[str, type] = {}

    # ----------------------------- Expansion ---------------------------------

    def expand(self, tp: Any, path: Optional[str] = None) -> Dict[str, Any]:
        """Expand `tp` into a schema node.

        Args:
            tp: Any supported type or type annotation.
            path: Dotted location used in error messages.

        Raises:
            UnsupportedTypeError: `tp` (or a type reachable from it) has no mapping.
        """
        tp = unwrap_optional(tp)
        # typing.NewType
        while hasattr(tp, "__supertype__"):
            tp = tp.__supertype__

        if is_record(tp):
            name = qualified_name(tp)
            if name in self.definitions:
                self._check_owner(name, tp, path)
                return self.definitions.ref(name)
            if name in self.__expanding:
                if self.__expanding[name] is tp:
                    logger.debug("Recursive exclusive combinator %s, promoting to a definition", name)
                    self.definitions.reserve(name, tp)
                    return self.definitions.ref(name)
                raise self._name_clash(name, self.__expanding[name], tp, path)
            return self.expand_record(tp, path)

        # enum values travel as their name or their number
        if isinstance(tp, type) and issubclass(tp, PyEnum):
            return {"oneOf": [{"type": JsonSchemaTypes.STRING.value}, {"type": JsonSchemaTypes.INTEGER.value}]}

        return self._expand_value_type(tp, path)

    def _expand_value_type(self, tp: Any, path: Optional[str]) -> Dict[str, Any]:
        if tp is Any or tp is object:
            return {"type": JsonSchemaTypes.OBJECT.value, "additionalProperties": True}

        if isinstance(tp, type):
            for known, fmt in FORMAT_TYPES.items():
                if issubclass(tp, known):
                    return {"type": JsonSchemaTypes.STRING.value, "format": fmt}
            # RawMessage is a bytes subclass but holds JSON
            if issubclass(tp, RawMessage):
                return {"type": JsonSchemaTypes.OBJECT.value}
            if issubclass(tp, BYTE_TYPES):
                return {"type": JsonSchemaTypes.STRING.value, "media": {"binaryEncoding": "base64"}}
            kind = _primitive_kind(tp)
            if kind:
                return {"type": kind}

        origin, args = _container_origin(tp)
        if origin in MAPPING_ORIGINS:
            return self._expand_mapping(args, path)
        if origin in SEQUENCE_ORIGINS:
            return self._expand_sequence(tp, origin, args, path)

        if get_origin(tp) is Union:
            reason = "only Optional[X] unions are supported"
        else:
            reason = "no JSON Schema mapping"
        logger.error("Cannot generate schema for %r at %s: %s", tp, path or "<root>", reason)
        raise UnsupportedTypeError(tp, path, reason)

    def _expand_mapping(self, args: Tuple[Any, ...], path: Optional[str]) -> Dict[str, Any]:
        node: Dict[str, Any] = {"type": JsonSchemaTypes.OBJECT.value}
        value_type = args[1] if len(args) == 2 else Any
        # Dict[str, Any] allows any child type
        if value_type is not Any and value_type is not object:
            node["patternProperties"] = {".*": self.expand(value_type, f"{path}{{}}" if path else None)}
        return node

    def _expand_sequence(self, tp: Any, origin: Any, args: Tuple[Any, ...], path: Optional[str]) -> Dict[str, Any]:
        node: Dict[str, Any] = {"type": JsonSchemaTypes.ARRAY.value}
        item_path = f"{path}[]" if path else None

        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            if args == ((),):
                args = ()
            if len(set(args)) > 1:
                logger.error("Cannot generate schema for %r at %s: heterogeneous tuple", tp, path or "<root>")
                raise UnsupportedTypeError(tp, path, "tuple items must share one type")
            element = args[0] if args else Any
            node["items"] = self.expand(element, item_path)
            node["minItems"] = len(args)
            node["maxItems"] = len(args)
        else:
            element = args[0] if args else Any
            node["items"] = self.expand(element, item_path)

        if origin in UNIQUE_ORIGINS:
            node["uniqueItems"] = True

        # container subclasses may report their own bounds
        if isinstance(tp, type):
            min_items = getattr(tp, "min_items", None)
            max_items = getattr(tp, "max_items", None)
            if callable(min_items):
                node["minItems"] = min_items()
            if callable(max_items):
                node["maxItems"] = max_items()
        return node

    def expand_record(self, cls: type, path: Optional[str] = None) -> Dict[str, Any]:
        """Expand a dataclass into the definitions table and return a reference to it.

        When the class implements an exclusive combinator hook the combinator node
        is returned instead and none of the class's own fields are walked.
        """
        name = qualified_name(cls)
        self.__expanding[name] = cls
        try:
            exclusive = exclusive_subschema(self, cls)
        finally:
            self.__expanding.pop(name, None)
        if exclusive is not None:
            if name in self.definitions:
                # a slot recursed into this record while it was being expanded
                self.definitions.fill(name, exclusive)
                return self.definitions.ref(name, with_version=True, track=False)
            return exclusive

        logger.debug("Expanding record %s", name)
        node = self.new_object_node()
        # register before walking the fields so self references resolve to it
        self.definitions.register(name, node, cls)
        self.reflect_fields(node, cls)
        # hooks of embedded records apply to the parent first, its own hooks last
        for embedded in embedded_records(cls):
            add_boolean_subschemas(self, node, embedded)
            add_switch_subschemas(self, node, embedded)
        add_boolean_subschemas(self, node, cls)
        add_switch_subschemas(self, node, cls)
        add_conditional_subschemas(self, node, cls)
        return self.definitions.ref(name, with_version=True, track=False)

    def new_object_node(self) -> Dict[str, Any]:
        return {
            "type": JsonSchemaTypes.OBJECT.value,
            "properties": {},
            "additionalProperties": self.reflector.allow_additional_properties,
        }

    def reflect_fields(self, node: Dict[str, Any], cls: type) -> None:
        """Walk the retained fields of `cls` (embedded dataclasses flattened) into `node`."""
        required: List[str] = []
        for resolved in collect_fields(cls, self.overrides, self.reflector.required_from_tags):
            owner_name = qualified_name(resolved.field.owner)
            prop = self.expand(resolved.type, f"{owner_name}.{resolved.field.name}")
            apply_keywords(prop, resolved.directives, self._reporter(owner_name, resolved.field.name))
            node["properties"][resolved.wire_name] = prop
            if resolved.required:
                required.append(resolved.wire_name)
        if required:
            node["required"] = required

    def condition_node(self, fd: FieldDescriptor) -> Dict[str, Any]:
        """Constraint asserted by an if/then/else trigger field, compiled from its schema tag."""
        kind = _primitive_kind(unwrap_optional(fd.type))
        node: Dict[str, Any] = {"type": kind} if kind else {}
        owner_name = qualified_name(fd.owner) if fd.owner is not None else None
        apply_keywords(node, parse_tag(fd.effective_tag(self.overrides)), self._reporter(owner_name, fd.name))
        node.pop("type", None)
        return node

    def _check_owner(self, name: str, tp: type, path: Optional[str]) -> None:
        owner = self.definitions.owner(name)
        if owner is not None and owner is not tp:
            raise self._name_clash(name, owner, tp, path)

    @staticmethod
    def _name_clash(name: str, first: type, second: type, path: Optional[str]) -> ReflectionError:
        logger.error("Definition %s is claimed by %r and %r (at %s)", name, first, second, path or "<root>")
        return ReflectionError(
            f"types {first.__module__}.{first.__qualname__} and {second.__module__}.{second.__qualname__} "
            f"both map to definition '{name}'"
        )

    # ----------------------------- Diagnostics -------------------------------

    def _reporter(self, type_name: Optional[str], field_name: Optional[str]) -> Reporter:
        def report(directive: str, value: Optional[str], message: str) -> None:
            diagnostic = Diagnostic(type_name, field_name, directive, value, message)
            self.diagnostics.append(diagnostic)
            logger.warning("Ignoring malformed directive %s", diagnostic)
        return report
