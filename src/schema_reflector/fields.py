"""
Dataclass introspection: field listing, embedding, wire names and required-ness.

A record type is a dataclass. Each field may carry, in its metadata:

    "json"        wire-name tag, e.g. "first_name,omitempty" or "-"
    "jsonschema"  schema tag, e.g. "required,minLength=1"
    "embed"       True to inline the fields of a nested dataclass into the parent

`schema_field()` builds such a field:

    @dataclass
    class User:
        base: Base = schema_field(embed=True)
        name: str = schema_field(json="name", jsonschema="minLength=1")
        note: Optional[str] = schema_field(json="note,omitempty")
"""

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union, get_args, get_origin, get_type_hints
import logging

from .errors import UnsupportedTypeError
from .overrides import SchemaTagOverrides
from .tags import (
    EMBED_KEY,
    SCHEMA_TAG_KEY,
    WIRE_TAG_KEY,
    Directive,
    is_ignored,
    is_optional,
    is_required,
    parse_tag,
    parse_wire_tag,
    required_from_wire_tag,
    wire_ignored,
)

logger = logging.getLogger(__name__)

NoneType = type(None)


def schema_field(*, json: str = "", jsonschema: str = "", embed: bool = False, **kwargs: Any) -> Any:
    """dataclasses.field() with the wire-name tag, schema tag and embed flag stored in metadata."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    if json:
        metadata[WIRE_TAG_KEY] = json
    if jsonschema:
        metadata[SCHEMA_TAG_KEY] = jsonschema
    if embed:
        metadata[EMBED_KEY] = True
    return field(metadata=metadata, **kwargs)


def is_record(tp: Any) -> bool:
    return isinstance(tp, type) and is_dataclass(tp)


def unwrap_optional(tp: Any) -> Any:
    """Strip Optional[...] wrappers; Optional carries no schema meaning by itself."""
    while get_origin(tp) is Union:
        args = [a for a in get_args(tp) if a is not NoneType]
        if len(args) != 1:
            return tp
        tp = args[0]
    return tp


def qualified_name(tp: type) -> str:
    """Definitions key of a record type: "<last module component>.<class qualname>".

    Nested classes keep their enclosing class ("models.Order.Line"); classes defined
    inside functions drop the "<locals>" marker.
    """
    package = tp.__module__.rsplit(".", 1)[-1]
    name = tp.__qualname__.replace("<locals>.", "")
    return f"{package}.{name}"


@dataclass(frozen=True)
class FieldDescriptor:
    """A declared dataclass field as the host type system reports it."""

    name: str
    type: Any
    owner: Optional[type]
    wire_tag: str = ""
    schema_tag: str = ""
    embedded: bool = False

    @property
    def visible(self) -> bool:
        return not self.name.startswith("_")

    @property
    def wire_name(self) -> str:
        name, _ = parse_wire_tag(self.wire_tag)
        return name or self.name

    def effective_tag(self, overrides: Optional[SchemaTagOverrides]) -> str:
        if overrides is not None:
            tag = overrides.get(self.owner, self.name)
            if tag is not None:
                return tag
        return self.schema_tag


class ResolvedField(NamedTuple):
    """A retained field: serialized name, declared type, required flag and its parsed schema tag."""

    wire_name: str
    type: Any
    required: bool
    tag: str
    directives: List[Directive]
    field: FieldDescriptor


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls)
    except NameError as e:
        raise UnsupportedTypeError(cls, reason=f"cannot resolve annotations ({e})") from e


def declared_fields(cls: type) -> List[FieldDescriptor]:
    """List the fields of a dataclass in declaration order with resolved types."""
    if not is_record(cls):
        raise UnsupportedTypeError(cls, reason="not a dataclass")
    hints = _type_hints(cls)
    return [
        FieldDescriptor(
            name=f.name,
            type=hints.get(f.name, f.type),
            owner=cls,
            wire_tag=f.metadata.get(WIRE_TAG_KEY, ""),
            schema_tag=f.metadata.get(SCHEMA_TAG_KEY, ""),
            embedded=bool(f.metadata.get(EMBED_KEY, False)),
        )
        for f in fields(cls)
    ]


def field_of(cls: type, name: str) -> FieldDescriptor:
    """Look up a declared field by its attribute name."""
    for fd in declared_fields(cls):
        if fd.name == name:
            return fd
    raise KeyError(f"{cls.__name__} has no field '{name}'")


def resolve_field(fd: FieldDescriptor, overrides: Optional[SchemaTagOverrides], required_from_tags: bool) -> Optional[ResolvedField]:
    """Resolve wire name and required-ness of a field, or None when the field is skipped.

    A field is skipped when it is not visible, when its wire tag is "-", or when the
    first directive of its (possibly overridden) schema tag is "-".
    """
    if not fd.visible or wire_ignored(fd.wire_tag):
        return None
    tag = fd.effective_tag(overrides)
    directives = parse_tag(tag)
    if is_ignored(directives):
        return None

    if required_from_tags:
        required = is_required(directives)
    else:
        required = required_from_wire_tag(fd.wire_tag)
    if is_optional(directives):
        required = False

    return ResolvedField(fd.wire_name, fd.type, required, tag, directives, fd)


def collect_fields(cls: type, overrides: Optional[SchemaTagOverrides], required_from_tags: bool) -> List[ResolvedField]:
    """Retained fields of a record, with embedded dataclasses flattened in.

    When a wire name is declared at several embedding depths the shallowest
    declaration wins outright; a field declared on the record itself always
    beats an embedded one. Within one depth the first declaration wins.
    Properties keep the position where their wire name was first met.
    """
    selected: Dict[str, Tuple[int, ResolvedField]] = {}

    def visit(tp: type, depth: int, chain: Tuple[type, ...]) -> None:
        for fd in declared_fields(tp):
            if fd.embedded and fd.visible:
                inner = unwrap_optional(fd.type)
                if not is_record(inner):
                    raise UnsupportedTypeError(inner, f"{qualified_name(tp)}.{fd.name}", "embedded field must be a dataclass")
                if inner in chain:
                    logger.debug("Skipping recursive embedding of %s in %s", inner.__name__, tp.__name__)
                    continue
                visit(inner, depth + 1, chain + (inner,))
                continue

            resolved = resolve_field(fd, overrides, required_from_tags)
            if resolved is None:
                continue
            current = selected.get(resolved.wire_name)
            if current is None or depth < current[0]:
                selected[resolved.wire_name] = (depth, resolved)

    visit(cls, 0, (cls,))
    return [resolved for _, resolved in selected.values()]


def embedded_records(cls: type) -> List[type]:
    """Dataclasses embedded in `cls`, directly or transitively, deepest first.

    Each type is listed once; recursive embedding is skipped as in `collect_fields`.
    """
    found: List[type] = []

    def visit(tp: type, chain: Tuple[type, ...]) -> None:
        for fd in declared_fields(tp):
            if not (fd.embedded and fd.visible):
                continue
            inner = unwrap_optional(fd.type)
            if not is_record(inner) or inner in chain:
                continue
            visit(inner, chain + (inner,))
            if inner not in found:
                found.append(inner)

    visit(cls, (cls,))
    return found
