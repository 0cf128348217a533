"""
Field tag grammar.

Two tags are read per dataclass field (both stored in the field's metadata):

- the wire-name tag (metadata key "json"), e.g. "first_name,omitempty"
- the schema tag (metadata key "jsonschema"), e.g. "required,minLength=1,enum=a|b|c"

A schema tag is a comma separated list of directives. A directive is either a bare
flag ("required", "optional", "notEmpty", "allowNull", "uniqueItems") or a
"name=value" pair. A first directive of "-" ignores the field entirely.
"""

from typing import List, NamedTuple, Optional, Tuple

WIRE_TAG_KEY = "json"
SCHEMA_TAG_KEY = "jsonschema"
EMBED_KEY = "embed"

IGNORE = "-"
OMIT_EMPTY = "omitempty"
REQUIRED = "required"
OPTIONAL = "optional"
ENUM_SEPARATOR = "|"


class Directive(NamedTuple):
    name: str
    value: Optional[str] = None

    @property
    def is_flag(self) -> bool:
        return self.value is None


def parse_tag(tag: Optional[str]) -> List[Directive]:
    """Parse a raw schema tag into its ordered directives.

    Args:
        tag: The raw tag string; None and "" yield no directives.

    Returns:
        List of Directive, in tag order. The value of a "name=value" directive is
        everything after the first "=".
    """
    directives: List[Directive] = []
    if not tag:
        return directives
    for part in tag.split(","):
        if not part:
            continue
        if "=" in part:
            name, value = part.split("=", 1)
            directives.append(Directive(name, value))
        else:
            directives.append(Directive(part))
    return directives


def split_enum(value: str) -> List[str]:
    return value.split(ENUM_SEPARATOR)


def is_ignored(directives: List[Directive]) -> bool:
    return bool(directives) and directives[0] == Directive(IGNORE)


def is_required(directives: List[Directive]) -> bool:
    """Required-ness when it is driven by the schema tag: only an explicit "required" flag counts."""
    if is_ignored(directives):
        return False
    return any(d.is_flag and d.name == REQUIRED for d in directives)


def is_optional(directives: List[Directive]) -> bool:
    # "optional" lets a field that is always serialized (no omitempty) skip validation
    return any(d.is_flag and d.name == OPTIONAL for d in directives)


def parse_wire_tag(tag: Optional[str]) -> Tuple[str, List[str]]:
    """Split a wire-name tag into (name, options). The name may be empty."""
    parts = (tag or "").split(",")
    return parts[0], parts[1:]


def wire_ignored(tag: Optional[str]) -> bool:
    name, _ = parse_wire_tag(tag)
    return name == IGNORE


def required_from_wire_tag(tag: Optional[str]) -> bool:
    """Default required-ness: required unless the wire tag carries omitempty."""
    if wire_ignored(tag):
        return False
    _, options = parse_wire_tag(tag)
    return OMIT_EMPTY not in options
