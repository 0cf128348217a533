"""
Constraint compiler: reads parsed schema-tag directives into JSON Schema keywords.

Compilers are registered per JSON Schema kind with `_register_keyword_compiler`.
A node without a "type" (references, interface-like values) is compiled with the
string rules. Malformed numeric or boolean values never abort generation: the
keyword is skipped and the problem is handed to the `report` callback.
"""

from typing import Any, Callable, Dict, List, Optional
import logging
import math

from .tags import Directive, split_enum
from .wellknown import ALLOWED_FORMATS, FALSE_STRINGS, NOT_EMPTY_PATTERN, TRUE_STRINGS, JsonSchemaTypes

logger = logging.getLogger(__name__)

# report(directive_name, raw_value, message)
Reporter = Callable[[str, Optional[str], str], None]

__keyword_compilers_registry: Dict[str, Callable] = {}


def _register_keyword_compiler(kind: str):
    """Decorator to register a keyword compiler for a JSON Schema kind."""
    def decorator(func: Callable):
        __keyword_compilers_registry[kind] = func
        return func
    return decorator


def _get_keyword_compiler(kind: str) -> Optional[Callable]:
    return __keyword_compilers_registry.get(kind)


def _ignore_report(directive: str, value: Optional[str], message: str) -> None:
    logger.warning("Ignoring directive %s=%r: %s", directive, value, message)


def apply_keywords(node: Dict[str, Any], directives: List[Directive], report: Optional[Reporter] = None) -> Dict[str, Any]:
    """Mutate `node` with the keywords its directives describe and return it.

    Args:
        node: Schema node produced by the type walker.
        directives: Parsed schema tag of the field the node describes.
        report: Called once per malformed directive value.
    """
    if not directives:
        return node
    report = report or _ignore_report
    kind = node.get("type") or JsonSchemaTypes.STRING.value
    compiler = _get_keyword_compiler(kind)
    for directive in directives:
        if _common_keyword(node, directive):
            continue
        if compiler:
            compiler(node, directive, report)
    return node


def _common_keyword(node: Dict[str, Any], directive: Directive) -> bool:
    """Keywords shared by every kind. Returns True when the directive was consumed."""
    if directive.name in ("title", "description") and not directive.is_flag:
        node[directive.name] = directive.value
        return True
    return False


def allow_null(node: Dict[str, Any]) -> None:
    """Replace the node's kind with a two branch oneOf of {original kind} and {null}."""
    null_branch = {"type": JsonSchemaTypes.NULL.value}
    kind = node.pop("type", None)
    if kind is not None:
        branch: Dict[str, Any] = {"type": kind}
    elif "$ref" in node:
        branch = {}
        if "$schema" in node:
            branch["$schema"] = node.pop("$schema")
        branch["$ref"] = node.pop("$ref")
    elif "oneOf" in node:
        if null_branch not in node["oneOf"]:
            node["oneOf"].append(null_branch)
        return
    else:
        branch = {}
    node["oneOf"] = [branch, null_branch]


def _to_int(directive: Directive, report: Reporter) -> Optional[int]:
    try:
        return int(directive.value)
    except (TypeError, ValueError):
        report(directive.name, directive.value, "not an integer")
        return None


def _to_float(directive: Directive, report: Reporter) -> Optional[float]:
    try:
        value = float(directive.value)
    except (TypeError, ValueError):
        report(directive.name, directive.value, "not a number")
        return None
    # inf and nan have no JSON representation
    if not math.isfinite(value):
        report(directive.name, directive.value, "not a finite number")
        return None
    return value


def _to_bool(directive: Directive, report: Reporter) -> Optional[bool]:
    if directive.value in TRUE_STRINGS:
        return True
    if directive.value in FALSE_STRINGS:
        return False
    report(directive.name, directive.value, "not a boolean")
    return None


def _set_if_parsed(node: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        node[key] = value


# ----------------------------- Keyword compilers -----------------------------

@_register_keyword_compiler("string")
def _string_keywords(node: Dict[str, Any], directive: Directive, report: Reporter) -> None:
    """minLength/maxLength/enum/format/pattern plus the notEmpty and allowNull flags."""
    name, value = directive
    if directive.is_flag:
        if name == "notEmpty":
            node["pattern"] = NOT_EMPTY_PATTERN
        elif name == "allowNull":
            allow_null(node)
        return

    if name in ("minLength", "maxLength"):
        _set_if_parsed(node, name, _to_int(directive, report))
    elif name == "enum":
        node["enum"] = split_enum(value)
    elif name == "format":
        if value in ALLOWED_FORMATS:
            node["format"] = value
        else:
            report(name, value, "unknown format")
    elif name == "pattern":
        node["pattern"] = value


@_register_keyword_compiler("integer")
def _integer_keywords(node: Dict[str, Any], directive: Directive, report: Reporter) -> None:
    name, value = directive
    if directive.is_flag:
        if name == "allowNull":
            allow_null(node)
        return

    if name in ("multipleOf", "minimum", "maximum"):
        _set_if_parsed(node, name, _to_int(directive, report))
    elif name in ("exclusiveMinimum", "exclusiveMaximum"):
        # only a true flag is written out
        if _to_bool(directive, report):
            node[name] = True
    elif name == "enum":
        members = []
        for member in split_enum(value):
            parsed = _to_int(Directive(name, member), report)
            if parsed is not None:
                members.append(parsed)
        node["enum"] = members


@_register_keyword_compiler("number")
def _number_keywords(node: Dict[str, Any], directive: Directive, report: Reporter) -> None:
    name, value = directive
    if directive.is_flag:
        if name == "allowNull":
            allow_null(node)
        return

    if name in ("multipleOf", "minimum", "maximum"):
        _set_if_parsed(node, name, _to_float(directive, report))
    elif name == "enum":
        members = []
        for member in split_enum(value):
            parsed = _to_float(Directive(name, member), report)
            if parsed is not None:
                members.append(parsed)
        node["enum"] = members


@_register_keyword_compiler("array")
def _array_keywords(node: Dict[str, Any], directive: Directive, report: Reporter) -> None:
    name, _ = directive
    if directive.is_flag:
        if name == "uniqueItems":
            node["uniqueItems"] = True
        return

    if name in ("minItems", "maxItems"):
        _set_if_parsed(node, name, _to_int(directive, report))
    elif name == "uniqueItems":
        _set_if_parsed(node, name, _to_bool(directive, report))
