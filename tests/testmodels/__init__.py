"""Dataclasses exercised by the reflector tests."""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from ipaddress import IPv4Address
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import ParseResult

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', '..', 'src'))
from schema_reflector import RawMessage, SchemaCondition, SchemaSwitch, field_of, schema_field

from . import v1, v2


# ----------------------------- Plain records -----------------------------

class Feeling(Enum):
    GOOD = 0
    BAD = 1


@dataclass
class GrandfatherType:
    family_name: str = schema_field(json="family_name", jsonschema="required")


@dataclass
class SomeBaseType:
    some_base_property: int = schema_field(json="some_base_property")
    _some_unexported_property: str = schema_field()
    ignored: str = schema_field(json="-")
    grandfather: GrandfatherType = schema_field(embed=True)


@dataclass
class User:
    base: SomeBaseType = schema_field(embed=True)
    id: int = schema_field(json="id", jsonschema="required")
    name: str = schema_field(json="name", jsonschema="required,minLength=1,maxLength=20,pattern=.*,description=this is a property,title=the name")
    friends: List[int] = schema_field(json="friends,omitempty")
    tags: Dict[str, Any] = schema_field(json="tags,omitempty")
    counts: Dict[str, int] = schema_field(json="counts,omitempty")
    birth_date: datetime = schema_field(json="birth_date,omitempty")
    website: ParseResult = schema_field(json="website,omitempty")
    ipv4: IPv4Address = schema_field(json="network_address,omitempty")
    photo: bytes = schema_field(json="photo,omitempty", jsonschema="required")
    feeling: Feeling = schema_field(json="feeling,omitempty")
    age: int = schema_field(json="age", jsonschema="minimum=18,maximum=120,exclusiveMaximum=true,exclusiveMinimum=true")
    email: str = schema_field(json="email", jsonschema="format=email")
    payload: RawMessage = schema_field(json="payload,omitempty")
    extra: Any = schema_field(json="extra,omitempty")
    nickname: Optional[str] = schema_field(json="nickname", jsonschema="allowNull")
    color: str = schema_field(json="color", jsonschema="enum=red|green|blue")
    rank: int = schema_field(json="rank,omitempty", jsonschema="enum=1|2|3")
    ratio: float = schema_field(json="ratio,omitempty", jsonschema="enum=0.5|1.5")
    scores: Tuple[float, float, float] = schema_field(json="scores,omitempty")
    aliases: List[str] = schema_field(json="aliases,omitempty", jsonschema="minItems=1,maxItems=5,uniqueItems")
    secret: str = schema_field(json="secret", jsonschema="-")
    dropped: str = schema_field(json="-,")
    comment: str = schema_field(json="comment", jsonschema="optional")


@dataclass
class TreeNode:
    value: str = schema_field(json="value")
    children: List["TreeNode"] = schema_field(json="children,omitempty")
    parent: Optional["TreeNode"] = schema_field(json="parent,omitempty")


@dataclass
class Employee:
    name: str = schema_field(json="name")
    department: Optional["Department"] = schema_field(json="department,omitempty")


@dataclass
class Department:
    title: str = schema_field(json="title")
    manager: Optional[Employee] = schema_field(json="manager,omitempty")
    staff: List[Employee] = schema_field(json="staff,omitempty")


@dataclass
class Leaf:
    name: str = schema_field(json="name")


@dataclass
class Wrapper:
    leaf: Optional[Leaf] = schema_field(json="leaf", jsonschema="allowNull")
    other: Leaf = schema_field(json="other,omitempty")


class Tags(List[str]):

    @classmethod
    def min_items(cls):
        return 1

    @classmethod
    def max_items(cls):
        return 10


@dataclass
class SliceTestType:
    tags: Tags = schema_field(json="tags")
    fixed: Tuple[int, int] = schema_field(json="fixed")
    bounded: Tags = schema_field(json="bounded", jsonschema="maxItems=3")
    unique: frozenset = schema_field(json="unique,omitempty")


@dataclass
class Job:
    name: str = schema_field(json="name")
    callback: Callable[[], None] = schema_field(json="callback")


@dataclass
class Ambiguous:
    value: Union[int, str] = schema_field(json="value")


@dataclass
class Malformed:
    size: int = schema_field(json="size", jsonschema="minimum=abc,maximum=10")
    label: str = schema_field(json="label", jsonschema="minLength=x,format=bogus")
    level: int = schema_field(json="level", jsonschema="enum=1|two|3")
    ratio: float = schema_field(json="ratio", jsonschema="minimum=inf,enum=nan|1.5")


# ----------------------------- Embedding precedence -----------------------------

@dataclass
class MostInner:
    foo: str = schema_field(json="foo,omitempty", jsonschema="maxLength=3")
    bar: str = schema_field(json="bar,omitempty")
    baz: str = schema_field(json="bazDifferent,omitempty")


@dataclass
class Inner:
    most_inner: MostInner = schema_field(embed=True)
    foo: str = schema_field(json="foo,omitempty", jsonschema="maxLength=2")
    bar: str = schema_field(json="bar,omitempty")
    baz: str = schema_field(json="baz,omitempty")


@dataclass
class Root:
    inner: Inner = schema_field(embed=True)
    foo: str = schema_field(json="foo", jsonschema="maxLength=1")
    bar: str = schema_field(json="bar")
    baz: str = schema_field(json="baz")


@dataclass
class TrailingMostInner:
    foo: str = schema_field(json="foo,omitempty")
    bar: str = schema_field(json="bar", jsonschema="minLength=5")


@dataclass
class TrailingInner:
    foo: str = schema_field(json="foo")
    bar: str = schema_field(json="bar,omitempty", jsonschema="minLength=4")
    most_inner: TrailingMostInner = schema_field(embed=True)


@dataclass
class TrailingRoot:
    foo: str = schema_field(json="foo")
    bar: str = schema_field(json="bar")
    inner: TrailingInner = schema_field(embed=True)


# ----------------------------- Boolean combinators -----------------------------

@dataclass
class StringOrNull:
    value: str = schema_field(json="value")
    is_null: bool = schema_field(json="is_null")

    @classmethod
    def json_schema_one_of(cls):
        return [str, None]


@dataclass
class Tester:
    experience: StringOrNull = schema_field(json="experience")


@dataclass
class Laptop:
    brand: str = schema_field(json="brand", jsonschema="pattern=^(apple|lenovo|dell)$")
    need_touchscreen: bool = schema_field(json="need_touchscreen")


@dataclass
class Desktop:
    form_factor: str = schema_field(json="form_factor", jsonschema="pattern=^(standard|micro|mini|nano)")
    need_keyboard: bool = schema_field(json="need_keyboard")


@dataclass
class Hardware:
    brand: str = schema_field(json="brand", jsonschema="notEmpty")
    memory: int = schema_field(json="memory")

    @classmethod
    def json_schema_and_one_of(cls):
        return [Laptop, Desktop]


@dataclass
class Developer:
    experience: StringOrNull = schema_field(json="experience", jsonschema="minLength=1")
    language: StringOrNull = schema_field(json="language", jsonschema="pattern=\\S+")
    hardware_choice: Hardware = schema_field(json="hardware")


@dataclass
class UserOneOf:
    tester: Tester = schema_field(json="tester")
    developer: Developer = schema_field(json="developer")

    @classmethod
    def json_schema_one_of(cls):
        return [field_of(cls, "tester"), field_of(cls, "developer")]


@dataclass
class AnyAndAll:
    name: str = schema_field(json="name")

    @staticmethod
    def json_schema_any_of():
        return [Laptop]

    @staticmethod
    def json_schema_all_of():
        return [Desktop]


@dataclass
class Tagged:
    label: str = schema_field(json="label")

    @classmethod
    def json_schema_and_any_of(cls):
        return [Leaf, None]

    @classmethod
    def json_schema_and_all_of(cls):
        return [Leaf]


@dataclass
class VersionedDeveloper:
    hardware: v1.Hardware = schema_field(json="hardware")
    hardware1: v2.Hardware = schema_field(json="hardware1")


# recursion through an exclusive combinator
@dataclass
class Expression:

    @classmethod
    def json_schema_any_of(cls):
        return [Number, BinaryOp]


@dataclass
class Number:
    value: float = schema_field(json="value")


@dataclass
class BinaryOp:
    op: str = schema_field(json="op", jsonschema="enum=+|-")
    left: Expression = schema_field(json="left")
    right: Expression = schema_field(json="right")


# ----------------------------- Conditional -----------------------------

@dataclass
class ApplicationValidation:
    type: str = schema_field(json="type", jsonschema="enum=web")


@dataclass
class WebApp:
    browser: str = schema_field(json="browser")


@dataclass
class MobileApp:
    device: str = schema_field(json="device")


@dataclass
class Application:
    type: str = schema_field(json="type")

    @classmethod
    def json_schema_if_then_else(cls):
        return SchemaCondition(if_field=field_of(ApplicationValidation, "type"), then=WebApp, else_=MobileApp)


@dataclass
class Quota:
    level: int = schema_field(json="level", jsonschema="enum=1|2")

    @classmethod
    def json_schema_if_then_else(cls):
        return SchemaCondition(if_field=field_of(cls, "level"), then=Leaf)


@dataclass
class BrokenCondition:
    type: str = schema_field(json="type")

    @classmethod
    def json_schema_if_then_else(cls):
        return {"if": "type"}


# ----------------------------- Switch -----------------------------

@dataclass
class IntPayload:
    payload: int = schema_field(json="payload")


@dataclass
class StringPayload:
    payload: str = schema_field(json="payload")


@dataclass
class BoolPayload:
    payload: bool = schema_field(json="payload")


@dataclass
class ExampleCase:
    type: str = schema_field(json="type", jsonschema="optional")

    @classmethod
    def json_schema_case(cls):
        cases = {}
        order = []
        cases["bool"] = BoolPayload
        order.append("bool")
        cases["int"] = IntPayload
        order.append("int")
        cases["string"] = StringPayload
        order.append("string")
        return SchemaSwitch(by_field="type", cases=cases, order=order)


@dataclass
class ExampleCaseReversed:
    type: str = schema_field(json="type", jsonschema="optional")

    @classmethod
    def json_schema_case(cls):
        cases = {"bool": BoolPayload, "int": IntPayload, "string": StringPayload}
        return SchemaSwitch(by_field="type", cases=cases, order=["string", "int", "bool"])


@dataclass
class ExampleCaseWithoutOrder:
    type: str = schema_field(json="type", jsonschema="optional")

    @classmethod
    def json_schema_case(cls):
        cases = {}
        cases["string"] = StringPayload
        cases["bool"] = BoolPayload
        cases["int"] = IntPayload
        return SchemaSwitch(by_field="type", cases=cases)


@dataclass
class ExampleCaseBadOrder:
    type: str = schema_field(json="type")

    @classmethod
    def json_schema_case(cls):
        return SchemaSwitch(by_field="type", cases={"int": IntPayload}, order=["int", "float"])


@dataclass
class SwitchAndOneOf:
    type: str = schema_field(json="type")

    @classmethod
    def json_schema_and_one_of(cls):
        return [Leaf]

    @classmethod
    def json_schema_case(cls):
        return SchemaSwitch(by_field="type", cases={"int": IntPayload})


# ----------------------------- Definition names -----------------------------

class Shelf:

    @dataclass
    class Item:
        x: int = schema_field(json="x")


class Crate:

    @dataclass
    class Item:
        y: str = schema_field(json="y")


@dataclass
class Storage:
    shelf_item: Shelf.Item = schema_field(json="shelf_item")
    crate_item: Crate.Item = schema_field(json="crate_item")


@dataclass
class FirstTwin:
    x: int = schema_field(json="x")


@dataclass
class SecondTwin:
    y: str = schema_field(json="y")


# two distinct types claiming one definition name
FirstTwin.__qualname__ = SecondTwin.__qualname__ = "Twin"


@dataclass
class Twins:
    first: FirstTwin = schema_field(json="first")
    second: SecondTwin = schema_field(json="second")


# ----------------------------- Hooks on embedded records -----------------------------

@dataclass
class DeviceBase:
    kind: str = schema_field(json="kind")

    @classmethod
    def json_schema_and_one_of(cls):
        return [Laptop, Desktop]


@dataclass
class Workstation:
    base: DeviceBase = schema_field(embed=True)
    owner: str = schema_field(json="owner")


@dataclass
class Kiosk:
    base: DeviceBase = schema_field(embed=True)
    location: str = schema_field(json="location")

    @classmethod
    def json_schema_and_one_of(cls):
        return [Leaf]


@dataclass
class InstanceHook:
    name: str = schema_field(json="name")

    def json_schema_one_of(self):
        return [str]
