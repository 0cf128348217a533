"""
Well-known types and JSON Schema constants shared by the type walker and the constraint compiler.

The tables below are read-only; they are built once at import time.
"""

from datetime import datetime
from enum import Enum as PyEnum
from ipaddress import IPv4Address, IPv6Address
from types import MappingProxyType
from urllib.parse import ParseResult, SplitResult

# JSON Schema version emitted as "$schema".
# RFC draft-handrews-json-schema-01 (draft-07)
VERSION = "http://json-schema.org/draft-07/schema#"

DEFINITIONS_PREFIX = "#/definitions/"


class JsonSchemaTypes(PyEnum):
    STRING = 'string'
    NUMBER = 'number'
    INTEGER = 'integer'
    ARRAY = 'array'
    BOOLEAN = 'boolean'
    OBJECT = 'object'
    NULL = 'null'


class RawMessage(bytes):
    """Already-encoded JSON carried as bytes; described as an arbitrary JSON object."""


# Defined format types for JSON Schema validation, draft-07 section 7.3
FORMAT_TYPES = MappingProxyType({
    datetime: "date-time",      # section 7.3.1
    IPv4Address: "ipv4",        # section 7.3.4
    IPv6Address: "ipv6",        # section 7.3.5
    ParseResult: "uri",         # section 7.3.6
    SplitResult: "uri",
})

# Values accepted by the "format" directive; anything else is dropped
ALLOWED_FORMATS = frozenset(["date-time", "email", "hostname", "ipv4", "ipv6", "uri"])

BYTE_TYPES = (bytes, bytearray)

# Go strconv.ParseBool spellings
TRUE_STRINGS = frozenset(["1", "t", "T", "TRUE", "true", "True"])
FALSE_STRINGS = frozenset(["0", "f", "F", "FALSE", "false", "False"])

NOT_EMPTY_PATTERN = "^\\S"
