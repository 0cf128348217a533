"""Exceptions and non-fatal diagnostics raised or collected during schema reflection."""

from dataclasses import dataclass
from typing import Any, Optional


class ReflectionError(Exception):
    """Base class for errors that abort schema generation."""


class UnsupportedTypeError(ReflectionError):
    """Raised when a type has no JSON Schema mapping rule.

    Args:
        tp: The offending type.
        path: Dotted path of the field being expanded when the type was met
            (e.g. "models.Job.callback"), or None at the top level.
        reason: Optional extra explanation.
    """

    def __init__(self, tp: Any, path: Optional[str] = None, reason: Optional[str] = None) -> None:
        self.type = tp
        self.path = path
        self.reason = reason
        message = f"unsupported type {tp!r}"
        if path:
            message += f" at '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidCompositionError(ReflectionError):
    """Raised when a switch or condition declaration cannot be compiled."""


@dataclass(frozen=True)
class Diagnostic:
    """A malformed tag directive that was skipped instead of aborting generation."""

    type_name: Optional[str]
    field_name: Optional[str]
    directive: str
    value: Optional[str]
    message: str

    def __str__(self) -> str:
        location = ".".join(p for p in (self.type_name, self.field_name) if p) or "<condition>"
        return f"{location}: {self.directive}={self.value!r}: {self.message}"
