"""
Schema tag overrides.

Lets a caller replace the "jsonschema" tag of a field at generation time without
editing the dataclass. The expected use case is a shared nested dataclass whose
validation must be stricter for one consumer: a shared `Pet.species` tagged
"enum=Human|Dog|Alien" can be generated as "required,enum=Dog".

An override fully replaces the declared tag; it is never merged with it.
"""

from typing import Any, Dict, Optional, Tuple


class SchemaTagOverrides:
    """Mapping of (declaring class, declared field name) -> replacement schema tag."""

    def __init__(self) -> None:
        self.__tags: Dict[Tuple[type, str], str] = {}

    @staticmethod
    def _as_type(type_or_instance: Any) -> type:
        return type_or_instance if isinstance(type_or_instance, type) else type(type_or_instance)

    def set(self, type_or_instance: Any, field_name: str, tag: str) -> None:
        """Register a replacement tag for `field_name` on the given class (or the class of an instance)."""
        self.__tags[(self._as_type(type_or_instance), field_name)] = tag

    def get(self, tp: Optional[type], field_name: str) -> Optional[str]:
        """Return the replacement tag, or None when the class/field has no override."""
        if tp is None:
            return None
        tag = self.__tags.get((self._as_type(tp), field_name))
        # an empty override is treated as no override
        return tag or None

    def __len__(self) -> int:
        return len(self.__tags)

    def __contains__(self, key: Tuple[type, str]) -> bool:
        return key in self.__tags


def get_schema_tag_override() -> SchemaTagOverrides:
    """Return a new, empty overrides table."""
    return SchemaTagOverrides()
