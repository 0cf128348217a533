"""
Definitions table: qualified record name -> expanded schema node.

Nodes refer to each other by "$ref" strings into this table instead of embedding
one another, so recursive record graphs stay tree shaped. A table belongs to a
single generation call and must not be shared between concurrent calls.

Each name remembers the type that claimed it: two distinct types mapping to the
same name would otherwise silently share one schema.
"""

from typing import Any, Dict, Iterator, Optional
import logging

from .wellknown import DEFINITIONS_PREFIX, VERSION

logger = logging.getLogger(__name__)


class DefinitionsTable:

    def __init__(self) -> None:
        self.__nodes: Dict[str, Dict[str, Any]] = {}
        self.__owners: Dict[str, Any] = {}
        self.__ref_counts: Dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.__nodes

    def __len__(self) -> int:
        return len(self.__nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__nodes)

    def register(self, name: str, node: Dict[str, Any], owner: Any = None) -> Dict[str, Any]:
        """Register the node of a record type. Each name is registered at most once.

        Args:
            name: Qualified record name.
            node: Schema node, completed in place by the caller.
            owner: The type the node describes, see `owner`.
        """
        if name in self.__nodes:
            raise ValueError(f"Definition '{name}' is already registered")
        self.__nodes[name] = node
        self.__owners[name] = owner
        logger.debug("Registered definition %s", name)
        return node

    def reserve(self, name: str, owner: Any = None) -> Dict[str, Any]:
        """Register an empty placeholder to be completed later with `fill`."""
        return self.register(name, {}, owner)

    def fill(self, name: str, node: Dict[str, Any]) -> Dict[str, Any]:
        """Complete a reserved placeholder in place, keeping its position in the table."""
        placeholder = self.__nodes[name]
        placeholder.clear()
        placeholder.update(node)
        return placeholder

    def owner(self, name: str) -> Any:
        return self.__owners.get(name)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self.__nodes.get(name)

    def pop(self, name: str) -> Optional[Dict[str, Any]]:
        self.__owners.pop(name, None)
        return self.__nodes.pop(name, None)

    def ref(self, name: str, with_version: bool = False, track: bool = True) -> Dict[str, Any]:
        """Build a reference node to `name`.

        Args:
            name: Qualified record name.
            with_version: Prefix the node with "$schema".
            track: Count the reference; `is_referenced` reports tracked references only.
        """
        if track:
            self.__ref_counts[name] = self.__ref_counts.get(name, 0) + 1
        node: Dict[str, Any] = {}
        if with_version:
            node["$schema"] = VERSION
        node["$ref"] = DEFINITIONS_PREFIX + name
        return node

    def is_referenced(self, name: str) -> bool:
        return self.__ref_counts.get(name, 0) > 0

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        return dict(self.__nodes)
