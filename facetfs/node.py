"""
The node module contains the per-file attribute store and the lookup capability that attribute views
use to find it.

A Node only knows how to get and set values by qualified key (`view:attribute`). It knows nothing
about which views exist or what types their attributes have; that is the job of the providers.
"""

from __future__ import annotations

import threading
from typing import Any, Literal, Protocol

import uuid6

NodeKind = Literal["file", "directory", "symlink"]


class Node:
    """
    Per-key reads and writes are atomic. There is no transaction across keys: a reader that fetches
    several keys may observe a concurrent writer halfway through its own sequence of writes.
    """

    def __init__(self, kind: NodeKind = "file", *, node_id: str | None = None, size: int = 0):
        self.id = node_id or str(uuid6.uuid7())
        self.kind: NodeKind = kind
        self.size = size
        self._attributes: dict[str, Any] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, kind={self.kind!r})"

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._attributes.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._attributes[key] = value

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._attributes)


class Lookup(Protocol):
    """
    Resolves the node a view is bound to. Implementations must resolve afresh on every call so that
    a view survives renames and moves, and must raise NodeDoesNotExistError once the file is gone.
    """

    def resolve(self) -> Node: ...


class StaticLookup:
    """A lookup for when the caller already holds the node, e.g. while the node is being created."""

    def __init__(self, node: Node):
        self._node = node

    def resolve(self) -> Node:
        return self._node
