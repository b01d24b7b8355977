"""
The tree module is a small in-memory file tree. It maps paths to nodes and hands out attribute views
for them, and it is what the CLI and the tests use to exercise the attribute views end to end.

It only models structure (create, move, delete, look up). File contents are out of scope.

Two indexes are kept: path -> node ID and node ID -> node. Views are bound to a node ID, not a path,
so a view obtained before a move keeps addressing the same file afterwards. Deleting the file removes
it from the ID index, which is the single source of truth for whether a file still exists.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath
from typing import Any

from facetfs.common import FacetExpectedError, NodeDoesNotExistError
from facetfs.node import Node, NodeKind
from facetfs.provider import AttributeView
from facetfs.registry import AttributeRegistry

logger = logging.getLogger(__name__)

ROOT = PurePosixPath("/")


class NodeAlreadyExistsError(FacetExpectedError, FileExistsError):
    pass


class ParentDoesNotExistError(FacetExpectedError, FileNotFoundError):
    pass


class NodeLookup:
    """Resolves a node by ID on every call, against the tree's live index."""

    def __init__(self, tree: FileTree, node_id: str):
        self.tree = tree
        self.node_id = node_id

    def __repr__(self) -> str:
        return f"NodeLookup(node_id={self.node_id!r})"

    def resolve(self) -> Node:
        return self.tree.get_node_by_id(self.node_id)


class FileTree:
    def __init__(self, registry: AttributeRegistry):
        self.registry = registry
        self._lock = threading.RLock()
        self._paths: dict[PurePosixPath, str] = {}
        self._nodes: dict[str, Node] = {}
        root = Node("directory")
        registry.initialize_node(root)
        self._paths[ROOT] = root.id
        self._nodes[root.id] = root

    def exists(self, path: str | PurePosixPath) -> bool:
        with self._lock:
            return _normalize(path) in self._paths

    def get_node(self, path: str | PurePosixPath) -> Node:
        p = _normalize(path)
        with self._lock:
            try:
                return self._nodes[self._paths[p]]
            except KeyError as e:
                raise NodeDoesNotExistError(f"No such file or directory: {p}") from e

    def get_node_by_id(self, node_id: str) -> Node:
        with self._lock:
            try:
                return self._nodes[node_id]
            except KeyError as e:
                raise NodeDoesNotExistError(f"File {node_id} no longer exists") from e

    def paths(self) -> list[PurePosixPath]:
        with self._lock:
            return sorted(self._paths)

    def create_file(
        self,
        path: str | PurePosixPath,
        attrs: Iterable[tuple[str, Any]] = (),
        overrides: Mapping[str, Any] | None = None,
    ) -> Node:
        return self._create(path, "file", attrs, overrides)

    def create_directory(
        self,
        path: str | PurePosixPath,
        attrs: Iterable[tuple[str, Any]] = (),
        overrides: Mapping[str, Any] | None = None,
    ) -> Node:
        return self._create(path, "directory", attrs, overrides)

    def _create(
        self,
        path: str | PurePosixPath,
        kind: NodeKind,
        attrs: Iterable[tuple[str, Any]],
        overrides: Mapping[str, Any] | None,
    ) -> Node:
        p = _normalize(path)
        with self._lock:
            if p in self._paths:
                raise NodeAlreadyExistsError(f"File already exists: {p}")
            self._check_parent(p)
            node = Node(kind)
            self.registry.initialize_node(node, overrides)
            # Creation attributes are applied before the node is linked into the tree. If any of
            # them is rejected, the file is never created.
            for key, value in attrs:
                self.registry.set_attribute(node, key, value, create=True)
            self._paths[p] = node.id
            self._nodes[node.id] = node
        logger.debug(f"Created {kind} {p} ({node.id})")
        return node

    def move(self, source: str | PurePosixPath, target: str | PurePosixPath) -> None:
        src = _normalize(source)
        dst = _normalize(target)
        with self._lock:
            if src not in self._paths:
                raise NodeDoesNotExistError(f"No such file or directory: {src}")
            if src == ROOT or dst.is_relative_to(src):
                raise FacetExpectedError(f"Cannot move {src} into itself")
            if dst in self._paths:
                raise NodeAlreadyExistsError(f"File already exists: {dst}")
            self._check_parent(dst)
            for p in [x for x in self._paths if x == src or x.is_relative_to(src)]:
                self._paths[dst / p.relative_to(src)] = self._paths.pop(p)
        logger.debug(f"Moved {src} to {dst}")

    def delete(self, path: str | PurePosixPath) -> None:
        p = _normalize(path)
        with self._lock:
            if p == ROOT:
                raise FacetExpectedError("Cannot delete the root directory")
            if p not in self._paths:
                raise NodeDoesNotExistError(f"No such file or directory: {p}")
            if any(x.parent == p for x in self._paths if x != ROOT):
                raise FacetExpectedError(f"Directory not empty: {p}")
            del self._nodes[self._paths.pop(p)]
        logger.debug(f"Deleted {p}")

    def lookup(self, path: str | PurePosixPath) -> NodeLookup:
        return NodeLookup(self, self.get_node(path).id)

    def get_attribute_view(self, path: str | PurePosixPath, view: str) -> AttributeView | None:
        return self.registry.get_view(view, self.lookup(path))

    def read_attributes(self, path: str | PurePosixPath, view: str) -> Any:
        return self.registry.read_attributes(view, self.get_node(path))

    def read_attribute_map(self, path: str | PurePosixPath, attributes: str) -> dict[str, Any]:
        return self.registry.read_attribute_map(self.get_node(path), attributes)

    def get_attribute(self, path: str | PurePosixPath, attribute: str) -> Any | None:
        return self.registry.get_attribute(self.get_node(path), attribute)

    def set_attribute(self, path: str | PurePosixPath, attribute: str, value: Any) -> None:
        self.registry.set_attribute(self.get_node(path), attribute, value)

    def _check_parent(self, p: PurePosixPath) -> None:
        parent = self._paths.get(p.parent)
        if parent is None:
            raise ParentDoesNotExistError(f"Parent directory does not exist: {p.parent}")
        if self._nodes[parent].kind != "directory":
            raise ParentDoesNotExistError(f"Parent is not a directory: {p.parent}")


def _normalize(path: str | PurePosixPath) -> PurePosixPath:
    return ROOT / PurePosixPath(path)
