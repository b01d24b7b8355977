"""
The basic module provides the `basic` view: the file's timestamps plus a few read-only facts derived
from the node itself (size, file key, and what kind of file it is). Every other view that exposes
timestamps inherits this one.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Self

from facetfs.common import UnsettableAttributeError
from facetfs.node import Lookup, Node
from facetfs.provider import (
    AttributeProvider,
    AttributeSpec,
    AttributeView,
    check_file_time,
)


def _unsettable(view: str, attribute: str, value: Any) -> Any:
    raise UnsettableAttributeError(f"Attribute {view}:{attribute} cannot be set")


_TIME_ATTRIBUTE = AttributeSpec(check=check_file_time, creation_restricted=True)
_NODE_FACT = AttributeSpec(check=_unsettable, settable=False)

_NODE_FACTS: dict[str, Callable[[Node], Any]] = {
    "size": lambda n: n.size,
    "fileKey": lambda n: n.id,
    "isRegularFile": lambda n: n.kind == "file",
    "isDirectory": lambda n: n.kind == "directory",
    "isSymbolicLink": lambda n: n.kind == "symlink",
    "isOther": lambda n: False,
}


@dataclass(frozen=True)
class BasicFileAttributes:
    last_modified_time: datetime.datetime | None
    last_access_time: datetime.datetime | None
    creation_time: datetime.datetime | None
    size: int
    file_key: str
    is_regular_file: bool
    is_directory: bool
    is_symbolic_link: bool
    is_other: bool

    @classmethod
    def read(cls, node: Node) -> Self:
        return cls(**cls.read_fields(node))

    @classmethod
    def read_fields(cls, node: Node) -> dict[str, Any]:
        return {
            "last_modified_time": node.get("basic:lastModifiedTime"),
            "last_access_time": node.get("basic:lastAccessTime"),
            "creation_time": node.get("basic:creationTime"),
            "size": node.size,
            "file_key": node.id,
            "is_regular_file": node.kind == "file",
            "is_directory": node.kind == "directory",
            "is_symbolic_link": node.kind == "symlink",
            "is_other": False,
        }


class BasicFileAttributeView(AttributeView):
    name = "basic"

    def read_attributes(self) -> BasicFileAttributes:
        return BasicFileAttributes.read(self.lookup_node())

    def set_times(
        self,
        last_modified_time: datetime.datetime | None = None,
        last_access_time: datetime.datetime | None = None,
        creation_time: datetime.datetime | None = None,
    ) -> None:
        """Set any of the three timestamps. A None leaves that timestamp unchanged."""
        node = self.lookup_node()
        for attribute, value in [
            ("lastModifiedTime", last_modified_time),
            ("lastAccessTime", last_access_time),
            ("creationTime", creation_time),
        ]:
            if value is not None:
                node.set(f"basic:{attribute}", check_file_time("basic", attribute, value))


class BasicAttributeProvider(AttributeProvider):
    name = "basic"
    attributes = {
        "lastModifiedTime": _TIME_ATTRIBUTE,
        "lastAccessTime": _TIME_ATTRIBUTE,
        "creationTime": _TIME_ATTRIBUTE,
        **{attribute: _NODE_FACT for attribute in _NODE_FACTS},
    }

    def default_values(self, overrides: Mapping[str, Any]) -> dict[str, Any]:
        rv = super().default_values(overrides)
        # All three timestamps of a new file start out identical.
        now = datetime.datetime.now(datetime.UTC)
        for attribute in ["lastModifiedTime", "lastAccessTime", "creationTime"]:
            rv.setdefault(self.qualified(attribute), now)
        return rv

    def get(self, node: Node, attribute: str) -> Any | None:
        if attribute in _NODE_FACTS:
            return _NODE_FACTS[attribute](node)
        return super().get(node, attribute)

    def view(
        self, lookup: Lookup, inherited_views: Mapping[str, AttributeView]
    ) -> BasicFileAttributeView:
        return BasicFileAttributeView(lookup)

    def read_attributes(self, node: Node) -> BasicFileAttributes:
        return BasicFileAttributes.read(node)
