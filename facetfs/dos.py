"""
The dos module provides the `dos` view: the readonly, hidden, archive and system flags.

All four flags are creation-restricted: the generic set path refuses them while a file is being
created. The dedicated setters on the view are not subject to that restriction, so a flag can always
be flipped once the file exists.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from facetfs.basic import BasicFileAttributes, BasicFileAttributeView
from facetfs.node import Lookup, Node
from facetfs.provider import AttributeProvider, AttributeSpec, AttributeView, check_bool

_FLAG = AttributeSpec(check=check_bool, default=lambda: False, creation_restricted=True)


@dataclass(frozen=True)
class DosFileAttributes(BasicFileAttributes):
    readonly: bool
    hidden: bool
    archive: bool
    system: bool

    @classmethod
    def read_fields(cls, node: Node) -> dict[str, Any]:
        return {
            **super().read_fields(node),
            "readonly": bool(node.get("dos:readonly")),
            "hidden": bool(node.get("dos:hidden")),
            "archive": bool(node.get("dos:archive")),
            "system": bool(node.get("dos:system")),
        }


class DosFileAttributeView(AttributeView):
    name = "dos"

    def __init__(self, lookup: Lookup, basic_view: BasicFileAttributeView):
        super().__init__(lookup)
        self.basic_view = basic_view

    def read_attributes(self) -> DosFileAttributes:
        return DosFileAttributes.read(self.lookup_node())

    def set_times(
        self,
        last_modified_time: datetime.datetime | None = None,
        last_access_time: datetime.datetime | None = None,
        creation_time: datetime.datetime | None = None,
    ) -> None:
        self.basic_view.set_times(last_modified_time, last_access_time, creation_time)

    def set_readonly(self, value: bool) -> None:
        self._set_flag("readonly", value)

    def set_hidden(self, value: bool) -> None:
        self._set_flag("hidden", value)

    def set_archive(self, value: bool) -> None:
        self._set_flag("archive", value)

    def set_system(self, value: bool) -> None:
        self._set_flag("system", value)

    def _set_flag(self, attribute: str, value: bool) -> None:
        self.lookup_node().set(f"dos:{attribute}", check_bool("dos", attribute, value))


class DosAttributeProvider(AttributeProvider):
    name = "dos"
    inherits = frozenset(["basic"])
    attributes = {
        "readonly": _FLAG,
        "hidden": _FLAG,
        "archive": _FLAG,
        "system": _FLAG,
    }

    def view(
        self, lookup: Lookup, inherited_views: Mapping[str, AttributeView]
    ) -> DosFileAttributeView:
        basic_view = inherited_views["basic"]
        assert isinstance(basic_view, BasicFileAttributeView)
        return DosFileAttributeView(lookup, basic_view)

    def read_attributes(self, node: Node) -> DosFileAttributes:
        return DosFileAttributes.read(node)
