"""
The posix module provides the `posix` view: the group a file belongs to and its permission bits.

The posix view stores only those two attributes. Ownership and timestamps belong to the `owner` and
`basic` views; the posix view holds the built instances of those views and passes such calls through
to them unchanged.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping, Set
from dataclasses import dataclass
from typing import Any

from facetfs.basic import BasicFileAttributes, BasicFileAttributeView
from facetfs.node import Lookup, Node
from facetfs.owner import FileOwnerAttributeView
from facetfs.permissions import (
    PermissionSet,
    PosixPermission,
    permissions_from_string,
)
from facetfs.principals import GroupPrincipal, UserPrincipal, create_group_principal
from facetfs.provider import (
    AttributeProvider,
    AttributeSpec,
    AttributeView,
    check_group_principal,
    check_permissions,
    coerce_group_principal,
    coerce_permissions,
)

DEFAULT_GROUP = create_group_principal("group")
DEFAULT_PERMISSIONS = permissions_from_string("rw-r--r--")


@dataclass(frozen=True)
class PosixFileAttributes(BasicFileAttributes):
    owner: UserPrincipal | None
    group: GroupPrincipal | None
    permissions: PermissionSet | None

    @classmethod
    def read_fields(cls, node: Node) -> dict[str, Any]:
        permissions = node.get("posix:permissions")
        return {
            **super().read_fields(node),
            "owner": node.get("owner:owner"),
            "group": node.get("posix:group"),
            "permissions": frozenset(permissions) if permissions is not None else None,
        }


class PosixFileAttributeView(AttributeView):
    name = "posix"

    def __init__(
        self,
        lookup: Lookup,
        basic_view: BasicFileAttributeView,
        owner_view: FileOwnerAttributeView,
    ):
        super().__init__(lookup)
        self.basic_view = basic_view
        self.owner_view = owner_view

    def read_attributes(self) -> PosixFileAttributes:
        return PosixFileAttributes.read(self.lookup_node())

    def set_times(
        self,
        last_modified_time: datetime.datetime | None = None,
        last_access_time: datetime.datetime | None = None,
        creation_time: datetime.datetime | None = None,
    ) -> None:
        self.basic_view.set_times(last_modified_time, last_access_time, creation_time)

    def set_permissions(self, permissions: Set[PosixPermission]) -> None:
        self.lookup_node().set(
            "posix:permissions", check_permissions("posix", "permissions", permissions)
        )

    def set_group(self, group: GroupPrincipal) -> None:
        self.lookup_node().set("posix:group", check_group_principal("posix", "group", group))

    def get_owner(self) -> UserPrincipal:
        return self.owner_view.get_owner()

    def set_owner(self, owner: UserPrincipal) -> None:
        self.owner_view.set_owner(owner)


class PosixAttributeProvider(AttributeProvider):
    name = "posix"
    inherits = frozenset(["basic", "owner"])
    attributes = {
        "group": AttributeSpec(
            check=check_group_principal,
            coerce_default=coerce_group_principal,
            default=lambda: DEFAULT_GROUP,
            creation_restricted=True,
        ),
        # Permissions may be supplied at creation time, so that a file can be created with its
        # final permissions in one step.
        "permissions": AttributeSpec(
            check=check_permissions,
            coerce_default=coerce_permissions,
            default=lambda: DEFAULT_PERMISSIONS,
        ),
    }

    def view(
        self, lookup: Lookup, inherited_views: Mapping[str, AttributeView]
    ) -> PosixFileAttributeView:
        basic_view = inherited_views["basic"]
        owner_view = inherited_views["owner"]
        assert isinstance(basic_view, BasicFileAttributeView)
        assert isinstance(owner_view, FileOwnerAttributeView)
        return PosixFileAttributeView(lookup, basic_view, owner_view)

    def read_attributes(self, node: Node) -> PosixFileAttributes:
        return PosixFileAttributes.read(node)
