"""
The owner module provides the `owner` view, which holds the principal that owns a file. It has no
snapshot type of its own; the posix snapshot carries the owner instead.
"""

from __future__ import annotations

from collections.abc import Mapping

from facetfs.node import Lookup
from facetfs.principals import UserPrincipal, create_user_principal
from facetfs.provider import (
    AttributeProvider,
    AttributeSpec,
    AttributeView,
    check_user_principal,
    coerce_user_principal,
)

DEFAULT_OWNER = create_user_principal("user")


class FileOwnerAttributeView(AttributeView):
    name = "owner"

    def get_owner(self) -> UserPrincipal:
        return self.lookup_node().get("owner:owner")  # type: ignore

    def set_owner(self, owner: UserPrincipal) -> None:
        self.lookup_node().set("owner:owner", check_user_principal("owner", "owner", owner))


class OwnerAttributeProvider(AttributeProvider):
    name = "owner"
    attributes = {
        "owner": AttributeSpec(
            check=check_user_principal,
            coerce_default=coerce_user_principal,
            default=lambda: DEFAULT_OWNER,
            creation_restricted=True,
        ),
    }

    def view(
        self, lookup: Lookup, inherited_views: Mapping[str, AttributeView]
    ) -> FileOwnerAttributeView:
        return FileOwnerAttributeView(lookup)
