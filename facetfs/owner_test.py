import pytest

from facetfs.common import CreationRestrictedError, InvalidAttributeTypeError
from facetfs.node import Node, StaticLookup
from facetfs.owner import DEFAULT_OWNER, FileOwnerAttributeView, OwnerAttributeProvider
from facetfs.principals import GroupPrincipal, UserPrincipal


def test_owner_default_values() -> None:
    p = OwnerAttributeProvider()
    assert p.default_values({}) == {"owner:owner": DEFAULT_OWNER}
    assert DEFAULT_OWNER == UserPrincipal("user")
    assert p.default_values({"owner:owner": "alice"}) == {"owner:owner": UserPrincipal("alice")}
    with pytest.raises(InvalidAttributeTypeError):
        p.default_values({"owner:owner": 1000})


def test_owner_set() -> None:
    p = OwnerAttributeProvider()
    node = Node()
    with pytest.raises(CreationRestrictedError):
        p.set(node, "owner", "owner", UserPrincipal("alice"), True)
    p.set(node, "owner", "owner", UserPrincipal("alice"), False)
    assert p.get(node, "owner") == UserPrincipal("alice")
    with pytest.raises(InvalidAttributeTypeError):
        p.set(node, "owner", "owner", "bob", False)


def test_owner_view() -> None:
    node = Node()
    node.set("owner:owner", DEFAULT_OWNER)
    view = OwnerAttributeProvider().view(StaticLookup(node), {})
    assert isinstance(view, FileOwnerAttributeView)
    assert view.get_owner() == UserPrincipal("user")
    view.set_owner(UserPrincipal("alice"))
    assert view.get_owner() == UserPrincipal("alice")
    # Groups are principals too, and may own files.
    view.set_owner(GroupPrincipal("wheel"))
    assert view.get_owner() == GroupPrincipal("wheel")
    with pytest.raises(InvalidAttributeTypeError):
        view.set_owner("bob")  # type: ignore
