"""
The provider module defines the contract every attribute view implements.

An AttributeProvider owns one view: a name (which doubles as the prefix of every key it stores on a
node), a fixed table of attributes, the names of the views it depends on, and factories for a live
view and an immutable snapshot. Providers never talk to each other directly. When a view needs
another view's behavior (e.g. posix delegating `set_times` to basic), the registry builds the
dependency first and hands the built view object over.

Each attribute is described by an AttributeSpec, which carries the conversion functions for that
attribute. Values are converted into their canonical form when they enter the system, so nothing
past this boundary needs to inspect types again.
"""

from __future__ import annotations

import abc
import collections.abc
import datetime
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from facetfs.common import (
    CreationRestrictedError,
    InvalidAttributeTypeError,
    UnsettableAttributeError,
    UnsupportedViewError,
    type_name,
)
from facetfs.node import Lookup, Node
from facetfs.permissions import PermissionSet, permissions_from_string, to_permissions
from facetfs.principals import (
    GroupPrincipal,
    UserPrincipal,
    create_group_principal,
    create_user_principal,
)

logger = logging.getLogger(__name__)

# A converter takes (view, attribute, value) and returns the canonical value or raises. The view is
# the name the caller addressed the attribute by, which is not necessarily the owning view.
Converter = Callable[[str, str, Any], Any]


@dataclass(frozen=True, slots=True)
class AttributeSpec:
    # Strict validator for the generic set path.
    check: Converter
    # Lenient converter for default overrides. Falls back to `check`.
    coerce_default: Converter | None = None
    # Factory for the built-in default. None means the provider fills the default in itself.
    default: Callable[[], Any] | None = None
    # May not be supplied through the generic set path while the node is being created.
    creation_restricted: bool = False
    settable: bool = True

    def coerce(self, view: str, attribute: str, value: Any) -> Any:
        return (self.coerce_default or self.check)(view, attribute, value)


def check_not_create(view: str, attribute: str, create: bool) -> None:
    if create:
        raise CreationRestrictedError(
            f"Cannot set attribute {view}:{attribute} during file creation"
        )


def _invalid_type(view: str, attribute: str, value: Any, *expected: str) -> InvalidAttributeTypeError:
    return InvalidAttributeTypeError(
        f"Invalid type {type_name(value)} for attribute {view}:{attribute}: "
        f"should be {' or '.join(expected)}"
    )


def check_bool(view: str, attribute: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise _invalid_type(view, attribute, value, "bool")
    return value


def check_file_time(view: str, attribute: str, value: Any) -> datetime.datetime:
    if not isinstance(value, datetime.datetime) or value.tzinfo is None:
        raise _invalid_type(view, attribute, value, "timezone-aware datetime")
    return value


def check_user_principal(view: str, attribute: str, value: Any) -> UserPrincipal:
    if not isinstance(value, UserPrincipal):
        raise _invalid_type(view, attribute, value, "UserPrincipal")
    return value


def coerce_user_principal(view: str, attribute: str, value: Any) -> UserPrincipal:
    if isinstance(value, str):
        return create_user_principal(value)
    if isinstance(value, UserPrincipal):
        return value
    raise _invalid_type(view, attribute, value, "str", "UserPrincipal")


def check_group_principal(view: str, attribute: str, value: Any) -> GroupPrincipal:
    if not isinstance(value, GroupPrincipal):
        raise _invalid_type(view, attribute, value, "GroupPrincipal")
    # Store our own type even if handed a subclass.
    if type(value) is not GroupPrincipal:
        return create_group_principal(value.name)
    return value


def coerce_group_principal(view: str, attribute: str, value: Any) -> GroupPrincipal:
    if isinstance(value, str):
        return create_group_principal(value)
    if isinstance(value, GroupPrincipal):
        return check_group_principal(view, attribute, value)
    raise _invalid_type(view, attribute, value, "str", "GroupPrincipal")


def check_permissions(view: str, attribute: str, value: Any) -> PermissionSet:
    if not isinstance(value, collections.abc.Set):
        raise _invalid_type(view, attribute, value, "set of PosixPermission")
    return to_permissions(view, attribute, value)


def coerce_permissions(view: str, attribute: str, value: Any) -> PermissionSet:
    if isinstance(value, str):
        return permissions_from_string(value)
    if isinstance(value, collections.abc.Set):
        return to_permissions(view, attribute, value)
    raise _invalid_type(view, attribute, value, "str", "set of PosixPermission")


class AttributeView(abc.ABC):
    """
    A live handle onto one view of one file. It holds nothing but the lookup (and whichever
    inherited views it was built with), so every operation sees the node as it is now.
    """

    name: ClassVar[str]

    def __init__(self, lookup: Lookup):
        self.lookup = lookup

    def lookup_node(self) -> Node:
        return self.lookup.resolve()


class AttributeProvider(abc.ABC):
    name: ClassVar[str]
    inherits: ClassVar[frozenset[str]] = frozenset()
    attributes: ClassVar[Mapping[str, AttributeSpec]]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def fixed_attributes(self) -> frozenset[str]:
        return frozenset(self.attributes)

    def supports(self, attribute: str) -> bool:
        return attribute in self.attributes

    def qualified(self, attribute: str) -> str:
        return f"{self.name}:{attribute}"

    def default_values(self, overrides: Mapping[str, Any]) -> dict[str, Any]:
        """
        Compute the initial values of this provider's attributes for a new node. Overrides are keyed
        by qualified key; keys belonging to other providers are ignored here. This is pure: it never
        touches a node.
        """
        rv: dict[str, Any] = {}
        for attribute, spec in self.attributes.items():
            key = self.qualified(attribute)
            override = overrides.get(key)
            if not spec.settable:
                if override is not None:
                    raise UnsettableAttributeError(
                        f"Attribute {key} is derived from the file and cannot be given a default"
                    )
                continue
            if override is not None:
                rv[key] = spec.coerce(self.name, attribute, override)
            elif spec.default is not None:
                rv[key] = spec.default()
        return rv

    def get(self, node: Node, attribute: str) -> Any | None:
        if attribute not in self.attributes:
            return None
        return node.get(self.qualified(attribute))

    def set(self, node: Node, view: str, attribute: str, value: Any, create: bool) -> None:
        spec = self.attributes.get(attribute)
        if spec is None:
            # Unknown names are ignored so that several providers can be probed by name.
            return
        if not spec.settable:
            raise UnsettableAttributeError(f"Attribute {view}:{attribute} cannot be set")
        if spec.creation_restricted:
            check_not_create(view, attribute, create)
        node.set(self.qualified(attribute), spec.check(view, attribute, value))

    @abc.abstractmethod
    def view(self, lookup: Lookup, inherited_views: Mapping[str, AttributeView]) -> AttributeView:
        """Build a live view, given the already-built views named in `inherits`."""

    def read_attributes(self, node: Node) -> Any:
        """Read an immutable snapshot. Views without a snapshot type do not support this."""
        raise UnsupportedViewError(f"View {self.name} does not support reading attributes")
