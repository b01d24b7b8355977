"""
The permissions module models POSIX permission bits as a set of flags and converts between that set
and the familiar 9-character `rwxr-x---` notation.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable

from facetfs.common import InvalidAttributeTypeError, type_name


class InvalidPermissionStringError(InvalidAttributeTypeError, ValueError):
    pass


class PosixPermission(enum.Enum):
    OWNER_READ = "owner:read"
    OWNER_WRITE = "owner:write"
    OWNER_EXECUTE = "owner:execute"
    GROUP_READ = "group:read"
    GROUP_WRITE = "group:write"
    GROUP_EXECUTE = "group:execute"
    OTHERS_READ = "others:read"
    OTHERS_WRITE = "others:write"
    OTHERS_EXECUTE = "others:execute"


PermissionSet = frozenset[PosixPermission]

# The order of this list matches the positions in the string notation.
_STRING_ORDER: list[tuple[PosixPermission, str]] = [
    (PosixPermission.OWNER_READ, "r"),
    (PosixPermission.OWNER_WRITE, "w"),
    (PosixPermission.OWNER_EXECUTE, "x"),
    (PosixPermission.GROUP_READ, "r"),
    (PosixPermission.GROUP_WRITE, "w"),
    (PosixPermission.GROUP_EXECUTE, "x"),
    (PosixPermission.OTHERS_READ, "r"),
    (PosixPermission.OTHERS_WRITE, "w"),
    (PosixPermission.OTHERS_EXECUTE, "x"),
]


def permissions_from_string(perms: str) -> PermissionSet:
    """
    Parse `rwxr-x---` notation. Every position must hold either its letter or `-`; anything else,
    including the wrong length, is rejected.
    """
    if len(perms) != len(_STRING_ORDER):
        raise InvalidPermissionStringError(
            f"Invalid permission string {perms!r}: must be exactly 9 characters, like rwxr-x---"
        )
    rv: set[PosixPermission] = set()
    for i, (c, (perm, letter)) in enumerate(zip(perms, _STRING_ORDER, strict=True)):
        if c == letter:
            rv.add(perm)
        elif c != "-":
            raise InvalidPermissionStringError(
                f"Invalid permission string {perms!r}: expected {letter!r} or '-' at index {i}, got {c!r}"
            )
    return frozenset(rv)


def permissions_to_string(perms: Iterable[PosixPermission]) -> str:
    perms = set(perms)
    return "".join(letter if perm in perms else "-" for perm, letter in _STRING_ORDER)


def to_permissions(view: str, attribute: str, value: Iterable[object]) -> PermissionSet:
    """
    Validate that every element of a collection is a PosixPermission and return a fresh, immutable
    copy. The copy is taken even when the input is already a frozenset, so callers can never alias
    the stored value.
    """
    rv: set[PosixPermission] = set()
    for x in value:
        if not isinstance(x, PosixPermission):
            raise InvalidAttributeTypeError(
                f"Invalid element for attribute {view}:{attribute}: "
                f"should be a set of PosixPermission, found element of type {type_name(x)}"
            )
        rv.add(x)
    return frozenset(rv)
