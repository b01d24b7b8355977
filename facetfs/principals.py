"""
The principals module defines the identity values stored in the ownership attributes: the user that
owns a file and the group a file belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserPrincipal:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class GroupPrincipal(UserPrincipal):
    # A group is a principal too, but a group named "x" is never equal to a user named "x": the
    # dataclass __eq__ compares classes before fields.
    pass


def create_user_principal(name: str) -> UserPrincipal:
    return UserPrincipal(name)


def create_group_principal(name: str) -> GroupPrincipal:
    return GroupPrincipal(name)
