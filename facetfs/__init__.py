from facetfs.basic import BasicAttributeProvider, BasicFileAttributes, BasicFileAttributeView
from facetfs.common import (
    VERSION,
    CreationRestrictedError,
    FacetError,
    FacetExpectedError,
    InvalidAttributeTypeError,
    NodeDoesNotExistError,
    UnsettableAttributeError,
    UnsupportedViewError,
    initialize_logging,
)
from facetfs.config import Config
from facetfs.dos import DosAttributeProvider, DosFileAttributes, DosFileAttributeView
from facetfs.node import Lookup, Node, StaticLookup
from facetfs.owner import FileOwnerAttributeView, OwnerAttributeProvider
from facetfs.permissions import (
    InvalidPermissionStringError,
    PosixPermission,
    permissions_from_string,
    permissions_to_string,
)
from facetfs.posix import PosixAttributeProvider, PosixFileAttributes, PosixFileAttributeView
from facetfs.principals import (
    GroupPrincipal,
    UserPrincipal,
    create_group_principal,
    create_user_principal,
)
from facetfs.provider import AttributeProvider, AttributeSpec, AttributeView
from facetfs.registry import (
    AttributeCollisionError,
    AttributeRegistry,
    InheritanceCycleError,
    ProviderConfigurationError,
    ProviderConflictError,
    UnknownInheritedViewError,
    create_registry,
    dump_attributes,
    dump_initial_attributes,
)
from facetfs.tree import FileTree, NodeAlreadyExistsError, NodeLookup, ParentDoesNotExistError

__all__ = [
    # Plumbing
    "initialize_logging",
    "VERSION",
    # Errors
    "FacetError",
    "FacetExpectedError",
    "InvalidAttributeTypeError",
    "InvalidPermissionStringError",
    "CreationRestrictedError",
    "UnsettableAttributeError",
    "UnsupportedViewError",
    "NodeDoesNotExistError",
    "NodeAlreadyExistsError",
    "ParentDoesNotExistError",
    "ProviderConfigurationError",
    "ProviderConflictError",
    "UnknownInheritedViewError",
    "InheritanceCycleError",
    "AttributeCollisionError",
    # Configuration
    "Config",
    # Nodes
    "Node",
    "Lookup",
    "StaticLookup",
    # Values
    "UserPrincipal",
    "GroupPrincipal",
    "create_user_principal",
    "create_group_principal",
    "PosixPermission",
    "permissions_from_string",
    "permissions_to_string",
    # Provider contract
    "AttributeProvider",
    "AttributeSpec",
    "AttributeView",
    # Registry
    "AttributeRegistry",
    "create_registry",
    "dump_attributes",
    "dump_initial_attributes",
    # Views
    "BasicAttributeProvider",
    "BasicFileAttributeView",
    "BasicFileAttributes",
    "OwnerAttributeProvider",
    "FileOwnerAttributeView",
    "PosixAttributeProvider",
    "PosixFileAttributeView",
    "PosixFileAttributes",
    "DosAttributeProvider",
    "DosFileAttributeView",
    "DosFileAttributes",
    # Tree
    "FileTree",
    "NodeLookup",
]

initialize_logging(__name__)
