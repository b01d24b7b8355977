"""
The registry module composes attribute providers into a working set of views.

The AttributeRegistry is responsible for:

1. Validating the providers it is given: names are unique, every inherited view is registered, the
   inheritance graph has no cycles, and no two providers store to the same qualified key.
2. Computing the initial attribute values of a new node, running each provider's defaults in
   inheritance order.
3. Building live views and snapshots. A view's inherited views are built first and handed to it.
4. Dispatching by-name reads and writes (`posix:group`, or a bare `group`) to the provider that owns
   the name.

Names that no provider recognizes are not an error: reads return None and writes do nothing. This
lets callers probe several views by name without checking first, at the cost of silently swallowing
typos. The behavior is relied upon, so keep it.
"""

from __future__ import annotations

import datetime
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from facetfs.basic import BasicAttributeProvider
from facetfs.common import FacetError, UnsupportedViewError
from facetfs.dos import DosAttributeProvider
from facetfs.node import Lookup, Node
from facetfs.owner import OwnerAttributeProvider
from facetfs.permissions import PosixPermission, permissions_to_string
from facetfs.posix import PosixAttributeProvider
from facetfs.principals import UserPrincipal
from facetfs.provider import AttributeProvider, AttributeView

logger = logging.getLogger(__name__)


class ProviderConfigurationError(FacetError):
    pass


class ProviderConflictError(ProviderConfigurationError):
    pass


class UnknownInheritedViewError(ProviderConfigurationError):
    pass


class InheritanceCycleError(ProviderConfigurationError):
    pass


class AttributeCollisionError(ProviderConfigurationError):
    pass


STANDARD_PROVIDERS: dict[str, type[AttributeProvider]] = {
    "basic": BasicAttributeProvider,
    "owner": OwnerAttributeProvider,
    "posix": PosixAttributeProvider,
    "dos": DosAttributeProvider,
}


class AttributeRegistry:
    def __init__(
        self,
        providers: Iterable[AttributeProvider],
        default_attributes: Mapping[str, Any] | None = None,
    ):
        self._providers: dict[str, AttributeProvider] = {}
        for p in providers:
            if p.name in self._providers:
                raise ProviderConflictError(f"Multiple providers registered for view {p.name}")
            self._providers[p.name] = p
        for p in self._providers.values():
            for dep in sorted(p.inherits):
                if dep not in self._providers:
                    raise UnknownInheritedViewError(
                        f"View {p.name} inherits view {dep}, but no provider for {dep} is registered"
                    )
        self._ordered = self._sort_by_inheritance()

        # Map of qualified key -> owning view, used both to detect collisions and to recognize
        # override keys.
        self._owners: dict[str, str] = {}
        for p in self._ordered:
            for attribute in p.attributes:
                key = p.qualified(attribute)
                if key in self._owners:
                    raise AttributeCollisionError(
                        f"Attribute {key} is declared by both view {self._owners[key]} and view {p.name}"
                    )
                self._owners[key] = p.name

        self.default_attributes: dict[str, Any] = {}
        for key, value in (default_attributes or {}).items():
            if key not in self._owners:
                logger.warning(f"Ignoring default value for unknown attribute {key}")
                continue
            self.default_attributes[key] = value

    def _sort_by_inheritance(self) -> list[AttributeProvider]:
        """
        Order the providers so that every provider comes after the views it inherits. Ties keep
        registration order.
        """
        rv: list[AttributeProvider] = []
        done: set[str] = set()
        visiting: list[str] = []

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                cycle = [*visiting[visiting.index(name) :], name]
                raise InheritanceCycleError(f"Views inherit each other in a cycle: {' -> '.join(cycle)}")
            visiting.append(name)
            provider = self._providers[name]
            for dep in sorted(provider.inherits):
                visit(dep)
            visiting.pop()
            done.add(name)
            rv.append(provider)

        for name in self._providers:
            visit(name)
        return rv

    def _inheritance_closure(self, view: str) -> list[AttributeProvider]:
        """The view's own provider, followed by everything it inherits, nearest first."""
        rv: list[AttributeProvider] = []
        queue = [view]
        while queue:
            name = queue.pop(0)
            provider = self._providers[name]
            if provider in rv:
                continue
            rv.append(provider)
            queue.extend(sorted(provider.inherits))
        return rv

    def _candidates(self, view: str | None) -> list[AttributeProvider]:
        if view is None:
            return self._ordered
        if view not in self._providers:
            return []
        return self._inheritance_closure(view)

    def providers(self) -> list[AttributeProvider]:
        return list(self._ordered)

    def get_provider(self, view: str) -> AttributeProvider | None:
        return self._providers.get(view)

    def supported_views(self) -> frozenset[str]:
        return frozenset(self._providers)

    def compute_initial_attributes(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Compute the attribute values a new node starts out with. Configured defaults are merged with
        the per-call overrides (the overrides win). If any value has the wrong type, the whole
        computation fails and nothing is returned.
        """
        overrides = overrides or {}
        for key in overrides:
            if key not in self._owners:
                logger.warning(f"Ignoring default value for unknown attribute {key}")
        merged = {**self.default_attributes, **overrides}
        rv: dict[str, Any] = {}
        for p in self._ordered:
            rv.update(p.default_values(merged))
        return rv

    def initialize_node(self, node: Node, overrides: Mapping[str, Any] | None = None) -> None:
        """Seed a newly created node. Must be called exactly once, before any view is handed out."""
        for key, value in self.compute_initial_attributes(overrides).items():
            node.set(key, value)
        logger.debug(f"Initialized attributes of {node}")

    def get_view(self, view: str, lookup: Lookup) -> AttributeView | None:
        if view not in self._providers:
            return None
        return self._build_view(view, lookup, {})

    def _build_view(self, view: str, lookup: Lookup, built: dict[str, AttributeView]) -> AttributeView:
        # `built` is shared across one get_view call, so a view inherited along two paths (e.g. basic,
        # via both posix and owner) is only built once.
        if view in built:
            return built[view]
        provider = self._providers[view]
        inherited = {dep: self._build_view(dep, lookup, built) for dep in sorted(provider.inherits)}
        rv = provider.view(lookup, inherited)
        built[view] = rv
        return rv

    def read_attributes(self, view: str, node: Node) -> Any:
        provider = self._providers.get(view)
        if provider is None:
            raise UnsupportedViewError(f"Unsupported attribute view {view}")
        return provider.read_attributes(node)

    def get_attribute(self, node: Node, attribute: str) -> Any | None:
        view, name = _split_attribute(attribute)
        for p in self._candidates(view):
            if p.supports(name):
                return p.get(node, name)
        logger.debug(f"No view recognizes attribute {attribute}, returning None")
        return None

    def set_attribute(self, node: Node, attribute: str, value: Any, create: bool = False) -> None:
        view, name = _split_attribute(attribute)
        for p in self._candidates(view):
            if p.supports(name):
                p.set(node, view or p.name, name, value, create)
                return
        logger.debug(f"No view recognizes attribute {attribute}, ignoring set")

    def read_attribute_map(self, node: Node, attributes: str) -> dict[str, Any]:
        """
        Read several attributes at once. Accepts `view:*`, `view:a,b,c`, or the same without a view
        prefix, which means the basic view. `*` includes inherited attributes. Names the view does not
        recognize are skipped.
        """
        view, names = _split_attribute(attributes)
        view = view or "basic"
        if view not in self._providers:
            raise UnsupportedViewError(f"Unsupported attribute view {view}")
        candidates = self._inheritance_closure(view)

        rv: dict[str, Any] = {}
        requested = [x.strip() for x in names.split(",")]
        if "*" in requested:
            # Inherited attributes first, so the map reads from most to least general.
            for p in reversed(candidates):
                for attribute in p.attributes:
                    rv[attribute] = p.get(node, attribute)
            return rv
        for attribute in requested:
            for p in candidates:
                if p.supports(attribute):
                    rv[attribute] = p.get(node, attribute)
                    break
        return rv


def _split_attribute(attribute: str) -> tuple[str | None, str]:
    view, sep, name = attribute.partition(":")
    if not sep:
        return None, attribute
    return view, name


def create_registry(
    view_names: Iterable[str],
    default_attributes: Mapping[str, Any] | None = None,
) -> AttributeRegistry:
    """
    Build a registry from the standard providers. The basic view is always present, and the views
    inherited by any requested view are added automatically.
    """
    names: list[str] = []
    queue = ["basic", *view_names]
    while queue:
        name = queue.pop(0)
        if name in names:
            continue
        if name not in STANDARD_PROVIDERS:
            raise UnsupportedViewError(
                f"Unknown attribute view {name}: must be one of {', '.join(STANDARD_PROVIDERS)}"
            )
        names.append(name)
        queue.extend(sorted(STANDARD_PROVIDERS[name].inherits))
    return AttributeRegistry([STANDARD_PROVIDERS[n]() for n in names], default_attributes)


def serialize_attribute(value: Any) -> Any:
    if isinstance(value, UserPrincipal):
        return value.name
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, frozenset) and all(isinstance(x, PosixPermission) for x in value):
        return permissions_to_string(value)
    return value


def dump_attributes(registry: AttributeRegistry, node: Node, view: str) -> str:
    return json.dumps(
        {k: serialize_attribute(v) for k, v in registry.read_attribute_map(node, f"{view}:*").items()}
    )


def dump_initial_attributes(
    registry: AttributeRegistry,
    overrides: Mapping[str, Any] | None = None,
) -> str:
    return json.dumps(
        {k: serialize_attribute(v) for k, v in registry.compute_initial_attributes(overrides).items()}
    )
