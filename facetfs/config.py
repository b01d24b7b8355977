"""
The config module provides the config schema and parsing logic.

The configuration decides which attribute views a filesystem supports and which default attribute
values new files start out with. We provide detailed errors when an invalid configuration is
detected, and emit warnings when unrecognized keys are found.
"""

from __future__ import annotations

import functools
import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import appdirs
import tomli_w
import tomllib

from facetfs.common import FacetExpectedError
from facetfs.registry import AttributeRegistry, create_registry

XDG_CONFIG_FACETFS = Path(appdirs.user_config_dir("facetfs"))
CONFIG_PATH = XDG_CONFIG_FACETFS / "config.toml"

DEFAULT_ATTRIBUTE_VIEWS = ["basic"]

logger = logging.getLogger(__name__)


class ConfigNotFoundError(FacetExpectedError):
    pass


class ConfigDecodeError(FacetExpectedError):
    pass


class ConfigAlreadyExistsError(FacetExpectedError):
    pass


class InvalidConfigValueError(FacetExpectedError, ValueError):
    pass


@dataclass(frozen=True)
class Config:
    # Views enabled in addition to basic. Inherited views are enabled automatically.
    attribute_views: list[str] = field(default_factory=lambda: list(DEFAULT_ATTRIBUTE_VIEWS))
    # Map of qualified key (e.g. `posix:group`) -> default value for new files.
    default_attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def default(cls) -> Config:
        return Config()

    @classmethod
    def parse(cls, config_path_override: Path | None = None) -> Config:
        # As we parse, delete consumed values from the data dictionary. If any are left over at the
        # end of the config, warn that unknown config keys were found.
        cfgpath = config_path_override or CONFIG_PATH
        try:
            with cfgpath.open("r") as fp:
                data = tomllib.loads(fp.read())
        except FileNotFoundError as e:
            raise ConfigNotFoundError(f"Configuration file not found ({cfgpath})") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigDecodeError(
                f"Failed to decode configuration file: invalid TOML: {e}"
            ) from e

        try:
            attribute_views = data["attribute_views"]
            del data["attribute_views"]
            if not isinstance(attribute_views, list):
                raise ValueError(f"Must be a list[str]: got {type(attribute_views)}")
            for s in attribute_views:
                if not isinstance(s, str):
                    raise ValueError(f"Each view must be of type str: got {type(s)}")
        except KeyError:
            attribute_views = list(DEFAULT_ATTRIBUTE_VIEWS)
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for attribute_views in configuration file ({cfgpath}): {e}"
            ) from e

        try:
            default_attributes = data["default_attributes"]
            del data["default_attributes"]
            if not isinstance(default_attributes, dict):
                raise ValueError(
                    f"Must be a table of attribute to value: got {type(default_attributes)}"
                )
            for key in default_attributes:
                if ":" not in key:
                    raise ValueError(f"Attribute {key} must be qualified with its view, like posix:{key}")
        except KeyError:
            default_attributes = {}
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for default_attributes in configuration file ({cfgpath}): {e}"
            ) from e

        # Build the registry once to validate the views and the types of the default values.
        try:
            create_registry(attribute_views, default_attributes).compute_initial_attributes()
        except FacetExpectedError as e:
            raise InvalidConfigValueError(
                f"Invalid attribute configuration in configuration file ({cfgpath}): {e}"
            ) from e

        if data:
            unrecognized_accessors: list[str] = []
            # Do a DFS over the data keys to assemble the map of unknown keys. State is a tuple of
            # ("accessor", node).
            dfs_state: deque[tuple[str, Any]] = deque([("", data)])
            while dfs_state:
                accessor, node = dfs_state.pop()
                if isinstance(node, dict):
                    for k, v in node.items():
                        child_accessor = k if not accessor else f"{accessor}.{k}"
                        dfs_state.append((child_accessor, v))
                    continue
                unrecognized_accessors.append(accessor)
            logger.warning(
                f"Unrecognized options found in configuration file: {', '.join(unrecognized_accessors)}"
            )

        return Config(
            attribute_views=attribute_views,
            default_attributes=default_attributes,
        )

    @functools.cached_property
    def registry(self) -> AttributeRegistry:
        return create_registry(self.attribute_views, self.default_attributes)


def write_default_config(path: Path | None = None, *, force: bool = False) -> Path:
    """Write a starter configuration file that enables every standard view."""
    path = path or CONFIG_PATH
    if path.exists() and not force:
        raise ConfigAlreadyExistsError(f"Configuration file already exists ({path})")
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "attribute_views": ["posix", "dos"],
        "default_attributes": {
            "owner:owner": "user",
            "posix:group": "group",
            "posix:permissions": "rw-r--r--",
        },
    }
    with path.open("wb") as fp:
        tomli_w.dump(data, fp)
    logger.info(f"Wrote default configuration to {path}")
    return path
