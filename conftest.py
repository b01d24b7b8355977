import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from facetfs.config import Config
from facetfs.node import Node
from facetfs.registry import AttributeRegistry, create_registry
from facetfs.tree import FileTree

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)


@pytest.fixture()
def isolated_dir() -> Iterator[Path]:
    with CliRunner().isolated_filesystem():
        yield Path.cwd()


@pytest.fixture()
def config_path(isolated_dir: Path) -> Path:
    path = isolated_dir / "config.toml"
    with path.open("w") as fp:
        fp.write(
            """
            attribute_views = ["posix", "dos"]

            [default_attributes]
            "posix:group" = "staff"
            """
        )
    return path


@pytest.fixture()
def config(config_path: Path) -> Config:
    return Config.parse(config_path_override=config_path)


@pytest.fixture()
def registry() -> AttributeRegistry:
    return create_registry(["posix", "dos"])


@pytest.fixture()
def node(registry: AttributeRegistry) -> Node:
    n = Node("file")
    registry.initialize_node(n)
    return n


@pytest.fixture()
def tree(registry: AttributeRegistry) -> FileTree:
    return FileTree(registry)
