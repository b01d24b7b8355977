"""
The cli module defines facetfs's CLI interface. It does not have any domain logic of its own. It is
dedicated to parsing, resolving arguments, and delegating to the appropriate module.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import tomllib

from facetfs.common import FacetExpectedError
from facetfs.config import Config, ConfigNotFoundError, write_default_config
from facetfs.permissions import permissions_from_string

logger = logging.getLogger(__name__)


class InvalidAssignmentArgError(FacetExpectedError):
    pass


@dataclass
class Context:
    config: Config
    config_path: Path | None = None


# fmt: off
@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Emit verbose logging.")
@click.option("--config", "-c", type=click.Path(path_type=Path), help="Override the config file location.")
@click.pass_context
# fmt: on
def cli(cc: click.Context, verbose: bool, config: Path | None = None) -> None:
    """Inspect the attribute views of an in-memory filesystem."""
    if verbose:
        logging.getLogger("facetfs").setLevel(logging.DEBUG)
    try:
        parsed = Config.parse(config_path_override=config)
    except ConfigNotFoundError:
        # An explicitly passed config must exist, unless we are about to create it. The default
        # location is optional.
        if config is not None and cc.invoked_subcommand != "config":
            raise
        logger.debug("No configuration file found, using the default configuration")
        parsed = Config.default()
    cc.obj = Context(config=parsed, config_path=config)


@cli.group()
def config() -> None:
    """Utilites for configuring facetfs."""


@config.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file.")
@click.pass_obj
def init(ctx: Context, force: bool) -> None:
    """Write a starter configuration file."""
    path = write_default_config(ctx.config_path, force=force)
    click.echo(f"Wrote configuration to {path}")


@cli.command()
@click.pass_obj
def views(ctx: Context) -> None:
    """List the enabled attribute views."""
    for p in ctx.config.registry.providers():
        inherits = ", ".join(sorted(p.inherits)) or "-"
        click.echo(f"{p.name}: inherits [{inherits}], attributes [{', '.join(p.attributes)}]")


# fmt: off
@cli.command()
@click.option("--set", "-s", "overrides", multiple=True, help="Override a default value, as KEY=VALUE.")
@click.pass_obj
# fmt: on
def defaults(ctx: Context, overrides: tuple[str, ...]) -> None:
    """Print the attributes a new file starts out with."""
    from facetfs.registry import dump_initial_attributes
    click.echo(dump_initial_attributes(ctx.config.registry, parse_assignment_arguments(overrides)))


# fmt: off
@cli.command(name="inspect")
@click.argument("view", type=str, nargs=1)
@click.option("--set", "-s", "overrides", multiple=True, help="Override a default value, as KEY=VALUE.")
@click.option("--create-attr", "-a", "create_attrs", multiple=True, help="Supply an attribute at creation time, as KEY=VALUE.")
@click.pass_obj
# fmt: on
def inspect_view(
    ctx: Context,
    view: str,
    overrides: tuple[str, ...],
    create_attrs: tuple[str, ...],
) -> None:
    """Create a scratch file and print one of its views."""
    from facetfs.registry import dump_attributes
    from facetfs.tree import FileTree
    registry = ctx.config.registry
    creation_attributes = {
        k: parse_creation_attribute(k, v)
        for k, v in parse_assignment_arguments(create_attrs).items()
    }
    tree = FileTree(registry)
    node = tree.create_file(
        "/scratch",
        attrs=creation_attributes.items(),
        overrides=parse_assignment_arguments(overrides),
    )
    logger.info(f"Created scratch file {node.id}")
    click.echo(dump_attributes(registry, node, view))


def parse_assignment_arguments(args: tuple[str, ...]) -> dict[str, Any]:
    """
    Parse KEY=VALUE arguments. Values are read as TOML literals when they are valid TOML (so `true`
    becomes a bool), and otherwise as plain strings.
    """
    rv: dict[str, Any] = {}
    for arg in args:
        key, sep, raw = arg.partition("=")
        if not sep or not key:
            raise InvalidAssignmentArgError(
                f"{arg} is not a valid assignment: assignments must look like KEY=VALUE, e.g. posix:group=staff"
            )
        try:
            rv[key] = tomllib.loads(f"v = {raw}")["v"]
        except tomllib.TOMLDecodeError:
            rv[key] = raw
    return rv


def parse_creation_attribute(key: str, value: Any) -> Any:
    """Creation attributes are strict about types; accept the string notation for permissions."""
    if key.endswith(":permissions") and isinstance(value, str):
        return permissions_from_string(value)
    return value
