import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from facetfs.cli import (
    Context,
    InvalidAssignmentArgError,
    cli,
    defaults,
    parse_assignment_arguments,
    parse_creation_attribute,
)
from facetfs.common import CreationRestrictedError, InvalidAttributeTypeError
from facetfs.config import Config, ConfigAlreadyExistsError, ConfigNotFoundError
from facetfs.permissions import InvalidPermissionStringError, permissions_from_string


def test_parse_assignment_arguments() -> None:
    assert parse_assignment_arguments(()) == {}
    assert parse_assignment_arguments(
        (
            "posix:group=staff",
            "dos:hidden=true",
            'owner:owner="root user"',
            "posix:permissions=rwxr-x---",
            "x:y=a=b",
        )
    ) == {
        "posix:group": "staff",
        "dos:hidden": True,
        "owner:owner": "root user",
        "posix:permissions": "rwxr-x---",
        "x:y": "a=b",
    }
    with pytest.raises(InvalidAssignmentArgError):
        parse_assignment_arguments(("posix:group",))
    with pytest.raises(InvalidAssignmentArgError):
        parse_assignment_arguments(("=staff",))


def test_parse_creation_attribute() -> None:
    assert parse_creation_attribute("posix:permissions", "rwx------") == permissions_from_string("rwx------")
    assert parse_creation_attribute("permissions", "rwx------") == "rwx------"
    assert parse_creation_attribute("dos:hidden", True) is True
    with pytest.raises(InvalidPermissionStringError):
        parse_creation_attribute("posix:permissions", "rwx")


def test_cli_views(config_path: Path) -> None:
    runner = CliRunner()
    res = runner.invoke(cli, ["--config", str(config_path), "views"])
    assert res.exit_code == 0
    lines = res.stdout.splitlines()
    assert [x.split(":")[0] for x in lines] == ["basic", "owner", "posix", "dos"]
    assert "posix: inherits [basic, owner], attributes [group, permissions]" in lines
    assert "dos: inherits [basic], attributes [readonly, hidden, archive, system]" in lines
    assert "owner: inherits [-], attributes [owner]" in lines


def test_cli_defaults(config: Config) -> None:
    ctx = Context(config=config)
    runner = CliRunner()
    res = runner.invoke(defaults, obj=ctx)
    assert res.exit_code == 0
    out = json.loads(res.stdout)
    assert out["posix:group"] == "staff"
    assert out["posix:permissions"] == "rw-r--r--"
    assert out["owner:owner"] == "user"
    assert out["dos:hidden"] is False

    res = runner.invoke(defaults, ["--set", "dos:hidden=true", "-s", "posix:permissions=rwx------"], obj=ctx)
    assert res.exit_code == 0
    out = json.loads(res.stdout)
    assert out["dos:hidden"] is True
    assert out["posix:permissions"] == "rwx------"
    assert out["posix:group"] == "staff"


def test_cli_defaults_invalid_value(config: Config) -> None:
    runner = CliRunner()
    res = runner.invoke(defaults, ["--set", "dos:hidden=yes"], obj=Context(config=config))
    assert res.exit_code == 1
    assert isinstance(res.exception, InvalidAttributeTypeError)


def test_cli_inspect(config_path: Path) -> None:
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(config_path), "inspect", "posix"])
    assert res.exit_code == 0
    out = json.loads(res.stdout)
    assert out["group"] == "staff"
    assert out["owner"] == "user"
    assert out["isRegularFile"] is True
    assert "hidden" not in out

    res = runner.invoke(
        cli,
        ["-c", str(config_path), "inspect", "posix", "-a", "posix:permissions=rwx------", "-s", "owner:owner=root"],
    )
    assert res.exit_code == 0
    out = json.loads(res.stdout)
    assert out["permissions"] == "rwx------"
    assert out["owner"] == "root"

    res = runner.invoke(cli, ["-c", str(config_path), "inspect", "dos"])
    assert res.exit_code == 0
    assert json.loads(res.stdout)["archive"] is False


def test_cli_inspect_creation_restricted(config_path: Path) -> None:
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(config_path), "inspect", "posix", "-a", "posix:group=wheel"])
    assert res.exit_code == 1
    assert isinstance(res.exception, CreationRestrictedError)
    res = runner.invoke(cli, ["-c", str(config_path), "inspect", "dos", "-a", "dos:hidden=true"])
    assert isinstance(res.exception, CreationRestrictedError)


def test_cli_config_init(isolated_dir: Path) -> None:
    path = isolated_dir / "facetfs" / "config.toml"
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(path), "config", "init"])
    assert res.exit_code == 0
    assert path.is_file()
    assert Config.parse(config_path_override=path).attribute_views == ["posix", "dos"]

    res = runner.invoke(cli, ["-c", str(path), "config", "init"])
    assert res.exit_code == 1
    assert isinstance(res.exception, ConfigAlreadyExistsError)
    res = runner.invoke(cli, ["-c", str(path), "config", "init", "--force"])
    assert res.exit_code == 0


def test_cli_missing_explicit_config(isolated_dir: Path) -> None:
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(isolated_dir / "missing.toml"), "views"])
    assert res.exit_code == 1
    assert isinstance(res.exception, ConfigNotFoundError)
