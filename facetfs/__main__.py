import sys

import click

from facetfs.cli import cli
from facetfs.common import FacetExpectedError


def main() -> None:
    try:
        cli()
    except FacetExpectedError as e:
        click.secho(f"{e.__class__.__module__}.{e.__class__.__name__}: ", fg="red", nl=False)
        click.secho(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
