"""CHISTOGRAM manifest CLI.

Shows how a registered package is wired: its sub-packages, its libraries and
unit tests, and the (consumer -> provider) dependency edges between them.

Examples
    $ chistogram manifest
    $ chistogram manifest cfile
    $ chistogram manifest --json | jq .unittests
"""

from __future__ import annotations

import json
import logging

import click

from chistogram.manifest import Package, default_registry
from chistogram.manifest.errors import ManifestError
from chistogram.manifest.packages import PACKAGE_NAME

from .helpers import error

logger = logging.getLogger(__name__)


def _render(package: Package) -> None:
    click.secho(f"{package.name}", bold=True)
    click.echo(f"  path      : {package.path}")
    click.echo(
        "  packages  : " + (", ".join(p.name for p in package.packages) or "<none>")
    )
    for label, projects in (
        ("main lib", package.get_main_lib()),
        ("test lib", package.get_test_lib()),
        ("unittest", package.get_unittest()),
    ):
        for project in projects:
            deps = ", ".join(project.dependency_names) or "<none>"
            click.echo(f"  {label:<10}: {project.name} -> {deps}")


@click.command("manifest")
@click.argument("name", default=PACKAGE_NAME)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the manifest as JSON on stdout.",
)
def manifest(name: str, as_json: bool) -> None:
    """Show the package manifest of NAME (default: chistogram)."""
    try:
        package = default_registry().resolve(name)
    except ManifestError as e:
        error(str(e))
        raise click.ClickException(f"Unknown package {name!r}") from e

    logger.debug("Showing manifest of %s", package.name)
    if as_json:
        click.echo(json.dumps(package.to_dict(), indent=2))
    else:
        _render(package)
