"""CLI command handler for creating a default configuration file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from storyblok_exporter.cli.common import cli
from storyblok_exporter.core.config import create_default_config
from storyblok_exporter.utils.logging import setup_logger

# ---------------------------------------------------------------------------
# init-config subcommand
# ---------------------------------------------------------------------------


@cli.command("init-config")
@click.option(
    "--output",
    default="config.yaml",
    show_default=True,
    help="Where to write the configuration file",
)
def init_config(output: str) -> None:
    """Write a default configuration file (never overwrites).

    Args:
        output: Path of the file to create.
    """
    setup_logger()

    if not create_default_config(Path(output)):
        sys.exit(1)
    click.echo(
        "Fill in the Storyblok space and datasource ids, or set STORYBLOK_OAUTH_TOKEN, "
        "STORYBLOK_SPACE_ID and STORYBLOK_DATASOURCE_ID in the environment."
    )
