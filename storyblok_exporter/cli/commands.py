#!/usr/bin/env python3
"""
Main execution module for the Drupal to Storyblok export tool.

Importing the command modules registers their subcommands on the shared
click group.
"""

from __future__ import annotations

from storyblok_exporter.cli import config_cmd, export_cmd  # noqa: F401
from storyblok_exporter.cli.common import cli, handle_exception  # noqa: F401


def main() -> None:
    """Main entry point for the Drupal to Storyblok export tool."""
    cli()


if __name__ == "__main__":
    main()
