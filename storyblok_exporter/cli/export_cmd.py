"""CLI command handler for the export workflow."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from storyblok_exporter.cli.common import cli, common_options, handle_exception
from storyblok_exporter.cli.report import (
    build_report,
    create_output_directory,
    generate_report,
)
from storyblok_exporter.core.config import ExporterConfig, load_config, validate_config
from storyblok_exporter.core.migration_logging import log_export_summary
from storyblok_exporter.core.migrator import DrupalToStoryblokMigrator
from storyblok_exporter.core.projector import project_records
from storyblok_exporter.services.drupal_reader import DrupalJsonApiReader
from storyblok_exporter.services.dry_run_client import DryRunStoryblokClient
from storyblok_exporter.services.files import FilePathResolver
from storyblok_exporter.services.storyblok_client import StoryblokClient
from storyblok_exporter.types import MigrationSummary
from storyblok_exporter.utils.logging import log_with_context, setup_logger

# ---------------------------------------------------------------------------
# export subcommand
# ---------------------------------------------------------------------------


@cli.command("export")
@common_options
@click.option(
    "--limit",
    type=int,
    default=None,
    help="LIMIT the number of articles to export (all when omitted or <= 0)",
)
@click.option(
    "--dry_run",
    is_flag=True,
    default=False,
    help="Read and transform articles but do not call the Storyblok API",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit with status 1 when any article fails to export",
)
def export(
    config: str,
    verbose: bool,
    debug_api: bool,
    limit: int | None,
    dry_run: bool,
    strict: bool,
) -> None:
    """Export published Drupal articles to Storyblok.

    Example: storyblok-exporter export --limit=10 exports and migrates up to
    10 articles to Storyblok.

    Args:
        config: Path to config YAML.
        verbose: Enable verbose console logging.
        debug_api: Enable detailed API request/response logging.
        limit: Maximum number of articles to fetch.
        dry_run: Skip all Storyblok writes.
        strict: Exit non-zero on any failed article.
    """
    output_dir = create_output_directory()
    setup_logger(verbose, debug_api, output_dir)

    log_startup_info(config, limit, dry_run, strict)
    log_with_context(logging.INFO, f"Output directory: {output_dir}")

    migrator: DrupalToStoryblokMigrator | None = None
    try:
        cfg = load_config(Path(config))
        migrator = create_migrator(cfg, dry_run=dry_run, progress=True)
        summary, fetched = run_export(
            cfg, limit=limit, dry_run=dry_run, migrator=migrator
        )
    except (Exception, KeyboardInterrupt) as e:
        handle_exception(e)
        # Partial report covering the articles processed before the failure
        if migrator is not None and migrator.summary.attempted:
            report_file = generate_report(
                build_report(
                    migrator.summary,
                    dry_run=dry_run,
                    content_type=cfg.content_type,
                    limit=limit,
                    fetched=None,
                    interrupted=True,
                ),
                output_dir,
            )
            log_with_context(
                logging.INFO, f"Partial export report available at: {report_file}"
            )
        sys.exit(1)

    generate_report(
        build_report(
            summary,
            dry_run=dry_run,
            content_type=cfg.content_type,
            limit=limit,
            fetched=fetched,
        ),
        output_dir,
    )

    if strict and summary.failed:
        log_with_context(
            logging.ERROR,
            f"--strict: {len(summary.failed)} article(s) failed, exiting with status 1",
        )
        sys.exit(1)


# Same short name as the drush command (``drush sbe``)
cli.add_command(export, name="sbe")


def create_migrator(
    cfg: ExporterConfig, dry_run: bool = False, progress: bool = False
) -> DrupalToStoryblokMigrator:
    """Build the migrator with the real or dry-run Storyblok client."""
    client = DryRunStoryblokClient() if dry_run else StoryblokClient(cfg.storyblok)
    files = FilePathResolver(
        cfg.drupal.public_files_path, cfg.drupal.private_files_path
    )
    return DrupalToStoryblokMigrator(client, files.realpath, progress=progress)


def run_export(
    cfg: ExporterConfig,
    limit: int | None = None,
    dry_run: bool = False,
    progress: bool = False,
    migrator: DrupalToStoryblokMigrator | None = None,
) -> tuple[MigrationSummary, int]:
    """Read, project and migrate articles according to ``cfg``.

    Args:
        cfg: Loaded configuration; validated here before any network call.
        limit: Maximum number of articles to fetch (None or <= 0 for all).
        dry_run: Use the dry-run client instead of the Storyblok API.
        progress: Show a progress bar while migrating.
        migrator: Migrator to use; built from ``cfg`` when omitted. Passing
            one lets the caller read its summary if the run is interrupted.

    Returns:
        The migration summary and the number of records fetched from Drupal.

    Raises:
        ConfigError: if the configuration is incomplete.
        SourceError: if Drupal cannot be read.
    """
    validate_config(cfg, dry_run=dry_run)

    reader = DrupalJsonApiReader(cfg.drupal)
    records = reader.find_published(cfg.content_type, limit)
    items = project_records(records, reader, cfg.timezone)

    if migrator is None:
        migrator = create_migrator(cfg, dry_run=dry_run, progress=progress)
    migrator.migrate(items)

    log_export_summary(migrator.summary, dry_run=dry_run)
    return migrator.summary, len(records)


def log_startup_info(config: str, limit: int | None, dry_run: bool, strict: bool) -> None:
    """Log startup information."""
    config_path = Path(config)
    if not config_path.is_absolute():
        config_path = Path.cwd() / config

    log_with_context(logging.INFO, "Starting export with the following parameters:")
    log_with_context(logging.INFO, f"- Config: {config_path}")
    log_with_context(
        logging.INFO, f"- Limit: {limit if limit and limit > 0 else 'all articles'}"
    )
    log_with_context(logging.INFO, f"- Dry run: {dry_run}")
    log_with_context(logging.INFO, f"- Strict: {strict}")
