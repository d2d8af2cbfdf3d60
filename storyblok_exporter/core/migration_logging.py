"""
Export summary logging for the Drupal to Storyblok export tool.

The headline is always "Exported N articles to Storyblok."; the outcome
line that follows tells an empty query from a total or partial failure.
"""

from __future__ import annotations

import logging

from storyblok_exporter.types import MigrationSummary
from storyblok_exporter.utils.logging import log_with_context


def log_export_summary(summary: MigrationSummary, dry_run: bool = False) -> None:
    """Log the final count and an outcome-specific status line.

    Args:
        summary: Counters collected by the migrator.
        dry_run: Whether the run only simulated Storyblok calls.
    """
    prefix = "[DRY RUN] " if dry_run else ""
    outcome = summary.outcome

    log_with_context(
        logging.INFO,
        f"{prefix}Exported {summary.migrated} articles to Storyblok.",
        outcome=outcome,
        count=summary.migrated,
    )

    if outcome == "nothing_to_export":
        log_with_context(
            logging.WARNING,
            f"{prefix}No published articles matched the query, nothing was exported.",
            outcome=outcome,
        )
        return

    if summary.image_failures:
        log_with_context(
            logging.WARNING,
            f"{summary.image_failures} image(s) could not be uploaded; those stories were created without an image.",
            stat="image_failures",
            count=summary.image_failures,
        )
    if summary.tag_failures:
        log_with_context(
            logging.WARNING,
            f"{summary.tag_failures} tag(s) could not be created as datasource entries.",
            stat="tag_failures",
            count=summary.tag_failures,
        )

    if outcome == "success":
        log_with_context(
            logging.INFO, f"{prefix}Content successfully exported 🎉", outcome=outcome
        )
        return

    failed = len(summary.failed)
    if outcome == "failed":
        log_with_context(
            logging.ERROR,
            f"{prefix}All {failed} article(s) failed to export.",
            outcome=outcome,
            count=failed,
        )
    else:
        log_with_context(
            logging.WARNING,
            f"{prefix}{failed} of {summary.attempted} article(s) failed to export.",
            outcome=outcome,
            count=failed,
        )
    for title in summary.failed:
        log_with_context(logging.WARNING, f"  • {title}", title=title)
