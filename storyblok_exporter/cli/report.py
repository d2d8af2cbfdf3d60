"""
Report generation for Drupal to Storyblok export runs
"""

from __future__ import annotations

import datetime
import logging
import os
from typing import Any

import yaml

from storyblok_exporter.constants import OUTPUT_ROOT
from storyblok_exporter.types import MigrationSummary
from storyblok_exporter.utils.logging import log_with_context


def create_output_directory(root: str = OUTPUT_ROOT) -> str:
    """Create a timestamped output directory for this run and return its path."""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    run_output_dir = os.path.join(root, f"run_{timestamp}")
    os.makedirs(run_output_dir, exist_ok=True)
    return run_output_dir


def build_report(
    summary: MigrationSummary,
    *,
    dry_run: bool,
    content_type: str,
    limit: int | None,
    fetched: int | None,
    interrupted: bool = False,
) -> dict[str, Any]:
    """Collect the data written to ``export_report.yaml``.

    ``fetched`` is None when the run stopped before the source was fully read.
    """
    return {
        "generated_at": datetime.datetime.now().isoformat(timespec="seconds"),
        "dry_run": dry_run,
        "content_type": content_type,
        "limit": limit if limit and limit > 0 else None,
        "outcome": summary.outcome,
        "interrupted": interrupted,
        "summary": {
            "fetched": fetched,
            "attempted": summary.attempted,
            "migrated": summary.migrated,
            "failed": len(summary.failed),
            "image_failures": summary.image_failures,
            "tag_failures": summary.tag_failures,
        },
        "failed_articles": list(summary.failed),
    }


def generate_report(
    report: dict[str, Any], output_dir: str, output_file: str = "export_report.yaml"
) -> str | None:
    """Write the run report into ``output_dir`` and return its path.

    A report that cannot be written is logged and skipped; it never fails the run.
    """
    report_path = os.path.join(output_dir, output_file)
    try:
        with open(report_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                report, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to write export report: {e}")
        return None

    log_with_context(logging.INFO, f"Export report saved to {report_path}")
    return report_path
