"""No-op Storyblok client for dry-run mode.

Exposes the same operations as ``StoryblokClient`` but logs instead of
making API calls. Every call succeeds with synthetic identifiers so the
rest of the pipeline behaves exactly as in a real run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from storyblok_exporter.types import Result, StoryPayload, UploadedAsset
from storyblok_exporter.utils.logging import log_with_context


class DryRunStoryblokClient:
    """Stand-in for ``StoryblokClient`` that records intent only."""

    def __init__(self) -> None:
        self._asset_counter = 0
        self._story_counter = 0

    def upload_asset(self, local_path: Path, filename: str) -> Result[UploadedAsset]:
        self._asset_counter += 1
        log_with_context(
            logging.INFO,
            f"[DRY RUN] Would upload image {filename} from {local_path}",
            file_name=filename,
        )
        return Result.success(
            UploadedAsset(
                id=f"dry-run-asset-{self._asset_counter}",
                filename=f"dry-run://assets/{filename}",
            )
        )

    def create_tag(self, label: str) -> Result[None]:
        log_with_context(
            logging.INFO, f"[DRY RUN] Would create datasource entry: {label}", tag=label
        )
        return Result.success()

    def create_story(self, payload: StoryPayload) -> Result[str]:
        self._story_counter += 1
        story = payload["story"]
        log_with_context(
            logging.INFO,
            f"[DRY RUN] Would create story '{story['name']}' with slug '{story['slug']}'",
            title=story["name"],
        )
        return Result.success(f"dry-run-story-{self._story_counter}")
