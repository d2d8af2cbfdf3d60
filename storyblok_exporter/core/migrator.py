"""
Main migrator class for the Drupal to Storyblok export tool
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from tqdm import tqdm

from storyblok_exporter.core.payload import build_story_payload
from storyblok_exporter.types import (
    DestinationClient,
    ExportItem,
    MigrationSummary,
    UploadedAsset,
)
from storyblok_exporter.utils.logging import log_with_context


class DrupalToStoryblokMigrator:
    """Creates one Storyblok story per export item.

    Items are processed one at a time, in input order. For each item the
    image is uploaded first, then its tags are created, then the story.
    Failures of any single call are logged and never stop the batch; a
    failed image upload still produces a story, just without an image.
    """

    def __init__(
        self,
        client: DestinationClient,
        resolve_path: Callable[[str], Optional[Path]],
        progress: bool = False,
    ):
        """
        Args:
            client: Storyblok client (real or dry-run)
            resolve_path: Maps an image source URI to a local file path
            progress: Show a tqdm progress bar while migrating
        """
        self.client = client
        self.resolve_path = resolve_path
        self.progress = progress
        self.summary = MigrationSummary()

    def migrate(self, items: Iterable[ExportItem]) -> int:
        """Migrate every item and return the number of stories created."""
        self.summary = MigrationSummary()

        items = list(items)
        for item in tqdm(
            items, desc="Migrating articles", unit="article", disable=not self.progress
        ):
            self.summary.attempted += 1
            if self.migrate_item(item):
                self.summary.migrated += 1
            else:
                self.summary.failed.append(item.title)

        return self.summary.migrated

    def migrate_item(self, item: ExportItem) -> bool:
        """Run the upload, tag and story steps for one item.

        Returns:
            True when the story was created
        """
        asset = self._upload_image(item) if item.image else None

        for tag in item.tags:
            self._create_tag(item, tag)

        payload = build_story_payload(item, asset)
        result = self.client.create_story(payload)

        if result.ok:
            log_with_context(
                logging.INFO,
                f"Successfully migrated: {item.title}",
                title=item.title,
                story_id=result.value,
            )
            return True

        log_with_context(
            logging.ERROR,
            f"Failed to migrate: {item.title}. {result.error}",
            title=item.title,
        )
        return False

    def _upload_image(self, item: ExportItem) -> UploadedAsset | None:
        image = item.image
        log_with_context(
            logging.INFO, f"Uploading image: {image.filename}", title=item.title
        )

        local_path = self.resolve_path(image.source_uri)
        if local_path is None:
            self.summary.image_failures += 1
            log_with_context(
                logging.WARNING,
                f"Error uploading image: {image.filename}. Cannot resolve {image.source_uri} to a local file",
                title=item.title,
            )
            return None

        result = self.client.upload_asset(local_path, image.filename)
        if not result.ok:
            self.summary.image_failures += 1
            log_with_context(
                logging.WARNING,
                f"Error uploading image: {image.filename}. Error: {result.error}",
                title=item.title,
            )
            return None

        return result.value

    def _create_tag(self, item: ExportItem, tag: str) -> None:
        result = self.client.create_tag(tag)
        if result.ok:
            log_with_context(
                logging.INFO,
                f"Successfully created datasource entry: {tag}",
                title=item.title,
                tag=tag,
            )
        else:
            self.summary.tag_failures += 1
            log_with_context(
                logging.WARNING,
                f"Failed to create datasource entry: {tag}. {result.error}",
                title=item.title,
                tag=tag,
            )
