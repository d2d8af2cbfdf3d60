"""
Projection of Drupal source records into export items.

The projector is the only place that follows entity references: the image
attachment becomes an ``ImageRef`` (or ``None``) and tag references become
their labels. Missing entities are a normal outcome, never an error.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Iterable

from storyblok_exporter.constants import CREATED_DATE_FORMAT
from storyblok_exporter.core.config import resolve_timezone
from storyblok_exporter.types import (
    EntityResolver,
    ExportItem,
    ImageRef,
    SourceRecord,
)
from storyblok_exporter.utils.logging import log_with_context


def _resolve_image(record: SourceRecord, resolver: EntityResolver) -> ImageRef | None:
    if record.image_ref is None:
        return None

    file_entity = resolver.resolve_file(record.image_ref)
    if file_entity is None:
        log_with_context(
            logging.DEBUG,
            f"Image reference {record.image_ref.id} of '{record.title}' does not resolve, exporting without image",
            title=record.title,
        )
        return None

    return ImageRef(source_uri=file_entity.uri, filename=file_entity.filename)


def _resolve_tags(record: SourceRecord, resolver: EntityResolver) -> list[str]:
    tags: list[str] = []
    for ref in record.tag_refs:
        label = resolver.resolve_term(ref)
        if label is not None:
            tags.append(label)
    return tags


def format_created(created_at: int, tz: tzinfo | str = "UTC") -> str:
    """Format a Unix timestamp as ``YYYY-MM-DD HH:MM:SS`` in ``tz``."""
    if isinstance(tz, str):
        tz = resolve_timezone(tz)
    return datetime.fromtimestamp(created_at, tz=tz).strftime(CREATED_DATE_FORMAT)


def project_record(
    record: SourceRecord, resolver: EntityResolver, tz: tzinfo | str = "UTC"
) -> ExportItem:
    """
    Shape one source record for export.

    Args:
        record: The record read from Drupal
        resolver: Loads the file and taxonomy term entities the record references
        tz: Timezone (or its name) used to format the created date

    Returns:
        The export item; ``image`` is None when the attachment is empty or dangling
    """
    return ExportItem(
        title=record.title,
        body=record.body,
        created_at=format_created(record.created_at, tz),
        author=record.author,
        image=_resolve_image(record, resolver),
        tags=_resolve_tags(record, resolver),
    )


def project_records(
    records: Iterable[SourceRecord], resolver: EntityResolver, tz: tzinfo | str = "UTC"
) -> list[ExportItem]:
    """Project every record, preserving input order."""
    if isinstance(tz, str):
        tz = resolve_timezone(tz)
    return [project_record(record, resolver, tz) for record in records]
