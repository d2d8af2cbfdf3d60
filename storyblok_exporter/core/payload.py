"""Construction of the Storyblok story payload for an export item."""

from __future__ import annotations

from storyblok_exporter.constants import STORY_COMPONENT
from storyblok_exporter.core.slug import generate_slug
from storyblok_exporter.types import (
    ExportItem,
    StoryblokAssetField,
    StoryPayload,
    UploadedAsset,
)


def build_asset_field(asset: UploadedAsset | None) -> StoryblokAssetField:
    """Build the ``asset`` field, with null id and filename when there is no asset."""
    return {
        "id": asset.id if asset else None,
        "alt": None,
        "name": "",
        "focus": "",
        "title": None,
        "source": None,
        "filename": asset.filename if asset else None,
        "copyright": None,
        "fieldtype": "asset",
        "meta_data": {},
        "is_external_url": False,
    }


def build_story_payload(
    item: ExportItem, asset: UploadedAsset | None = None
) -> StoryPayload:
    """
    Build the request body for creating a story from an export item.

    Stories are always created unpublished.

    Args:
        item: The export item
        asset: The image uploaded for this item, if the upload succeeded

    Returns:
        The ``{"story": {...}}`` payload
    """
    return {
        "story": {
            "name": item.title,
            "created_at": item.created_at,
            "slug": generate_slug(item.title),
            "content": {
                "component": STORY_COMPONENT,
                "title": item.title,
                "body": item.body,
                "image": build_asset_field(asset),
                "tags": list(item.tags),
            },
            "is_folder": False,
            "parent_id": 0,
            "disable_fe_editor": False,
            "path": None,
            "is_startpage": False,
            "publish": False,
        }
    }
