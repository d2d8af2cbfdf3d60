"""Unit test configuration and shared fixtures."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest

import storyblok_exporter.utils.logging as log_module
from storyblok_exporter.core.config import DrupalConfig, StoryblokConfig
from storyblok_exporter.types import ExportItem, ImageRef, Result, UploadedAsset


@pytest.fixture(autouse=True)
def _clean_logger():
    """Remove all handlers from the storyblok_exporter logger around each test."""
    logger = logging.getLogger("storyblok_exporter")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    log_module._DEBUG_API_ENABLED = False


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200, json_data: Any = None, text: str | None = None
) -> MagicMock:
    """Build a MagicMock that looks enough like ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    else:
        response.json.return_value = json_data
        response.text = text if text is not None else str(json_data)
    return response


@pytest.fixture()
def storyblok_config() -> StoryblokConfig:
    return StoryblokConfig(
        oauth_token="sb-token",
        space_id="12345",
        datasource_id="678",
        api_url="https://mapi.storyblok.com/v1/spaces/",
        request_timeout=10,
    )


@pytest.fixture()
def drupal_config() -> DrupalConfig:
    return DrupalConfig(base_url="https://drupal.example.com/", request_timeout=10)


# ---------------------------------------------------------------------------
# Export items and a scripted destination client
# ---------------------------------------------------------------------------


def _make_item(
    title: str = "Hello, World!",
    image: ImageRef | None = None,
    tags: list[str] | None = None,
) -> ExportItem:
    return ExportItem(
        title=title,
        body="<p>Body</p>",
        created_at="2024-03-05 10:20:30",
        author="Alice Smith",
        image=image,
        tags=tags or [],
    )


def _build_mock_client(
    upload: Result | None = None,
    tag: Result | None = None,
    story: Result | None = None,
) -> MagicMock:
    """Build a MagicMock destination client that succeeds unless told otherwise."""
    client = MagicMock()
    client.upload_asset.return_value = upload or Result.success(
        UploadedAsset(id=42, filename="https://a.storyblok.com/f/12345/hello.jpg")
    )
    client.create_tag.return_value = tag or Result.success()
    client.create_story.return_value = story or Result.success(1001)
    return client


@pytest.fixture()
def make_response():
    return _make_response


@pytest.fixture()
def make_item():
    return _make_item


@pytest.fixture()
def mock_client():
    return _build_mock_client
