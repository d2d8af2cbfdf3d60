"""Shared type definitions for the Drupal to Storyblok export tool.

Provides the dataclasses flowing through the export pipeline (source
records, export items, uploaded assets), the ``Result`` type returned by
every destination client operation, and TypedDicts describing the Storyblok
story payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar, TypedDict

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Source side (produced by the Drupal reader)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntityRef:
    """Reference to a related Drupal entity, e.g. ``file--file`` / uuid."""

    type: str
    id: str


@dataclass(frozen=True)
class FileEntity:
    """A resolved Drupal file entity."""

    uri: str
    filename: str


@dataclass(frozen=True)
class SourceRecord:
    """One content item read from the Drupal site."""

    title: str
    body: str
    created_at: int  # Unix seconds
    author: str
    image_ref: EntityRef | None = None
    tag_refs: list[EntityRef] = field(default_factory=list)


class EntityResolver(Protocol):
    """Loads entities referenced by a SourceRecord."""

    def resolve_file(self, ref: EntityRef) -> FileEntity | None: ...

    def resolve_term(self, ref: EntityRef) -> str | None: ...


# ---------------------------------------------------------------------------
# Export side (store-agnostic and destination-agnostic)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImageRef:
    """Image attachment of an export item."""

    source_uri: str
    filename: str


@dataclass(frozen=True)
class ExportItem:
    """An article shaped for export."""

    title: str
    body: str
    created_at: str  # "YYYY-MM-DD HH:MM:SS"
    author: str
    image: ImageRef | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UploadedAsset:
    """An asset uploaded to Storyblok for the item currently being migrated."""

    id: Any
    filename: str


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a destination client call: a value or an error detail."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> Result[T]:
        return cls(error=error or "unknown error")


# ---------------------------------------------------------------------------
# Storyblok payload shapes
# ---------------------------------------------------------------------------


class StoryblokAssetField(TypedDict):
    """The ``asset`` field shape Storyblok expects inside story content."""

    id: Any
    alt: str | None
    name: str
    focus: str
    title: str | None
    source: str | None
    filename: str | None
    copyright: str | None
    fieldtype: str
    meta_data: dict[str, Any]
    is_external_url: bool


class StoryblokContent(TypedDict):
    """Content block of an article story."""

    component: str
    title: str
    body: str
    image: StoryblokAssetField
    tags: list[str]


class StoryblokStory(TypedDict):
    """The ``story`` object sent to the Management API."""

    name: str
    created_at: str
    slug: str
    content: StoryblokContent
    is_folder: bool
    parent_id: int
    disable_fe_editor: bool
    path: str | None
    is_startpage: bool
    publish: bool


class StoryPayload(TypedDict):
    """Request body for ``POST /stories``."""

    story: StoryblokStory


class DestinationClient(Protocol):
    """Operations the migrator needs from a Storyblok client."""

    def upload_asset(
        self, local_path: Path, filename: str
    ) -> Result[UploadedAsset]: ...

    def create_tag(self, label: str) -> Result[None]: ...

    def create_story(self, payload: StoryPayload) -> Result[Any]: ...


# ---------------------------------------------------------------------------
# Run tracking
# ---------------------------------------------------------------------------


@dataclass
class MigrationSummary:
    """Counters collected while migrating a batch of export items."""

    attempted: int = 0
    migrated: int = 0
    failed: list[str] = field(default_factory=list)
    image_failures: int = 0
    tag_failures: int = 0

    @property
    def outcome(self) -> str:
        if self.attempted == 0:
            return "nothing_to_export"
        if self.migrated == self.attempted:
            return "success"
        if self.migrated == 0:
            return "failed"
        return "partial"
