"""Drupal JSON:API source reader.

Reads published nodes of one content type from a Drupal site's JSON:API
endpoint and turns them into ``SourceRecord``s. Related entities requested
through ``include`` (author, image file, tags) are indexed as pages arrive,
which lets the reader double as the entity resolver used by the projector.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import requests

from storyblok_exporter.constants import (
    AUTHOR_FIELD,
    IMAGE_FIELD,
    JSONAPI_INCLUDE,
    TAGS_FIELD,
)
from storyblok_exporter.core.config import DrupalConfig
from storyblok_exporter.exceptions import SourceError
from storyblok_exporter.types import EntityRef, FileEntity, SourceRecord
from storyblok_exporter.utils.logging import (
    log_api_request,
    log_api_response,
    log_with_context,
)


def parse_created(value: Any) -> int:
    """Convert a JSON:API ``created`` value to Unix seconds.

    Drupal 8.7+ serializes timestamps as RFC 3339 strings; older sites send
    integers (sometimes as strings).
    """
    if isinstance(value, bool) or value is None:
        raise SourceError(f"Invalid created timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return int(datetime.fromisoformat(text).timestamp())
    except ValueError as e:
        raise SourceError(f"Invalid created timestamp: {value!r}") from e


def _relationship_data(resource: dict[str, Any], field_name: str) -> Any:
    relationship = (resource.get("relationships") or {}).get(field_name) or {}
    return relationship.get("data")


def _to_ref(data: Any) -> EntityRef | None:
    if not isinstance(data, dict) or not data.get("type") or not data.get("id"):
        return None
    return EntityRef(type=data["type"], id=data["id"])


class DrupalJsonApiReader:
    """Reads nodes from Drupal's JSON:API and resolves their references."""

    def __init__(
        self, config: DrupalConfig, session: requests.Session | None = None
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        if config.username:
            self._session.auth = (config.username, config.password)
        self._included: dict[tuple[str, str], dict[str, Any]] = {}

    # -- Querying -------------------------------------------------------------

    def _get(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        log_api_request("GET", url, params)
        try:
            response = self._session.get(
                url,
                params=params,
                headers={"Accept": "application/vnd.api+json"},
                timeout=self._config.request_timeout,
            )
            log_api_response(response.status_code, url, response.text)
            response.raise_for_status()
            data: dict[str, Any] = response.json()
        except requests.exceptions.RequestException as e:
            raise SourceError(f"Failed to read {url}: {e}") from e
        except ValueError as e:
            raise SourceError(f"Invalid JSON returned by {url}: {e}") from e
        return data

    def find_published(
        self, content_type: str, limit: int | None = None
    ) -> list[SourceRecord]:
        """Fetch published nodes of ``content_type`` in the site's natural order.

        Args:
            content_type: Node bundle, e.g. ``article``.
            limit: Maximum number of records; None or <= 0 fetches all pages.

        Returns:
            The source records, at most ``limit`` of them.

        Raises:
            SourceError: if the site cannot be queried.
        """
        url: str | None = (
            f"{self._config.base_url.rstrip('/')}/jsonapi/node/{content_type}"
        )
        params: dict[str, Any] | None = {
            "filter[status]": 1,
            "include": JSONAPI_INCLUDE,
        }
        max_records = limit if limit and limit > 0 else None
        if max_records:
            params["page[limit]"] = max_records

        records: list[SourceRecord] = []
        while url and (max_records is None or len(records) < max_records):
            document = self._get(url, params)
            self._index_included(document.get("included") or [])

            for resource in document.get("data") or []:
                if max_records is not None and len(records) >= max_records:
                    break
                records.append(self._to_record(resource))

            # The next link already carries every query parameter
            url = ((document.get("links") or {}).get("next") or {}).get("href")
            params = None

        log_with_context(
            logging.INFO,
            f"Fetched {len(records)} published {content_type} node(s) from Drupal",
            count=len(records),
        )
        return records

    def _index_included(self, included: list[dict[str, Any]]) -> None:
        for resource in included:
            if resource.get("type") and resource.get("id"):
                self._included[(resource["type"], resource["id"])] = resource

    def _to_record(self, resource: dict[str, Any]) -> SourceRecord:
        attributes = resource.get("attributes") or {}
        body = attributes.get("body") or {}
        tag_data = _relationship_data(resource, TAGS_FIELD) or []

        return SourceRecord(
            title=attributes.get("title") or "",
            body=(body.get("value") if isinstance(body, dict) else str(body)) or "",
            created_at=parse_created(attributes.get("created")),
            author=self._author_name(_to_ref(_relationship_data(resource, AUTHOR_FIELD))),
            image_ref=_to_ref(_relationship_data(resource, IMAGE_FIELD)),
            tag_refs=[ref for ref in map(_to_ref, tag_data) if ref is not None],
        )

    def _author_name(self, ref: EntityRef | None) -> str:
        user = self._included.get((ref.type, ref.id)) if ref else None
        if not user:
            return ""
        attributes = user.get("attributes") or {}
        return attributes.get("display_name") or attributes.get("name") or ""

    # -- Entity resolution ----------------------------------------------------

    def resolve_file(self, ref: EntityRef) -> FileEntity | None:
        """Return the file entity for ``ref``, or None if it was not loaded."""
        resource = self._included.get((ref.type, ref.id))
        if not resource:
            return None
        attributes = resource.get("attributes") or {}
        uri = attributes.get("uri") or {}
        uri_value = uri.get("value") if isinstance(uri, dict) else uri
        if not uri_value:
            return None
        return FileEntity(uri=uri_value, filename=attributes.get("filename") or "")

    def resolve_term(self, ref: EntityRef) -> str | None:
        """Return the label of the taxonomy term for ``ref``, or None."""
        resource = self._included.get((ref.type, ref.id))
        if not resource:
            return None
        return (resource.get("attributes") or {}).get("name")
