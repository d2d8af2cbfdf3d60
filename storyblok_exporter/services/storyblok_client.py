"""Typed client for the Storyblok Management API.

Wraps the three calls the export needs (asset upload, datasource entry
creation, story creation) behind methods that return ``Result`` values
instead of raising, so the migrator decides what a failure means.

There is no retry logic: every call is attempted once, with the configured
timeout.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests

from storyblok_exporter.constants import HTTP_CREATED, HTTP_NO_CONTENT, HTTP_OK
from storyblok_exporter.core.config import StoryblokConfig
from storyblok_exporter.exceptions import AssetUploadError
from storyblok_exporter.types import Result, StoryPayload, UploadedAsset
from storyblok_exporter.utils.logging import (
    log_api_request,
    log_api_response,
    log_with_context,
)


def _response_detail(response: requests.Response) -> str:
    body = (response.text or "").strip()
    if len(body) > 500:
        body = body[:500] + "... [truncated]"
    detail = f"Status code: {response.status_code}"
    return f"{detail}. Response: {body}" if body else detail


class StoryblokClient:
    """Thin wrapper around the Storyblok Management API for one space."""

    def __init__(
        self, config: StoryblokConfig, session: requests.Session | None = None
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    # -- Helpers --------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.space_url}/{path.lstrip('/')}"

    def _headers(self, json_body: bool = True) -> dict[str, str]:
        headers = {"Authorization": self._config.oauth_token}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _post_json(self, path: str, body: dict[str, Any]) -> requests.Response:
        url = self._url(path)
        log_api_request("POST", url, body)
        response = self._session.post(
            url,
            headers=self._headers(),
            json=body,
            timeout=self._config.request_timeout,
        )
        log_api_response(response.status_code, url, response.text)
        return response

    # -- Assets ---------------------------------------------------------------

    def upload_asset(self, local_path: Path, filename: str) -> Result[UploadedAsset]:
        """Upload a local file as a Storyblok asset.

        Performs the signed upload handshake: request a signed upload target,
        post the file to it, then confirm the upload.

        Args:
            local_path: Path of the file on disk.
            filename: Filename to register the asset under.

        Returns:
            A Result holding the UploadedAsset (id and public URL), or the
            failure detail.
        """
        if not local_path.is_file():
            return Result.failure(f"Cannot read {local_path}: not a file")

        try:
            signed = self._request_signed_upload(filename)
            self._transfer_file(signed, local_path, filename)
            self._finish_upload(signed["id"])
        except AssetUploadError as e:
            return Result.failure(str(e))
        except requests.exceptions.RequestException as e:
            return Result.failure(f"Transport error: {e}")
        except OSError as e:
            return Result.failure(f"Cannot read {local_path}: {e}")

        log_with_context(
            logging.INFO,
            f"Successfully uploaded image: {filename}",
            file_name=filename,
            asset_id=signed["id"],
        )
        return Result.success(
            UploadedAsset(id=signed["id"], filename=signed["pretty_url"])
        )

    def _request_signed_upload(self, filename: str) -> dict[str, Any]:
        response = self._post_json(
            "assets", {"filename": filename, "validate_upload": 1}
        )
        if response.status_code != HTTP_OK:
            raise AssetUploadError(
                f"Failed to initiate upload: {_response_detail(response)}"
            )
        try:
            signed: dict[str, Any] = response.json()
        except ValueError as e:
            raise AssetUploadError(f"Invalid signed upload response: {e}") from e
        if not isinstance(signed, dict) or not all(
            signed.get(key) for key in ("id", "post_url", "pretty_url")
        ):
            raise AssetUploadError(
                "Signed upload response is missing id, post_url or pretty_url"
            )
        return signed

    def _transfer_file(
        self, signed: dict[str, Any], local_path: Path, filename: str
    ) -> None:
        fields = signed.get("fields") or {}
        with open(local_path, "rb") as fh:
            log_api_request("POST", signed["post_url"], {"fields": list(fields)})
            response = self._session.post(
                signed["post_url"],
                data=fields,
                files={"file": (filename, fh)},
                timeout=self._config.request_timeout,
            )
        log_api_response(response.status_code, signed["post_url"], response.text)
        if response.status_code != HTTP_NO_CONTENT:
            raise AssetUploadError(
                f"Failed to upload to S3: {_response_detail(response)}"
            )

    def _finish_upload(self, asset_id: Any) -> None:
        url = self._url(f"assets/{asset_id}/finish_upload")
        log_api_request("GET", url)
        response = self._session.get(
            url,
            headers=self._headers(json_body=False),
            timeout=self._config.request_timeout,
        )
        log_api_response(response.status_code, url, response.text)
        if response.status_code != HTTP_OK:
            raise AssetUploadError(
                f"Failed to finalize upload: {_response_detail(response)}"
            )

    # -- Tags -----------------------------------------------------------------

    def create_tag(self, label: str) -> Result[None]:
        """Create a datasource entry holding a tag label.

        Args:
            label: The tag label, used as both name and value.

        Returns:
            An empty success Result, or the failure detail.
        """
        body = {
            "datasource_entry": {
                "name": label,
                "value": label,
                "datasource_id": self._config.datasource_id,
            }
        }
        try:
            response = self._post_json("datasource_entries", body)
        except requests.exceptions.RequestException as e:
            return Result.failure(f"Transport error: {e}")

        if response.status_code != HTTP_CREATED:
            return Result.failure(_response_detail(response))
        return Result.success()

    # -- Stories --------------------------------------------------------------

    def create_story(self, payload: StoryPayload) -> Result[Any]:
        """Create a story.

        Args:
            payload: The ``{"story": {...}}`` request body.

        Returns:
            A Result holding the new story id (None if the response has no
            body), or the failure detail.
        """
        try:
            response = self._post_json("stories", dict(payload))
        except requests.exceptions.RequestException as e:
            return Result.failure(f"Transport error: {e}")

        if response.status_code != HTTP_CREATED:
            return Result.failure(_response_detail(response))

        try:
            body = response.json()
        except ValueError:
            body = None
        story = body.get("story") if isinstance(body, dict) else None
        return Result.success(story.get("id") if isinstance(story, dict) else None)
