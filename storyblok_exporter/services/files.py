"""Mapping of Drupal stream-wrapper URIs to local file paths."""

from __future__ import annotations

import logging
from pathlib import Path

from storyblok_exporter.utils.logging import log_with_context


class FilePathResolver:
    """Resolves ``public://`` and ``private://`` URIs against local directories."""

    def __init__(self, public_files_path: str = "", private_files_path: str = "") -> None:
        self._roots: dict[str, str] = {
            "public": public_files_path,
            "private": private_files_path,
        }

    def realpath(self, uri: str) -> Path | None:
        """Return the local path for ``uri``, or None when it cannot be mapped.

        Args:
            uri: A Drupal file URI such as ``public://2024-01/photo.jpg`` or a
                plain filesystem path.

        Returns:
            The absolute local path, or None for unsupported schemes and
            stream wrappers without a configured directory.
        """
        if "://" not in uri:
            return Path(uri).resolve()

        scheme, _, target = uri.partition("://")
        root = self._roots.get(scheme)
        if not root:
            log_with_context(
                logging.WARNING,
                f"Cannot map '{uri}' to a local file: no directory configured for '{scheme}://'",
            )
            return None

        return (Path(root) / target).resolve()
