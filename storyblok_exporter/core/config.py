"""
Configuration module for the Drupal to Storyblok export tool.

This module provides functions for loading configuration settings from YAML
files, layering environment variables on top, validating the result once at
startup, and creating a default configuration file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from storyblok_exporter.constants import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_REQUEST_TIMEOUT,
    STORYBLOK_API_URL,
)
from storyblok_exporter.exceptions import ConfigError
from storyblok_exporter.utils.logging import log_with_context

# Environment variable -> (section, attribute)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "STORYBLOK_OAUTH_TOKEN": ("storyblok", "oauth_token"),
    "STORYBLOK_SPACE_ID": ("storyblok", "space_id"),
    "STORYBLOK_DATASOURCE_ID": ("storyblok", "datasource_id"),
    "DRUPAL_BASE_URL": ("drupal", "base_url"),
    "DRUPAL_USERNAME": ("drupal", "username"),
    "DRUPAL_PASSWORD": ("drupal", "password"),
}


@dataclass
class DrupalConfig:
    """Connection settings for the Drupal JSON:API source."""

    base_url: str = ""
    username: str = ""
    password: str = ""
    public_files_path: str = ""
    private_files_path: str = ""
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DrupalConfig:
        if not data:
            return cls()
        return cls(
            base_url=str(data.get("base_url") or ""),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
            public_files_path=str(data.get("public_files_path") or ""),
            private_files_path=str(data.get("private_files_path") or ""),
            request_timeout=data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT),
        )


@dataclass
class StoryblokConfig:
    """Credentials and endpoint settings for the Storyblok Management API."""

    oauth_token: str = ""
    space_id: str = ""
    datasource_id: str = ""
    api_url: str = STORYBLOK_API_URL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StoryblokConfig:
        if not data:
            return cls()
        return cls(
            oauth_token=str(data.get("oauth_token") or ""),
            space_id=str(data.get("space_id") or ""),
            datasource_id=str(data.get("datasource_id") or ""),
            api_url=data.get("api_url") or STORYBLOK_API_URL,
            request_timeout=data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT),
        )

    @property
    def space_url(self) -> str:
        """Base URL of the configured space, without a trailing slash."""
        return f"{self.api_url.rstrip('/')}/{self.space_id}"


@dataclass
class ExporterConfig:
    """Typed configuration for the export tool."""

    content_type: str = DEFAULT_CONTENT_TYPE
    timezone: str = "UTC"
    drupal: DrupalConfig = field(default_factory=DrupalConfig)
    storyblok: StoryblokConfig = field(default_factory=StoryblokConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExporterConfig:
        """Create an ExporterConfig from a raw config dictionary."""
        return cls(
            content_type=data.get("content_type") or DEFAULT_CONTENT_TYPE,
            timezone=data.get("timezone") or "UTC",
            drupal=DrupalConfig.from_dict(data.get("drupal")),
            storyblok=StoryblokConfig.from_dict(data.get("storyblok")),
        )


def apply_env_overrides(
    config: ExporterConfig, environ: dict[str, str] | None = None
) -> ExporterConfig:
    """
    Overlay credentials and endpoints supplied through environment variables.

    Args:
        config: The configuration loaded from YAML
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        The same config instance, updated in place
    """
    environ = os.environ if environ is None else environ
    for env_name, (section, attr) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            setattr(getattr(config, section), attr, value)
            log_with_context(
                logging.DEBUG, f"Using {env_name} from environment for {section}.{attr}"
            )
    return config


def load_config(
    config_path: Path, environ: dict[str, str] | None = None
) -> ExporterConfig:
    """
    Load configuration from YAML file and environment variables.

    Loads the configuration from the specified YAML file and applies default
    values for any missing configuration options. If the file doesn't exist
    or is invalid, appropriate warnings are logged and default settings are
    used; environment variables are applied in every case.

    Args:
        config_path: Path to the config YAML file
        environ: Optional environment mapping (defaults to ``os.environ``)

    Returns:
        ExporterConfig with all necessary defaults applied
    """
    raw: dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)
                # Handle None result from empty file
                if loaded_config is not None:
                    raw = loaded_config
            log_with_context(logging.INFO, f"Loaded configuration from {config_path}")
        except (yaml.YAMLError, OSError) as e:
            log_with_context(
                logging.WARNING, f"Failed to load config file {config_path}: {e}"
            )
    else:
        log_with_context(
            logging.WARNING,
            f"Config file {config_path} not found, using defaults and environment",
        )

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a YAML mapping")

    return apply_env_overrides(ExporterConfig.from_dict(raw), environ)


def validate_config(config: ExporterConfig, dry_run: bool = False) -> None:
    """
    Check that every setting the export needs is present and usable.

    Args:
        config: The configuration to validate
        dry_run: Storyblok credentials are not needed when nothing is written

    Raises:
        ConfigError: listing every problem found
    """
    problems: list[str] = []

    if not config.drupal.base_url:
        problems.append("drupal.base_url is required (or set DRUPAL_BASE_URL)")
    if not config.content_type:
        problems.append("content_type must not be empty")

    if not dry_run:
        if not config.storyblok.oauth_token:
            problems.append(
                "storyblok.oauth_token is required (or set STORYBLOK_OAUTH_TOKEN)"
            )
        if not config.storyblok.space_id:
            problems.append("storyblok.space_id is required (or set STORYBLOK_SPACE_ID)")
        if not config.storyblok.datasource_id:
            problems.append(
                "storyblok.datasource_id is required (or set STORYBLOK_DATASOURCE_ID)"
            )

    for section in (config.drupal, config.storyblok):
        timeout = section.request_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            problems.append(f"request_timeout must be a number, got {timeout!r}")
        elif timeout <= 0:
            problems.append(f"request_timeout must be a positive number, got {timeout!r}")

    try:
        resolve_timezone(config.timezone)
    except ConfigError as e:
        problems.append(str(e))

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))


def resolve_timezone(name: str) -> tzinfo:
    """Return a tzinfo for ``name``; ``UTC`` never needs the tz database."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone: {name}") from e


def create_default_config(output_path: Path) -> bool:
    """
    Create a default configuration file with recommended settings.

    The function will not overwrite an existing configuration file. Secrets
    are left empty so they can be supplied through environment variables.

    Args:
        output_path: Path where the default config should be saved

    Returns:
        True if the config file was created successfully, False otherwise
    """
    if output_path.exists():
        log_with_context(
            logging.WARNING,
            f"Config file {output_path} already exists, not overwriting",
        )
        return False

    default_config = {
        "content_type": DEFAULT_CONTENT_TYPE,
        "timezone": "UTC",
        "drupal": {
            "base_url": "https://drupal.example.com",
            "username": "",
            "password": "",
            "public_files_path": "/var/www/html/sites/default/files",
            "private_files_path": "",
            "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        },
        "storyblok": {
            "space_id": "",
            "datasource_id": "",
            "oauth_token": "",
            "api_url": STORYBLOK_API_URL,
            "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        },
    }

    try:
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(default_config, f, default_flow_style=False, sort_keys=False)
        log_with_context(logging.INFO, f"Created default config file at {output_path}")
        return True
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to create default config file: {e}")
        return False
