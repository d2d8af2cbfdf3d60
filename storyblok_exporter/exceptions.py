"""Custom exception hierarchy for the Drupal to Storyblok export tool."""


class ExporterError(Exception):
    """Base exception for all export-related errors."""


class ConfigError(ExporterError):
    """Raised when configuration is invalid or missing."""


class SourceError(ExporterError):
    """Raised when the Drupal site cannot be read."""


class AssetUploadError(ExporterError):
    """Raised when one phase of the Storyblok asset upload fails."""
