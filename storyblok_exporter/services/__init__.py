"""Service integrations for reading from Drupal and writing to Storyblok."""

__all__ = [
    "drupal_reader",
    "dry_run_client",
    "files",
    "storyblok_client",
]
