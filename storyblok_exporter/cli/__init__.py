"""Command-line interface for the Drupal to Storyblok export tool."""
