#!/usr/bin/env python3
"""
Drupal to Storyblok export tool
"""

__version__ = "0.1.0"

from storyblok_exporter.core.config import load_config
from storyblok_exporter.core.migrator import DrupalToStoryblokMigrator
from storyblok_exporter.core.projector import project_record, project_records
from storyblok_exporter.core.slug import generate_slug
from storyblok_exporter.services.drupal_reader import DrupalJsonApiReader
from storyblok_exporter.services.storyblok_client import StoryblokClient
