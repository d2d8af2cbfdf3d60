#!/usr/bin/env python3
"""
Main execution module for the Drupal to Storyblok export tool
"""

from storyblok_exporter.cli.commands import main

if __name__ == "__main__":
    main()
