"""Shared CLI infrastructure: option decorators, error handlers, and the CLI group."""

from __future__ import annotations

import logging
from typing import Callable

import click
import requests

import storyblok_exporter
from storyblok_exporter.constants import (
    HTTP_FORBIDDEN,
    HTTP_RATE_LIMIT,
    HTTP_SERVER_ERROR_MIN,
    HTTP_UNAUTHORIZED,
)
from storyblok_exporter.exceptions import ExporterError
from storyblok_exporter.utils.logging import log_with_context


# ---------------------------------------------------------------------------
# Shared option decorator
# ---------------------------------------------------------------------------


def common_options(f: Callable[..., None]) -> Callable[..., None]:
    """Decorator that adds options shared across subcommands.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with common options attached.
    """
    f = click.option(
        "--config",
        default="config.yaml",
        show_default=True,
        help="Path to config YAML",
    )(f)
    f = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable verbose console logging (shows DEBUG level messages)",
    )(f)
    f = click.option(
        "--debug_api",
        is_flag=True,
        default=False,
        help="Log API request/response details (tokens are redacted)",
    )(f)
    return f


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(
    version=storyblok_exporter.__version__, prog_name="storyblok-exporter"
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Export Drupal articles to Storyblok.

    Args:
        ctx: The Click context (injected by ``@click.pass_context``).
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def handle_http_error(e: requests.exceptions.HTTPError) -> None:
    """Handle HTTP errors with specific messages.

    Args:
        e: The HTTP error raised by ``requests``.
    """
    status = e.response.status_code if e.response is not None else None

    if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
        log_with_context(logging.ERROR, f"Access denied: {e}")
        log_with_context(
            logging.INFO,
            "Check the Drupal credentials and the Storyblok OAuth token in your config or environment.",
        )
    elif status == HTTP_RATE_LIMIT:
        log_with_context(logging.ERROR, f"Rate limit exceeded: {e}")
        log_with_context(
            logging.INFO, "Wait a moment, then run the export again with --limit."
        )
    elif status is not None and status >= HTTP_SERVER_ERROR_MIN:
        log_with_context(logging.ERROR, f"Server error: {e}")
        log_with_context(
            logging.INFO, "This is likely a temporary issue. Please try again later."
        )
    else:
        log_with_context(logging.ERROR, f"API error during export: {e}")


def handle_exception(e: BaseException) -> None:
    """Handle different types of exceptions.

    Args:
        e: The exception to handle.
    """
    cause = e.__cause__
    if isinstance(e, ExporterError):
        log_with_context(logging.ERROR, str(e))
        if isinstance(cause, requests.exceptions.HTTPError):
            handle_http_error(cause)
    elif isinstance(e, requests.exceptions.HTTPError):
        handle_http_error(e)
    elif isinstance(e, requests.exceptions.RequestException):
        log_with_context(logging.ERROR, f"Network error: {e}")
        log_with_context(
            logging.INFO, "Check that the Drupal site and Storyblok API are reachable."
        )
    elif isinstance(e, FileNotFoundError):
        log_with_context(logging.ERROR, f"File not found: {e}")
        log_with_context(
            logging.INFO,
            "Please check that all required files exist and paths are correct.",
        )
    elif isinstance(e, KeyboardInterrupt):
        log_with_context(logging.WARNING, "Export interrupted by user.")
        log_with_context(
            logging.INFO,
            "Stories created so far remain in Storyblok; a new run creates them again.",
        )
    else:
        log_with_context(logging.ERROR, f"Export failed: {e}", exc_info=True)
