"""
Logging module for the Drupal to Storyblok export tool
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from storyblok_exporter.constants import LOGGER_NAME

# Module-level flag to track if API debug logging is enabled
_DEBUG_API_ENABLED = False

_SENSITIVE_KEYS = ("token", "auth", "password", "secret", "key")


class EnhancedFormatter(logging.Formatter):
    """
    Custom formatter that supports both verbose mode (with additional context information)
    and API debug mode (with request/response data)
    """

    def __init__(
        self,
        fmt=None,
        datefmt=None,
        style="%",
        verbose=False,
        include_api_details=False,
    ):
        if verbose:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
        elif not fmt:
            fmt = "%(asctime)s - %(levelname)s - %(message)s"

        super().__init__(fmt, datefmt, style)
        self.include_api_details = include_api_details

    def format(self, record):
        result = super().format(record)

        if self.include_api_details:
            if getattr(record, "api_data", None):
                result += f"\nAPI Data: {record.api_data}"
            if getattr(record, "response", None):
                result += f"\nResponse: {record.response}"

        return result


def setup_main_log_file(
    output_dir: str, debug_api: bool = False
) -> logging.FileHandler:
    """
    Set up a file handler writing every log record of the run to ``export.log``.

    Args:
        output_dir: The output directory path
        debug_api: If True, include API request/response details in the file

    Returns:
        The file handler for the main log file
    """
    os.makedirs(output_dir, exist_ok=True)
    log_file = os.path.join(output_dir, "export.log")

    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)  # Always use DEBUG level for file handlers
    file_handler.setFormatter(
        EnhancedFormatter(
            "%(asctime)s - %(levelname)s - %(message)s",
            include_api_details=debug_api,
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(file_handler)

    logger.info(f"Main log file created at: {log_file}")
    return file_handler


def setup_logger(
    verbose: bool = False, debug_api: bool = False, output_dir: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return the logger with appropriate formatting.

    Args:
        verbose: If True, set console handler to DEBUG level; otherwise INFO level
        debug_api: If True, enable detailed API request/response logging
        output_dir: Optional output directory for the main log file

    Returns:
        Configured logger instance
    """
    global _DEBUG_API_ENABLED
    _DEBUG_API_ENABLED = debug_api

    logger = logging.getLogger(LOGGER_NAME)

    # Clear any existing handlers to prevent duplicate messages
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(
        EnhancedFormatter(verbose=verbose, include_api_details=debug_api)
    )
    logger.addHandler(console_handler)

    if output_dir:
        setup_main_log_file(output_dir, debug_api)

    if debug_api:
        logger.info("API debug logging enabled")

    return logger


def log_with_context(level: int, message: str, **kwargs: Any) -> None:
    """
    Log a message with additional context information.

    Args:
        level: The logging level (e.g., logging.INFO)
        message: The log message
        **kwargs: Additional context to include in the log record
    """
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}

    # exc_info is a logging keyword, not record context
    exc_info = filtered_kwargs.pop("exc_info", None)

    logger = logging.getLogger(LOGGER_NAME)
    logger.log(level, message, extra=filtered_kwargs, exc_info=exc_info)


def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
    redacted = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
            redacted[key] = "[REDACTED]"
        elif isinstance(value, dict):
            redacted[key] = _redact(value)
        else:
            redacted[key] = value
    return redacted


def log_api_request(
    method: str, url: str, data: Optional[Dict] = None, **kwargs: Any
) -> None:
    """
    Log an API request when API debug logging is enabled.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: The API endpoint URL
        data: Optional request data/payload
        **kwargs: Additional context to include in the log record
    """
    if not is_debug_api_enabled():
        return

    log_context = kwargs.copy()
    if data and isinstance(data, dict):
        log_context["api_data"] = json.dumps(_redact(data), indent=2, default=str)

    log_with_context(logging.DEBUG, f"API Request: {method} {url}", **log_context)


def log_api_response(
    status_code: int, url: str, response_data: Any = None, **kwargs: Any
) -> None:
    """
    Log an API response when API debug logging is enabled.

    Args:
        status_code: HTTP status code
        url: The API endpoint URL
        response_data: Optional response data
        **kwargs: Additional context to include in the log record
    """
    if not is_debug_api_enabled():
        return

    log_context = kwargs.copy()
    if response_data:
        if isinstance(response_data, (dict, list)):
            response_str = json.dumps(response_data, indent=2, default=str)
            if len(response_str) > 2000:
                response_str = response_str[:2000] + "... [truncated]"
        else:
            response_str = str(response_data)
            if len(response_str) > 1000:
                response_str = response_str[:1000] + "... [truncated]"
        log_context["response"] = response_str

    log_with_context(
        logging.DEBUG, f"API Response: {status_code} from {url}", **log_context
    )


def is_debug_api_enabled() -> bool:
    """Check if API debug logging is enabled."""
    return _DEBUG_API_ENABLED


def get_logger():
    """Get the storyblok_exporter logger, creating it with defaults if needed."""
    exporter_logger = logging.getLogger(LOGGER_NAME)
    if not exporter_logger.handlers:
        exporter_logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(EnhancedFormatter())
        exporter_logger.addHandler(handler)
    return exporter_logger


# Module logger - will be properly initialized when setup_logger is called
logger = get_logger()
