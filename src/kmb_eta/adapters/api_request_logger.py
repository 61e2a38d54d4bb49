"""Utility for logging API requests when KMB_LOG_REQUESTS is enabled."""

import json
import logging
import os

logger = logging.getLogger(__name__)


def should_log_requests() -> bool:
    """Check if request logging is enabled via KMB_LOG_REQUESTS environment variable."""
    return os.getenv("KMB_LOG_REQUESTS", "").lower() == "true"


def log_api_request(method: str, url: str, headers: dict[str, str] | None = None) -> None:
    """Log API request details if KMB_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        headers: Request headers (optional).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {url}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(headers, indent=2)}")

    logger.info("API Request:\n" + "\n".join(log_parts))
