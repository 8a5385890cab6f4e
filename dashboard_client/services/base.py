"""
Shared helpers for the admin services.
"""

import logging
from typing import Tuple, Type

import httpx

from dashboard_client.exceptions import ApiError, BackendError, ValidationError

logger = logging.getLogger(__name__)

# Failures a list/stat read degrades on. SessionExpiredError is not one of them.
READ_ERRORS: Tuple[Type[Exception], ...] = (BackendError, ApiError, httpx.HTTPError)


def check_page(page: int, page_size: int) -> None:
    """
    Raises:
        ValidationError: If page or page_size is below 1
    """
    errors = {}
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        errors["page"] = "Page must be a whole number of at least 1"
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        errors["page_size"] = "Page size must be a whole number of at least 1"
    if errors:
        raise ValidationError("Invalid pagination", errors)


def log_degraded(operation: str, error: Exception) -> None:
    logger.warning("%s failed, returning empty result: %s", operation, error)
