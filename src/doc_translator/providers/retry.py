"""
Retry policy shared by the Google Cloud providers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from google.api_core import exceptions as gexc

from doc_translator.errors import TranslatorError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors worth another attempt; everything else fails immediately
RETRYABLE_ERRORS = (
    gexc.ServiceUnavailable,
    gexc.TooManyRequests,
    gexc.DeadlineExceeded,
    gexc.InternalServerError,
)


async def call_with_retries(
    factory: Callable[[], Awaitable[T]],
    *,
    operation: str,
    max_retries: int,
    failure: type[TranslatorError],
) -> T:
    """
    Run an API call, retrying transient errors with exponential backoff.

    Args:
        factory: Builds a fresh awaitable for each attempt.
        operation: Name used in log and error messages.
        max_retries: Total attempts for transient errors.
        failure: Error type raised once the call is given up.

    Raises:
        failure: On a non-transient API error, or when every attempt failed.
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            return await factory()
        except RETRYABLE_ERRORS as e:
            last_error = e
            logger.debug("%s attempt %d failed: %s", operation, attempt + 1, e)
            if attempt < max_retries - 1:
                await asyncio.sleep(2**attempt)
        except gexc.GoogleAPICallError as e:
            raise failure(f"{operation} failed: {e.message}") from e

    raise failure(f"{operation} failed after {max_retries} attempts: {last_error}") from last_error
