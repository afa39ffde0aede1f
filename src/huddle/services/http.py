"""Shared outbound HTTP helpers.

Every external client in :mod:`huddle.services` funnels its requests through
:func:`with_retry`, which retries connection resets only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from huddle.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_connection_reset(exc: BaseException) -> bool:
    """Return True if ``exc`` or any exception it was raised from is a connection reset."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ConnectionResetError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int | None = None,
    delay: float | None = None,
) -> T:
    """Run ``fn`` and retry it when the connection was reset by the peer.

    Args:
        fn: Zero-argument coroutine factory performing one attempt.
        max_retries: Total number of attempts (defaults to ``HTTP_MAX_RETRIES``).
        delay: Base delay in seconds; attempt ``n`` waits ``delay * n``.

    Returns:
        The result of the first successful attempt.

    Raises:
        The original exception for non-reset failures, or the last reset
        error once all attempts are exhausted.
    """
    attempts = max(1, max_retries if max_retries is not None else settings.http_max_retries)
    base_delay = delay if delay is not None else settings.http_retry_delay_seconds

    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except Exception as exc:
            if not is_connection_reset(exc) or attempt == attempts:
                raise
            logger.info("Retry attempt %d after connection reset", attempt)
            await asyncio.sleep(base_delay * attempt)

    raise RuntimeError("retry loop exited without a result")


def build_async_client(
    base_url: str,
    headers: dict[str, str] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the configured timeout."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers or {},
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        transport=transport,
    )
