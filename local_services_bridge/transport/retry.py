"""HTTP resilience layer shared by the JSON-RPC and REST clients.

Every attempt is bounded by a timeout; the in-flight request is cancelled when
the budget is exceeded. Transport failures and 5xx responses are retried with
capped linear backoff until the retry budget is spent.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import ConfigDict, Field

from ..errors import RequestTimeoutError
from ..schemas.base import BaseSchema

logger = logging.getLogger(__name__)

BACKOFF_STEP_MS = 1000
BACKOFF_CAP_MS = 3000

SleepFunc = Callable[[float], Awaitable[Any]]


class RetryPolicy(BaseSchema):
    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(default=15000, ge=1, description="Per-attempt timeout in milliseconds.")
    retries: int = Field(default=1, ge=0, description="Retries after the first attempt.")


def backoff_delay_ms(attempt: int) -> int:
    """Delay before retry attempt ``attempt`` (1-indexed): ``min(1000 * n, 3000)``."""
    return min(BACKOFF_STEP_MS * attempt, BACKOFF_CAP_MS)


async def _attempt(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    timeout_ms: int,
    request_kwargs: dict[str, Any],
) -> httpx.Response:
    timeout_s = timeout_ms / 1000
    try:
        return await asyncio.wait_for(
            client.request(method, url, timeout=timeout_s, **request_kwargs),
            timeout=timeout_s,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise RequestTimeoutError(url, timeout_ms) from e


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    policy: RetryPolicy,
    sleep: SleepFunc = asyncio.sleep,
    **request_kwargs: Any,
) -> httpx.Response:
    """Send one HTTP request with per-attempt timeout and bounded retries.

    Args:
        client: The async httpx client to send with.
        method: HTTP method.
        url: Absolute request URL.
        policy: Timeout and retry budget.
        sleep: Awaitable used for the backoff delay (seconds).
        **request_kwargs: Passed through to ``httpx.AsyncClient.request``.

    Returns:
        The first non-5xx response, or the final 5xx response once retries are
        exhausted. 4xx responses are returned without retry.

    Raises:
        RequestTimeoutError: If the final attempt timed out.
        httpx.TransportError: If the final attempt failed at the network level.
    """
    attempt = 0
    last_error: Optional[Exception] = None
    while attempt <= policy.retries:
        try:
            logger.debug("send_with_retry: %s %s attempt=%d", method, url, attempt + 1)
            response = await _attempt(client, method, url, policy.timeout_ms, request_kwargs)
        except (httpx.TransportError, RequestTimeoutError) as e:
            last_error = e
            if attempt >= policy.retries:
                break
            attempt += 1
            delay = backoff_delay_ms(attempt)
            logger.warning(
                "HTTP %s %s failed (%s); retrying in %sms (attempt %s/%s)",
                method,
                url,
                e,
                delay,
                attempt,
                policy.retries,
            )
            await sleep(delay / 1000)
            continue
        if response.status_code >= 500 and attempt < policy.retries:
            attempt += 1
            delay = backoff_delay_ms(attempt)
            logger.warning(
                "HTTP %s %s returned %s; retrying in %sms (attempt %s/%s)",
                method,
                url,
                response.status_code,
                delay,
                attempt,
                policy.retries,
            )
            await sleep(delay / 1000)
            continue
        return response
    if last_error is None:
        raise RuntimeError(f"No attempt was made for {method} {url}")
    logger.error("HTTP %s %s failed after %d attempts: %s", method, url, attempt + 1, last_error)
    raise last_error
