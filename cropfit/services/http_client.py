import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from cropfit.core.config import settings
from cropfit.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429}


def _is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    kind: str,
    max_attempts: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
) -> Any:
    """
    GETs ``url`` and decodes the JSON body.

    Timeouts, HTTP 429 and 5xx responses are retried with exponential
    backoff up to ``max_attempts`` tries. Any other failure, or running out
    of attempts, raises UpstreamUnavailable for ``kind``.
    """
    if max_attempts is None:
        max_attempts = settings.UPSTREAM_MAX_ATTEMPTS
    if backoff_seconds is None:
        backoff_seconds = settings.UPSTREAM_BACKOFF_SECONDS
    max_attempts = max(1, max_attempts)

    last_error = "no attempt made"
    for attempt in range(max_attempts):
        try:
            response = await client.get(
                url, params=params, timeout=settings.UPSTREAM_TIMEOUT_SECONDS
            )
        except httpx.TimeoutException as e:
            last_error = f"timeout ({type(e).__name__})"
        except httpx.RequestError as e:
            logger.warning("Request error fetching %s data from %s: %s", kind, url, e)
            raise UpstreamUnavailable(kind, str(e)) from e
        else:
            if response.status_code < 400:
                try:
                    return response.json()
                except ValueError as e:
                    raise UpstreamUnavailable(kind, "invalid JSON in response") from e
            last_error = f"HTTP {response.status_code}"
            if not _is_retryable_status(response.status_code):
                logger.warning(
                    "HTTP error fetching %s data: %s - %s",
                    kind,
                    response.status_code,
                    response.text[:200],
                )
                raise UpstreamUnavailable(kind, last_error)

        if attempt + 1 < max_attempts:
            delay = backoff_seconds * (2**attempt)
            logger.info(
                "Retrying %s request after %s (attempt %d/%d, sleeping %.2fs)",
                kind,
                last_error,
                attempt + 1,
                max_attempts,
                delay,
            )
            await asyncio.sleep(delay)

    logger.warning("Giving up on %s data after %d attempts: %s", kind, max_attempts, last_error)
    raise UpstreamUnavailable(kind, last_error)


@asynccontextmanager
async def upstream_client(
    client: Optional[httpx.AsyncClient] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yields ``client`` when given, otherwise a short-lived AsyncClient."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned_client:
        yield owned_client
