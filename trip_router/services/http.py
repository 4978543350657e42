from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from trip_router.core.config import settings
from trip_router.services.exceptions import ProviderError

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


class JSONRoutingClient:
    """Shared GET-and-decode plumbing for the routing providers.

    Every transport, status and decoding problem surfaces as ``ProviderError``.
    Rate-limited responses are retried only when more than one attempt is
    configured.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_wait: Optional[wait_base] = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout or settings.ROUTING_REQUEST_TIMEOUT, connect=10.0)
        self.max_attempts = max(1, max_attempts or settings.ROUTING_MAX_ATTEMPTS)
        self._transport = transport
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=5)

    async def _get_json(
        self,
        url: str,
        params: Dict[str, Any],
        accept_statuses: Sequence[int] = (200,),
    ) -> Dict[str, Any]:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        return await retrying(self._get_once, url, params, accept_statuses)

    async def _get_once(
        self,
        url: str,
        params: Dict[str, Any],
        accept_statuses: Sequence[int],
    ) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("Routing request timeout: %s", url)
            raise ProviderError(f"timeout contacting {url}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Routing request failed: %s", exc)
            raise ProviderError(f"request to {url} failed: {exc}") from exc

        if response.status_code == 429:
            logger.warning("Rate limit reached for %s", url)
            raise ProviderError("rate-limit", retryable=True)

        if response.status_code not in accept_statuses:
            logger.error("Routing provider error %s: %s", response.status_code, response.text[:200])
            raise ProviderError(f"HTTP {response.status_code} from {url}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("malformed JSON response") from exc

        if not isinstance(data, dict):
            raise ProviderError("unexpected response payload")

        logger.debug("Routing response from %s: %s", url, str(data)[:500])
        return data
