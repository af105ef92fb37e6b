"""
Async HTTP client wrapper using aiohttp with retry and exponential backoff.
"""

import asyncio
from typing import Optional, Dict, Any
import aiohttp
import logging

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Shared aiohttp session for the upstream JSON feeds.

    Connection failures, timeouts and 5xx responses are retried with
    exponential backoff; any other HTTP error status is raised at once.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        """
        Args:
            base_url: Prefix for relative endpoints
            timeout: Total request timeout in seconds
            max_retries: Attempts per request, at least one
            retry_delay: Delay before the second attempt; doubles after each failure
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    def _build_url(self, endpoint: str) -> str:
        if self.base_url and not endpoint.startswith(("http://", "https://")):
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint

    @staticmethod
    def _is_retryable(error: BaseException) -> bool:
        if isinstance(error, aiohttp.ClientResponseError):
            return error.status >= 500
        return True

    async def get_json(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a JSON document.

        Args:
            endpoint: Absolute URL, or a path relative to base_url
            params: Query parameters
            headers: Request headers

        Returns:
            Decoded JSON body

        Raises:
            aiohttp.ClientError or asyncio.TimeoutError from the last attempt
        """
        url = self._build_url(endpoint)
        session = await self._get_session()

        for attempt in range(1, self.max_retries + 1):
            try:
                async with session.get(url, params=params, headers=headers) as response:
                    response.raise_for_status()
                    # gov.uk serves JSON with varying content types
                    return await response.json(content_type=None)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if attempt == self.max_retries or not self._is_retryable(e):
                    logger.error(f"GET {url} failed after {attempt} attempt(s): {e}")
                    raise
                delay = self.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"GET {url} failed (attempt {attempt}/{self.max_retries}): {e}. Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
