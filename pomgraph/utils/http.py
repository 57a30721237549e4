"""
Asynchronous HTTP access to remote Maven repositories.

:class:`HTTPClient` wraps one ``httpx.AsyncClient`` (HTTP/2 enabled) and
adds what repository traffic needs: bounded concurrency, an optional
minimum spacing between requests, retries with exponential backoff for
timeouts, connection failures and 5xx answers, and ``Retry-After``
handling for 429. Status codes are turned into pomgraph exceptions here so
store clients never see ``httpx`` errors.
"""

from __future__ import annotations

import time
import httpx
import random
import asyncio
from typing import Any, Optional, Tuple

from pomgraph.utils.logger import get_logger
from pomgraph.__version__ import __version__
from pomgraph.exceptions import NetworkError, NotFoundError
from pomgraph.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

# Answers meaning "the artifact is not there"; never retried.
_MISSING_STATUSES = frozenset({404, 410})

# Servers that refuse HEAD are probed with GET instead.
_HEAD_UNSUPPORTED = frozenset({405, 501})


def _backoff(attempt: int) -> float:
    return (2**attempt) + random.uniform(0.0, 0.3)


def _retry_after(response: httpx.Response) -> int:
    """Seconds requested by a 429 answer; 1 when absent or not numeric."""
    value = response.headers.get("Retry-After", "")
    return int(value) if value.strip().isdigit() else 1


class HTTPClient:
    """Retrying HTTP client shared by remote store clients.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after a retryable failure.
        rate_limit_delay: Minimum seconds between two requests; 0 disables.
        verify_ssl: Verify server certificates.
        user_agent: ``User-Agent`` header; defaults to ``pomgraph/<version>``.
        max_concurrency: Requests allowed in flight at once.
        auth: Optional ``(username, password)`` for basic auth, typically
            needed only for deployment (PUT).

    Example:
        >>> async with HTTPClient() as client:
        ...     response = await client.get("https://repo1.maven.org/maven2/junit/junit/4.13.2/junit-4.13.2.pom")
    """

    max_rate_limit_retries: int = 5

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rate_limit_delay: float = 0.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = 10,
        auth: Optional[Tuple[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency
        self.auth = auth

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._spacing_lock = asyncio.Lock()
        self._next_slot: float = 0.0

    async def __aenter__(self) -> "HTTPClient":
        self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                auth=self.auth,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _wait_for_slot(self) -> None:
        if self.rate_limit_delay <= 0:
            return

        async with self._spacing_lock:
            now = time.monotonic()
            wait = self._next_slot - now
            self._next_slot = max(now, self._next_slot) + self.rate_limit_delay
        if wait > 0:
            await asyncio.sleep(wait)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, retrying transient failures.

        Raises:
            NotFoundError: 404 or 410; never retried.
            NetworkError: Any other 4xx, too many 429 answers, or retries
                exhausted. ``status_code`` is ``None`` when no attempt got
                an HTTP answer.
        """
        client = self._open()
        url = url.strip().strip("\"'")
        attempts = self.max_retries + 1
        rate_limited = 0
        last_status: Optional[int] = None
        last_exc: Optional[Exception] = None

        attempt = 0
        while attempt < attempts:
            await self._wait_for_slot()
            try:
                async with self._semaphore:
                    response = await client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exc = exc
                logger.warning(
                    "%s %s failed (%d/%d): %s", method, url, attempt + 1, attempts, exc
                )
            else:
                status = response.status_code

                if status == 429:
                    rate_limited += 1
                    if rate_limited > self.max_rate_limit_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self.max_rate_limit_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    delay = _retry_after(response)
                    logger.warning("Rate limited by %s, waiting %ds", url, delay)
                    await asyncio.sleep(delay)
                    # 429 answers do not use up ordinary attempts
                    continue

                if status in _MISSING_STATUSES:
                    raise NotFoundError(
                        f"Resource not found: {url}", url=url, status_code=status
                    )

                if status < 400:
                    return response

                if status < 500:
                    raise NetworkError(
                        f"HTTP {status} error for {url}",
                        url=url,
                        status_code=status,
                        response_body=response.text,
                    )

                last_status = status
                logger.warning(
                    "%s %s answered HTTP %d (%d/%d)", method, url, status, attempt + 1, attempts
                )

            attempt += 1
            if attempt < attempts:
                delay = _backoff(attempt - 1)
                logger.debug("Retrying %s in %.2fs", url, delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}",
            url=url,
            status_code=last_status,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def head(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("HEAD", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def probe(self, url: str) -> bool:
        """Whether ``url`` exists, without downloading it where possible.

        Uses HEAD; a server that rejects HEAD (405, 501) is asked with GET.

        Raises:
            NetworkError: Any failure other than "not found".
        """
        try:
            await self.head(url)
        except NotFoundError:
            return False
        except NetworkError as exc:
            if exc.status_code not in _HEAD_UNSUPPORTED:
                raise
            logger.debug("HEAD refused by %s, probing with GET", url)
            try:
                await self.get(url)
            except NotFoundError:
                return False
        return True
