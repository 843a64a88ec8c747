"""TrendScope — Collector Adapter Base.

Every adapter is stateless between runs: ``collect()`` opens its own HTTP
client, walks its targets, and returns normalized RawSignals. Failures on a
single target are logged and skipped; only a failure of the whole source
raises ``CollectorError``.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import httpx

from trendscope.config import settings
from trendscope.core.errors import CollectorError
from trendscope.core.logging import get_logger
from trendscope.models.signal_models import RawSignal

logger = get_logger("collectors")

MAX_RETRIES = 3
RETRY_BASE_DELAY = 2  # seconds
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class CollectorAdapter(ABC):
    """One external source of raw signals."""

    name: str = "unknown"
    platform: str = "unknown"
    aliases: Tuple[str, ...] = ()

    @abstractmethod
    async def collect(self) -> List[RawSignal]:
        """Scrape the source. Raises CollectorError on total failure."""
        ...

    def matches(self, platform: str) -> bool:
        key = platform.strip().lower()
        return key == self.platform or key in self.aliases


class HttpCollector(CollectorAdapter):
    """Adapter that talks HTTP through a shared retrying client."""

    user_agent: str = settings.user_agent
    request_delay: float = 1.0  # seconds between targets

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        request_delay: Optional[float] = None,
    ):
        self._transport = transport
        if request_delay is not None:
            self.request_delay = request_delay

    async def collect(self) -> List[RawSignal]:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                signals = await self._collect(client)
            except CollectorError:
                raise
            except Exception as e:
                logger.error(
                    f"{self.name} scraping failed: {e}", extra={"platform": self.platform}
                )
                raise CollectorError(
                    f"Failed to scrape {self.name} data", self.platform
                ) from e
        logger.info(
            f"{self.name} collected {len(signals)} signals",
            extra={"platform": self.platform},
        )
        return signals

    @abstractmethod
    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]: ...

    async def _pause(self) -> None:
        if self.request_delay > 0:
            await asyncio.sleep(self.request_delay)

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Dict[str, Any] | None = None,
        headers: Dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET with retry on 429 / 5xx / connection errors."""
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                resp = await client.get(url, params=params, headers=headers)

                if resp.status_code == 429 and attempt < MAX_RETRIES:
                    wait = RETRY_BASE_DELAY * (2 ** (attempt - 1))
                    logger.warning(
                        f"Rate limited (429) by {self.name}. Retrying in {wait}s "
                        f"(attempt {attempt}/{MAX_RETRIES})",
                        extra={"platform": self.platform},
                    )
                    await asyncio.sleep(wait)
                    continue

                resp.raise_for_status()
                return resp

            except httpx.HTTPStatusError as e:
                if attempt < MAX_RETRIES and e.response.status_code >= 500:
                    wait = RETRY_BASE_DELAY * (2 ** (attempt - 1))
                    logger.warning(
                        f"{self.name} server error {e.response.status_code}. "
                        f"Retrying in {wait}s",
                        extra={"platform": self.platform},
                    )
                    await asyncio.sleep(wait)
                    continue
                raise

            except httpx.RequestError as e:
                if attempt < MAX_RETRIES:
                    wait = RETRY_BASE_DELAY * (2 ** (attempt - 1))
                    logger.warning(
                        f"{self.name} request error: {e}. Retrying in {wait}s",
                        extra={"platform": self.platform},
                    )
                    await asyncio.sleep(wait)
                    continue
                raise

        raise CollectorError(f"{self.name}: max retries exhausted", self.platform)
