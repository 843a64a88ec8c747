"""TrendScope — Collector Aggregator.

Fans out to every registered adapter, keeps going when one fails, and
validates whatever came back before it reaches the reasoner.
"""

from typing import Collection, Iterable, List, Optional, Sequence

from trendscope.collectors.base import CollectorAdapter
from trendscope.config import settings
from trendscope.core.errors import UnsupportedPlatformError, with_deadline
from trendscope.core.logging import get_logger
from trendscope.models.signal_models import (
    MAX_CONTENT_LENGTH,
    MAX_MENTIONS,
    MIN_CONTENT_LENGTH,
    RawSignal,
    ScrapingResult,
)

logger = get_logger("collectors.aggregator")


def is_valid_signal(signal: RawSignal) -> bool:
    if not signal.platform or not signal.content:
        return False
    if not MIN_CONTENT_LENGTH <= len(signal.content) <= MAX_CONTENT_LENGTH:
        return False
    if isinstance(signal.mentions, bool) or not isinstance(signal.mentions, int):
        return False
    return 0 <= signal.mentions <= MAX_MENTIONS


def validate_signals(signals: Iterable[RawSignal]) -> List[RawSignal]:
    """Drop signals outside the content-length and mention bounds."""
    signals = list(signals)
    valid = [s for s in signals if is_valid_signal(s)]
    dropped = len(signals) - len(valid)
    if dropped:
        logger.info(f"Validation dropped {dropped}/{len(signals)} signals")
    return valid


def default_adapters() -> List[CollectorAdapter]:
    """The five production adapters, in fan-out order."""
    from trendscope.collectors.fashion_blogs import FashionBlogsCollector
    from trendscope.collectors.google_trends import GoogleTrendsCollector
    from trendscope.collectors.reddit import RedditCollector
    from trendscope.collectors.tiktok import TikTokCollector
    from trendscope.collectors.twitter import TwitterCollector

    return [
        RedditCollector(),
        GoogleTrendsCollector(),
        TikTokCollector(),
        TwitterCollector(),
        FashionBlogsCollector(),
    ]


class Aggregator:
    """Runs collector adapters and merges their output."""

    def __init__(
        self,
        adapters: Sequence[CollectorAdapter],
        timeout: Optional[float] = None,
    ):
        self.adapters = list(adapters)
        self.timeout = settings.collector_timeout_seconds if timeout is None else timeout

    @property
    def platforms(self) -> List[str]:
        return [a.platform for a in self.adapters]

    async def _run(self, adapter: CollectorAdapter) -> List[RawSignal]:
        return await with_deadline(adapter.collect(), self.timeout, f"{adapter.name} scraping")

    async def collect_all(
        self, platforms: Optional[Collection[str]] = None
    ) -> ScrapingResult:
        """Collect from every adapter (or only ``platforms``), isolating failures."""
        selected = [
            a for a in self.adapters if platforms is None or a.platform in platforms
        ]
        result = ScrapingResult(attempted_count=len(selected))
        collected: List[RawSignal] = []

        for adapter in selected:
            try:
                logger.info(f"Starting {adapter.name} scraping...", extra={"platform": adapter.platform})
                data = await self._run(adapter)
                collected.extend(data)
                result.succeeded_count += 1
                logger.info(
                    f"{adapter.name} scraping completed: {len(data)} items",
                    extra={"platform": adapter.platform},
                )
            except Exception as e:
                message = f"{adapter.name} scraping failed: {e}"
                logger.error(message, extra={"platform": adapter.platform})
                result.errors.append(message)

        result.items = validate_signals(collected)
        result.success = result.succeeded_count > 0
        logger.info(
            f"Scraping completed: {result.succeeded_count}/{len(selected)} sources "
            f"successful, {len(result.items)} valid items collected"
        )
        return result

    def get_adapter(self, platform: str) -> CollectorAdapter:
        for adapter in self.adapters:
            if adapter.matches(platform):
                return adapter
        raise UnsupportedPlatformError(platform)

    async def collect_single(self, platform: str) -> List[RawSignal]:
        """Collect from exactly one adapter, bypassing the fan-out."""
        adapter = self.get_adapter(platform)
        return validate_signals(await self._run(adapter))
