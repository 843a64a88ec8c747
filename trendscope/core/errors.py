"""TrendScope — Error Taxonomy and Deadlines."""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class TrendScopeError(Exception):
    """Base class for all TrendScope errors."""


class CollectorError(TrendScopeError):
    """Raised by a collector adapter when its source cannot be scraped."""

    def __init__(self, message: str, platform: str = ""):
        self.platform = platform
        super().__init__(message)


class UnsupportedPlatformError(TrendScopeError):
    """Raised when a single-source collection names an unknown platform."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class ScrapingFailedError(TrendScopeError):
    """Raised when no adapter succeeded or nothing survived validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Scraping failed: {', '.join(self.errors)}")


class ReasonerError(TrendScopeError):
    """Raised when the language model call fails or returns unusable output."""


class ReasonerUnavailableError(ReasonerError):
    """Raised when no AI provider is configured."""


class StageTimeoutError(TrendScopeError):
    """Raised when an external call exceeds its deadline."""

    def __init__(self, stage: str, seconds: float):
        self.stage = stage
        self.seconds = seconds
        super().__init__(f"{stage} timed out after {seconds:g}s")


class EmailConfigError(TrendScopeError):
    """Raised when SMTP credentials are missing."""


class EmailDispatchError(TrendScopeError):
    """Raised when a message could not be delivered to a recipient."""

    def __init__(self, message: str, recipient: str = ""):
        self.recipient = recipient
        super().__init__(message)


async def with_deadline(
    awaitable: Awaitable[T], seconds: Optional[float], stage: str
) -> T:
    """Await ``awaitable`` with a bounded deadline.

    A non-positive or missing ``seconds`` disables the deadline.
    """
    if not seconds or seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        raise StageTimeoutError(stage, seconds) from None
