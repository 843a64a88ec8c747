"""TrendScope — Raw Signal Models (Transient).

Collector adapters normalize every scraped item into a RawSignal. Signals
are handed to the reasoner once and never stored on their own; trends keep
a copy of the few that were linked to them.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 1000
MAX_MENTIONS = 10_000_000


class RawSignal(BaseModel):
    """A single normalized record from one platform.

    Bounds are not enforced here: adapters are untrusted, and
    ``validate_signals`` filters out records that break them.
    """

    platform: str
    content: str
    mentions: int
    engagement: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None


class ScrapingResult(BaseModel):
    """Outcome of one fan-out over the collector adapters."""

    success: bool = False
    items: List[RawSignal] = []
    errors: List[str] = []
    succeeded_count: int = 0
    attempted_count: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
