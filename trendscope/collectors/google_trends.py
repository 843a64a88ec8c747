"""TrendScope — Google Trends Collector."""

import json
from typing import Any, Dict, List

import httpx

from trendscope.collectors.base import BROWSER_USER_AGENT, HttpCollector, logger
from trendscope.models.signal_models import RawSignal

DAILY_TRENDS_URL = "https://trends.google.com/trends/api/dailytrends"
KEYWORDS = [
    "sustainable fashion",
    "vintage clothing",
    "streetwear trends",
    "fashion sustainability",
    "ethical fashion",
    "slow fashion",
    "cottagecore",
    "minimalist fashion",
    "thrift shopping",
    "upcycling fashion",
]
DEFAULT_TRAFFIC = 1000


def parse_count(text: str | None, default: int = 0) -> int:
    """Parse counts such as ``"200K+"``, ``"1.2M"`` or ``"3,400"``."""
    if not text:
        return default
    cleaned = text.replace(",", "").replace("+", "").strip().upper()
    multiplier = 1
    if cleaned and cleaned[-1] in "KMB":
        multiplier = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}[cleaned[-1]]
        cleaned = cleaned[:-1]
    try:
        return int(float(cleaned) * multiplier)
    except ValueError:
        return default


def _strip_xssi_prefix(body: str) -> str:
    # Payload starts with )]}',
    if body.startswith(")]}'"):
        body = body[4:].lstrip(",")
    return body.strip()


class GoogleTrendsCollector(HttpCollector):
    name = "Google Trends"
    platform = "google-trends"
    user_agent = BROWSER_USER_AGENT
    request_delay = 2.0

    def __init__(self, keywords: List[str] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.keywords = [k.lower() for k in (keywords or KEYWORDS)]

    def _is_relevant(self, search: Dict[str, Any]) -> bool:
        title = (search.get("title", {}).get("query") or "").lower()
        articles = search.get("articles", [])
        for keyword in self.keywords:
            if keyword in title:
                return True
            for article in articles:
                if keyword in (article.get("title") or "").lower():
                    return True
                if keyword in (article.get("snippet") or "").lower():
                    return True
        return False

    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]:
        resp = await self._request(
            client, DAILY_TRENDS_URL, params={"hl": "en", "tz": "-480", "geo": "US", "ns": "15"}
        )
        data = json.loads(_strip_xssi_prefix(resp.text))
        days = data.get("default", {}).get("trendingSearchesDays", [])
        searches = days[0].get("trendingSearches", []) if days else []

        results: List[RawSignal] = []
        for search in searches:
            if not self._is_relevant(search):
                continue
            query = search.get("title", {}).get("query", "")
            articles = search.get("articles", [])
            first = articles[0] if articles else {}
            content = f"{query} - {first.get('title', '')} {first.get('snippet', '')}"[:500]
            results.append(
                RawSignal(
                    platform=self.platform,
                    content=content,
                    mentions=parse_count(search.get("formattedTraffic"), DEFAULT_TRAFFIC),
                    metadata={
                        "query": query,
                        "traffic": search.get("formattedTraffic"),
                        "articles": [
                            {
                                "title": a.get("title"),
                                "url": a.get("url"),
                                "source": a.get("source"),
                            }
                            for a in articles[:3]
                        ],
                    },
                )
            )

        logger.debug(
            f"Google Trends: {len(results)}/{len(searches)} searches relevant",
            extra={"platform": self.platform},
        )
        return results
