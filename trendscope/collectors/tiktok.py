"""TrendScope — TikTok Collector.

Scrapes public hashtag pages. View counts come from the description meta
tag, context from any JSON-LD blocks on the page.
"""

import json
import re
from typing import List

import httpx
from bs4 import BeautifulSoup

from trendscope.collectors.base import BROWSER_USER_AGENT, HttpCollector, logger
from trendscope.collectors.google_trends import parse_count
from trendscope.models.signal_models import RawSignal

HASHTAGS = [
    "sustainablefashion",
    "thrifting",
    "vintagefashion",
    "fashiontok",
    "outfit",
    "style",
    "cottagecore",
    "slowfashion",
    "upcycling",
    "ethicalfashion",
]
DEFAULT_VIEWS = 100_000
VIEW_PATTERN = re.compile(r"([\d.]+[KMB])\s*views?", re.IGNORECASE)


class TikTokCollector(HttpCollector):
    name = "TikTok"
    platform = "tiktok"
    user_agent = BROWSER_USER_AGENT
    request_delay = 3.0

    def __init__(self, hashtags: List[str] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.hashtags = hashtags or HASHTAGS

    def parse_page(self, hashtag: str, html: str) -> RawSignal:
        soup = BeautifulSoup(html, "html.parser")

        meta = soup.find("meta", attrs={"name": "description"})
        description = meta.get("content", "") if meta else ""
        match = VIEW_PATTERN.search(description)
        views_label = match.group(1) if match else None
        views = parse_count(views_label, DEFAULT_VIEWS)

        indicators = []
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            try:
                payload = json.loads(script.string or "{}")
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict) and (payload.get("name") or payload.get("description")):
                indicators.append(
                    {"name": payload.get("name"), "description": payload.get("description")}
                )

        context = " ".join(i["description"] or "" for i in indicators)[:300]
        url = f"https://www.tiktok.com/tag/{hashtag}"
        return RawSignal(
            platform=self.platform,
            content=(
                f"TikTok hashtag #{hashtag} trending with "
                f"{views_label or 'significant'} views. {context}"
            ).strip(),
            mentions=views,
            metadata={
                "hashtag": hashtag,
                "viewCount": views_label or "N/A",
                "url": url,
                "indicators": indicators[:3],
            },
        )

    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]:
        results: List[RawSignal] = []
        for hashtag in self.hashtags:
            try:
                resp = await self._request(client, f"https://www.tiktok.com/tag/{hashtag}")
                results.append(self.parse_page(hashtag, resp.text))
            except Exception as e:
                logger.error(
                    f"Error scraping TikTok hashtag #{hashtag}: {e}",
                    extra={"platform": self.platform},
                )
            await self._pause()
        return results
