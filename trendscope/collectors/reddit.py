"""TrendScope — Reddit Collector.

Reads the hot listing of fashion subreddits through the public JSON API and
keeps posts with real discussion behind them.
"""

from datetime import datetime, timezone
from typing import List

import httpx

from trendscope.collectors.base import HttpCollector, logger
from trendscope.models.signal_models import RawSignal

SUBREDDITS = [
    "fashion",
    "streetwear",
    "malefashionadvice",
    "femalefashionadvice",
    "sustainability",
    "thriftstorehauls",
    "frugalmalefashion",
    "womensstreetwear",
]
MIN_SCORE = 50
MIN_COMMENTS = 10


class RedditCollector(HttpCollector):
    name = "Reddit"
    platform = "reddit"
    request_delay = 1.0

    def __init__(self, subreddits: List[str] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.subreddits = subreddits or SUBREDDITS

    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]:
        results: List[RawSignal] = []

        for subreddit in self.subreddits:
            try:
                resp = await self._request(
                    client,
                    f"https://www.reddit.com/r/{subreddit}/hot.json",
                    params={"limit": 25},
                )
                children = resp.json().get("data", {}).get("children", [])
                for child in children:
                    post = child.get("data", {})
                    score = post.get("score", 0)
                    comments = post.get("num_comments", 0)
                    if score <= MIN_SCORE or comments <= MIN_COMMENTS:
                        continue

                    content = f"{post.get('title', '')} {post.get('selftext', '')}"[:500]
                    created = post.get("created_utc")
                    results.append(
                        RawSignal(
                            platform=self.platform,
                            content=content,
                            mentions=score,
                            engagement=comments,
                            metadata={
                                "subreddit": post.get("subreddit", subreddit),
                                "url": post.get("url"),
                                "created": (
                                    datetime.fromtimestamp(created, tz=timezone.utc).isoformat()
                                    if created
                                    else None
                                ),
                            },
                        )
                    )
            except Exception as e:
                logger.error(
                    f"Error scraping r/{subreddit}: {e}", extra={"platform": self.platform}
                )
            await self._pause()

        return results
