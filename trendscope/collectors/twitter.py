"""TrendScope — Twitter/X Collector (API v2 recent search)."""

from typing import List, Optional

import httpx

from trendscope.collectors.base import HttpCollector, logger
from trendscope.config import settings
from trendscope.core.errors import CollectorError
from trendscope.models.signal_models import RawSignal

SEARCH_URL = "https://api.twitter.com/2/tweets/search/recent"
KEYWORDS = [
    "sustainable fashion",
    "ethical fashion",
    "slow fashion",
    "thrift fashion",
    "vintage style",
    "fashion sustainability",
    "circular fashion",
    "eco fashion",
    "minimalist fashion",
    "cottagecore",
]
MIN_ENGAGEMENT = 10


class TwitterCollector(HttpCollector):
    name = "Twitter/X"
    platform = "twitter"
    aliases = ("x",)
    request_delay = 3.0  # 300 requests per 15-minute window

    def __init__(
        self,
        bearer_token: Optional[str] = None,
        keywords: List[str] | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.bearer_token = bearer_token if bearer_token is not None else settings.twitter_bearer_token
        self.keywords = keywords or KEYWORDS

    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]:
        if not self.bearer_token:
            raise CollectorError("Twitter/X API credentials not configured", self.platform)

        headers = {"Authorization": f"Bearer {self.bearer_token}"}
        results: List[RawSignal] = []

        for keyword in self.keywords:
            params = {
                "query": f'"{keyword}" lang:en -is:retweet',
                "max_results": "20",
                "tweet.fields": "author_id,created_at,public_metrics,context_annotations",
                "user.fields": "username,verified",
            }
            try:
                resp = await client.get(SEARCH_URL, params=params, headers=headers)
                if resp.status_code == 429:
                    logger.warning(
                        "Twitter rate limit hit, skipping remaining keywords",
                        extra={"platform": self.platform},
                    )
                    break
                resp.raise_for_status()

                for tweet in resp.json().get("data") or []:
                    metrics = tweet.get("public_metrics", {})
                    retweets = metrics.get("retweet_count", 0)
                    quotes = metrics.get("quote_count", 0)
                    engagement = (
                        retweets + metrics.get("like_count", 0) + metrics.get("reply_count", 0) + quotes
                    )
                    if engagement <= MIN_ENGAGEMENT:
                        continue
                    results.append(
                        RawSignal(
                            platform=self.platform,
                            content=tweet.get("text", "")[:500],
                            mentions=retweets + quotes,
                            engagement=engagement,
                            metadata={
                                "keyword": keyword,
                                "tweet_id": tweet.get("id"),
                                "author_id": tweet.get("author_id"),
                                "created_at": tweet.get("created_at"),
                                "metrics": metrics,
                                "context": tweet.get("context_annotations", []),
                            },
                        )
                    )
            except Exception as e:
                logger.error(
                    f'Error searching Twitter for "{keyword}": {e}',
                    extra={"platform": self.platform},
                )
            await self._pause()

        return results
