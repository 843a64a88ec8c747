"""TrendScope — Fashion Magazine Collector.

Pulls article headlines from fashion magazine section fronts and keeps the
ones that mention a trend keyword.
"""

import re
from dataclasses import dataclass
from typing import Dict, List
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from trendscope.collectors.base import BROWSER_USER_AGENT, HttpCollector, logger
from trendscope.models.signal_models import RawSignal


@dataclass
class Blog:
    name: str
    url: str


BLOGS = [
    Blog("Vogue", "https://www.vogue.com/fashion"),
    Blog("Elle", "https://www.elle.com/fashion/"),
    Blog("Harper's Bazaar", "https://www.harpersbazaar.com/fashion/"),
    Blog("Refinery29", "https://www.refinery29.com/en-us/fashion"),
    Blog("Who What Wear", "https://www.whowhatwear.com/"),
]

TREND_KEYWORDS = [
    "trending", "trend", "popular", "viral", "buzz", "hot",
    "sustainable", "eco-friendly", "ethical", "conscious",
    "vintage", "thrift", "secondhand", "upcycle",
    "minimalist", "capsule", "slow fashion",
    "cottagecore", "y2k", "grunge", "preppy",
]
MAX_ARTICLES = 10
DEFAULT_ENGAGEMENT = 50
ARTICLE_SELECTOR = 'article, .article, [class*="article"]'
SOCIAL_SELECTOR = '[class*="social"], [class*="share"]'


def extract_articles(html: str, base_url: str) -> List[Dict[str, str]]:
    """Headline, summary and absolute link of each article block."""
    soup = BeautifulSoup(html, "html.parser")
    articles = []
    for element in soup.select(ARTICLE_SELECTOR):
        heading = element.find(["h1", "h2", "h3"])
        headline = heading.get_text(strip=True) if heading else ""
        if len(headline) <= 10:
            continue
        paragraph = element.find("p")
        link = element.find("a")
        href = link.get("href", "") if link else ""
        articles.append(
            {
                "headline": headline,
                "summary": (paragraph.get_text(strip=True) if paragraph else "")[:200],
                "link": urljoin(base_url, href),
            }
        )
    return articles


def average_social_count(html: str) -> int:
    soup = BeautifulSoup(html, "html.parser")
    counts = []
    for element in soup.select(SOCIAL_SELECTOR):
        match = re.search(r"\d+", element.get_text())
        if match:
            counts.append(int(match.group(0)))
    return sum(counts) // len(counts) if counts else DEFAULT_ENGAGEMENT


class FashionBlogsCollector(HttpCollector):
    name = "Fashion Blogs"
    platform = "fashion-blogs"
    user_agent = BROWSER_USER_AGENT
    request_delay = 2.0

    def __init__(self, blogs: List[Blog] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.blogs = blogs or BLOGS

    def parse_page(self, blog: Blog, html: str) -> List[RawSignal]:
        articles = extract_articles(html, blog.url)[:MAX_ARTICLES]
        relevant = [
            a
            for a in articles
            if any(k in f"{a['headline']} {a['summary']}".lower() for k in TREND_KEYWORDS)
        ]
        engagement = average_social_count(html)
        return [
            RawSignal(
                platform=self.platform,
                content=f"{a['headline']} - {a['summary']}",
                mentions=engagement,
                metadata={"source": blog.name, "url": a["link"], "headline": a["headline"]},
            )
            for a in relevant
        ]

    async def _collect(self, client: httpx.AsyncClient) -> List[RawSignal]:
        results: List[RawSignal] = []
        for blog in self.blogs:
            try:
                resp = await self._request(client, blog.url)
                results.extend(self.parse_page(blog, resp.text))
            except Exception as e:
                logger.error(
                    f"Error scraping {blog.name}: {e}", extra={"platform": self.platform}
                )
            await self._pause()
        return results
