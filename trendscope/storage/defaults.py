"""TrendScope — Seed Data for a Fresh Store."""

from typing import Any, Dict, List, Tuple

from trendscope.config import settings
from trendscope.models.source_models import SYSTEM_PLATFORM

# (display name, platform key)
DEFAULT_SOURCES: List[Tuple[str, str]] = [
    ("Reddit", "reddit"),
    ("Google Trends", "google-trends"),
    ("TikTok", "tiktok"),
    ("Twitter/X", "twitter"),
    ("Fashion Blogs", "fashion-blogs"),
    ("System", SYSTEM_PLATFORM),
]

DEFAULT_SETTINGS: Dict[str, Any] = {
    "email_recipients": [],
    "daily_report_time": settings.default_daily_report_time,
    "scraping_interval": settings.default_scraping_interval,
    "scheduler_enabled": True,
    "brand_category": "fashion",
    "target_audience": "Gen Z, Millennials, Sustainable fashion enthusiasts",
    "focus_keywords": [
        "sustainable fashion",
        "ethical clothing",
        "minimalist style",
        "cottagecore",
        "vintage fashion",
    ],
}
