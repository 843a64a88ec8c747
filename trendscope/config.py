"""TrendScope — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    Only process-level values live here. Runtime-editable values (cadences,
    recipients, scheduler switch) are Setting records in storage.
    """

    # ── AI Providers ──
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    sarvam_api_key: Optional[str] = None
    default_ai_provider: str = "openai"  # openai | claude | sarvam
    openai_model: str = "gpt-4o"
    claude_model: str = "claude-sonnet-4-20250514"

    # ── Collectors ──
    twitter_bearer_token: Optional[str] = None
    user_agent: str = "TrendScope/1.0 (Cultural Trends Monitor)"
    http_timeout_seconds: float = 30.0
    collector_timeout_seconds: float = 300.0

    # ── Email ──
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout_seconds: float = 30.0
    smtp_use_tls: bool = True
    email_user: str = ""
    email_password: str = ""
    email_from_name: str = "TrendScope"

    # ── Storage ──
    storage_backend: str = "memory"  # memory | sql
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    scheduler_autostart: bool = True
    default_scraping_interval: str = "0 */2 * * *"
    default_daily_report_time: str = "0 6 * * *"

    # ── Analysis ──
    trend_confidence_threshold: int = 70
    report_lookback_hours: int = 24
    external_call_timeout_seconds: float = 120.0

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/trendscope.db"
        return "sqlite:///./trendscope.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
