"""TrendScope — Report & Email Models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class ReportStatus(str, Enum):
    GENERATED = "generated"
    SENT = "sent"
    FAILED = "failed"


class Report(SQLModel, table=True):
    """Audit record of one report run, successful or not."""

    __tablename__ = "reports"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(index=True, description="YYYY-MM-DD")
    trends_count: int = 0
    suggestions_count: int = 0
    status: ReportStatus = ReportStatus.GENERATED
    emails_sent: int = 0
    content: Optional[dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON),
        description="Summary plus trend/suggestion snapshot, or {'error': ...}",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )


class EmailRecipient(BaseModel):
    email: str
    name: Optional[str] = None


class EmailTemplate(BaseModel):
    """A rendered message, identical for every recipient."""

    subject: str
    html: str
    text: str
