"""TrendScope — Source & Setting Models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

SYSTEM_PLATFORM = "system"


class SourceStatus(str, Enum):
    ACTIVE = "active"
    ERROR = "error"
    RATE_LIMITED = "rate_limited"
    RUNNING = "running"
    PENDING = "pending"


class Source(SQLModel, table=True):
    """Health record for one platform, or the ``system`` pseudo-source."""

    __tablename__ = "sources"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    platform: str = Field(index=True, unique=True)
    enabled: bool = True
    status: SourceStatus = SourceStatus.ACTIVE
    last_check: Optional[datetime] = None
    error_message: Optional[str] = None
    config: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))


class Setting(SQLModel, table=True):
    """Runtime-editable key/value configuration."""

    __tablename__ = "settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(index=True, unique=True)
    value: Any = Field(default=None, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
