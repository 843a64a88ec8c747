"""TrendScope — Trend & Suggestion Models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SuggestionType(str, Enum):
    STRATEGIC = "strategic"
    CONTENT = "content"
    PARTNERSHIP = "partnership"
    QUICK_WIN = "quick-win"


# ─────────────────────────────────────────────
# DATABASE MODELS
# ─────────────────────────────────────────────


class Trend(SQLModel, table=True):
    """A named trend extracted by the reasoner. Immutable once created."""

    __tablename__ = "trends"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str = ""
    category: str = Field(default="fashion", index=True)
    sources: List[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Raw signals linked by keyword, in collection order",
    )
    confidence: int = Field(description="0-100")
    trend_score: int = Field(description="0-100")
    change_percentage: Optional[int] = Field(default=None, description="Signed growth %")
    impact: Impact = Impact.MEDIUM
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )


class AISuggestion(SQLModel, table=True):
    """A brand-opportunity suggestion.

    ``trend_id`` is a lookup-only reference to a Trend, never ownership.
    """

    __tablename__ = "ai_suggestions"

    id: Optional[int] = Field(default=None, primary_key=True)
    trend_id: Optional[int] = Field(default=None, foreign_key="trends.id", index=True)
    title: str
    description: str = ""
    impact: Impact = Impact.MEDIUM
    effort: Effort = Effort.MEDIUM
    type: SuggestionType = SuggestionType.CONTENT
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS — Reasoner output
# ─────────────────────────────────────────────


def _to_score(value: Any) -> int:
    return max(0, min(100, int(round(float(value)))))


class TrendCandidate(BaseModel):
    """A trend proposed by the reasoner, before persistence."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    category: str = "fashion"
    confidence: int = 0
    trend_score: int = PydanticField(default=0, alias="trendScore")
    change_percentage: int = PydanticField(default=0, alias="changePercentage")
    impact: Impact = Impact.MEDIUM

    @field_validator("confidence", "trend_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> int:
        return _to_score(value)

    @field_validator("change_percentage", mode="before")
    @classmethod
    def _round_change(cls, value: Any) -> int:
        return int(round(float(value or 0)))

    @field_validator("impact", mode="before")
    @classmethod
    def _lower_impact(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class BrandSuggestion(BaseModel):
    """A brand-opportunity suggestion proposed by the reasoner."""

    title: str
    description: str = ""
    impact: Impact = Impact.MEDIUM
    effort: Effort = Effort.MEDIUM
    type: SuggestionType = SuggestionType.CONTENT

    @field_validator("impact", "effort", "type", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value
