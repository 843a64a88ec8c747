"""TrendScope — Trend, Suggestion & Report API Routes."""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from trendscope.dependencies import get_storage
from trendscope.models.report_models import Report, ReportStatus
from trendscope.models.trend_models import AISuggestion, BrandSuggestion, Trend, TrendCandidate
from trendscope.storage.base import Analytics, StorageGateway

router = APIRouter(prefix="/api", tags=["Trends"])

DASHBOARD_HOURS = 24
DASHBOARD_ITEMS = 10


# ── Request Models ──


class TrendCreate(TrendCandidate):
    sources: List[dict] = []


class SuggestionCreate(BrandSuggestion):
    trend_id: Optional[int] = None


class ReportCreate(BaseModel):
    date: str
    trends_count: int = 0
    suggestions_count: int = 0
    status: ReportStatus = ReportStatus.GENERATED
    emails_sent: int = 0
    content: Optional[dict[str, Any]] = None


# ── Analytics & Dashboard ──


@router.get("/analytics", response_model=Analytics)
async def get_analytics(storage: StorageGateway = Depends(get_storage)):
    return await storage.get_analytics()


@router.get("/dashboard")
async def get_dashboard(storage: StorageGateway = Depends(get_storage)):
    """Last day's trends and suggestions, every source, and the counters."""
    trends = await storage.get_recent_trends(DASHBOARD_HOURS)
    suggestions = await storage.get_recent_suggestions(DASHBOARD_HOURS)
    return {
        "trends": trends[:DASHBOARD_ITEMS],
        "suggestions": suggestions[:DASHBOARD_ITEMS],
        "sources": await storage.get_all_sources(),
        "analytics": await storage.get_analytics(),
    }


# ── Trends ──


@router.get("/trends", response_model=List[Trend])
async def list_trends(
    hours: Optional[float] = Query(None, gt=0, description="Only trends from the last N hours"),
    storage: StorageGateway = Depends(get_storage),
):
    if hours:
        return await storage.get_recent_trends(hours)
    return await storage.get_all_trends()


@router.get("/trends/{trend_id}", response_model=Trend)
async def get_trend(trend_id: int, storage: StorageGateway = Depends(get_storage)):
    trend = await storage.get_trend(trend_id)
    if not trend:
        raise HTTPException(status_code=404, detail="Trend not found")
    return trend


@router.post("/trends", response_model=Trend, status_code=201)
async def create_trend(body: TrendCreate, storage: StorageGateway = Depends(get_storage)):
    return await storage.create_trend(Trend(**body.model_dump()))


# ── AI Suggestions ──


@router.get("/suggestions", response_model=List[AISuggestion])
async def list_suggestions(
    trend_id: Optional[int] = Query(None),
    hours: Optional[float] = Query(None, gt=0),
    storage: StorageGateway = Depends(get_storage),
):
    if trend_id is not None:
        return await storage.get_suggestions_by_trend(trend_id)
    if hours:
        return await storage.get_recent_suggestions(hours)
    return await storage.get_all_suggestions()


@router.get("/suggestions/{suggestion_id}", response_model=AISuggestion)
async def get_suggestion(suggestion_id: int, storage: StorageGateway = Depends(get_storage)):
    suggestion = await storage.get_suggestion(suggestion_id)
    if not suggestion:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    return suggestion


@router.post("/suggestions", response_model=AISuggestion, status_code=201)
async def create_suggestion(
    body: SuggestionCreate, storage: StorageGateway = Depends(get_storage)
):
    return await storage.create_suggestion(AISuggestion(**body.model_dump()))


# ── Reports ──


@router.get("/reports", response_model=List[Report])
async def list_reports(storage: StorageGateway = Depends(get_storage)):
    return await storage.get_all_reports()


@router.get("/reports/{report_id}", response_model=Report)
async def get_report(report_id: int, storage: StorageGateway = Depends(get_storage)):
    report = await storage.get_report(report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


@router.post("/reports", response_model=Report, status_code=201)
async def create_report(body: ReportCreate, storage: StorageGateway = Depends(get_storage)):
    return await storage.create_report(Report(**body.model_dump()))
