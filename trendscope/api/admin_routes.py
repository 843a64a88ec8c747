"""TrendScope — Source, Setting, Email & Scheduler API Routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from trendscope.ai.base_provider import TrendReasoner
from trendscope.api.pipeline_routes import error_response
from trendscope.config import settings
from trendscope.core.errors import with_deadline
from trendscope.core.logging import get_logger
from trendscope.dependencies import get_dispatcher, get_reasoner, get_scheduler, get_storage
from trendscope.models.report_models import EmailRecipient
from trendscope.models.source_models import Setting, Source, SourceStatus
from trendscope.notifications.email_dispatcher import EmailDispatcher
from trendscope.notifications.email_templates import render_trend_report
from trendscope.scheduler.jobs import SchedulerStatus, TrendScheduler
from trendscope.storage.base import StorageGateway

logger = get_logger("api.admin")

router = APIRouter(prefix="/api", tags=["Admin"])

TEST_EMAIL_HOURS = 24
TEST_EMAIL_ITEMS = 3


# ── Request Models ──


class SourceCreate(BaseModel):
    name: str
    platform: str
    enabled: bool = True
    status: SourceStatus = SourceStatus.ACTIVE
    config: Optional[Dict[str, Any]] = None


class SourceStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: SourceStatus
    error_message: Optional[str] = Field(default=None, alias="errorMessage")


class SettingUpdate(BaseModel):
    value: Any = None


class TestEmailRequest(BaseModel):
    email: str = Field(min_length=3)


# ── Sources ──


@router.get("/sources", response_model=List[Source])
async def list_sources(storage: StorageGateway = Depends(get_storage)):
    return await storage.get_all_sources()


@router.get("/sources/{source_id}", response_model=Source)
async def get_source(source_id: int, storage: StorageGateway = Depends(get_storage)):
    source = await storage.get_source(source_id)
    if not source:
        raise HTTPException(status_code=404, detail="Source not found")
    return source


@router.post("/sources", response_model=Source, status_code=201)
async def create_source(body: SourceCreate, storage: StorageGateway = Depends(get_storage)):
    if await storage.get_source_by_platform(body.platform):
        raise HTTPException(status_code=400, detail=f"Source '{body.platform}' already exists")
    return await storage.create_source(Source(**body.model_dump()))


@router.put("/sources/{source_id}/status")
async def update_source_status(
    source_id: int,
    body: SourceStatusUpdate,
    storage: StorageGateway = Depends(get_storage),
):
    source = await storage.get_source(source_id)
    if not source:
        raise HTTPException(status_code=404, detail="Source not found")
    await storage.update_source_status(source.platform, body.status, body.error_message)
    return {"message": "Source status updated"}


# ── Settings ──


@router.get("/settings", response_model=List[Setting])
async def list_settings(storage: StorageGateway = Depends(get_storage)):
    return await storage.get_all_settings()


@router.get("/settings/{key}", response_model=Setting)
async def get_setting(key: str, storage: StorageGateway = Depends(get_storage)):
    setting = await storage.get_setting(key)
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return setting


@router.put("/settings/{key}", response_model=Setting)
async def update_setting(
    key: str, body: SettingUpdate, storage: StorageGateway = Depends(get_storage)
):
    """Upsert a runtime setting. Cadence changes apply after a restart."""
    return await storage.update_setting(key, body.value)


# ── Email ──


@router.post("/email/test")
async def send_test_email(
    body: TestEmailRequest,
    storage: StorageGateway = Depends(get_storage),
    reasoner: TrendReasoner = Depends(get_reasoner),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
):
    """Send the current digest to a single address, without recording a Report."""
    try:
        trends = (await storage.get_recent_trends(TEST_EMAIL_HOURS))[:TEST_EMAIL_ITEMS]
        suggestions = (await storage.get_recent_suggestions(TEST_EMAIL_HOURS))[:TEST_EMAIL_ITEMS]
        summary = await with_deadline(
            reasoner.summarize(trends, suggestions),
            settings.external_call_timeout_seconds,
            "test email summary",
        )
        template = render_trend_report(trends, suggestions, summary)
        await dispatcher.send([EmailRecipient(email=body.email)], template)
    except Exception as e:
        logger.error(f"Test email failed: {e}")
        return error_response(500, "Failed to send test email", str(e))
    return {"message": "Test email sent successfully"}


# ── Scheduler ──


@router.get("/scheduler/status", response_model=SchedulerStatus)
async def scheduler_status(scheduler: TrendScheduler = Depends(get_scheduler)):
    return await scheduler.status()
