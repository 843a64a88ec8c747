"""TrendScope — Pipeline API Routes.

Manual triggers for scraping, analysis and the daily report. Analysis and
report runs go through the scheduler's run guards, so a manual run never
overlaps a timer-fired one.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trendscope.collectors.aggregator import Aggregator
from trendscope.core.errors import UnsupportedPlatformError
from trendscope.core.logging import get_logger
from trendscope.dependencies import get_aggregator, get_scheduler
from trendscope.scheduler.jobs import JobRunResult, TrendScheduler

logger = get_logger("api.pipeline")

router = APIRouter(prefix="/api", tags=["Pipeline"])


class ScrapeRequest(BaseModel):
    platform: Optional[str] = None


def error_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    body = {"message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


def job_response(result: JobRunResult, done: str, failed: str, busy: str):
    if result.status == "skipped":
        return error_response(409, busy)
    if result.status == "failed":
        return error_response(500, failed, result.error)
    return {"message": done, "duration_ms": result.duration_ms}


@router.post("/scrape")
async def scrape(
    body: Optional[ScrapeRequest] = None,
    aggregator: Aggregator = Depends(get_aggregator),
):
    """Scrape every enabled adapter, or only ``platform`` when given."""
    platform = body.platform if body else None
    try:
        if platform:
            data = await aggregator.collect_single(platform)
            return {"success": True, "data": data, "errors": []}
        result = await aggregator.collect_all()
        return {
            "success": result.success,
            "data": result.items,
            "errors": result.errors,
            "timestamp": result.timestamp,
        }
    except UnsupportedPlatformError as e:
        return error_response(400, "Scraping failed", str(e))
    except Exception as e:
        logger.error(f"Scraping failed: {e}")
        return error_response(500, "Scraping failed", str(e))


@router.post("/analyze")
async def analyze(scheduler: TrendScheduler = Depends(get_scheduler)):
    """Run one trend analysis cycle now."""
    result = await scheduler.trigger_collection()
    return job_response(
        result,
        done="Trend analysis completed successfully",
        failed="Trend analysis failed",
        busy="Trend analysis already running",
    )


@router.post("/reports/generate")
async def generate_report(scheduler: TrendScheduler = Depends(get_scheduler)):
    """Build and send the daily report now."""
    result = await scheduler.trigger_report()
    return job_response(
        result,
        done="Report generated and sent successfully",
        failed="Failed to generate report",
        busy="Report generation already running",
    )
