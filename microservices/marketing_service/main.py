"""
Marketing Service Main Application

FastAPI application for book marketing campaigns and analytics.
Port: 8260
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.logger import setup_service_logger

from .campaign_orchestrator import CampaignOrchestrator
from .factory import MarketingServiceFactory
from .models import (
    CampaignAnalytics,
    CampaignLaunchRequest,
    CampaignResponse,
    ChannelRecordListResponse,
    DashboardData,
    EmailEventRequest,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    LivenessResponse,
    MarketingReport,
    ReadinessResponse,
    ReportRequest,
    SaleResponse,
    SocialEngagementRequest,
    TrackSaleRequest,
)
from .performance_tracker import PerformanceTracker
from .protocols import MarketingServiceError

# Service configuration
SERVICE_NAME = "marketing_service"
SERVICE_VERSION = "1.0.0"
API_PREFIX = "/api/v1/marketing"

settings = get_settings()
SERVICE_PORT = settings.service_port

setup_service_logger(SERVICE_NAME, config=settings.logging)
logger = logging.getLogger(__name__)

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[MarketingServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    factory = MarketingServiceFactory(settings)
    await factory.initialize()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()
    factory = None


app = FastAPI(
    title="Marketing Service",
    description="Book marketing campaign orchestration and performance analytics",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(MarketingServiceError)
async def marketing_error_handler(request: Request, exc: MarketingServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details)
        ).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=ErrorDetail(
            code="VALIDATION_ERROR",
            message="Request validation failed",
            details={"errors": [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    import traceback
    error_traceback = traceback.format_exc()
    logger.error(f"Unhandled exception: {exc}\n{error_traceback}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=ErrorDetail(
            code="INTERNAL_ERROR",
            message=str(exc),
            details={"type": type(exc).__name__},
        )).model_dump(),
    )


# ====================
# Dependencies
# ====================


def get_orchestrator() -> CampaignOrchestrator:
    """Get campaign orchestrator from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.orchestrator


def get_tracker() -> PerformanceTracker:
    """Get performance tracker from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.tracker


# ====================
# Health Endpoints
# ====================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            dependencies["postgres"] = "healthy" if db_healthy else "unhealthy"
        except Exception:
            dependencies["postgres"] = "unhealthy"

        if factory.nats_client:
            dependencies["nats"] = "healthy" if factory.nats_client.is_connected else "unhealthy"
        else:
            dependencies["nats"] = "not_configured"

        if factory.book_metadata_client:
            provider_healthy = await factory.book_metadata_client.health_check()
            dependencies["book_metadata"] = "healthy" if provider_healthy else "unhealthy"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


@app.get("/health/ready", response_model=ReadinessResponse, tags=["Health"])
async def readiness_check():
    """Readiness check endpoint"""
    checks = {}
    details = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            checks["database"] = db_healthy
            details["database"] = "Connected" if db_healthy else "Connection failed"
        except Exception as e:
            checks["database"] = False
            details["database"] = str(e)

        if factory.nats_client:
            checks["nats"] = factory.nats_client.is_connected
            details["nats"] = "Connected" if factory.nats_client.is_connected else "Disconnected"
        else:
            checks["nats"] = True  # Optional
            details["nats"] = "Not configured (optional)"
    else:
        checks["factory"] = False
        details["factory"] = "Factory not initialized"

    ready = all(checks.get(k, False) for k in ["database"])

    return ReadinessResponse(ready=ready, checks=checks, details=details)


@app.get("/health/live", response_model=LivenessResponse, tags=["Health"])
async def liveness_check():
    """Liveness check endpoint"""
    return LivenessResponse(
        alive=True,
        uptime_seconds=time.time() - startup_time,
    )


# ====================
# Campaign Endpoints
# ====================


@app.post(
    f"{API_PREFIX}/campaigns",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Campaigns"],
)
async def launch_campaign(
    request: CampaignLaunchRequest,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """
    Launch a campaign across the requested channels.

    Channels that fail to launch are absent from the response; the
    campaign itself stays active.
    """
    campaign = await orchestrator.launch_campaign(request)
    channels = await orchestrator.list_channels(campaign.campaign_id)
    return CampaignResponse(campaign=campaign, channels=channels)


@app.get(f"{API_PREFIX}/campaigns/{{campaign_id}}", response_model=CampaignResponse, tags=["Campaigns"])
async def get_campaign(
    campaign_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """Get a campaign with its channel records"""
    campaign = await orchestrator.get_campaign(campaign_id)
    channels = await orchestrator.list_channels(campaign_id)
    return CampaignResponse(campaign=campaign, channels=channels)


@app.get(
    f"{API_PREFIX}/campaigns/{{campaign_id}}/channels",
    response_model=ChannelRecordListResponse,
    tags=["Campaigns"],
)
async def list_campaign_channels(
    campaign_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """List channel records of a campaign"""
    channels = await orchestrator.list_channels(campaign_id)
    return ChannelRecordListResponse(campaign_id=campaign_id, channels=channels, total=len(channels))


@app.put(f"{API_PREFIX}/campaigns/{{campaign_id}}/pause", response_model=CampaignResponse, tags=["Campaigns"])
async def pause_campaign(
    campaign_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """Pause a campaign"""
    campaign = await orchestrator.pause_campaign(campaign_id)
    return CampaignResponse(campaign=campaign)


@app.put(f"{API_PREFIX}/campaigns/{{campaign_id}}/complete", response_model=CampaignResponse, tags=["Campaigns"])
async def complete_campaign(
    campaign_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """Mark a campaign completed"""
    campaign = await orchestrator.complete_campaign(campaign_id)
    return CampaignResponse(campaign=campaign)


@app.post(
    f"{API_PREFIX}/campaigns/{{campaign_id}}/performance/refresh",
    response_model=ChannelRecordListResponse,
    tags=["Campaigns"],
)
async def refresh_channel_performance(
    campaign_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """Pull current counters from every channel's platform"""
    channels = await orchestrator.refresh_channel_performance(campaign_id)
    return ChannelRecordListResponse(campaign_id=campaign_id, channels=channels, total=len(channels))


# ====================
# Analytics Endpoints
# ====================


@app.get(
    f"{API_PREFIX}/campaigns/{{campaign_id}}/analytics",
    response_model=CampaignAnalytics,
    tags=["Analytics"],
)
async def get_campaign_analytics(
    campaign_id: str,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Compute campaign analytics from persisted records"""
    return await tracker.get_campaign_analytics(campaign_id)


@app.post(f"{API_PREFIX}/analytics/reports", response_model=MarketingReport, tags=["Analytics"])
async def generate_report(
    request: ReportRequest,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Generate a campaign report descriptor"""
    return await tracker.generate_report(request.campaign_id, request.date_range)


@app.post(f"{API_PREFIX}/analytics/sales", response_model=SaleResponse, tags=["Analytics"])
async def track_sale(
    request: TrackSaleRequest,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Record a sale; tracked is false when it could not be stored"""
    sale = await tracker.track_sale(request)
    return SaleResponse(tracked=sale is not None, sale=sale)


@app.get(
    f"{API_PREFIX}/analytics/dashboard/{{project_id}}",
    response_model=DashboardData,
    tags=["Analytics"],
)
async def get_dashboard_data(
    project_id: str,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Author dashboard totals for a book project"""
    return await tracker.get_dashboard_data(project_id)


@app.post(f"{API_PREFIX}/analytics/email-events", tags=["Analytics"])
async def track_email_event(
    request: EmailEventRequest,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Count an email open, click or conversion"""
    tracked = await tracker.track_email_event(request.email_id, request.event)
    return {"tracked": tracked, "email_id": request.email_id, "event": request.event.value}


@app.post(f"{API_PREFIX}/analytics/social-engagement", tags=["Analytics"])
async def track_social_engagement(
    request: SocialEngagementRequest,
    tracker: PerformanceTracker = Depends(get_tracker),
):
    """Merge engagement counters into a social post"""
    tracked = await tracker.track_social_engagement(request.post_id, request.metrics)
    return {"tracked": tracked, "post_id": request.post_id}


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.marketing_service.main:app",
        host=settings.service_host,
        port=SERVICE_PORT,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
