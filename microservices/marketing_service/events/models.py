"""
Marketing Event Data Models

Event type definitions and data structures for marketing service events.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Event Type Definitions
# =============================================================================


class MarketingEventType(str, Enum):
    """
    Events published by marketing_service.

    These are the authoritative event types for this service.
    Other services should reference these when subscribing.
    """
    # Campaign lifecycle events
    CAMPAIGN_LAUNCHED = "marketing.campaign.launched"
    CAMPAIGN_PAUSED = "marketing.campaign.paused"
    CAMPAIGN_COMPLETED = "marketing.campaign.completed"

    # Channel events
    CHANNEL_LAUNCHED = "marketing.channel.launched"
    CHANNEL_FAILED = "marketing.channel.failed"
    CHANNEL_PERFORMANCE_UPDATED = "marketing.channel.performance_updated"

    # Sales events
    SALE_TRACKED = "marketing.sale.tracked"


class MarketingStreamConfig:
    """Stream configuration for marketing_service"""
    STREAM_NAME = "marketing-stream"
    SUBJECTS = ["marketing.>"]
    MAX_MESSAGES = 100000


# =============================================================================
# Event Data Models - Published Events
# =============================================================================


class CampaignLaunchedEventData(BaseModel):
    """marketing.campaign.launched event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    project_id: str = Field(..., description="Book project ID")
    campaign_type: str = Field(..., description="pre_launch, launch, ongoing or promo")
    budget: float = Field(..., description="Total budget")
    requested_channels: List[str] = Field(..., description="Channels selected at launch")
    launched_channels: List[str] = Field(default_factory=list, description="Channels that launched")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignStatusEventData(BaseModel):
    """marketing.campaign.paused / marketing.campaign.completed event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    project_id: str = Field(..., description="Book project ID")
    status: str = Field(..., description="New status")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class ChannelLaunchedEventData(BaseModel):
    """marketing.channel.launched event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    channel: str = Field(..., description="Channel kind")
    budget_allocation: float = Field(..., description="Allocated budget")
    external_ref: Optional[str] = Field(None, description="Remote platform reference")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class ChannelFailedEventData(BaseModel):
    """marketing.channel.failed event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    channel: str = Field(..., description="Channel kind")
    error: str = Field(..., description="Failure message")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class ChannelPerformanceUpdatedEventData(BaseModel):
    """marketing.channel.performance_updated event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    channel: str = Field(..., description="Channel kind")
    metrics: Dict[str, float] = Field(default_factory=dict, description="Counters after update")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class SaleTrackedEventData(BaseModel):
    """marketing.sale.tracked event data"""
    sale_id: str = Field(..., description="Sale ID")
    project_id: str = Field(..., description="Book project ID")
    platform: str = Field(..., description="Retail platform")
    revenue: float = Field(..., description="Sale revenue")
    royalty: float = Field(..., description="Author royalty")
    source: str = Field(..., description="Attribution source")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")
