"""
Marketing Service Events

Event models and publisher for marketing service.
"""

from .models import (
    MarketingEventType,
    MarketingStreamConfig,
    CampaignLaunchedEventData,
    CampaignStatusEventData,
    ChannelLaunchedEventData,
    ChannelFailedEventData,
    ChannelPerformanceUpdatedEventData,
    SaleTrackedEventData,
)
from .publishers import MarketingEventPublisher

__all__ = [
    # Event Types
    "MarketingEventType",
    "MarketingStreamConfig",
    # Event Data Models
    "CampaignLaunchedEventData",
    "CampaignStatusEventData",
    "ChannelLaunchedEventData",
    "ChannelFailedEventData",
    "ChannelPerformanceUpdatedEventData",
    "SaleTrackedEventData",
    # Publisher
    "MarketingEventPublisher",
]
