"""
Marketing Event Publishers

Publishes events to NATS JetStream. Publishing is best-effort: failures are
logged and reported as False, never raised.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import Campaign, ChannelKind, ChannelRecord, SaleRecord
from ..protocols import EventBusProtocol
from .models import (
    MarketingEventType,
    CampaignLaunchedEventData,
    CampaignStatusEventData,
    ChannelLaunchedEventData,
    ChannelFailedEventData,
    ChannelPerformanceUpdatedEventData,
    SaleTrackedEventData,
)

logger = logging.getLogger(__name__)


class MarketingEventPublisher:
    """Publisher for marketing service events"""

    def __init__(self, nats_client: Optional[EventBusProtocol] = None):
        self.nats_client = nats_client
        self.source = "marketing_service"

    async def publish(
        self,
        event_type: MarketingEventType,
        data: Dict[str, Any],
    ) -> bool:
        """
        Publish an event to NATS.

        Args:
            event_type: The event type enum
            data: Event data payload

        Returns:
            True if published successfully, False otherwise
        """
        if not self.nats_client:
            logger.debug(f"NATS client not configured, skipping publish: {event_type.value}")
            return False

        try:
            event = {
                "event_type": event_type.value,
                "source": self.source,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "data": data,
            }

            await self.nats_client.publish(event_type.value, event)
            logger.debug(f"Published event: {event_type.value}")
            return True

        except Exception as e:
            logger.error(f"Failed to publish event {event_type.value}: {e}")
            return False

    # ====================
    # Campaign Lifecycle Events
    # ====================

    async def publish_campaign_launched(
        self,
        campaign: Campaign,
        requested_channels: List[ChannelKind],
        launched_channels: List[ChannelKind],
    ) -> bool:
        """Publish marketing.campaign.launched event"""
        data = CampaignLaunchedEventData(
            campaign_id=campaign.campaign_id,
            project_id=campaign.project_id,
            campaign_type=campaign.campaign_type.value,
            budget=campaign.budget,
            requested_channels=[c.value for c in requested_channels],
            launched_channels=[c.value for c in launched_channels],
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(MarketingEventType.CAMPAIGN_LAUNCHED, data.model_dump(mode="json"))

    async def publish_campaign_status(self, campaign: Campaign) -> bool:
        """Publish marketing.campaign.paused or marketing.campaign.completed"""
        event_types = {
            "paused": MarketingEventType.CAMPAIGN_PAUSED,
            "completed": MarketingEventType.CAMPAIGN_COMPLETED,
        }
        event_type = event_types.get(campaign.status.value)
        if event_type is None:
            return False

        data = CampaignStatusEventData(
            campaign_id=campaign.campaign_id,
            project_id=campaign.project_id,
            status=campaign.status.value,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(event_type, data.model_dump(mode="json"))

    # ====================
    # Channel Events
    # ====================

    async def publish_channel_launched(self, record: ChannelRecord) -> bool:
        """Publish marketing.channel.launched event"""
        data = ChannelLaunchedEventData(
            campaign_id=record.campaign_id,
            channel=record.channel.value,
            budget_allocation=record.budget_allocation,
            external_ref=record.external_ref,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(MarketingEventType.CHANNEL_LAUNCHED, data.model_dump(mode="json"))

    async def publish_channel_failed(
        self, campaign_id: str, channel: ChannelKind, error: str
    ) -> bool:
        """Publish marketing.channel.failed event"""
        data = ChannelFailedEventData(
            campaign_id=campaign_id,
            channel=channel.value,
            error=error,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(MarketingEventType.CHANNEL_FAILED, data.model_dump(mode="json"))

    async def publish_channel_performance_updated(self, record: ChannelRecord) -> bool:
        """Publish marketing.channel.performance_updated event"""
        data = ChannelPerformanceUpdatedEventData(
            campaign_id=record.campaign_id,
            channel=record.channel.value,
            metrics={
                "spend": record.spend,
                "impressions": record.impressions,
                "clicks": record.clicks,
                "conversions": record.conversions,
                "revenue": record.revenue,
            },
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(
            MarketingEventType.CHANNEL_PERFORMANCE_UPDATED, data.model_dump(mode="json")
        )

    # ====================
    # Sales Events
    # ====================

    async def publish_sale_tracked(self, sale: SaleRecord) -> bool:
        """Publish marketing.sale.tracked event"""
        data = SaleTrackedEventData(
            sale_id=sale.sale_id,
            project_id=sale.project_id,
            platform=sale.platform.value,
            revenue=sale.revenue,
            royalty=sale.royalty,
            source=sale.source.value,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(MarketingEventType.SALE_TRACKED, data.model_dump(mode="json"))


__all__ = ["MarketingEventPublisher"]
