"""
Campaign Orchestrator

Turns one launch intent into coordinated, independently failing launches
across heterogeneous marketing channels, and manages campaign lifecycle.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Type

from .budget_allocation import allocate_budget, channel_budget
from .events.publishers import MarketingEventPublisher
from .models import (
    Campaign,
    CampaignLaunchRequest,
    CampaignStatus,
    ChannelKind,
    ChannelPerformance,
    ChannelRecord,
    LaunchContext,
)
from .protocols import (
    BookMetadataClientProtocol,
    CampaignCompleteError,
    CampaignLaunchError,
    CampaignNotFoundError,
    CampaignPauseError,
    ChannelLaunchError,
    ChannelLauncherProtocol,
    CRMClientProtocol,
    MarketingRepositoryProtocol,
)

logger = logging.getLogger(__name__)


def merge_performance(record: ChannelRecord, reported: ChannelPerformance) -> ChannelPerformance:
    """Counters only move forward; a lower report never rolls a tally back"""
    return ChannelPerformance(
        spend=max(record.spend, reported.spend),
        impressions=max(record.impressions, reported.impressions),
        clicks=max(record.clicks, reported.clicks),
        conversions=max(record.conversions, reported.conversions),
        revenue=max(record.revenue, reported.revenue),
    )


class CampaignOrchestrator:
    """Campaign lifecycle and multi-channel launch coordination"""

    def __init__(
        self,
        repository: MarketingRepositoryProtocol,
        launchers: Dict[ChannelKind, ChannelLauncherProtocol],
        book_metadata_client: BookMetadataClientProtocol,
        crm_client: Optional[CRMClientProtocol] = None,
        event_publisher: Optional[MarketingEventPublisher] = None,
    ):
        self.repository = repository
        self.launchers = launchers
        self.book_metadata_client = book_metadata_client
        self.crm_client = crm_client
        self.event_publisher = event_publisher

    # ====================
    # Launch
    # ====================

    async def launch_campaign(self, request: CampaignLaunchRequest) -> Campaign:
        """
        Launch a campaign across the requested channels.

        The campaign is persisted as active before any channel is attempted.
        Channels launch concurrently; each failure is isolated, so the call
        succeeds even when every channel fails.

        Raises:
            CampaignLaunchError: the campaign record could not be created
        """
        now = datetime.now(timezone.utc)
        campaign = Campaign(
            project_id=request.project_id,
            campaign_name=f"{request.campaign_type.value} Campaign - {now.isoformat()}",
            campaign_type=request.campaign_type,
            start_date=now,
            end_date=now + timedelta(days=request.duration_days),
            budget=request.budget,
            status=CampaignStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

        try:
            campaign = await self.repository.create_campaign(campaign)
        except Exception as e:
            logger.error(f"Failed to create campaign for project {request.project_id}: {e}", exc_info=True)
            raise CampaignLaunchError(str(e)) from e

        allocation = allocate_budget(request.budget, request.channels)
        logger.info(
            f"Launching campaign {campaign.campaign_id} on "
            f"{', '.join(c.value for c in request.channels)} with budget {request.budget}"
        )

        results = await asyncio.gather(
            *(
                self._launch_channel(campaign, channel, allocation[channel])
                for channel in request.channels
            ),
            return_exceptions=True,
        )

        launched: List[ChannelKind] = []
        for channel, result in zip(request.channels, results):
            if isinstance(result, ChannelRecord):
                launched.append(channel)
            elif isinstance(result, BaseException):
                logger.error(f"Channel {channel.value} task for campaign {campaign.campaign_id} aborted: {result}")

        logger.info(f"Campaign {campaign.campaign_id} launched {len(launched)}/{len(request.channels)} channels")

        await self._sync_to_crm(campaign)

        if self.event_publisher:
            await self.event_publisher.publish_campaign_launched(campaign, request.channels, launched)

        return campaign

    async def _launch_channel(
        self, campaign: Campaign, channel: ChannelKind, allocated: float
    ) -> Optional[ChannelRecord]:
        """Launch one channel; any failure is logged and absorbed"""
        try:
            launcher: Optional[ChannelLauncherProtocol] = self.launchers.get(channel)
            if launcher is None:
                raise ChannelLaunchError(channel, "no launcher registered")

            book = await self.book_metadata_client.get_book_context(campaign.project_id)
            context = LaunchContext(
                campaign_id=campaign.campaign_id,
                campaign_type=campaign.campaign_type,
                end_date=campaign.end_date,
                book=book,
            )
            outcome = await launcher.launch(context, channel_budget(allocated))

            for email in outcome.email_campaigns:
                await self.repository.create_email_campaign(email)
            for post in outcome.social_posts:
                await self.repository.create_social_post(post)

            record = await self.repository.create_channel_record(
                ChannelRecord(
                    campaign_id=campaign.campaign_id,
                    channel=channel,
                    budget_allocation=allocated,
                    external_ref=outcome.external_ref,
                )
            )

        except Exception as e:
            logger.error(f"Failed to launch {channel.value} for campaign {campaign.campaign_id}: {e}")
            if self.event_publisher:
                await self.event_publisher.publish_channel_failed(campaign.campaign_id, channel, str(e))
            return None

        logger.info(f"Launched {channel.value} for campaign {campaign.campaign_id} with {allocated:.2f}")
        if self.event_publisher:
            await self.event_publisher.publish_channel_launched(record)
        return record

    async def _sync_to_crm(self, campaign: Campaign) -> None:
        if not self.crm_client:
            return
        try:
            await self.crm_client.sync_campaign(campaign)
        except Exception as e:
            logger.warning(f"CRM sync failed for campaign {campaign.campaign_id}: {e}")

    # ====================
    # Lifecycle
    # ====================

    async def get_campaign(self, campaign_id: str) -> Campaign:
        """Get campaign by ID"""
        campaign = await self.repository.get_campaign(campaign_id)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)
        return campaign

    async def list_channels(self, campaign_id: str) -> List[ChannelRecord]:
        """Channel records of a campaign; a failed channel has none"""
        await self.get_campaign(campaign_id)
        return await self.repository.list_channel_records(campaign_id)

    async def pause_campaign(self, campaign_id: str) -> Campaign:
        """
        Pause a campaign.

        Raises:
            CampaignNotFoundError: no such campaign
            CampaignPauseError: the status update failed
        """
        return await self._set_status(campaign_id, CampaignStatus.PAUSED, CampaignPauseError)

    async def complete_campaign(self, campaign_id: str) -> Campaign:
        """
        Mark a campaign completed.

        Raises:
            CampaignNotFoundError: no such campaign
            CampaignCompleteError: the status update failed
        """
        return await self._set_status(campaign_id, CampaignStatus.COMPLETED, CampaignCompleteError)

    async def _set_status(
        self,
        campaign_id: str,
        status: CampaignStatus,
        error_cls: Type[Exception],
    ) -> Campaign:
        updated: Optional[Campaign] = None
        try:
            existing = await self.repository.get_campaign(campaign_id)
            if existing is not None:
                updated = await self.repository.update_campaign_status(campaign_id, status)
        except Exception as e:
            logger.error(f"Failed to set campaign {campaign_id} to {status.value}: {e}")
            raise error_cls(campaign_id, str(e)) from e

        if updated is None:
            raise CampaignNotFoundError(campaign_id)

        logger.info(f"Campaign {campaign_id} is now {status.value}")
        if self.event_publisher:
            await self.event_publisher.publish_campaign_status(updated)
        return updated

    # ====================
    # Performance Refresh
    # ====================

    async def refresh_channel_performance(self, campaign_id: str) -> List[ChannelRecord]:
        """
        Pull current counters from each channel's remote platform.

        Channels refresh concurrently; one failing platform leaves its record
        unchanged and does not affect the others.
        """
        await self.get_campaign(campaign_id)
        records = await self.repository.list_channel_records(campaign_id)

        refreshable = [r for r in records if r.external_ref and r.channel in self.launchers]
        await asyncio.gather(
            *(self._refresh_channel(record) for record in refreshable),
            return_exceptions=True,
        )
        return await self.repository.list_channel_records(campaign_id)

    async def _refresh_channel(self, record: ChannelRecord) -> Optional[ChannelRecord]:
        try:
            launcher = self.launchers[record.channel]
            reported = await launcher.fetch_performance(record.external_ref)
            updated = await self.repository.update_channel_metrics(
                record.channel_record_id, merge_performance(record, reported)
            )
        except Exception as e:
            logger.warning(
                f"Performance refresh failed for {record.channel.value} of campaign {record.campaign_id}: {e}"
            )
            return None

        if updated and self.event_publisher:
            await self.event_publisher.publish_channel_performance_updated(updated)
        return updated


__all__ = ["CampaignOrchestrator", "merge_performance"]
