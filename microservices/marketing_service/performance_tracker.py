"""
Performance Tracker

Rolls persisted channel, email, social and sale records up into normalized
campaign analytics, reports and dashboards. Also records sales and
engagement telemetry on a best-effort basis.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .events.publishers import MarketingEventPublisher
from .metrics_math import (
    calculate_acos,
    calculate_click_rate,
    calculate_cpa,
    calculate_open_rate,
    calculate_roas,
    calculate_roi,
)
from .models import (
    Campaign,
    CampaignAnalytics,
    CampaignStatus,
    ChannelKind,
    ChannelMetrics,
    ChannelRecord,
    DashboardData,
    DateRange,
    EmailEvent,
    EmailMetrics,
    MarketingReport,
    ReportSummary,
    SaleRecord,
    SocialEngagement,
    SocialMetrics,
    TrackSaleRequest,
)
from .protocols import CampaignNotFoundError, MarketingRepositoryProtocol

logger = logging.getLogger(__name__)

ROYALTY_RATE = 0.70
REPORTS_DIR = "/reports"
NO_CHANNEL = "N/A"

EMAIL_EVENT_COUNTERS = {
    EmailEvent.OPEN: "opens_count",
    EmailEvent.CLICK: "clicks_count",
    EmailEvent.CONVERSION: "conversions_count",
}


def select_best_channel(channels: Dict[ChannelKind, ChannelMetrics]) -> str:
    """Channel with the highest defined ROI; the first one wins a tie"""
    best_channel = NO_CHANNEL
    best_roi: Optional[float] = None
    for channel, metrics in channels.items():
        if metrics.roi is None:
            continue
        if best_roi is None or metrics.roi > best_roi:
            best_roi = metrics.roi
            best_channel = channel.value
    return best_channel


class PerformanceTracker:
    """Campaign analytics and performance telemetry"""

    def __init__(
        self,
        repository: MarketingRepositoryProtocol,
        event_publisher: Optional[MarketingEventPublisher] = None,
    ):
        self.repository = repository
        self.event_publisher = event_publisher

    # ====================
    # Analytics
    # ====================

    async def get_campaign_analytics(self, campaign_id: str) -> CampaignAnalytics:
        """
        Compute analytics for a campaign from its persisted records.

        Channels without a record (failed launches) are absent from the
        breakdown and contribute nothing to the totals. Ratios whose
        denominator is zero are None.

        Raises:
            CampaignNotFoundError: no such campaign
        """
        campaign = await self.repository.get_campaign(campaign_id)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)

        records = await self.repository.list_channel_records(campaign_id)

        channels: Dict[ChannelKind, ChannelMetrics] = {}
        for record in records:
            if record.channel == ChannelKind.EMAIL:
                channels[record.channel] = await self._email_channel_metrics(record)
            elif record.channel == ChannelKind.SOCIAL_ORGANIC:
                channels[record.channel] = await self._social_channel_metrics(record)
            else:
                channels[record.channel] = self._ad_channel_metrics(record)

        spend = sum(r.spend for r in records)
        revenue = sum(r.revenue for r in records)
        conversions = sum(r.conversions for r in records)

        return CampaignAnalytics(
            campaign_id=campaign_id,
            spend=spend,
            revenue=revenue,
            sales_count=conversions,
            roi=calculate_roi(revenue, spend),
            acos=calculate_acos(spend, revenue),
            roas=calculate_roas(revenue, spend),
            cpa=calculate_cpa(spend, conversions),
            channels=channels,
        )

    def _ad_channel_metrics(self, record: ChannelRecord) -> ChannelMetrics:
        return ChannelMetrics(
            spend=record.spend,
            revenue=record.revenue,
            impressions=record.impressions,
            clicks=record.clicks,
            conversions=record.conversions,
            roi=calculate_roi(record.revenue, record.spend),
        )

    async def _email_channel_metrics(self, record: ChannelRecord) -> ChannelMetrics:
        emails = await self.repository.list_email_campaigns(record.campaign_id)
        sent = sum(e.recipients_count for e in emails)
        opens = sum(e.opens_count for e in emails)
        clicks = sum(e.clicks_count for e in emails)
        conversions = sum(e.conversions_count for e in emails)

        return ChannelMetrics(
            spend=record.spend,
            revenue=record.revenue,
            impressions=sent,
            clicks=clicks,
            conversions=conversions,
            roi=calculate_roi(record.revenue, record.spend),
            email=EmailMetrics(
                sent=sent,
                opens=opens,
                clicks=clicks,
                conversions=conversions,
                open_rate=calculate_open_rate(opens, sent),
                click_rate=calculate_click_rate(clicks, opens),
            ),
        )

    async def _social_channel_metrics(self, record: ChannelRecord) -> ChannelMetrics:
        posts = await self.repository.list_social_posts(record.campaign_id)
        impressions = sum(p.engagement.views for p in posts)
        engagement = sum(
            p.engagement.likes + p.engagement.comments + p.engagement.shares for p in posts
        )
        clicks = sum(p.engagement.clicks for p in posts)
        conversions = sum(p.engagement.conversions for p in posts)

        return ChannelMetrics(
            spend=record.spend,
            revenue=record.revenue,
            impressions=impressions,
            clicks=clicks,
            conversions=conversions,
            roi=calculate_roi(record.revenue, record.spend),
            social=SocialMetrics(
                posts=len(posts),
                impressions=impressions,
                engagement=engagement,
                clicks=clicks,
                conversions=conversions,
            ),
        )

    # ====================
    # Reports
    # ====================

    async def generate_report(self, campaign_id: str, date_range: DateRange) -> MarketingReport:
        """Describe a campaign report; rendering the document is external"""
        analytics = await self.get_campaign_analytics(campaign_id)
        generated_at = datetime.now(timezone.utc)
        report_file = f"{REPORTS_DIR}/campaign_{campaign_id}_{int(generated_at.timestamp() * 1000)}.pdf"

        summary = ReportSummary(
            roi=analytics.roi,
            total_sales=analytics.sales_count,
            best_performing_channel=select_best_channel(analytics.channels),
        )
        logger.info(f"Generated report {report_file}, best channel {summary.best_performing_channel}")
        return MarketingReport(
            report_file=report_file,
            generated_at=generated_at,
            date_range=date_range,
            summary=summary,
        )

    # ====================
    # Dashboard
    # ====================

    async def get_dashboard_data(self, project_id: str) -> DashboardData:
        """Totals for a book project; spend counts active campaigns only"""
        total_sales, total_revenue = await self.repository.get_sales_summary(project_id)
        active = await self.repository.list_campaigns_by_project(project_id, CampaignStatus.ACTIVE)
        total_spend = sum(c.budget for c in active)

        return DashboardData(
            project_id=project_id,
            total_sales=total_sales,
            total_revenue=total_revenue,
            total_spend=total_spend,
            roi=calculate_roi(total_revenue, total_spend),
            active_campaigns=len(active),
            top_performing_campaign=await self._top_performing_campaign(active),
        )

    async def _top_performing_campaign(self, campaigns: List[Campaign]) -> Optional[str]:
        best_id: Optional[str] = None
        best_roi: Optional[float] = None
        for campaign in campaigns:
            analytics = await self.get_campaign_analytics(campaign.campaign_id)
            if analytics.roi is None:
                continue
            if best_roi is None or analytics.roi > best_roi:
                best_roi = analytics.roi
                best_id = campaign.campaign_id
        return best_id

    # ====================
    # Telemetry
    # ====================

    async def track_sale(self, request: TrackSaleRequest) -> Optional[SaleRecord]:
        """Record a sale; returns None when it could not be stored"""
        sale = SaleRecord(
            project_id=request.project_id,
            platform=request.platform,
            format=request.format,
            units_sold=request.units_sold,
            revenue=request.revenue,
            royalty=request.revenue * ROYALTY_RATE,
            source=request.source,
        )
        try:
            sale = await self.repository.create_sale(sale)
        except Exception as e:
            logger.error(f"Failed to track sale for project {request.project_id}: {e}")
            return None

        logger.info(f"Tracked {sale.platform.value} sale {sale.sale_id} for project {sale.project_id}")
        if self.event_publisher:
            await self.event_publisher.publish_sale_tracked(sale)
        return sale

    async def track_email_event(self, email_id: str, event: EmailEvent) -> bool:
        """Count an open, click or conversion of a sequence email"""
        counter = EMAIL_EVENT_COUNTERS[event]
        try:
            updated = await self.repository.increment_email_counter(email_id, counter)
        except Exception as e:
            logger.error(f"Failed to track {event.value} for email {email_id}: {e}")
            return False

        if not updated:
            logger.warning(f"Email {email_id} not found, {event.value} ignored")
        return updated

    async def track_social_engagement(self, post_id: str, metrics: SocialEngagement) -> bool:
        """Merge reported counters into a post's engagement"""
        try:
            post = await self.repository.get_social_post(post_id)
            if post is None:
                logger.warning(f"Social post {post_id} not found, engagement ignored")
                return False

            merged = post.engagement.model_copy(update=metrics.model_dump(exclude_unset=True))
            return await self.repository.update_social_engagement(post_id, merged)

        except Exception as e:
            logger.error(f"Failed to track engagement for post {post_id}: {e}")
            return False


__all__ = ["PerformanceTracker", "select_best_channel", "ROYALTY_RATE"]
