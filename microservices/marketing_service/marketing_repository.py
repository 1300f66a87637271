"""
Marketing Service Data Repository

Data access layer - PostgreSQL (Async, asyncpg pool)
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import asyncpg

from core.config import InfraConfig, get_settings
from .models import (
    Campaign,
    CampaignStatus,
    CampaignType,
    ChannelKind,
    ChannelPerformance,
    ChannelRecord,
    EmailCampaignRecord,
    EmailStatus,
    EmailType,
    SaleFormat,
    SalePlatform,
    SaleRecord,
    SaleSource,
    SocialEngagement,
    SocialPlatform,
    SocialPostRecord,
    SocialPostStatus,
)
from .protocols import MarketingValidationError


class ExtendedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and datetime types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def json_dumps(obj):
    """JSON dumps with Decimal and datetime support"""
    return json.dumps(obj, cls=ExtendedJSONEncoder)


logger = logging.getLogger(__name__)

EMAIL_COUNTERS = ("opens_count", "clicks_count", "conversions_count")


class MarketingRepository:
    """Marketing service data repository - PostgreSQL (Async)"""

    def __init__(self, config: Optional[InfraConfig] = None):
        self.config = config or get_settings().infrastructure
        self.pool: Optional[asyncpg.Pool] = None
        self.schema = self.config.postgres_schema

        # Table names
        self.campaigns_table = "campaigns"
        self.channels_table = "campaign_channels"
        self.sales_table = "sales"
        self.email_campaigns_table = "email_campaigns"
        self.social_posts_table = "social_posts"

    async def initialize(self):
        """Initialize database connection pool"""
        logger.info(f"Connecting to PostgreSQL at {self.config.postgres_host}:{self.config.postgres_port}")
        self.pool = await asyncpg.create_pool(
            dsn=self.config.postgres_dsn,
            min_size=self.config.postgres_min_pool,
            max_size=self.config.postgres_max_pool,
        )
        logger.info("Marketing repository initialized with PostgreSQL")

    async def close(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        logger.info("Marketing repository database connection closed")

    async def health_check(self) -> bool:
        """Check repository health"""
        if not self.pool:
            return False
        try:
            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise RuntimeError("Repository not initialized")
        return self.pool

    # ====================
    # Campaigns
    # ====================

    async def create_campaign(self, campaign: Campaign) -> Campaign:
        """Insert a campaign"""
        try:
            query = f'''
                INSERT INTO {self.schema}.{self.campaigns_table} (
                    campaign_id, project_id, campaign_name, campaign_type,
                    start_date, end_date, budget, status, created_at, updated_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    campaign.campaign_id,
                    campaign.project_id,
                    campaign.campaign_name,
                    campaign.campaign_type.value,
                    campaign.start_date,
                    campaign.end_date,
                    campaign.budget,
                    campaign.status.value,
                    campaign.created_at,
                    campaign.updated_at,
                )
            return self._row_to_campaign(dict(row)) if row else campaign

        except Exception as e:
            logger.error(f"Error creating campaign: {e}", exc_info=True)
            raise

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.campaigns_table}
                WHERE campaign_id = $1
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(query, campaign_id)
            return self._row_to_campaign(dict(row)) if row else None

        except Exception as e:
            logger.error(f"Error getting campaign {campaign_id}: {e}")
            raise

    async def update_campaign_status(
        self, campaign_id: str, status: CampaignStatus
    ) -> Optional[Campaign]:
        """Set campaign status"""
        try:
            query = f'''
                UPDATE {self.schema}.{self.campaigns_table}
                SET status = $2, updated_at = $3
                WHERE campaign_id = $1
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query, campaign_id, status.value, datetime.now(timezone.utc)
                )
            return self._row_to_campaign(dict(row)) if row else None

        except Exception as e:
            logger.error(f"Error updating campaign {campaign_id} status: {e}")
            raise

    async def list_campaigns_by_project(
        self, project_id: str, status: Optional[CampaignStatus] = None
    ) -> List[Campaign]:
        """List campaigns of a book project, newest first"""
        try:
            conditions = ["project_id = $1"]
            params: List[Any] = [project_id]
            if status is not None:
                params.append(status.value)
                conditions.append(f"status = ${len(params)}")

            query = f'''
                SELECT * FROM {self.schema}.{self.campaigns_table}
                WHERE {" AND ".join(conditions)}
                ORDER BY created_at DESC
            '''
            async with self._require_pool().acquire() as conn:
                rows = await conn.fetch(query, *params)
            return [self._row_to_campaign(dict(row)) for row in rows]

        except Exception as e:
            logger.error(f"Error listing campaigns for project {project_id}: {e}")
            raise

    # ====================
    # Channel Records
    # ====================

    async def create_channel_record(self, record: ChannelRecord) -> ChannelRecord:
        """Insert a channel record"""
        try:
            query = f'''
                INSERT INTO {self.schema}.{self.channels_table} (
                    channel_record_id, campaign_id, channel, budget_allocation,
                    spend, impressions, clicks, conversions, revenue,
                    external_ref, created_at, updated_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    record.channel_record_id,
                    record.campaign_id,
                    record.channel.value,
                    record.budget_allocation,
                    record.spend,
                    record.impressions,
                    record.clicks,
                    record.conversions,
                    record.revenue,
                    record.external_ref,
                    record.created_at,
                    record.updated_at,
                )
            return self._row_to_channel_record(dict(row)) if row else record

        except Exception as e:
            logger.error(f"Error creating {record.channel.value} record for campaign {record.campaign_id}: {e}")
            raise

    async def list_channel_records(self, campaign_id: str) -> List[ChannelRecord]:
        """List channel records of a campaign in creation order"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.channels_table}
                WHERE campaign_id = $1
                ORDER BY created_at ASC, channel_record_id ASC
            '''
            async with self._require_pool().acquire() as conn:
                rows = await conn.fetch(query, campaign_id)
            return [self._row_to_channel_record(dict(row)) for row in rows]

        except Exception as e:
            logger.error(f"Error listing channel records for campaign {campaign_id}: {e}")
            raise

    async def update_channel_metrics(
        self, channel_record_id: str, performance: ChannelPerformance
    ) -> Optional[ChannelRecord]:
        """Write counters; GREATEST keeps them monotone under concurrent refreshes"""
        try:
            query = f'''
                UPDATE {self.schema}.{self.channels_table}
                SET spend = GREATEST(spend, $2),
                    impressions = GREATEST(impressions, $3),
                    clicks = GREATEST(clicks, $4),
                    conversions = GREATEST(conversions, $5),
                    revenue = GREATEST(revenue, $6),
                    updated_at = $7
                WHERE channel_record_id = $1
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    channel_record_id,
                    performance.spend,
                    performance.impressions,
                    performance.clicks,
                    performance.conversions,
                    performance.revenue,
                    datetime.now(timezone.utc),
                )
            return self._row_to_channel_record(dict(row)) if row else None

        except Exception as e:
            logger.error(f"Error updating channel record {channel_record_id}: {e}")
            raise

    # ====================
    # Email Sequence
    # ====================

    async def create_email_campaign(self, record: EmailCampaignRecord) -> EmailCampaignRecord:
        """Insert an email sequence record"""
        try:
            query = f'''
                INSERT INTO {self.schema}.{self.email_campaigns_table} (
                    email_id, campaign_id, email_type, subject_line, send_date,
                    recipients_count, opens_count, clicks_count, conversions_count, status
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    record.email_id,
                    record.campaign_id,
                    record.email_type.value,
                    record.subject_line,
                    record.send_date,
                    record.recipients_count,
                    record.opens_count,
                    record.clicks_count,
                    record.conversions_count,
                    record.status.value,
                )
            return self._row_to_email_campaign(dict(row)) if row else record

        except Exception as e:
            logger.error(f"Error creating email record for campaign {record.campaign_id}: {e}")
            raise

    async def list_email_campaigns(self, campaign_id: str) -> List[EmailCampaignRecord]:
        """List email sequence records of a campaign"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.email_campaigns_table}
                WHERE campaign_id = $1
                ORDER BY send_date ASC NULLS LAST
            '''
            async with self._require_pool().acquire() as conn:
                rows = await conn.fetch(query, campaign_id)
            return [self._row_to_email_campaign(dict(row)) for row in rows]

        except Exception as e:
            logger.error(f"Error listing email records for campaign {campaign_id}: {e}")
            raise

    async def increment_email_counter(self, email_id: str, counter: str) -> bool:
        """Increment one engagement counter of an email"""
        if counter not in EMAIL_COUNTERS:
            raise MarketingValidationError(f"Unknown email counter: {counter}", field="counter")
        try:
            query = f'''
                UPDATE {self.schema}.{self.email_campaigns_table}
                SET {counter} = {counter} + 1
                WHERE email_id = $1
            '''
            async with self._require_pool().acquire() as conn:
                status = await conn.execute(query, email_id)
            return status.endswith(" 1")

        except Exception as e:
            logger.error(f"Error incrementing {counter} for email {email_id}: {e}")
            raise

    # ====================
    # Social Posts
    # ====================

    async def create_social_post(self, record: SocialPostRecord) -> SocialPostRecord:
        """Insert a social post"""
        try:
            query = f'''
                INSERT INTO {self.schema}.{self.social_posts_table} (
                    post_id, campaign_id, platform, post_type, content, media_urls,
                    scheduled_date, posted_date, status, engagement
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    record.post_id,
                    record.campaign_id,
                    record.platform.value,
                    record.post_type,
                    record.content,
                    json_dumps(record.media_urls),
                    record.scheduled_date,
                    record.posted_date,
                    record.status.value,
                    json_dumps(record.engagement.model_dump()),
                )
            return self._row_to_social_post(dict(row)) if row else record

        except Exception as e:
            logger.error(f"Error creating social post for campaign {record.campaign_id}: {e}")
            raise

    async def list_social_posts(self, campaign_id: str) -> List[SocialPostRecord]:
        """List social posts of a campaign"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.social_posts_table}
                WHERE campaign_id = $1
                ORDER BY scheduled_date ASC NULLS LAST
            '''
            async with self._require_pool().acquire() as conn:
                rows = await conn.fetch(query, campaign_id)
            return [self._row_to_social_post(dict(row)) for row in rows]

        except Exception as e:
            logger.error(f"Error listing social posts for campaign {campaign_id}: {e}")
            raise

    async def get_social_post(self, post_id: str) -> Optional[SocialPostRecord]:
        """Get social post by ID"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.social_posts_table}
                WHERE post_id = $1
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(query, post_id)
            return self._row_to_social_post(dict(row)) if row else None

        except Exception as e:
            logger.error(f"Error getting social post {post_id}: {e}")
            raise

    async def update_social_engagement(
        self, post_id: str, engagement: SocialEngagement
    ) -> bool:
        """Replace the engagement counters of a post"""
        try:
            query = f'''
                UPDATE {self.schema}.{self.social_posts_table}
                SET engagement = $2
                WHERE post_id = $1
            '''
            async with self._require_pool().acquire() as conn:
                status = await conn.execute(query, post_id, json_dumps(engagement.model_dump()))
            return status.endswith(" 1")

        except Exception as e:
            logger.error(f"Error updating engagement for post {post_id}: {e}")
            raise

    # ====================
    # Sales
    # ====================

    async def create_sale(self, sale: SaleRecord) -> SaleRecord:
        """Insert a sale"""
        try:
            query = f'''
                INSERT INTO {self.schema}.{self.sales_table} (
                    sale_id, project_id, platform, sale_date, format,
                    units_sold, revenue, royalty, source
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                RETURNING *
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    sale.sale_id,
                    sale.project_id,
                    sale.platform.value,
                    sale.sale_date,
                    sale.format.value,
                    sale.units_sold,
                    sale.revenue,
                    sale.royalty,
                    sale.source.value,
                )
            return self._row_to_sale(dict(row)) if row else sale

        except Exception as e:
            logger.error(f"Error creating sale for project {sale.project_id}: {e}")
            raise

    async def get_sales_summary(self, project_id: str) -> Tuple[int, float]:
        """Sale count and total revenue of a project"""
        try:
            query = f'''
                SELECT COUNT(*) AS sale_count, COALESCE(SUM(revenue), 0) AS total_revenue
                FROM {self.schema}.{self.sales_table}
                WHERE project_id = $1
            '''
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow(query, project_id)
            return int(row["sale_count"]), float(row["total_revenue"])

        except Exception as e:
            logger.error(f"Error summarizing sales for project {project_id}: {e}")
            raise

    # ====================
    # Row Mapping
    # ====================

    def _row_to_campaign(self, row: Dict[str, Any]) -> Campaign:
        """Convert database row to Campaign model"""
        return Campaign.model_construct(
            campaign_id=row.get("campaign_id"),
            project_id=row.get("project_id"),
            campaign_name=row.get("campaign_name"),
            campaign_type=CampaignType(row.get("campaign_type")),
            start_date=row.get("start_date"),
            end_date=row.get("end_date"),
            budget=float(row.get("budget") or 0),
            status=CampaignStatus(row.get("status")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def _row_to_channel_record(self, row: Dict[str, Any]) -> ChannelRecord:
        """Convert database row to ChannelRecord model"""
        return ChannelRecord.model_construct(
            channel_record_id=row.get("channel_record_id"),
            campaign_id=row.get("campaign_id"),
            channel=ChannelKind(row.get("channel")),
            budget_allocation=float(row.get("budget_allocation") or 0),
            spend=float(row.get("spend") or 0),
            impressions=int(row.get("impressions") or 0),
            clicks=int(row.get("clicks") or 0),
            conversions=int(row.get("conversions") or 0),
            revenue=float(row.get("revenue") or 0),
            external_ref=row.get("external_ref"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def _row_to_email_campaign(self, row: Dict[str, Any]) -> EmailCampaignRecord:
        """Convert database row to EmailCampaignRecord model"""
        return EmailCampaignRecord.model_construct(
            email_id=row.get("email_id"),
            campaign_id=row.get("campaign_id"),
            email_type=EmailType(row.get("email_type")),
            subject_line=row.get("subject_line"),
            send_date=row.get("send_date"),
            recipients_count=int(row.get("recipients_count") or 0),
            opens_count=int(row.get("opens_count") or 0),
            clicks_count=int(row.get("clicks_count") or 0),
            conversions_count=int(row.get("conversions_count") or 0),
            status=EmailStatus(row.get("status")),
        )

    def _row_to_social_post(self, row: Dict[str, Any]) -> SocialPostRecord:
        """Convert database row to SocialPostRecord model"""
        media_urls = row.get("media_urls") or []
        if isinstance(media_urls, str):
            media_urls = json.loads(media_urls)

        engagement = row.get("engagement") or {}
        if isinstance(engagement, str):
            engagement = json.loads(engagement)

        return SocialPostRecord.model_construct(
            post_id=row.get("post_id"),
            campaign_id=row.get("campaign_id"),
            platform=SocialPlatform(row.get("platform")),
            post_type=row.get("post_type") or "text",
            content=row.get("content") or "",
            media_urls=media_urls,
            scheduled_date=row.get("scheduled_date"),
            posted_date=row.get("posted_date"),
            status=SocialPostStatus(row.get("status")),
            engagement=SocialEngagement(**engagement),
        )

    def _row_to_sale(self, row: Dict[str, Any]) -> SaleRecord:
        """Convert database row to SaleRecord model"""
        return SaleRecord.model_construct(
            sale_id=row.get("sale_id"),
            project_id=row.get("project_id"),
            platform=SalePlatform(row.get("platform")),
            sale_date=row.get("sale_date"),
            format=SaleFormat(row.get("format")),
            units_sold=int(row.get("units_sold") or 1),
            revenue=float(row.get("revenue") or 0),
            royalty=float(row.get("royalty") or 0),
            source=SaleSource(row.get("source")),
        )


__all__ = ["MarketingRepository", "json_dumps"]
