"""
Component Tests for MarketingRepository

Runs the repository against a fake asyncpg pool: row mapping, command
status handling and guard rails, without a database.
"""

import os
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import InfraConfig
from microservices.marketing_service.marketing_repository import MarketingRepository
from microservices.marketing_service.protocols import MarketingValidationError
from tests.contracts.marketing.data_contract import (
    CampaignStatus,
    ChannelKind,
    ChannelPerformance,
    SocialEngagement,
    SocialPlatform,
)


class FakeConnection:
    """Returns canned rows and records every statement"""

    def __init__(self):
        self.row: Optional[Dict[str, Any]] = None
        self.rows: List[Dict[str, Any]] = []
        self.status = "UPDATE 1"
        self.statements: List[tuple] = []

    async def fetchrow(self, query, *args):
        self.statements.append((query, args))
        return self.row

    async def fetch(self, query, *args):
        self.statements.append((query, args))
        return self.rows

    async def execute(self, query, *args):
        self.statements.append((query, args))
        return self.status

    async def fetchval(self, query, *args):
        return 1


class FakePool:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def acquire(self):
        pool = self

        class _Acquire:
            async def __aenter__(self):
                return pool.conn

            async def __aexit__(self, *exc):
                return False

        return _Acquire()

    async def close(self):
        pass


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def repository(conn):
    repo = MarketingRepository(InfraConfig())
    repo.pool = FakePool(conn)
    return repo


class TestRepositoryGuards:

    @pytest.mark.asyncio
    async def test_health_without_pool(self):
        assert await MarketingRepository(InfraConfig()).health_check() is False

    @pytest.mark.asyncio
    async def test_health_with_pool(self, repository):
        assert await repository.health_check() is True

    @pytest.mark.asyncio
    async def test_uninitialized_repository_raises(self):
        with pytest.raises(RuntimeError):
            await MarketingRepository(InfraConfig()).get_campaign("mcp_1")

    @pytest.mark.asyncio
    async def test_unknown_email_counter_rejected(self, repository, conn):
        with pytest.raises(MarketingValidationError) as exc_info:
            await repository.increment_email_counter("eml_1", "budget; DROP TABLE sales")
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "counter"}
        assert conn.statements == []


class TestRowMapping:

    @pytest.mark.asyncio
    async def test_campaign_row(self, repository, conn):
        now = datetime.now(timezone.utc)
        conn.row = {
            "campaign_id": "mcp_1",
            "project_id": "proj_1",
            "campaign_name": "launch Campaign",
            "campaign_type": "launch",
            "start_date": now,
            "end_date": None,
            "budget": Decimal("1000.00"),
            "status": "paused",
            "created_at": now,
            "updated_at": now,
        }

        campaign = await repository.update_campaign_status("mcp_1", CampaignStatus.PAUSED)

        assert campaign.status == CampaignStatus.PAUSED
        assert campaign.budget == 1000.0
        assert conn.statements[0][1][1] == "paused"

    @pytest.mark.asyncio
    async def test_missing_campaign_is_none(self, repository):
        assert await repository.get_campaign("mcp_missing") is None

    @pytest.mark.asyncio
    async def test_channel_metrics_update_returns_record(self, repository, conn):
        conn.row = {
            "channel_record_id": "mch_1",
            "campaign_id": "mcp_1",
            "channel": "amazon_ads",
            "budget_allocation": Decimal("500.00"),
            "spend": Decimal("42.50"),
            "impressions": 900,
            "clicks": 30,
            "conversions": 3,
            "revenue": Decimal("29.97"),
            "external_ref": "98765",
        }

        record = await repository.update_channel_metrics("mch_1", ChannelPerformance(spend=42.5, clicks=30))

        assert record.channel == ChannelKind.AMAZON_ADS
        assert record.spend == 42.5
        assert "GREATEST" in conn.statements[0][0]

    @pytest.mark.asyncio
    async def test_social_post_json_columns(self, repository, conn):
        conn.row = {
            "post_id": "spt_1",
            "campaign_id": "mcp_1",
            "platform": "instagram",
            "post_type": "image",
            "content": "Out now",
            "media_urls": '["https://cdn.example.com/c.jpg"]',
            "scheduled_date": None,
            "posted_date": None,
            "status": "scheduled",
            "engagement": '{"views": 10, "likes": 2}',
        }

        post = await repository.get_social_post("spt_1")

        assert post.platform == SocialPlatform.INSTAGRAM
        assert post.media_urls == ["https://cdn.example.com/c.jpg"]
        assert post.engagement.likes == 2

    @pytest.mark.asyncio
    async def test_engagement_update_status(self, repository, conn):
        conn.status = "UPDATE 0"

        assert await repository.update_social_engagement("spt_missing", SocialEngagement()) is False

    @pytest.mark.asyncio
    async def test_sales_summary(self, repository, conn):
        conn.row = {"sale_count": 3, "total_revenue": Decimal("29.97")}

        count, revenue = await repository.get_sales_summary("proj_1")

        assert count == 3
        assert revenue == pytest.approx(29.97)
