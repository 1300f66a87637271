"""
Component Test Fixtures for Marketing Service

Provides the orchestrator and tracker wired to in-memory collaborators:
a dict-backed repository, fake channel launchers, book metadata and CRM
stubs, and the shared MockEventBus. The API client fixture patches the
main module's factory so no database or broker is needed.
"""

import os
import sys
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from unittest.mock import patch

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.marketing_service.campaign_orchestrator import CampaignOrchestrator
from microservices.marketing_service.events.publishers import MarketingEventPublisher
from microservices.marketing_service.performance_tracker import PerformanceTracker
from microservices.marketing_service.protocols import (
    BookMetadataError,
    ChannelLaunchError,
)
from tests.component.mocks import MockEventBus
from tests.contracts.marketing.data_contract import (
    BookContext,
    Campaign,
    CampaignStatus,
    ChannelBudget,
    ChannelKind,
    ChannelOutcome,
    ChannelPerformance,
    ChannelRecord,
    EmailCampaignRecord,
    LaunchContext,
    MarketingTestDataFactory,
    SaleRecord,
    SocialEngagement,
    SocialPostRecord,
)


# ====================
# Mock Repository
# ====================


class MockMarketingRepository:
    """Dict-backed repository for component testing"""

    def __init__(self):
        self.campaigns: Dict[str, Campaign] = {}
        self.channel_records: Dict[str, ChannelRecord] = {}
        self.email_campaigns: Dict[str, EmailCampaignRecord] = {}
        self.social_posts: Dict[str, SocialPostRecord] = {}
        self.sales: Dict[str, SaleRecord] = {}
        self.fail_on: set = set()
        self.calls: List[str] = []

    def _check(self, operation: str):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise RuntimeError(f"database error in {operation}")

    async def initialize(self):
        pass

    async def close(self):
        pass

    async def health_check(self) -> bool:
        return "health_check" not in self.fail_on

    # Campaigns
    async def create_campaign(self, campaign: Campaign) -> Campaign:
        self._check("create_campaign")
        self.campaigns[campaign.campaign_id] = campaign
        return campaign

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        self._check("get_campaign")
        return self.campaigns.get(campaign_id)

    async def update_campaign_status(
        self, campaign_id: str, status: CampaignStatus
    ) -> Optional[Campaign]:
        self._check("update_campaign_status")
        campaign = self.campaigns.get(campaign_id)
        if campaign is None:
            return None
        updated = campaign.model_copy(update={"status": status, "updated_at": datetime.now(timezone.utc)})
        self.campaigns[campaign_id] = updated
        return updated

    async def list_campaigns_by_project(
        self, project_id: str, status: Optional[CampaignStatus] = None
    ) -> List[Campaign]:
        self._check("list_campaigns_by_project")
        return [
            c for c in self.campaigns.values()
            if c.project_id == project_id and (status is None or c.status == status)
        ]

    # Channel records
    async def create_channel_record(self, record: ChannelRecord) -> ChannelRecord:
        self._check("create_channel_record")
        for existing in self.channel_records.values():
            if existing.campaign_id == record.campaign_id and existing.channel == record.channel:
                raise RuntimeError("duplicate channel record")
        self.channel_records[record.channel_record_id] = record
        return record

    async def list_channel_records(self, campaign_id: str) -> List[ChannelRecord]:
        self._check("list_channel_records")
        return [r for r in self.channel_records.values() if r.campaign_id == campaign_id]

    async def update_channel_metrics(
        self, channel_record_id: str, performance: ChannelPerformance
    ) -> Optional[ChannelRecord]:
        self._check("update_channel_metrics")
        record = self.channel_records.get(channel_record_id)
        if record is None:
            return None
        updated = record.model_copy(update={
            "spend": max(record.spend, performance.spend),
            "impressions": max(record.impressions, performance.impressions),
            "clicks": max(record.clicks, performance.clicks),
            "conversions": max(record.conversions, performance.conversions),
            "revenue": max(record.revenue, performance.revenue),
            "updated_at": datetime.now(timezone.utc),
        })
        self.channel_records[channel_record_id] = updated
        return updated

    # Email sequence
    async def create_email_campaign(self, record: EmailCampaignRecord) -> EmailCampaignRecord:
        self._check("create_email_campaign")
        self.email_campaigns[record.email_id] = record
        return record

    async def list_email_campaigns(self, campaign_id: str) -> List[EmailCampaignRecord]:
        self._check("list_email_campaigns")
        return [e for e in self.email_campaigns.values() if e.campaign_id == campaign_id]

    async def increment_email_counter(self, email_id: str, counter: str) -> bool:
        self._check("increment_email_counter")
        record = self.email_campaigns.get(email_id)
        if record is None:
            return False
        self.email_campaigns[email_id] = record.model_copy(update={counter: getattr(record, counter) + 1})
        return True

    # Social posts
    async def create_social_post(self, record: SocialPostRecord) -> SocialPostRecord:
        self._check("create_social_post")
        self.social_posts[record.post_id] = record
        return record

    async def list_social_posts(self, campaign_id: str) -> List[SocialPostRecord]:
        self._check("list_social_posts")
        return [p for p in self.social_posts.values() if p.campaign_id == campaign_id]

    async def get_social_post(self, post_id: str) -> Optional[SocialPostRecord]:
        self._check("get_social_post")
        return self.social_posts.get(post_id)

    async def update_social_engagement(self, post_id: str, engagement: SocialEngagement) -> bool:
        self._check("update_social_engagement")
        post = self.social_posts.get(post_id)
        if post is None:
            return False
        self.social_posts[post_id] = post.model_copy(update={"engagement": engagement})
        return True

    # Sales
    async def create_sale(self, sale: SaleRecord) -> SaleRecord:
        self._check("create_sale")
        self.sales[sale.sale_id] = sale
        return sale

    async def get_sales_summary(self, project_id: str) -> Tuple[int, float]:
        self._check("get_sales_summary")
        sales = [s for s in self.sales.values() if s.project_id == project_id]
        return len(sales), sum(s.revenue for s in sales)


# ====================
# Fake Collaborators
# ====================


class FakeLauncher:
    """Launcher that records its calls and succeeds or fails on demand"""

    def __init__(self, channel: ChannelKind):
        self.channel = channel
        self.launches: List[Tuple[LaunchContext, ChannelBudget]] = []
        self.fetches: List[str] = []
        self.fail_launch = False
        self.fail_fetch = False
        self.performance = ChannelPerformance()
        self.email_campaigns: List[EmailCampaignRecord] = []
        self.social_posts: List[SocialPostRecord] = []

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        self.launches.append((context, budget))
        if self.fail_launch:
            raise ChannelLaunchError(self.channel, "platform rejected the campaign")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=f"{self.channel.value}-{len(self.launches)}",
            email_campaigns=[e.model_copy(update={"campaign_id": context.campaign_id}) for e in self.email_campaigns],
            social_posts=[p.model_copy(update={"campaign_id": context.campaign_id}) for p in self.social_posts],
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        self.fetches.append(external_ref)
        if self.fail_fetch:
            raise ChannelLaunchError(self.channel, "report unavailable")
        return self.performance


class MockBookMetadataClient:
    """Returns one book for every project, or fails"""

    def __init__(self):
        self.book: Optional[BookContext] = None
        self.fail = False
        self.requested: List[str] = []
        self.healthy = True

    async def get_book_context(self, project_id: str) -> BookContext:
        self.requested.append(project_id)
        if self.fail:
            raise BookMetadataError(project_id, "provider unreachable")
        if self.book is not None:
            return self.book
        return MarketingTestDataFactory.make_book_context(project_id=project_id)

    async def health_check(self) -> bool:
        return self.healthy


class MockCRMClient:
    """Records synced campaigns, or fails"""

    def __init__(self):
        self.synced: List[Campaign] = []
        self.fail = False

    async def sync_campaign(self, campaign: Campaign) -> bool:
        if self.fail:
            raise ConnectionError("CRM unreachable")
        self.synced.append(campaign)
        return True


class StubServiceFactory:
    """Stands in for MarketingServiceFactory inside the API module"""

    def __init__(self, repository, orchestrator, tracker, nats_client=None, book_metadata_client=None):
        self.repository = repository
        self.orchestrator = orchestrator
        self.tracker = tracker
        self.nats_client = nats_client
        self.book_metadata_client = book_metadata_client


# ====================
# Fixtures
# ====================


@pytest.fixture
def factory():
    """Provide test data factory"""
    return MarketingTestDataFactory()


@pytest.fixture
def mock_repository():
    return MockMarketingRepository()


@pytest.fixture
def launchers() -> Dict[ChannelKind, FakeLauncher]:
    return {kind: FakeLauncher(kind) for kind in ChannelKind}


@pytest.fixture
def book_client():
    return MockBookMetadataClient()


@pytest.fixture
def crm_client():
    return MockCRMClient()


@pytest.fixture
def mock_event_bus():
    return MockEventBus()


@pytest.fixture
def event_publisher(mock_event_bus):
    return MarketingEventPublisher(mock_event_bus)


@pytest.fixture
def orchestrator(mock_repository, launchers, book_client, crm_client, event_publisher):
    return CampaignOrchestrator(
        repository=mock_repository,
        launchers=launchers,
        book_metadata_client=book_client,
        crm_client=crm_client,
        event_publisher=event_publisher,
    )


@pytest.fixture
def tracker(mock_repository, event_publisher):
    return PerformanceTracker(repository=mock_repository, event_publisher=event_publisher)


@pytest.fixture
def client(mock_repository, orchestrator, tracker, mock_event_bus, book_client):
    """Create FastAPI test client with mocked dependencies"""
    from fastapi.testclient import TestClient

    stub = StubServiceFactory(mock_repository, orchestrator, tracker, mock_event_bus, book_client)

    # Patch the global factory; no lifespan, so nothing connects
    with patch("microservices.marketing_service.main.factory", stub):
        from microservices.marketing_service.main import app

        yield TestClient(app, raise_server_exceptions=False)
