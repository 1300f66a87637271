"""
Component Tests for Channel Launchers and Peer Clients

Each launcher talks to its platform through httpx.MockTransport; remote
failures must surface as ChannelLaunchError.
"""

import json
import os
import sys
from typing import Callable, Dict, List

import httpx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import (
    AmazonAdsConfig,
    BookBubConfig,
    ChannelConfig,
    EmailPlatformConfig,
    FacebookAdsConfig,
    ServiceConfig,
    SocialSchedulerConfig,
)
from microservices.marketing_service.budget_allocation import channel_budget
from microservices.marketing_service.channels import (
    AmazonAdsLauncher,
    BookBubLauncher,
    EmailSequenceLauncher,
    FacebookAdsLauncher,
    SocialSchedulerLauncher,
    build_channel_registry,
)
from microservices.marketing_service.clients.book_metadata_client import BookMetadataClient
from microservices.marketing_service.clients.crm_client import CRMClient
from microservices.marketing_service.protocols import BookMetadataError, ChannelLaunchError
from tests.contracts.marketing.data_contract import (
    CampaignType,
    ChannelKind,
    MarketingTestDataFactory,
    SocialPlatform,
)


class RecordingTransport:
    """httpx.MockTransport wrapper that keeps the requests it saw"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(_handle)

    def body(self, index: int = -1) -> Dict:
        return json.loads(self.requests[index].content)


def _json(payload: Dict, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, json=payload)


class TestAmazonAdsLauncher:

    @pytest.mark.asyncio
    async def test_launch_sends_daily_budget(self):
        recorder = RecordingTransport(_json({"campaignId": 98765}))
        launcher = AmazonAdsLauncher(AmazonAdsConfig(base_url="https://ads.test", client_id="cid"),
                                     transport=recorder.transport)
        context = MarketingTestDataFactory.make_launch_context()

        outcome = await launcher.launch(context, channel_budget(600))

        assert outcome.external_ref == "98765"
        request = recorder.requests[0]
        assert request.url.path == "/sp/campaigns"
        assert request.headers["Amazon-Advertising-API-ClientId"] == "cid"
        body = recorder.body()
        assert body["dailyBudget"] == 20
        assert body["asin"] == context.book.asin

    @pytest.mark.asyncio
    async def test_launch_requires_asin(self):
        recorder = RecordingTransport(_json({"campaignId": 1}))
        launcher = AmazonAdsLauncher(AmazonAdsConfig(base_url="https://ads.test"), transport=recorder.transport)
        book = MarketingTestDataFactory.make_book_context(asin=None)

        with pytest.raises(ChannelLaunchError):
            await launcher.launch(MarketingTestDataFactory.make_launch_context(book=book), channel_budget(100))
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_platform_error_becomes_channel_error(self):
        recorder = RecordingTransport(_json({"message": "throttled"}, status_code=429))
        launcher = AmazonAdsLauncher(AmazonAdsConfig(base_url="https://ads.test"), transport=recorder.transport)

        with pytest.raises(ChannelLaunchError) as exc_info:
            await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(100))

        assert exc_info.value.details["channel"] == "amazon_ads"
        assert "429" in exc_info.value.details["error"]

    @pytest.mark.asyncio
    async def test_fetch_performance(self):
        recorder = RecordingTransport(_json(
            {"cost": 42.5, "impressions": 9000, "clicks": 120, "orders": 9, "sales": 89.91}
        ))
        launcher = AmazonAdsLauncher(AmazonAdsConfig(base_url="https://ads.test"), transport=recorder.transport)

        performance = await launcher.fetch_performance("98765")

        assert recorder.requests[0].url.path == "/sp/campaigns/98765/report"
        assert performance.spend == 42.5
        assert performance.conversions == 9
        assert performance.revenue == pytest.approx(89.91)


class TestFacebookAdsLauncher:

    @pytest.mark.asyncio
    async def test_budget_in_cents(self):
        recorder = RecordingTransport(_json({"id": "2385"}))
        launcher = FacebookAdsLauncher(
            FacebookAdsConfig(base_url="https://graph.test", ad_account_id="111", access_token="tok"),
            transport=recorder.transport,
        )

        outcome = await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(300))

        assert outcome.external_ref == "2385"
        request = recorder.requests[0]
        assert request.url.path == "/act_111/campaigns"
        assert request.url.params["access_token"] == "tok"
        assert recorder.body()["daily_budget"] == 1000

    @pytest.mark.asyncio
    async def test_requires_ad_account(self):
        launcher = FacebookAdsLauncher(FacebookAdsConfig(base_url="https://graph.test"))

        with pytest.raises(ChannelLaunchError):
            await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(300))

    @pytest.mark.asyncio
    async def test_empty_insights(self):
        recorder = RecordingTransport(_json({"data": []}))
        launcher = FacebookAdsLauncher(FacebookAdsConfig(base_url="https://graph.test"), transport=recorder.transport)

        performance = await launcher.fetch_performance("2385")

        assert performance.spend == 0
        assert performance.impressions == 0


class TestBookBubLauncher:

    @pytest.mark.asyncio
    async def test_featured_deal(self):
        recorder = RecordingTransport(_json({"deal_id": "deal-77"}))
        launcher = BookBubLauncher(BookBubConfig(base_url="https://bb.test", api_key="k"), transport=recorder.transport)

        outcome = await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(500))

        assert outcome.external_ref == "deal-77"
        body = recorder.body()
        assert body["deal_price"] == 0.99
        assert body["max_cost"] == 500
        assert recorder.requests[0].headers["X-Api-Key"] == "k"

    @pytest.mark.asyncio
    async def test_missing_deal_id(self):
        recorder = RecordingTransport(_json({}))
        launcher = BookBubLauncher(BookBubConfig(base_url="https://bb.test"), transport=recorder.transport)

        with pytest.raises(ChannelLaunchError):
            await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(500))


class TestEmailSequenceLauncher:

    @pytest.mark.asyncio
    async def test_sequence_created_for_list(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"stats": {"member_count": 420}})
            return httpx.Response(200, json={"id": "auto-1"})

        recorder = RecordingTransport(handler)
        launcher = EmailSequenceLauncher(
            EmailPlatformConfig(base_url="https://mail.test", list_id="L1"), transport=recorder.transport
        )
        context = MarketingTestDataFactory.make_launch_context()

        outcome = await launcher.launch(context, channel_budget(50))

        assert outcome.external_ref == "auto-1"
        assert [r.url.path for r in recorder.requests] == ["/lists/L1", "/automations"]
        assert len(outcome.email_campaigns) == 5
        assert all(e.recipients_count == 420 for e in outcome.email_campaigns)
        assert all(e.campaign_id == context.campaign_id for e in outcome.email_campaigns)

    @pytest.mark.asyncio
    async def test_requires_list(self):
        launcher = EmailSequenceLauncher(EmailPlatformConfig(base_url="https://mail.test"))

        with pytest.raises(ChannelLaunchError):
            await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(50))


class TestSocialSchedulerLauncher:

    @pytest.mark.asyncio
    async def test_launch_day_posts_per_platform(self):
        recorder = RecordingTransport(_json({"schedule_id": "sched-9"}))
        launcher = SocialSchedulerLauncher(
            SocialSchedulerConfig(base_url="https://social.test"), transport=recorder.transport
        )

        outcome = await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(50))

        # launch day plus three review asks on three platforms
        assert len(outcome.social_posts) == 12
        assert {p.platform for p in outcome.social_posts} == {
            SocialPlatform.TWITTER, SocialPlatform.FACEBOOK, SocialPlatform.INSTAGRAM
        }
        assert len(recorder.body()["posts"]) == 12

    @pytest.mark.asyncio
    async def test_pre_launch_adds_countdown(self):
        recorder = RecordingTransport(_json({"schedule_id": "sched-9"}))
        launcher = SocialSchedulerLauncher(
            SocialSchedulerConfig(base_url="https://social.test"),
            transport=recorder.transport,
            platforms=(SocialPlatform.TWITTER,),
        )
        context = MarketingTestDataFactory.make_launch_context(campaign_type=CampaignType.PRE_LAUNCH)

        outcome = await launcher.launch(context, channel_budget(50))

        assert len(outcome.social_posts) == 11

    @pytest.mark.asyncio
    async def test_unreachable_scheduler(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        launcher = SocialSchedulerLauncher(
            SocialSchedulerConfig(base_url="https://social.test"), transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ChannelLaunchError):
            await launcher.launch(MarketingTestDataFactory.make_launch_context(), channel_budget(50))


def test_registry_covers_every_channel():
    registry = build_channel_registry(ChannelConfig())

    assert set(registry) == set(ChannelKind)
    assert all(launcher.channel == kind for kind, launcher in registry.items())


class TestBookMetadataClient:

    @pytest.mark.asyncio
    async def test_parses_project(self):
        recorder = RecordingTransport(_json({"project": {
            "project_id": "proj_1",
            "title": "Tide",
            "author_name": "Sam Rivera",
            "asin": "B0TIDE",
            "keywords": "sea, storm ,",
        }}))
        client = BookMetadataClient(ServiceConfig(book_metadata_url="http://books.test"), transport=recorder.transport)

        book = await client.get_book_context("proj_1")

        assert recorder.requests[0].url.path == "/api/v1/books/projects/proj_1"
        assert book.title == "Tide"
        assert book.asin == "B0TIDE"
        assert book.keywords == ["sea", "storm"]

    @pytest.mark.asyncio
    async def test_missing_project(self):
        recorder = RecordingTransport(_json({"detail": "not found"}, status_code=404))
        client = BookMetadataClient(ServiceConfig(book_metadata_url="http://books.test"), transport=recorder.transport)

        with pytest.raises(BookMetadataError) as exc_info:
            await client.get_book_context("proj_missing")

        assert exc_info.value.details["project_id"] == "proj_missing"

    @pytest.mark.asyncio
    async def test_health_check(self):
        recorder = RecordingTransport(_json({"status": "ok"}))
        client = BookMetadataClient(ServiceConfig(book_metadata_url="http://books.test"), transport=recorder.transport)

        assert await client.health_check() is True
        assert recorder.requests[0].url.path == "/health"

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = BookMetadataClient(
            ServiceConfig(book_metadata_url="http://books.test"), transport=httpx.MockTransport(handler)
        )

        assert await client.health_check() is False


class TestCRMClient:

    @pytest.mark.asyncio
    async def test_sync_campaign(self):
        recorder = RecordingTransport(_json({"ok": True}, status_code=201))
        client = CRMClient(ServiceConfig(crm_url="http://crm.test", crm_api_key="secret"), transport=recorder.transport)
        campaign = MarketingTestDataFactory.make_campaign()

        assert await client.sync_campaign(campaign) is True
        request = recorder.requests[0]
        assert request.url.path == "/api/campaigns"
        assert request.headers["Authorization"] == "Bearer secret"
        assert recorder.body()["campaign_id"] == campaign.campaign_id

    @pytest.mark.asyncio
    async def test_sync_failure_raises(self):
        recorder = RecordingTransport(_json({}, status_code=503))
        client = CRMClient(ServiceConfig(crm_url="http://crm.test"), transport=recorder.transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.sync_campaign(MarketingTestDataFactory.make_campaign())
