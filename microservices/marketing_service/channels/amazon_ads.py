"""
Amazon Ads Launcher

Sponsored product campaigns funded per day from the channel allocation.
"""

import logging
from typing import Dict, Optional

import httpx

from core.config import AmazonAdsConfig
from ..models import (
    ChannelBudget,
    ChannelKind,
    ChannelOutcome,
    ChannelPerformance,
    LaunchContext,
)
from ..protocols import ChannelLaunchError
from .base import PlatformLauncher

logger = logging.getLogger(__name__)


class AmazonAdsLauncher(PlatformLauncher):
    """Launches sponsored product campaigns"""

    channel = ChannelKind.AMAZON_ADS

    def __init__(
        self,
        config: AmazonAdsConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.base_url, timeout, transport)
        self.config = config

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.config.client_id:
            headers["Amazon-Advertising-API-ClientId"] = self.config.client_id
        if self.config.profile_id:
            headers["Amazon-Advertising-API-Scope"] = self.config.profile_id
        if self.config.refresh_token:
            headers["Authorization"] = f"Bearer {self.config.refresh_token}"
        return headers

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        book = context.book
        if not book.asin:
            raise ChannelLaunchError(self.channel, f"project {book.project_id} has no ASIN")

        payload = {
            "name": f"{book.title} - {context.campaign_type.value}",
            "campaignType": "sponsoredProducts",
            "targetingType": "auto",
            "state": "enabled",
            "dailyBudget": round(budget.daily, 2),
            "endDate": context.end_date.strftime("%Y%m%d") if context.end_date else None,
            "asin": book.asin,
            "keywords": book.keywords,
        }
        result = await self._request("POST", "/sp/campaigns", json=payload)
        campaign_ref = str(result.get("campaignId", ""))
        if not campaign_ref:
            raise ChannelLaunchError(self.channel, "response carried no campaignId")

        logger.info(f"Amazon ads campaign {campaign_ref} created for {context.campaign_id}, daily {budget.daily:.2f}")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=campaign_ref,
            details={"daily_budget": budget.daily},
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        report = await self._request("GET", f"/sp/campaigns/{external_ref}/report")
        return ChannelPerformance(
            spend=float(report.get("cost", 0)),
            impressions=int(report.get("impressions", 0)),
            clicks=int(report.get("clicks", 0)),
            conversions=int(report.get("orders", 0)),
            revenue=float(report.get("sales", 0)),
        )


__all__ = ["AmazonAdsLauncher"]
