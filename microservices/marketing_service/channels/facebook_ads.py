"""
Facebook Ads Launcher

Sales-objective campaigns on the social ad platform. The Graph API takes
budgets in cents.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.config import FacebookAdsConfig
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


class FacebookAdsLauncher(PlatformLauncher):
    """Launches campaigns on the Facebook/Instagram ad network"""

    channel = ChannelKind.FACEBOOK_ADS

    def __init__(
        self,
        config: FacebookAdsConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.base_url, timeout, transport)
        self.config = config

    def _auth_params(self) -> Dict[str, Any]:
        return {"access_token": self.config.access_token} if self.config.access_token else {}

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        if not self.config.ad_account_id:
            raise ChannelLaunchError(self.channel, "ad account not configured")

        book = context.book
        payload = {
            "name": f"{book.title} - {context.campaign_type.value}",
            "objective": "OUTCOME_SALES",
            "status": "ACTIVE",
            "daily_budget": int(round(budget.daily * 100)),
            "special_ad_categories": [],
        }
        result = await self._request(
            "POST",
            f"/act_{self.config.ad_account_id}/campaigns",
            json=payload,
            params=self._auth_params(),
        )
        campaign_ref = str(result.get("id", ""))
        if not campaign_ref:
            raise ChannelLaunchError(self.channel, "response carried no id")

        logger.info(f"Facebook ads campaign {campaign_ref} created for {context.campaign_id}")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=campaign_ref,
            details={"daily_budget_cents": payload["daily_budget"]},
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        params = {
            "fields": "impressions,clicks,spend,conversions,purchase_value",
            **self._auth_params(),
        }
        result = await self._request("GET", f"/{external_ref}/insights", params=params)
        rows = result.get("data") or [{}]
        insights = rows[0]
        return ChannelPerformance(
            spend=float(insights.get("spend", 0)),
            impressions=int(insights.get("impressions", 0)),
            clicks=int(insights.get("clicks", 0)),
            conversions=int(insights.get("conversions", 0)),
            revenue=float(insights.get("purchase_value", 0)),
        )


__all__ = ["FacebookAdsLauncher"]
