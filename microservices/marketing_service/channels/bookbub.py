"""
BookBub Featured Deal Launcher

Submits a discounted featured deal two weeks out. The deal has a flat cost,
so the allocation is not divided per day.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx

from core.config import BookBubConfig
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

DEAL_LEAD_DAYS = 14
DEAL_LENGTH_DAYS = 3
REGULAR_PRICE = 9.99
DEAL_PRICE = 0.99


class BookBubLauncher(PlatformLauncher):
    """Submits featured deals"""

    channel = ChannelKind.BOOKBUB

    def __init__(
        self,
        config: BookBubConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.base_url, timeout, transport)
        self.config = config

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.config.api_key:
            headers["X-Api-Key"] = self.config.api_key
        return headers

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        book = context.book
        deal_start = datetime.now(timezone.utc) + timedelta(days=DEAL_LEAD_DAYS)
        deal_end = deal_start + timedelta(days=DEAL_LENGTH_DAYS)

        payload = {
            "partner_id": self.config.partner_id,
            "title": book.title,
            "author": book.author_name,
            "asin": book.asin,
            "genre": book.genre,
            "regular_price": REGULAR_PRICE,
            "deal_price": DEAL_PRICE,
            "start_date": deal_start.date().isoformat(),
            "end_date": deal_end.date().isoformat(),
            "max_cost": budget.allocated,
        }
        result = await self._request("POST", "/featured-deals", json=payload)
        deal_ref = str(result.get("deal_id", ""))
        if not deal_ref:
            raise ChannelLaunchError(self.channel, "response carried no deal_id")

        logger.info(f"Featured deal {deal_ref} submitted for {context.campaign_id}, starts {deal_start.date()}")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=deal_ref,
            details={
                "deal_start": deal_start.isoformat(),
                "deal_end": deal_end.isoformat(),
                "deal_price": DEAL_PRICE,
            },
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        results = await self._request("GET", f"/featured-deals/{external_ref}/results")
        return ChannelPerformance(
            spend=float(results.get("cost", 0)),
            impressions=int(results.get("subscribers_reached", 0)),
            clicks=int(results.get("clicks", 0)),
            conversions=int(results.get("units_sold", 0)),
            revenue=float(results.get("revenue", 0)),
        )


__all__ = ["BookBubLauncher"]
