"""
Social Scheduler Launcher

Schedules organic launch posts (countdown, launch day, weekly review asks)
on several platforms through the social scheduler.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import httpx

from core.config import SocialSchedulerConfig
from ..models import (
    CampaignType,
    ChannelBudget,
    ChannelKind,
    ChannelOutcome,
    ChannelPerformance,
    LaunchContext,
    SocialPlatform,
    SocialPostRecord,
    SocialPostStatus,
)
from ..protocols import ChannelLaunchError
from .base import PlatformLauncher

logger = logging.getLogger(__name__)

DEFAULT_PLATFORMS = (SocialPlatform.TWITTER, SocialPlatform.FACEBOOK, SocialPlatform.INSTAGRAM)
COUNTDOWN_DAYS = 7
REVIEW_WEEKS = 3

POST_TYPES = {
    SocialPlatform.INSTAGRAM: "image",
    SocialPlatform.TIKTOK: "video",
}


def plan_launch_posts(title: str, launch_date: datetime, now: datetime) -> List[Tuple[datetime, str]]:
    """(schedule time, content) pairs; countdown posts already in the past are dropped"""
    posts = []
    for days_left in range(COUNTDOWN_DAYS, 0, -1):
        when = launch_date - timedelta(days=days_left)
        if when >= now:
            posts.append((when, f"{days_left} days until {title} launches! Are you ready?"))

    posts.append((launch_date, f"{title} is LIVE! Grab your copy now!"))

    for week in range(1, REVIEW_WEEKS + 1):
        posts.append((
            launch_date + timedelta(weeks=week),
            f"Loving {title}? Leave a review and help others discover this story!",
        ))
    return posts


class SocialSchedulerLauncher(PlatformLauncher):
    """Schedules organic social posts"""

    channel = ChannelKind.SOCIAL_ORGANIC

    def __init__(
        self,
        config: SocialSchedulerConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        platforms: Tuple[SocialPlatform, ...] = DEFAULT_PLATFORMS,
    ):
        super().__init__(config.base_url, timeout, transport)
        self.config = config
        self.platforms = platforms

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        now = datetime.now(timezone.utc)
        # Pre-launch campaigns lead into the release with a countdown
        if context.campaign_type == CampaignType.PRE_LAUNCH:
            launch_date = now + timedelta(days=COUNTDOWN_DAYS)
        else:
            launch_date = now

        posts = [
            SocialPostRecord(
                campaign_id=context.campaign_id,
                platform=platform,
                post_type=POST_TYPES.get(platform, "text"),
                content=content,
                media_urls=[context.book.cover_url] if context.book.cover_url else [],
                scheduled_date=when,
                status=SocialPostStatus.SCHEDULED,
            )
            for when, content in plan_launch_posts(context.book.title, launch_date, now)
            for platform in self.platforms
        ]

        payload = {
            "project_id": context.book.project_id,
            "posts": [
                {
                    "post_id": post.post_id,
                    "platform": post.platform.value,
                    "post_type": post.post_type,
                    "content": post.content,
                    "media_urls": post.media_urls,
                    "scheduled_date": post.scheduled_date.isoformat(),
                }
                for post in posts
            ],
        }
        result = await self._request("POST", "/api/v1/schedules", json=payload)
        schedule_ref = str(result.get("schedule_id", ""))
        if not schedule_ref:
            raise ChannelLaunchError(self.channel, "response carried no schedule_id")

        logger.info(f"Scheduled {len(posts)} social posts for {context.campaign_id}")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=schedule_ref,
            social_posts=posts,
            details={"posts_scheduled": len(posts), "launch_date": launch_date.isoformat()},
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        metrics = await self._request("GET", f"/api/v1/schedules/{external_ref}/metrics")
        return ChannelPerformance(
            spend=float(metrics.get("spend", 0)),
            impressions=int(metrics.get("views", 0)),
            clicks=int(metrics.get("clicks", 0)),
            conversions=int(metrics.get("conversions", 0)),
            revenue=float(metrics.get("revenue", 0)),
        )


__all__ = ["SocialSchedulerLauncher", "plan_launch_posts"]
