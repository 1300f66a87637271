"""
Email Sequence Launcher

Registers a five-email reader nurture sequence with the email platform and
returns the sequence emails as sub-records of the email channel.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import httpx

from core.config import EmailPlatformConfig
from ..models import (
    BookContext,
    ChannelBudget,
    ChannelKind,
    ChannelOutcome,
    ChannelPerformance,
    EmailCampaignRecord,
    EmailStatus,
    EmailType,
    LaunchContext,
)
from ..protocols import ChannelLaunchError
from .base import PlatformLauncher

logger = logging.getLogger(__name__)

# (days after trigger, email type, subject template)
READER_SEQUENCE: List[Tuple[int, EmailType, str]] = [
    (0, EmailType.WELCOME, "Thank you for reading {title}!"),
    (3, EmailType.NURTURE, "Quick favor? (It helps more than you know)"),
    (7, EmailType.PROMO, "Loved {title}? You'll love this next..."),
    (14, EmailType.NEWSLETTER, "Join my reader community!"),
    (30, EmailType.LAUNCH, "Early access: My next book is coming!"),
]


def build_reader_sequence(campaign_id: str, book: BookContext, recipients: int) -> List[EmailCampaignRecord]:
    """Sequence emails scheduled relative to now"""
    now = datetime.now(timezone.utc)
    return [
        EmailCampaignRecord(
            campaign_id=campaign_id,
            email_type=email_type,
            subject_line=subject.format(title=book.title),
            send_date=now + timedelta(days=delay),
            recipients_count=recipients,
            status=EmailStatus.SCHEDULED,
        )
        for delay, email_type, subject in READER_SEQUENCE
    ]


class EmailSequenceLauncher(PlatformLauncher):
    """Launches reader email sequences"""

    channel = ChannelKind.EMAIL

    def __init__(
        self,
        config: EmailPlatformConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.base_url, timeout, transport)
        self.config = config

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.config.api_key:
            headers["Authorization"] = f"apikey {self.config.api_key}"
        return headers

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        if not self.config.list_id:
            raise ChannelLaunchError(self.channel, "audience list not configured")

        book = context.book
        audience = await self._request("GET", f"/lists/{self.config.list_id}")
        recipients = int(audience.get("stats", {}).get("member_count", 0))

        emails = build_reader_sequence(context.campaign_id, book, recipients)
        payload = {
            "name": f"{book.title} - Reader Nurture",
            "list_id": self.config.list_id,
            "trigger_event": "book_purchased",
            "emails": [
                {
                    "subject_line": email.subject_line,
                    "email_type": email.email_type.value,
                    "send_date": email.send_date.isoformat(),
                }
                for email in emails
            ],
        }
        result = await self._request("POST", "/automations", json=payload)
        sequence_ref = str(result.get("id", ""))
        if not sequence_ref:
            raise ChannelLaunchError(self.channel, "response carried no id")

        logger.info(f"Email sequence {sequence_ref} created for {context.campaign_id} with {len(emails)} emails")
        return ChannelOutcome(
            channel=self.channel,
            external_ref=sequence_ref,
            email_campaigns=emails,
            details={"recipients": recipients},
        )

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        report = await self._request("GET", f"/automations/{external_ref}/report")
        return ChannelPerformance(
            spend=float(report.get("cost", 0)),
            impressions=int(report.get("emails_sent", 0)),
            clicks=int(report.get("clicks", {}).get("clicks_total", 0)),
            conversions=int(report.get("ecommerce", {}).get("total_orders", 0)),
            revenue=float(report.get("ecommerce", {}).get("total_revenue", 0)),
        )


__all__ = ["EmailSequenceLauncher", "READER_SEQUENCE", "build_reader_sequence"]
