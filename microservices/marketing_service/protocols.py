"""
Marketing Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple

from .models import (
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
    SaleRecord,
    SocialEngagement,
    SocialPostRecord,
)


# ====================
# Repository Protocol
# ====================


class MarketingRepositoryProtocol(Protocol):
    """Protocol for marketing data repository"""

    async def initialize(self) -> None:
        """Initialize repository connection"""
        ...

    async def close(self) -> None:
        """Close repository connection"""
        ...

    async def health_check(self) -> bool:
        """Check repository health"""
        ...

    # Campaigns
    async def create_campaign(self, campaign: Campaign) -> Campaign:
        """Insert a campaign"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        ...

    async def update_campaign_status(
        self, campaign_id: str, status: CampaignStatus
    ) -> Optional[Campaign]:
        """Set campaign status, returns None when the campaign does not exist"""
        ...

    async def list_campaigns_by_project(
        self, project_id: str, status: Optional[CampaignStatus] = None
    ) -> List[Campaign]:
        """List campaigns of a book project"""
        ...

    # Channel records
    async def create_channel_record(self, record: ChannelRecord) -> ChannelRecord:
        """Insert a channel record"""
        ...

    async def list_channel_records(self, campaign_id: str) -> List[ChannelRecord]:
        """List channel records of a campaign"""
        ...

    async def update_channel_metrics(
        self, channel_record_id: str, performance: ChannelPerformance
    ) -> Optional[ChannelRecord]:
        """Overwrite the counters of a channel record"""
        ...

    # Email sequence
    async def create_email_campaign(self, record: EmailCampaignRecord) -> EmailCampaignRecord:
        """Insert an email sequence record"""
        ...

    async def list_email_campaigns(self, campaign_id: str) -> List[EmailCampaignRecord]:
        """List email sequence records of a campaign"""
        ...

    async def increment_email_counter(self, email_id: str, counter: str) -> bool:
        """Increment opens_count, clicks_count or conversions_count by one"""
        ...

    # Social posts
    async def create_social_post(self, record: SocialPostRecord) -> SocialPostRecord:
        """Insert a social post"""
        ...

    async def list_social_posts(self, campaign_id: str) -> List[SocialPostRecord]:
        """List social posts of a campaign"""
        ...

    async def get_social_post(self, post_id: str) -> Optional[SocialPostRecord]:
        """Get social post by ID"""
        ...

    async def update_social_engagement(
        self, post_id: str, engagement: SocialEngagement
    ) -> bool:
        """Replace the engagement counters of a post"""
        ...

    # Sales
    async def create_sale(self, sale: SaleRecord) -> SaleRecord:
        """Insert a sale"""
        ...

    async def get_sales_summary(self, project_id: str) -> Tuple[int, float]:
        """Return (sale count, total revenue) of a project"""
        ...


# ====================
# Channel Launcher Protocol
# ====================


class ChannelLauncherProtocol(Protocol):
    """One implementation per channel kind, selected through a registry"""

    channel: ChannelKind

    async def launch(self, context: LaunchContext, budget: ChannelBudget) -> ChannelOutcome:
        """Start the campaign on the remote platform"""
        ...

    async def fetch_performance(self, external_ref: str) -> ChannelPerformance:
        """Read current counters from the remote platform"""
        ...


# ====================
# Event Bus Protocol
# ====================


class EventBusProtocol(Protocol):
    """Protocol for event publishing"""

    async def publish(self, subject: str, data: Dict[str, Any]) -> Any:
        """Publish an event payload on a subject"""
        ...


# ====================
# External Client Protocols
# ====================


class BookMetadataClientProtocol(Protocol):
    """Protocol for the book metadata provider"""

    async def get_book_context(self, project_id: str) -> BookContext:
        """Fetch the metadata of a book project"""
        ...

    async def health_check(self) -> bool:
        """Check if the provider is reachable"""
        ...


class CRMClientProtocol(Protocol):
    """Protocol for the CRM"""

    async def sync_campaign(self, campaign: Campaign) -> bool:
        """Push a campaign to the CRM"""
        ...


# ====================
# Custom Exceptions
# ====================


class MarketingServiceError(Exception):
    """Base exception for marketing service errors"""

    def __init__(
        self,
        message: str,
        code: str = "MARKETING_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class CampaignNotFoundError(MarketingServiceError):
    """Raised when campaign is not found"""

    def __init__(self, campaign_id: str):
        super().__init__(
            f"Campaign not found: {campaign_id}",
            code="CAMPAIGN_NOT_FOUND",
            status_code=404,
            details={"campaign_id": campaign_id},
        )
        self.campaign_id = campaign_id


class CampaignLaunchError(MarketingServiceError):
    """Raised when the campaign record cannot be created"""

    def __init__(self, error: str):
        super().__init__(
            "Failed to launch marketing campaign",
            code="CAMPAIGN_LAUNCH_ERROR",
            status_code=500,
            details={"error": error},
        )


class CampaignPauseError(MarketingServiceError):
    """Raised when the pause update fails"""

    def __init__(self, campaign_id: str, error: str):
        super().__init__(
            "Failed to pause campaign",
            code="CAMPAIGN_PAUSE_ERROR",
            status_code=500,
            details={"campaign_id": campaign_id, "error": error},
        )


class CampaignCompleteError(MarketingServiceError):
    """Raised when the complete update fails"""

    def __init__(self, campaign_id: str, error: str):
        super().__init__(
            "Failed to complete campaign",
            code="CAMPAIGN_COMPLETE_ERROR",
            status_code=500,
            details={"campaign_id": campaign_id, "error": error},
        )


class MarketingValidationError(MarketingServiceError):
    """Raised when request validation fails"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else None,
        )
        self.field = field


class ChannelLaunchError(MarketingServiceError):
    """Raised by a launcher when the remote platform rejects a launch"""

    def __init__(self, channel: ChannelKind, error: str):
        super().__init__(
            f"Failed to launch {channel.value}: {error}",
            code="CHANNEL_LAUNCH_ERROR",
            status_code=502,
            details={"channel": channel.value, "error": error},
        )
        self.channel = channel


class BookMetadataError(MarketingServiceError):
    """Raised when book metadata cannot be fetched"""

    def __init__(self, project_id: str, error: str):
        super().__init__(
            f"Failed to fetch book metadata for {project_id}",
            code="BOOK_METADATA_ERROR",
            status_code=502,
            details={"project_id": project_id, "error": error},
        )
        self.project_id = project_id


__all__ = [
    "MarketingRepositoryProtocol",
    "ChannelLauncherProtocol",
    "EventBusProtocol",
    "BookMetadataClientProtocol",
    "CRMClientProtocol",
    "MarketingServiceError",
    "CampaignNotFoundError",
    "CampaignLaunchError",
    "CampaignPauseError",
    "CampaignCompleteError",
    "MarketingValidationError",
    "ChannelLaunchError",
    "BookMetadataError",
]
