"""
Marketing Service Data Models

Canonical data structures for the marketing service: persisted records,
launch-time value objects, analytics results and API request/response
models. The test data contract re-exports these alongside its factories.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC so they compare with aware ones"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# ENUMS
# =============================================================================

class CampaignType(str, Enum):
    """Campaign purpose in the book's lifecycle"""
    PRE_LAUNCH = "pre_launch"
    LAUNCH = "launch"
    ONGOING = "ongoing"
    PROMO = "promo"


class CampaignStatus(str, Enum):
    """Campaign lifecycle status"""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class ChannelKind(str, Enum):
    """Marketing channels a campaign can launch on"""
    AMAZON_ADS = "amazon_ads"
    FACEBOOK_ADS = "facebook_ads"
    BOOKBUB = "bookbub"
    EMAIL = "email"
    SOCIAL_ORGANIC = "social_organic"


class SaleFormat(str, Enum):
    """Book format sold"""
    EBOOK = "ebook"
    PRINT = "print"
    AUDIOBOOK = "audiobook"


class SaleSource(str, Enum):
    """Attribution of a sale"""
    ORGANIC = "organic"
    AD = "ad"
    PROMO = "promo"
    REFERRAL = "referral"


class SalePlatform(str, Enum):
    """Retail platform a sale happened on"""
    AMAZON = "amazon"
    APPLE = "apple"
    KOBO = "kobo"
    AUDIBLE = "audible"
    DIRECT = "direct"


class EmailType(str, Enum):
    """Email in a launch sequence"""
    WELCOME = "welcome"
    NURTURE = "nurture"
    LAUNCH = "launch"
    PROMO = "promo"
    NEWSLETTER = "newsletter"


class EmailStatus(str, Enum):
    """Email send status"""
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"


class EmailEvent(str, Enum):
    """Tracked email engagement events"""
    OPEN = "open"
    CLICK = "click"
    CONVERSION = "conversion"


class SocialPlatform(str, Enum):
    """Organic social platforms"""
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    TIKTOK = "tiktok"
    FACEBOOK = "facebook"


class SocialPostStatus(str, Enum):
    """Social post lifecycle status"""
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    POSTED = "posted"
    FAILED = "failed"


# =============================================================================
# BASE MODELS
# =============================================================================

class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = {
        "from_attributes": True,
    }


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

class Campaign(BaseContract):
    """A coordinated marketing push for one book project"""
    campaign_id: str = Field(default_factory=lambda: f"mcp_{uuid4().hex[:16]}")
    project_id: str = Field(..., min_length=1, description="Book project being marketed")
    campaign_name: str = Field(..., min_length=1, max_length=255)
    campaign_type: CampaignType
    start_date: datetime = Field(default_factory=_now)
    end_date: Optional[datetime] = None
    budget: float = Field(..., ge=0, description="Total budget in dollars")
    status: CampaignStatus = CampaignStatus.DRAFT
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def normalize_timezone(cls, v):
        return _as_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ChannelRecord(BaseContract):
    """Per-channel state of a launched campaign

    Counters are running tallies and never decrease.
    """
    channel_record_id: str = Field(default_factory=lambda: f"mch_{uuid4().hex[:16]}")
    campaign_id: str
    channel: ChannelKind
    budget_allocation: float = Field(..., ge=0)
    spend: float = Field(default=0.0, ge=0)
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    revenue: float = Field(default=0.0, ge=0)
    external_ref: Optional[str] = Field(None, description="Remote platform campaign id")
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class SaleRecord(BaseContract):
    """A single book sale"""
    sale_id: str = Field(default_factory=lambda: f"sal_{uuid4().hex[:16]}")
    project_id: str = Field(..., min_length=1)
    platform: SalePlatform
    sale_date: datetime = Field(default_factory=_now)
    format: SaleFormat
    units_sold: int = Field(default=1, ge=1)
    revenue: float = Field(..., ge=0)
    royalty: float = Field(..., ge=0)
    source: SaleSource = SaleSource.ORGANIC


class EmailCampaignRecord(BaseContract):
    """One email of the email channel's sequence"""
    email_id: str = Field(default_factory=lambda: f"eml_{uuid4().hex[:16]}")
    campaign_id: str
    email_type: EmailType
    subject_line: str = Field(..., min_length=1, max_length=500)
    send_date: Optional[datetime] = None
    recipients_count: int = Field(default=0, ge=0)
    opens_count: int = Field(default=0, ge=0)
    clicks_count: int = Field(default=0, ge=0)
    conversions_count: int = Field(default=0, ge=0)
    status: EmailStatus = EmailStatus.SCHEDULED


class SocialEngagement(BaseContract):
    """Engagement counters reported for a social post"""
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)


class SocialPostRecord(BaseContract):
    """One scheduled organic social post"""
    post_id: str = Field(default_factory=lambda: f"spt_{uuid4().hex[:16]}")
    campaign_id: str
    platform: SocialPlatform
    post_type: str = "text"
    content: str = ""
    media_urls: List[str] = Field(default_factory=list)
    scheduled_date: Optional[datetime] = None
    posted_date: Optional[datetime] = None
    status: SocialPostStatus = SocialPostStatus.SCHEDULED
    engagement: SocialEngagement = Field(default_factory=SocialEngagement)


# =============================================================================
# LAUNCH VALUE OBJECTS
# =============================================================================

class BookContext(BaseContract):
    """Book metadata needed by channel launchers"""
    project_id: str
    title: str
    author_name: Optional[str] = None
    genre: Optional[str] = None
    asin: Optional[str] = None
    amazon_url: Optional[str] = None
    cover_url: Optional[str] = None
    description: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)


class LaunchContext(BaseContract):
    """Everything a launcher knows about the campaign it launches for"""
    campaign_id: str
    campaign_type: CampaignType
    end_date: Optional[datetime] = None
    book: BookContext


class ChannelBudget(BaseContract):
    """Budget handed to one channel launcher"""
    allocated: float = Field(..., ge=0)
    daily: float = Field(..., ge=0)


class ChannelOutcome(BaseContract):
    """What a successful launcher returns"""
    channel: ChannelKind
    external_ref: Optional[str] = None
    email_campaigns: List[EmailCampaignRecord] = Field(default_factory=list)
    social_posts: List[SocialPostRecord] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class ChannelPerformance(BaseContract):
    """Counters reported by a remote platform"""
    spend: float = Field(default=0.0, ge=0)
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    revenue: float = Field(default=0.0, ge=0)


# =============================================================================
# ANALYTICS MODELS
# =============================================================================

class EmailMetrics(BaseContract):
    """Aggregated email sequence metrics"""
    sent: int = 0
    opens: int = 0
    clicks: int = 0
    conversions: int = 0
    open_rate: float = 0.0
    click_rate: float = 0.0


class SocialMetrics(BaseContract):
    """Aggregated organic social metrics"""
    posts: int = 0
    impressions: int = 0
    engagement: int = 0
    clicks: int = 0
    conversions: int = 0


class ChannelMetrics(BaseContract):
    """Normalized metrics of one channel within a campaign"""
    spend: float = 0.0
    revenue: float = 0.0
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    roi: Optional[float] = None
    email: Optional[EmailMetrics] = None
    social: Optional[SocialMetrics] = None


class CampaignAnalytics(BaseContract):
    """Rollup of a campaign's channel records, computed on demand"""
    campaign_id: str
    spend: float = 0.0
    revenue: float = 0.0
    sales_count: int = 0
    roi: Optional[float] = None
    acos: Optional[float] = None
    roas: Optional[float] = None
    cpa: Optional[float] = None
    channels: Dict[ChannelKind, ChannelMetrics] = Field(default_factory=dict)


class DateRange(BaseContract):
    """Inclusive reporting window"""
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="after")
    @classmethod
    def normalize_timezone(cls, v):
        return _as_utc(v)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class ReportSummary(BaseContract):
    """Headline numbers of a marketing report"""
    roi: Optional[float] = None
    total_sales: int = 0
    best_performing_channel: str = "N/A"


class MarketingReport(BaseContract):
    """Report descriptor; rendering the document happens elsewhere"""
    report_file: str
    generated_at: datetime = Field(default_factory=_now)
    date_range: DateRange
    summary: ReportSummary


class DashboardData(BaseContract):
    """Author-facing totals for one book project"""
    project_id: str
    total_sales: int = 0
    total_revenue: float = 0.0
    total_spend: float = 0.0
    roi: Optional[float] = None
    active_campaigns: int = 0
    top_performing_campaign: Optional[str] = None


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class CampaignLaunchRequest(BaseContract):
    """Request to launch a campaign"""
    project_id: str = Field(..., min_length=1)
    campaign_type: CampaignType
    budget: float = Field(..., gt=0, description="Total budget in dollars")
    channels: List[ChannelKind] = Field(..., min_length=1)
    duration_days: int = Field(default=30, ge=1, le=365)

    @field_validator("channels")
    @classmethod
    def validate_unique_channels(cls, v: List[ChannelKind]) -> List[ChannelKind]:
        if len(set(v)) != len(v):
            raise ValueError("channels must not contain duplicates")
        return v


class TrackSaleRequest(BaseContract):
    """Request to record a sale"""
    project_id: str = Field(..., min_length=1)
    platform: SalePlatform
    format: SaleFormat
    revenue: float = Field(..., ge=0)
    units_sold: int = Field(default=1, ge=1)
    source: SaleSource = SaleSource.ORGANIC


class ReportRequest(BaseContract):
    """Request to generate a campaign report"""
    campaign_id: str = Field(..., min_length=1)
    date_range: DateRange


class EmailEventRequest(BaseContract):
    """Email engagement event"""
    email_id: str = Field(..., min_length=1)
    event: EmailEvent


class SocialEngagementRequest(BaseContract):
    """Engagement counters for a social post"""
    post_id: str = Field(..., min_length=1)
    metrics: SocialEngagement


class CampaignResponse(BaseContract):
    """Campaign with its launched channels"""
    campaign: Campaign
    channels: List[ChannelRecord] = Field(default_factory=list)


class ChannelRecordListResponse(BaseContract):
    """Channel records of a campaign"""
    campaign_id: str
    channels: List[ChannelRecord] = Field(default_factory=list)
    total: int = 0


class SaleResponse(BaseContract):
    """Result of sale tracking"""
    tracked: bool
    sale: Optional[SaleRecord] = None


# ====================
# Additional Service Models
# ====================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response"""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    details: Dict[str, str] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Liveness check response"""
    alive: bool
    uptime_seconds: float


class ErrorDetail(BaseModel):
    """Machine-readable error body"""
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: ErrorDetail


__all__ = [
    # Enums
    "CampaignType",
    "CampaignStatus",
    "ChannelKind",
    "SaleFormat",
    "SaleSource",
    "SalePlatform",
    "EmailType",
    "EmailStatus",
    "EmailEvent",
    "SocialPlatform",
    "SocialPostStatus",
    # Records
    "BaseContract",
    "Campaign",
    "ChannelRecord",
    "SaleRecord",
    "EmailCampaignRecord",
    "SocialEngagement",
    "SocialPostRecord",
    # Launch
    "BookContext",
    "LaunchContext",
    "ChannelBudget",
    "ChannelOutcome",
    "ChannelPerformance",
    # Analytics
    "EmailMetrics",
    "SocialMetrics",
    "ChannelMetrics",
    "CampaignAnalytics",
    "DateRange",
    "ReportSummary",
    "MarketingReport",
    "DashboardData",
    # Request/Response
    "CampaignLaunchRequest",
    "TrackSaleRequest",
    "ReportRequest",
    "EmailEventRequest",
    "SocialEngagementRequest",
    "CampaignResponse",
    "ChannelRecordListResponse",
    "SaleResponse",
    # Service Models
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
    "ErrorDetail",
    "ErrorResponse",
]
