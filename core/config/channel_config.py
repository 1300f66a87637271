#!/usr/bin/env python3
"""Marketing channel platform configuration

Endpoints and credentials for each channel the campaign orchestrator can
launch on: two paid ad platforms, the featured-deal platform, the email
sequence platform and the organic social scheduler.
"""
import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AmazonAdsConfig:
    """Sponsored product ads"""
    base_url: str = "https://advertising-api.amazon.com"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    refresh_token: Optional[str] = None
    profile_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'AmazonAdsConfig':
        return cls(
            base_url=os.getenv("AMAZON_ADS_URL", "https://advertising-api.amazon.com"),
            client_id=os.getenv("AMAZON_ADS_CLIENT_ID"),
            client_secret=os.getenv("AMAZON_ADS_CLIENT_SECRET"),
            refresh_token=os.getenv("AMAZON_ADS_REFRESH_TOKEN"),
            profile_id=os.getenv("AMAZON_ADS_PROFILE_ID"),
        )


@dataclass
class FacebookAdsConfig:
    """Social ad platform"""
    base_url: str = "https://graph.facebook.com/v18.0"
    app_id: Optional[str] = None
    app_secret: Optional[str] = None
    access_token: Optional[str] = None
    ad_account_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'FacebookAdsConfig':
        return cls(
            base_url=os.getenv("FACEBOOK_GRAPH_URL", "https://graph.facebook.com/v18.0"),
            app_id=os.getenv("FACEBOOK_APP_ID"),
            app_secret=os.getenv("FACEBOOK_APP_SECRET"),
            access_token=os.getenv("FACEBOOK_ACCESS_TOKEN"),
            ad_account_id=os.getenv("FACEBOOK_AD_ACCOUNT_ID"),
        )


@dataclass
class BookBubConfig:
    """Featured deal platform"""
    base_url: str = "https://partners.bookbub.com/api"
    api_key: Optional[str] = None
    partner_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'BookBubConfig':
        return cls(
            base_url=os.getenv("BOOKBUB_API_URL", "https://partners.bookbub.com/api"),
            api_key=os.getenv("BOOKBUB_API_KEY"),
            partner_id=os.getenv("BOOKBUB_PARTNER_ID"),
        )


@dataclass
class EmailPlatformConfig:
    """Email sequence platform"""
    base_url: str = "https://us1.api.mailchimp.com/3.0"
    api_key: Optional[str] = None
    list_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'EmailPlatformConfig':
        return cls(
            base_url=os.getenv("MAILCHIMP_API_URL", "https://us1.api.mailchimp.com/3.0"),
            api_key=os.getenv("MAILCHIMP_API_KEY"),
            list_id=os.getenv("MAILCHIMP_LIST_ID"),
        )


@dataclass
class SocialSchedulerConfig:
    """Organic social post scheduler"""
    base_url: str = "http://localhost:8270"
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'SocialSchedulerConfig':
        return cls(
            base_url=os.getenv("SOCIAL_SCHEDULER_URL", "http://localhost:8270"),
            api_key=os.getenv("SOCIAL_SCHEDULER_API_KEY"),
        )


@dataclass
class ChannelConfig:
    """Combined channel platform configuration"""
    amazon_ads: AmazonAdsConfig = field(default_factory=AmazonAdsConfig)
    facebook_ads: FacebookAdsConfig = field(default_factory=FacebookAdsConfig)
    bookbub: BookBubConfig = field(default_factory=BookBubConfig)
    email: EmailPlatformConfig = field(default_factory=EmailPlatformConfig)
    social: SocialSchedulerConfig = field(default_factory=SocialSchedulerConfig)

    @classmethod
    def from_env(cls) -> 'ChannelConfig':
        return cls(
            amazon_ads=AmazonAdsConfig.from_env(),
            facebook_ads=FacebookAdsConfig.from_env(),
            bookbub=BookBubConfig.from_env(),
            email=EmailPlatformConfig.from_env(),
            social=SocialSchedulerConfig.from_env(),
        )
