#!/usr/bin/env python3
"""Modular configuration system for the marketing platform

Configuration hierarchy:
- infra_config: Infrastructure services (PostgreSQL, NATS)
- service_config: Peer services (book metadata provider, CRM)
- channel_config: Marketing channel platforms (ads, featured deals, email, social)
- logging_config: Logging configuration
- marketing_config: Main configuration combining all of the above
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .infra_config import InfraConfig
from .service_config import ServiceConfig
from .channel_config import (
    ChannelConfig,
    AmazonAdsConfig,
    FacebookAdsConfig,
    BookBubConfig,
    EmailPlatformConfig,
    SocialSchedulerConfig,
)
from .marketing_config import MarketingConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = MarketingConfig.from_env()

def get_settings() -> MarketingConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> MarketingConfig:
    """Reload settings from environment"""
    global settings
    settings = MarketingConfig.from_env()
    return settings

__all__ = [
    # Main config
    'MarketingConfig',
    'get_settings',
    'reload_settings',
    'settings',
    # Sub-configs
    'LoggingConfig',
    'InfraConfig',
    'ServiceConfig',
    # Channel platform configs
    'ChannelConfig',
    'AmazonAdsConfig',
    'FacebookAdsConfig',
    'BookBubConfig',
    'EmailPlatformConfig',
    'SocialSchedulerConfig',
]
