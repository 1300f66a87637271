"""
Marketing Channel Launchers

One launcher per channel kind. The orchestrator looks launchers up in a
registry keyed by ChannelKind.
"""

from typing import Dict, Optional

import httpx

from core.config import ChannelConfig
from ..models import ChannelKind
from ..protocols import ChannelLauncherProtocol
from .amazon_ads import AmazonAdsLauncher
from .bookbub import BookBubLauncher
from .email_sequence import EmailSequenceLauncher
from .facebook_ads import FacebookAdsLauncher
from .social_scheduler import SocialSchedulerLauncher

ChannelRegistry = Dict[ChannelKind, ChannelLauncherProtocol]


def build_channel_registry(
    config: ChannelConfig,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChannelRegistry:
    """Construct one launcher per channel kind"""
    return {
        ChannelKind.AMAZON_ADS: AmazonAdsLauncher(config.amazon_ads, timeout, transport),
        ChannelKind.FACEBOOK_ADS: FacebookAdsLauncher(config.facebook_ads, timeout, transport),
        ChannelKind.BOOKBUB: BookBubLauncher(config.bookbub, timeout, transport),
        ChannelKind.EMAIL: EmailSequenceLauncher(config.email, timeout, transport),
        ChannelKind.SOCIAL_ORGANIC: SocialSchedulerLauncher(config.social, timeout, transport),
    }


__all__ = [
    "ChannelRegistry",
    "build_channel_registry",
    "AmazonAdsLauncher",
    "FacebookAdsLauncher",
    "BookBubLauncher",
    "EmailSequenceLauncher",
    "SocialSchedulerLauncher",
]
