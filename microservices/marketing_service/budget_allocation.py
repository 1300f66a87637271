"""
Budget Allocation

Splits a campaign budget across the selected channels. Shares are fixed
fractions of the total, the featured deal is a flat fee, and organic social
takes whatever is left (with a floor). The selected subset is never
renormalized: unselected channels' shares stay unspent.
"""

import logging
from typing import Dict, Iterable

from .models import ChannelBudget, ChannelKind

logger = logging.getLogger(__name__)

AMAZON_ADS_SHARE = 0.50
FACEBOOK_ADS_SHARE = 0.20
EMAIL_SHARE = 0.05
SOCIAL_FLOOR_SHARE = 0.05
BOOKBUB_FEATURED_DEAL_COST = 500.00

# Ad platforms are funded per day over a month
DAYS_PER_BUDGET_PERIOD = 30

BudgetAllocation = Dict[ChannelKind, float]


def allocate_budget(total_budget: float, channels: Iterable[ChannelKind]) -> BudgetAllocation:
    """
    Allocate a total budget across the selected channels.

    Args:
        total_budget: Total campaign budget in dollars
        channels: Selected channels

    Returns:
        Mapping of each selected channel to its dollar allocation
    """
    selected = set(channels)
    allocation: BudgetAllocation = {}
    remaining = total_budget

    if ChannelKind.AMAZON_ADS in selected:
        allocation[ChannelKind.AMAZON_ADS] = total_budget * AMAZON_ADS_SHARE
        remaining -= allocation[ChannelKind.AMAZON_ADS]

    if ChannelKind.FACEBOOK_ADS in selected:
        allocation[ChannelKind.FACEBOOK_ADS] = total_budget * FACEBOOK_ADS_SHARE
        remaining -= allocation[ChannelKind.FACEBOOK_ADS]

    if ChannelKind.BOOKBUB in selected:
        allocation[ChannelKind.BOOKBUB] = BOOKBUB_FEATURED_DEAL_COST
        remaining -= BOOKBUB_FEATURED_DEAL_COST

    if ChannelKind.EMAIL in selected:
        allocation[ChannelKind.EMAIL] = total_budget * EMAIL_SHARE
        remaining -= allocation[ChannelKind.EMAIL]

    if ChannelKind.SOCIAL_ORGANIC in selected:
        allocation[ChannelKind.SOCIAL_ORGANIC] = max(remaining, total_budget * SOCIAL_FLOOR_SHARE)

    logger.debug(f"Allocated budget {total_budget} across {len(allocation)} channels: {allocation}")
    return allocation


def channel_budget(allocated: float) -> ChannelBudget:
    """Budget handed to a launcher, with the daily rate for ad platforms"""
    return ChannelBudget(allocated=allocated, daily=allocated / DAYS_PER_BUDGET_PERIOD)


__all__ = [
    "AMAZON_ADS_SHARE",
    "FACEBOOK_ADS_SHARE",
    "EMAIL_SHARE",
    "SOCIAL_FLOOR_SHARE",
    "BOOKBUB_FEATURED_DEAL_COST",
    "DAYS_PER_BUDGET_PERIOD",
    "BudgetAllocation",
    "allocate_budget",
    "channel_budget",
]
