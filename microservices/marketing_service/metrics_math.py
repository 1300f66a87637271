"""
Marketing Metrics Math

Pure ratio functions shared by the orchestrator and the performance tracker.

Cost-efficiency ratios (ACOS, ROAS, ROI, CPA) return ``None`` when the
denominator is not positive: the ratio is undefined and callers must not
rank it. Engagement rates (CTR, open rate, click rate, conversion rate)
return ``0.0`` instead, since nothing shown means nothing engaged.
"""

from typing import Optional


def calculate_acos(spend: float, revenue: float) -> Optional[float]:
    """Advertising cost of sale, in percent"""
    if revenue <= 0:
        return None
    return (spend / revenue) * 100


def calculate_roas(revenue: float, spend: float) -> Optional[float]:
    """Return on ad spend, as a ratio"""
    if spend <= 0:
        return None
    return revenue / spend


def calculate_roi(revenue: float, spend: float) -> Optional[float]:
    """Return on investment, in percent"""
    if spend <= 0:
        return None
    return ((revenue - spend) / spend) * 100


def calculate_cpa(spend: float, conversions: float) -> Optional[float]:
    """Cost per acquisition"""
    if conversions <= 0:
        return None
    return spend / conversions


def calculate_ctr(clicks: float, impressions: float) -> float:
    """Click-through rate, in percent"""
    if impressions <= 0:
        return 0.0
    return (clicks / impressions) * 100


def calculate_open_rate(opens: float, recipients: float) -> float:
    """Email open rate, in percent"""
    if recipients <= 0:
        return 0.0
    return (opens / recipients) * 100


def calculate_click_rate(clicks: float, opens: float) -> float:
    """Email click rate relative to opens, in percent"""
    if opens <= 0:
        return 0.0
    return (clicks / opens) * 100


def calculate_conversion_rate(conversions: float, clicks: float) -> float:
    """Conversions per click, in percent"""
    if clicks <= 0:
        return 0.0
    return (conversions / clicks) * 100


def grade_performance(acos: Optional[float]) -> str:
    """Grade an ad campaign by its ACOS"""
    if acos is None:
        return "N/A"
    if acos < 10:
        return "Excellent"
    if acos < 20:
        return "Very Good"
    if acos < 30:
        return "Good"
    if acos < 50:
        return "Fair"
    return "Poor"


def estimate_lifetime_value(
    average_book_price: float,
    purchase_frequency: float,
    customer_lifespan_years: float,
) -> float:
    """Reader lifetime value: price x purchases per year x years"""
    return average_book_price * purchase_frequency * customer_lifespan_years


__all__ = [
    "calculate_acos",
    "calculate_roas",
    "calculate_roi",
    "calculate_cpa",
    "calculate_ctr",
    "calculate_open_rate",
    "calculate_click_rate",
    "calculate_conversion_rate",
    "grade_performance",
    "estimate_lifetime_value",
]
