"""
Unit Tests for Marketing Metrics Math

Undefined cost ratios are None; empty engagement rates are 0.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.marketing_service.metrics_math import (
    calculate_acos,
    calculate_click_rate,
    calculate_conversion_rate,
    calculate_cpa,
    calculate_ctr,
    calculate_open_rate,
    calculate_roas,
    calculate_roi,
    estimate_lifetime_value,
    grade_performance,
)


class TestCostRatios:
    """ROI, ROAS, ACOS and CPA"""

    def test_roi_total_loss(self):
        """No revenue on spend is a -100% return"""
        assert calculate_roi(0, 100) == -100

    def test_roi_positive(self):
        assert calculate_roi(300, 100) == 200

    def test_roi_undefined_without_spend(self):
        """ROI with zero spend is undefined, not zero"""
        assert calculate_roi(50, 0) is None
        assert calculate_roi(0, 0) is None

    def test_roas(self):
        assert calculate_roas(250, 100) == 2.5
        assert calculate_roas(250, 0) is None

    def test_acos(self):
        assert calculate_acos(25, 100) == 25
        assert calculate_acos(50, 0) is None

    def test_cpa(self):
        assert calculate_cpa(100, 4) == 25
        assert calculate_cpa(100, 0) is None


class TestEngagementRates:
    """Rates fall back to 0 on an empty denominator"""

    def test_ctr(self):
        assert calculate_ctr(5, 100) == 5
        assert calculate_ctr(5, 0) == 0

    def test_open_rate(self):
        assert calculate_open_rate(30, 120) == 25
        assert calculate_open_rate(3, 0) == 0

    def test_click_rate_is_relative_to_opens(self):
        assert calculate_click_rate(10, 40) == 25
        assert calculate_click_rate(10, 0) == 0

    def test_conversion_rate(self):
        assert calculate_conversion_rate(2, 50) == 4
        assert calculate_conversion_rate(2, 0) == 0


class TestGradePerformance:
    """ACOS grade bands"""

    @pytest.mark.parametrize("acos,grade", [
        (5, "Excellent"),
        (15, "Very Good"),
        (25, "Good"),
        (40, "Fair"),
        (75, "Poor"),
        (None, "N/A"),
    ])
    def test_grade_bands(self, acos, grade):
        assert grade_performance(acos) == grade

    def test_band_edges_fall_into_higher_band(self):
        assert grade_performance(10) == "Very Good"
        assert grade_performance(50) == "Poor"


def test_lifetime_value():
    """Price times purchases per year times years"""
    assert estimate_lifetime_value(5.0, 4, 3) == 60.0
