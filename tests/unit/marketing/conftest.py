"""
Unit Test Fixtures for Marketing Service

Uses MarketingTestDataFactory from the data contract.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from tests.contracts.marketing.data_contract import MarketingTestDataFactory


@pytest.fixture
def factory():
    """Provide test data factory"""
    return MarketingTestDataFactory()
