"""
Unit Test Layer Configuration

Pure functions, types and schemas; no I/O.

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit/marketing -v       # Marketing service only
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_collection_modifyitems(config, items):
    """Mark everything collected under tests/unit as unit"""
    for item in items:
        if "/tests/unit/" in str(item.path):
            item.add_marker(pytest.mark.unit)
