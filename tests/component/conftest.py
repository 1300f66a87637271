"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── marketing/   Service components against mocked collaborators
    └── mocks/       Shared mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/marketing -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "test")
os.environ["NATS_ENABLED"] = "false"

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_collection_modifyitems(config, items):
    """Auto-mark everything under tests/component"""
    for item in items:
        if "/tests/component/" in str(item.path):
            item.add_marker(pytest.mark.component)
