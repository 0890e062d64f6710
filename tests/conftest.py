"""
Pytest configuration for AutoPulse tests.

Registers custom markers and provides shared fixtures.
"""

from datetime import datetime

import pytest


FIXED_NOW = datetime(2026, 3, 14, 9, 30, 0)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def fixed_clock():
    """Fixture providing a clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW
