"""Pytest configuration and fixtures for the Barbatos test suite."""
import os
import sys
from pathlib import Path

import pytest

# Ensure project modules are importable
sys.path.insert(0, str(Path(__file__).parent.parent))

pytest_plugins = ("barbatos.cache.mock.pytest_plugin",)


# ============================================================================
# REDIS FIXTURES
# ============================================================================

@pytest.fixture
def redis_test_url():
    """URL of a disposable Redis database, or skip the test."""
    url = os.getenv("REDIS_TEST_URL")
    if not url:
        pytest.skip("REDIS_TEST_URL not set; skipping live Redis test")
    return url
