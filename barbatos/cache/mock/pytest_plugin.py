"""
Pytest plugin providing a mock cache fixture.

Enable it from a conftest.py:

    pytest_plugins = ("barbatos.cache.mock.pytest_plugin",)

The fixture asserts the mock's expectations during teardown, so a test
that leaves a count-bounded expectation unsatisfied is reported as an
error even when its own assertions passed.
"""

import pytest

from barbatos.cache.mock.mock_cache import MockCache


@pytest.fixture
def mock_cache():
    """MockCache whose expectations are asserted at test teardown."""
    cache = MockCache()
    yield cache
    cache.assert_expectations()
