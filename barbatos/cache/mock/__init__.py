"""
Programmable mock cache for tests.

Example usage:
    from barbatos.cache.mock import ANY, MockCache

    cache = MockCache()
    cache.on("get", ANY, "k").returns("first").once()
    cache.on("get", ANY, "k").returns("second")
"""

from barbatos.cache.mock.engine import CONTRACT_SIGNATURES, ExpectationEngine
from barbatos.cache.mock.errors import ExpectationUnmet, UnmatchedCall
from barbatos.cache.mock.expectation import Expectation
from barbatos.cache.mock.matchers import (
    ANY,
    ANY_KEYS,
    Matcher,
    any_of_type,
    keys_matching,
    matched_by,
)
from barbatos.cache.mock.mock_cache import MockCache

__all__ = [
    # Backend
    "MockCache",
    # Engine
    "ExpectationEngine",
    "Expectation",
    "CONTRACT_SIGNATURES",
    # Matchers
    "Matcher",
    "ANY",
    "ANY_KEYS",
    "matched_by",
    "any_of_type",
    "keys_matching",
    # Failures
    "UnmatchedCall",
    "ExpectationUnmet",
]
