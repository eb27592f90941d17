"""
Tests for MockCache.

Tests cover:
- Every contract operation routed through expectations
- Result coercion and error returns
- Unmatched call propagation
- Scoped lifecycle (context managers and pytest fixture)
"""

import asyncio
from datetime import timedelta

import pytest

from barbatos.cache.errors import BackendError, NotFound
from barbatos.cache.interface import Cache
from barbatos.cache.mock import (
    ANY,
    ANY_KEYS,
    ExpectationUnmet,
    MockCache,
    UnmatchedCall,
    any_of_type,
    keys_matching,
)
from barbatos.context import BACKGROUND, Context


# ============================================================================
# CONTRACT OPERATION TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_is_a_cache():
    assert isinstance(MockCache(), Cache)


@pytest.mark.asyncio
async def test_is_connected():
    cache = MockCache()
    cache.on("is_connected", ANY).returns(True).once()
    cache.on("is_connected", ANY).returns(False)

    assert await cache.is_connected() is True
    assert await cache.is_connected() is False
    cache.assert_expectations()


@pytest.mark.asyncio
async def test_get_returns_value():
    cache = MockCache()
    cache.on("get", ANY, "user:1").returns("john")

    assert await cache.get("user:1") == "john"


@pytest.mark.asyncio
async def test_get_not_found():
    """Test error returns are raised to the caller."""
    cache = MockCache()
    cache.on("get", ANY, "missing").returns("", NotFound("missing"))

    with pytest.raises(NotFound):
        await cache.get("missing")


@pytest.mark.asyncio
async def test_get_backend_error_via_raises():
    cache = MockCache()
    cache.on("get", ANY, "k").raises(BackendError("connection reset", operation="get"))

    with pytest.raises(BackendError, match="connection reset"):
        await cache.get("k")


@pytest.mark.asyncio
async def test_exception_as_single_return_value_is_raised():
    cache = MockCache()
    cache.on("set", ANY, "k", "v").returns(BackendError("read only", operation="set"))

    with pytest.raises(BackendError):
        await cache.set("k", "v")


@pytest.mark.asyncio
async def test_get_requires_string_result():
    cache = MockCache()
    cache.on("get", ANY, "k").returns(42)

    with pytest.raises(TypeError, match="must return a str"):
        await cache.get("k")


@pytest.mark.asyncio
async def test_set_and_set_with_expiration_are_distinct_calls():
    cache = MockCache()
    cache.on("set", ANY, "k", {"a": 1}).returns(None).once()
    cache.on("set_with_expiration", ANY, "k", "v", timedelta(seconds=5)).returns(None).once()

    await cache.set("k", {"a": 1})
    await cache.set_with_expiration("k", "v", timedelta(seconds=5))

    cache.assert_expectations()


@pytest.mark.asyncio
async def test_set_with_expiration_type_matcher():
    cache = MockCache()
    cache.on("set_with_expiration", ANY, "s", ANY, any_of_type(int, float)).returns(None)

    await cache.set_with_expiration("s", "data", 0.1)
    with pytest.raises(UnmatchedCall):
        await cache.set_with_expiration("s", "data", timedelta(seconds=1))


@pytest.mark.asyncio
async def test_delete_flattens_keys():
    """Test delete passes keys as positional arguments after ctx."""
    cache = MockCache()
    cache.on("delete", ANY, "a", "b").returns(None).once()

    await cache.delete("a", "b")

    cache.assert_expectations()


@pytest.mark.asyncio
async def test_delete_any_subset():
    cache = MockCache()
    cache.on("delete", ANY, keys_matching(lambda keys: set(keys) <= {"a", "b", "c"})).returns(None)

    await cache.delete("c", "a")
    await cache.delete("b")
    with pytest.raises(UnmatchedCall):
        await cache.delete("a", "z")


@pytest.mark.asyncio
async def test_delete_with_pattern():
    cache = MockCache()
    cache.on("delete_with_pattern", ANY, "key*").returns(None).once()

    await cache.delete_with_pattern("key*")

    cache.assert_expectations()


@pytest.mark.asyncio
async def test_keys_returns_list():
    cache = MockCache()
    cache.on("keys", ANY, "a*").returns(("a1", "a2"))

    assert await cache.keys("a*") == ["a1", "a2"]


@pytest.mark.asyncio
async def test_keys_none_becomes_empty_list():
    cache = MockCache()
    cache.on("keys", ANY, "none*").returns(None)

    assert await cache.keys("none*") == []


@pytest.mark.asyncio
async def test_close_takes_no_context():
    cache = MockCache()
    cache.on("close").returns(None).twice()

    await cache.close()
    await cache.close()

    cache.assert_expectations()


@pytest.mark.asyncio
async def test_context_passed_through_for_matching():
    """Test the exact ctx object given by the caller reaches the matchers."""
    ctx = Context.with_timeout(10)
    cache = MockCache()
    cache.on("get", ctx, "k").returns("scoped")
    cache.on("get", BACKGROUND, "k").returns("background")

    assert await cache.get("k", ctx=ctx) == "scoped"
    assert await cache.get("k") == "background"


@pytest.mark.asyncio
async def test_cancelled_context_is_ignored():
    ctx = Context()
    ctx.cancel()
    cache = MockCache()
    cache.on("get", ANY, "k").returns("v")

    assert await cache.get("k", ctx=ctx) == "v"


@pytest.mark.asyncio
async def test_dynamic_echo_of_key():
    cache = MockCache()
    cache.on("get", ANY, ANY).returns_using(lambda ctx, key: key.upper())

    assert await cache.get("abc") == "ABC"


# ============================================================================
# UNMATCHED CALL TESTS
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation",
    [
        lambda c: c.is_connected(),
        lambda c: c.get("k"),
        lambda c: c.set("k", "v"),
        lambda c: c.set_with_expiration("k", "v", 1),
        lambda c: c.delete("k"),
        lambda c: c.delete_with_pattern("k*"),
        lambda c: c.keys("k*"),
        lambda c: c.close(),
    ],
)
async def test_every_operation_raises_unmatched(operation):
    """Test no operation falls back to a default value."""
    cache = MockCache()

    with pytest.raises(UnmatchedCall):
        await operation(cache)


@pytest.mark.asyncio
async def test_unmatched_not_swallowed_by_backend_error_handler():
    """Test UnmatchedCall escapes code that handles BackendError."""
    cache = MockCache()

    async def load(key):
        try:
            return await cache.get(key)
        except (NotFound, BackendError):
            return None

    with pytest.raises(UnmatchedCall):
        await load("k")


# ============================================================================
# LIFECYCLE TESTS
# ============================================================================


def test_context_manager_asserts_on_exit():
    with pytest.raises(ExpectationUnmet):
        with MockCache() as cache:
            cache.on("get", ANY, "k").returns("v").once()


def test_context_manager_passes_when_met():
    with MockCache() as cache:
        cache.on("get", ANY, "k").returns("v").once()
        assert asyncio.run(cache.get("k")) == "v"


def test_context_manager_keeps_original_failure():
    """Test an in-flight error is not replaced by ExpectationUnmet."""
    with pytest.raises(RuntimeError, match="boom"):
        with MockCache() as cache:
            cache.on("get", ANY, "k").returns("v").once()
            raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_async_context_manager_asserts_on_exit():
    with pytest.raises(ExpectationUnmet):
        async with MockCache() as cache:
            cache.on("keys", ANY, "*").returns([]).twice()
            await cache.keys("*")


def test_assert_number_of_calls():
    cache = MockCache()
    cache.on("delete", ANY, ANY_KEYS).returns(None)

    asyncio.run(cache.delete("a"))
    asyncio.run(cache.delete("b", "c"))

    cache.assert_number_of_calls("delete", 2)
    with pytest.raises(AssertionError):
        cache.assert_number_of_calls("delete", 3)


@pytest.mark.asyncio
async def test_mock_cache_fixture(mock_cache):
    """Test the pytest fixture yields a fresh MockCache."""
    mock_cache.on("get", ANY, "k").returns("v").once()

    assert await mock_cache.get("k") == "v"


def test_registration_rejects_bad_arity():
    cache = MockCache()

    with pytest.raises(TypeError):
        cache.on("get", "k")
