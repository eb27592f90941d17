"""
Mock Cache Implementation

Programmable in-memory cache for tests. Every operation is recorded as a
call (method name, deadline context, arguments) and answered by the first
matching expectation. Nothing is stored; behavior comes entirely from the
expectations the test registers.

Example:
    with MockCache() as cache:
        cache.on("get", ANY, "user:1").returns("john").once()
        cache.on("get", ANY, "user:2").raises(NotFound("user:2"))

        assert await service.load_name(cache, "user:1") == "john"
    # leaving the block asserts that get("user:1") happened exactly once
"""

from typing import Any, List

from barbatos.cache.interface import Cache, Expiration
from barbatos.cache.mock.engine import ExpectationEngine
from barbatos.cache.mock.expectation import Expectation
from barbatos.context import BACKGROUND, Context
from barbatos.logging_config import get_logger

logger = get_logger(__name__)


class MockCache(Cache):
    """Cache whose behavior is programmed with expectations.

    Calls not covered by any expectation raise UnmatchedCall immediately.
    The deadline context is accepted but has no effect; it is passed to the
    matchers as the first argument of every call except close().
    """

    def __init__(self):
        self._engine = ExpectationEngine()

    # -------------------------------------------------------------------------
    # Expectation registration surface
    # -------------------------------------------------------------------------

    def on(self, method: str, *matchers: Any) -> Expectation:
        """Register an expectation for `method`.

        Args:
            method: Contract method name ("get", "set", "delete", ...)
            *matchers: One per call argument, ctx first. Plain values match
                       by equality; see barbatos.cache.mock.matchers.

        Raises:
            TypeError: If the method is unknown or the matcher count is wrong
        """
        return self._engine.on(method, *matchers)

    def assert_expectations(self) -> None:
        """Raise ExpectationUnmet listing every count-bounded rule not satisfied."""
        self._engine.assert_expectations()

    def unmet_expectations(self) -> List[str]:
        return self._engine.unmet_expectations()

    def assert_number_of_calls(self, method: str, expected: int) -> None:
        actual = self._engine.number_of_calls(method)
        assert actual == expected, (
            f"mock: expected {method} to be called {expected} time(s), got {actual}"
        )

    # -------------------------------------------------------------------------
    # Scoped lifecycle
    # -------------------------------------------------------------------------

    def __enter__(self) -> "MockCache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self._finish(exc_type)
        return False

    async def __aenter__(self) -> "MockCache":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self._finish(exc_type)
        return False

    def _finish(self, exc_type) -> None:
        if exc_type is None:
            self.assert_expectations()
            return

        # Keep the original failure as the reported one
        unmet = self.unmet_expectations()
        if unmet:
            logger.error("mock_expectations_unmet", violations=unmet,
                         error_type=exc_type.__name__)

    # -------------------------------------------------------------------------
    # Cache contract
    # -------------------------------------------------------------------------

    def _called(self, method: str, *args: Any) -> Any:
        outcome = self._engine.called(method, *args)
        if len(outcome) > 2:
            raise TypeError(f"mock: {method} expectation returned {len(outcome)} values")

        result = outcome[0] if outcome else None
        error = outcome[1] if len(outcome) > 1 else None
        if error is None and isinstance(result, BaseException):
            result, error = None, result

        if error is not None:
            if not isinstance(error, BaseException):
                raise TypeError(f"mock: {method} expectation returned non-exception error {error!r}")
            raise error
        return result

    async def is_connected(self, *, ctx: Context = BACKGROUND) -> bool:
        return bool(self._called("is_connected", ctx))

    async def get(self, key: str, *, ctx: Context = BACKGROUND) -> str:
        value = self._called("get", ctx, key)
        if not isinstance(value, str):
            raise TypeError(f"mock: get expectation must return a str, got {value!r}")
        return value

    async def set(self, key: str, value: Any, *, ctx: Context = BACKGROUND) -> None:
        self._called("set", ctx, key, value)

    async def set_with_expiration(
        self,
        key: str,
        value: Any,
        expiration: Expiration,
        *,
        ctx: Context = BACKGROUND
    ) -> None:
        self._called("set_with_expiration", ctx, key, value, expiration)

    async def delete(self, *keys: str, ctx: Context = BACKGROUND) -> None:
        self._called("delete", ctx, *keys)

    async def delete_with_pattern(self, pattern: str, *, ctx: Context = BACKGROUND) -> None:
        self._called("delete_with_pattern", ctx, pattern)

    async def keys(self, pattern: str, *, ctx: Context = BACKGROUND) -> List[str]:
        keys = self._called("keys", ctx, pattern)
        if keys is None:
            return []
        return list(keys)

    async def close(self) -> None:
        self._called("close")
