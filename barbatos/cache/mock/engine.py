"""
Expectation Engine

Matches actual calls against programmed expectations, counts matches, and
verifies count-bounded expectations at teardown.

Matching, selection, counting and result computation for one call all
happen under a single lock, so concurrent callers can never consume a
count-bounded rule more often than allowed.
"""

import threading
from typing import Any, Dict, List, Tuple

from barbatos.cache.metrics import MOCK_UNMATCHED_CALLS_TOTAL
from barbatos.cache.mock.errors import ExpectationUnmet, UnmatchedCall, format_call
from barbatos.cache.mock.expectation import Expectation
from barbatos.cache.mock.matchers import VariadicMatcher, as_matcher
from barbatos.logging_config import get_logger

logger = get_logger(__name__)

# Positional arguments of each contract operation as recorded in a call,
# deadline context first. "*keys" marks the variadic tail of delete.
CONTRACT_SIGNATURES: Dict[str, Tuple[str, ...]] = {
    "is_connected": ("ctx",),
    "get": ("ctx", "key"),
    "set": ("ctx", "key", "value"),
    "set_with_expiration": ("ctx", "key", "value", "expiration"),
    "delete": ("ctx", "*keys"),
    "delete_with_pattern": ("ctx", "pattern"),
    "keys": ("ctx", "pattern"),
    "close": (),
}


def _check_arity(method: str, matchers: Tuple[Any, ...]) -> None:
    """Reject matcher lists that can never match a call of `method`.

    Raises:
        TypeError: On an unknown method or a wrong number of matchers
    """
    if method not in CONTRACT_SIGNATURES:
        known = ", ".join(sorted(CONTRACT_SIGNATURES))
        raise TypeError(f"unknown cache method {method!r}; expected one of: {known}")

    signature = CONTRACT_SIGNATURES[method]
    for position, matcher in enumerate(matchers[:-1]):
        if isinstance(matcher, VariadicMatcher):
            raise TypeError(f"{method}: variadic matcher must be last, found at position {position}")

    variadic = bool(signature) and signature[-1].startswith("*")
    if variadic:
        # ctx plus at least one key position or a variadic tail
        if len(matchers) < len(signature):
            raise TypeError(
                f"{method} takes at least {len(signature)} matchers "
                f"({', '.join(signature)}), got {len(matchers)}"
            )
        return

    if matchers and isinstance(matchers[-1], VariadicMatcher):
        raise TypeError(f"{method} is not variadic; keys_matching() is only valid for delete")
    if len(matchers) != len(signature):
        raise TypeError(
            f"{method} takes {len(signature)} matchers "
            f"({', '.join(signature) or 'no arguments'}), got {len(matchers)}"
        )


class ExpectationEngine:
    """Ordered set of expectations for one mock cache instance."""

    def __init__(self):
        # Re-entrant so a returns_using() callback may call the mock again
        self._lock = threading.RLock()
        self._expectations: List[Expectation] = []

    def on(self, method: str, *matchers: Any) -> Expectation:
        """Register an expectation; plain values become exact matchers."""
        wrapped = tuple(as_matcher(m) for m in matchers)
        _check_arity(method, wrapped)

        expectation = Expectation(method, wrapped)
        with self._lock:
            self._expectations.append(expectation)
        logger.debug("mock_expectation_registered", expectation=repr(expectation))
        return expectation

    def called(self, method: str, *args: Any) -> Tuple[Any, ...]:
        """Match a call and return the selected expectation's result tuple.

        The first registered matching rule that still has calls left wins.

        Raises:
            UnmatchedCall: If no rule matches, or every matching rule is exhausted
        """
        with self._lock:
            candidates = [e for e in self._expectations if e.method == method]
            matching = [e for e in candidates if e.accepts(args)]

            if not matching:
                raise self._unmatched(method, args, candidates, exhausted=False)

            selected = next((e for e in matching if not e.exhausted), None)
            if selected is None:
                raise self._unmatched(method, args, matching, exhausted=True)

            selected.call_count += 1
            logger.debug("mock_call_matched", call=format_call(method, args),
                         expectation=repr(selected))
            return selected.resolve(args)

    def _unmatched(self, method: str, args: Tuple[Any, ...],
                   candidates: List[Expectation], exhausted: bool) -> UnmatchedCall:
        MOCK_UNMATCHED_CALLS_TOTAL.labels(operation=method).inc()
        logger.error("mock_unmatched_call", call=format_call(method, args), exhausted=exhausted)
        return UnmatchedCall(method, args, [repr(c) for c in candidates], exhausted=exhausted)

    def unmet_expectations(self) -> List[str]:
        """Describe every count-bounded expectation whose count is off."""
        with self._lock:
            return [
                f"{e!r}: expected {e.expected_calls} call(s), got {e.call_count}"
                for e in self._expectations
                if not e.satisfied
            ]

    def assert_expectations(self) -> None:
        """Verify all count-bounded expectations at once.

        Does not change any state, so repeated calls give the same verdict.

        Raises:
            ExpectationUnmet: Listing every violated expectation
        """
        violations = self.unmet_expectations()
        if violations:
            raise ExpectationUnmet(violations)

    def number_of_calls(self, method: str) -> int:
        with self._lock:
            return sum(e.call_count for e in self._expectations if e.method == method)

    @property
    def expectations(self) -> List[Expectation]:
        with self._lock:
            return list(self._expectations)
