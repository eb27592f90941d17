"""
Mock cache failures.

Both exceptions subclass AssertionError: they signal a broken test, are
reported by the test runner as failures, and never travel through the
cache contract as a CacheError.
"""

from typing import Any, Sequence


def format_call(method: str, args: Sequence[Any]) -> str:
    return f"{method}({', '.join(repr(arg) for arg in args)})"


class UnmatchedCall(AssertionError):
    """A call was made that no registered expectation covers."""

    def __init__(self, method: str, args: Sequence[Any],
                 candidates: Sequence[Any] = (), exhausted: bool = False):
        self.method = method
        self.call_args = tuple(args)
        self.candidates = list(candidates)
        self.exhausted = exhausted

        call = format_call(method, args)
        if exhausted:
            message = f"mock: {call} was called more times than expected"
        else:
            message = f"mock: unexpected call {call}"
        if self.candidates:
            lines = "\n".join(f"  - {candidate}" for candidate in self.candidates)
            message += f"\nexpectations registered for {method}:\n{lines}"
        else:
            message += f"\nno expectations registered for {method}; use on({method!r}, ...)"
        super().__init__(message)


class ExpectationUnmet(AssertionError):
    """One or more count-bounded expectations were not satisfied."""

    def __init__(self, violations: Sequence[str]):
        self.violations = list(violations)
        lines = "\n".join(f"  - {violation}" for violation in self.violations)
        super().__init__(f"mock: {len(self.violations)} expectation(s) not met:\n{lines}")
