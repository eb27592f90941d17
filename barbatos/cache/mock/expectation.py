"""
Expectation: one programmed rule of a mock cache.
"""

from typing import Any, Callable, Optional, Sequence, Tuple

from barbatos.cache.mock.matchers import Matcher, matches_all


class Expectation:
    """Matches calls of one method and decides what they return.

    Created by MockCache.on(); configured with the chainable methods below.

    Attributes:
        method: Contract method name ("get", "delete", ...)
        matchers: One matcher per call argument, deadline context first
        call_count: Times this rule has matched so far
        expected_calls: Exact number of calls required at assertion time,
                        or None when the rule is optional
    """

    def __init__(self, method: str, matchers: Sequence[Matcher]):
        self.method = method
        self.matchers: Tuple[Matcher, ...] = tuple(matchers)
        self.return_values: Tuple[Any, ...] = ()
        self.return_fn: Optional[Callable[..., Any]] = None
        self.call_count = 0
        self.expected_calls: Optional[int] = None

    # -------------------------------------------------------------------------
    # Return behavior
    # -------------------------------------------------------------------------

    def returns(self, *values: Any) -> "Expectation":
        """Return fixed values: (result,) or (result, error).

        An exception instance as the result, or a non-None error, is raised
        to the caller instead of being returned.
        """
        if len(values) > 2:
            raise TypeError(f"returns() takes a result and an optional error, got {len(values)} values")
        self.return_values = tuple(values)
        self.return_fn = None
        return self

    def raises(self, error: BaseException) -> "Expectation":
        if not isinstance(error, BaseException):
            raise TypeError(f"raises() needs an exception instance, got {error!r}")
        return self.returns(None, error)

    def returns_using(self, fn: Callable[..., Any]) -> "Expectation":
        """Compute the result from the actual call arguments.

        fn receives the same positional arguments the rule matched against
        (ctx first) and returns the operation's result or raises.
        """
        if not callable(fn):
            raise TypeError(f"returns_using() needs a callable, got {fn!r}")
        self.return_fn = fn
        self.return_values = ()
        return self

    # -------------------------------------------------------------------------
    # Call count
    # -------------------------------------------------------------------------

    def times(self, count: int) -> "Expectation":
        if count < 0:
            raise ValueError(f"times() needs a count >= 0, got {count}")
        self.expected_calls = count
        return self

    def once(self) -> "Expectation":
        return self.times(1)

    def twice(self) -> "Expectation":
        return self.times(2)

    # -------------------------------------------------------------------------
    # Engine hooks (called with the engine lock held)
    # -------------------------------------------------------------------------

    def accepts(self, args: Sequence[Any]) -> bool:
        return matches_all(self.matchers, args)

    @property
    def exhausted(self) -> bool:
        return self.expected_calls is not None and self.call_count >= self.expected_calls

    @property
    def satisfied(self) -> bool:
        return self.expected_calls is None or self.call_count == self.expected_calls

    def resolve(self, args: Sequence[Any]) -> Tuple[Any, ...]:
        if self.return_fn is not None:
            return (self.return_fn(*args),)
        return self.return_values

    def __repr__(self) -> str:
        rendered = ", ".join(repr(m) for m in self.matchers)
        bound = "any" if self.expected_calls is None else str(self.expected_calls)
        return f"{self.method}({rendered}) [calls: {self.call_count}/{bound}]"
