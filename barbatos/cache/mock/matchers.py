"""
Argument matchers for mock cache expectations.

A matcher decides whether one actual call argument is acceptable. Plain
values passed to MockCache.on() are wrapped in Exact; ANY accepts
everything; matched_by() runs a predicate. keys_matching() is a variadic
tail matcher for delete(*keys) and receives all remaining keys as a tuple.

Example:
    mock.on("get", ANY, "user:1").returns("john")
    mock.on("get", ANY, matched_by(lambda k: k.startswith("user:"))).returns("?")
    mock.on("delete", ANY, keys_matching(lambda keys: set(keys) == {"a", "b"}))
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Tuple, Type


class Matcher(ABC):
    """Accepts or rejects one actual argument."""

    @abstractmethod
    def matches(self, value: Any) -> bool:
        ...


class Anything(Matcher):
    def matches(self, value: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "ANY"


class Exact(Matcher):
    """Deep equality with the expected value."""

    def __init__(self, expected: Any):
        self.expected = expected

    def matches(self, value: Any) -> bool:
        return bool(self.expected == value)

    def __repr__(self) -> str:
        return repr(self.expected)


class MatchedBy(Matcher):
    """Predicate over the actual value; truthy result means a match."""

    def __init__(self, predicate: Callable[[Any], Any], description: Optional[str] = None):
        if not callable(predicate):
            raise TypeError(f"matched_by() needs a callable, got {predicate!r}")
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", "predicate")

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def __repr__(self) -> str:
        return f"matched_by({self.description})"


class OfType(Matcher):
    def __init__(self, *types: Type):
        self.types = types

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.types)

    def __repr__(self) -> str:
        return f"any_of_type({', '.join(t.__name__ for t in self.types)})"


class VariadicMatcher(Matcher):
    """Matches the tuple of all remaining arguments.

    Only valid as the last matcher of a variadic operation (delete).
    """

    def __init__(self, predicate: Callable[[Tuple[Any, ...]], Any], description: Optional[str] = None):
        if not callable(predicate):
            raise TypeError(f"keys_matching() needs a callable, got {predicate!r}")
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", "predicate")

    def matches(self, value: Tuple[Any, ...]) -> bool:
        return bool(self.predicate(tuple(value)))

    def __repr__(self) -> str:
        return f"keys_matching({self.description})"


ANY = Anything()
ANY_KEYS = VariadicMatcher(lambda keys: True, "any")


def matched_by(predicate: Callable[[Any], Any], description: Optional[str] = None) -> MatchedBy:
    return MatchedBy(predicate, description)


def any_of_type(*types: Type) -> OfType:
    return OfType(*types)


def keys_matching(predicate: Callable[[Tuple[Any, ...]], Any],
                  description: Optional[str] = None) -> VariadicMatcher:
    return VariadicMatcher(predicate, description)


def as_matcher(value: Any) -> Matcher:
    if isinstance(value, Matcher):
        return value
    return Exact(value)


def matches_all(matchers: Sequence[Matcher], args: Sequence[Any]) -> bool:
    """Check actual arguments position by position.

    A trailing VariadicMatcher consumes every argument past the fixed ones;
    otherwise the argument count must equal the matcher count.
    """
    if matchers and isinstance(matchers[-1], VariadicMatcher):
        fixed = matchers[:-1]
        if len(args) < len(fixed):
            return False
        rest = tuple(args[len(fixed):])
        return all(m.matches(a) for m, a in zip(fixed, args)) and matchers[-1].matches(rest)

    if len(args) != len(matchers):
        return False
    return all(m.matches(a) for m, a in zip(matchers, args))
