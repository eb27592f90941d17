"""
Cache Interface

Defines the abstract Cache contract shared by every backend. Application
code holds a Cache reference and never depends on the concrete backend.

Implementations:
- RedisCache: Redis-backed cache for production
- MockCache: programmable in-memory substitute for tests
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, List, Union

from barbatos.context import BACKGROUND, Context

Expiration = Union[int, float, timedelta]


def expiration_seconds(expiration: Expiration) -> float:
    """Normalize an expiration to seconds.

    Raises:
        ValueError: If the expiration is negative
    """
    if isinstance(expiration, timedelta):
        seconds = expiration.total_seconds()
    else:
        seconds = float(expiration)
    if seconds < 0:
        raise ValueError(f"expiration must be >= 0, got {expiration!r}")
    return seconds


class Cache(ABC):
    """Abstract cache contract.

    Every operation except close() takes a keyword-only deadline context.
    Failures surface as barbatos.cache.errors exceptions:

    - NotFound: get() on an absent key
    - BackendError: anything else going wrong in the backend
    """

    @abstractmethod
    async def is_connected(self, *, ctx: Context = BACKGROUND) -> bool:
        """Check backend connectivity.

        Never raises; an unreachable backend reports False.
        """
        ...

    @abstractmethod
    async def get(self, key: str, *, ctx: Context = BACKGROUND) -> str:
        """Retrieve value by key.

        Args:
            key: Cache key (non-empty)
            ctx: Deadline context

        Returns:
            Stored value as a string

        Raises:
            NotFound: If the key does not exist
            BackendError: On any other failure
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, *, ctx: Context = BACKGROUND) -> None:
        """Store value without expiration.

        Equivalent to set_with_expiration(key, value, 0).
        """
        ...

    @abstractmethod
    async def set_with_expiration(
        self,
        key: str,
        value: Any,
        expiration: Expiration,
        *,
        ctx: Context = BACKGROUND
    ) -> None:
        """Store value with a TTL.

        Args:
            key: Cache key
            value: Value to store (str, UTF-8 bytes, numbers, or JSON-serializable)
            expiration: TTL in seconds or as timedelta; 0 means no expiration.
                        Replaces any TTL already set on the key.
            ctx: Deadline context
        """
        ...

    @abstractmethod
    async def delete(self, *keys: str, ctx: Context = BACKGROUND) -> None:
        """Delete one or more keys. Missing keys are ignored."""
        ...

    @abstractmethod
    async def delete_with_pattern(self, pattern: str, *, ctx: Context = BACKGROUND) -> None:
        """Delete every key matching a glob pattern.

        Lists matching keys, then deletes them. The two steps are not atomic;
        keys created in between may or may not be removed. An empty match set
        is a no-op.
        """
        ...

    @abstractmethod
    async def keys(self, pattern: str, *, ctx: Context = BACKGROUND) -> List[str]:
        """List keys matching a glob pattern (*, ?, [abc], [^a], [a-z]).

        Returns:
            Matching keys in no particular order; empty list if none match
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        ...
