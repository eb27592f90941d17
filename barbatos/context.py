"""
Deadline Context

Cancellable deadline passed to every cache operation. The Redis backend
observes it on network I/O; the mock backend accepts it as a plain
argument that expectations can match on.

Example:
    ctx = Context.with_timeout(0.5)
    value = await cache.get("user:1", ctx=ctx)
"""

import threading
import time
import weakref
from typing import Callable, List, Optional


class Context:
    """Deadline and cancellation signal for a unit of work.

    Child contexts inherit the earliest deadline of their parent and are
    cancelled when the parent is cancelled. A parent only holds weak
    references to its children, and a cancelled child detaches itself.
    """

    CANCELED = "context canceled"
    DEADLINE_EXCEEDED = "context deadline exceeded"

    def __init__(self, deadline: Optional[float] = None, parent: Optional["Context"] = None):
        """Create a context.

        Args:
            deadline: Absolute deadline on the time.monotonic() clock (None = no deadline)
            parent: Optional parent whose deadline and cancellation propagate
        """
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)

        self.deadline = deadline
        self._lock = threading.Lock()
        self._canceled = False
        self._callbacks: List[Callable[[], None]] = []
        self._children: "weakref.WeakSet[Context]" = weakref.WeakSet()
        self._parent: Optional[Context] = None

        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled and has no deadline."""
        return BACKGROUND

    @classmethod
    def with_timeout(cls, seconds: float, parent: Optional["Context"] = None) -> "Context":
        """Create a context expiring `seconds` from now."""
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    def cancel(self) -> None:
        """Cancel the context and fire registered callbacks once."""
        with self._lock:
            if self._canceled:
                return
            self._canceled = True
            callbacks, self._callbacks = self._callbacks, []
            children = list(self._children)
            self._children.clear()
            parent, self._parent = self._parent, None

        if parent is not None:
            parent._release(self)
        for child in children:
            child.cancel()
        for callback in callbacks:
            callback()

    def _adopt(self, child: "Context") -> None:
        with self._lock:
            if not self._canceled:
                self._children.add(child)
                child._parent = self
                return
        child.cancel()

    def _release(self, child: "Context") -> None:
        with self._lock:
            self._children.discard(child)

    def add_cancel_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback run on cancel.

        Runs immediately if the context is already cancelled.

        Returns:
            Function removing the callback again
        """
        with self._lock:
            if not self._canceled:
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)

        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> Optional[str]:
        """Reason the context is done, or None while it is still live."""
        if self._canceled:
            return self.CANCELED
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return self.DEADLINE_EXCEEDED
        return None

    @property
    def done(self) -> bool:
        return self.err() is not None

    def __repr__(self) -> str:
        if self is BACKGROUND:
            return "Context.background()"
        return f"Context(remaining={self.remaining()}, err={self.err()!r})"


class _BackgroundContext(Context):
    """Root context; cancel() is a no-op."""

    def cancel(self) -> None:
        return None

    def add_cancel_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        return lambda: None

    def _adopt(self, child: Context) -> None:
        return None


BACKGROUND: Context = _BackgroundContext()
