"""
Cache Error Taxonomy

Errors returned through the cache contract. Test-harness failures raised
by the mock backend live in barbatos.cache.mock.errors and are deliberately
not part of this hierarchy.
"""

from datetime import datetime
from typing import Any, Dict, Optional


class CacheError(Exception):
    """Base exception for all errors returned by a cache backend."""

    def __init__(self, message: str, operation: str = "unknown",
                 context: Optional[Dict[str, Any]] = None):
        """Initialize cache error with metadata.

        Args:
            message: Error message
            operation: Contract operation that failed (get, keys, ...)
            context: Additional context data (key, pattern, ...)
        """
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "operation": self.operation,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class NotFound(CacheError):
    """Raised by get() when the key does not exist."""

    def __init__(self, key: str):
        super().__init__(f"cache key not found: {key}", operation="get",
                         context={"key": key})
        self.key = key


class BackendError(CacheError):
    """Connectivity, protocol or serialization failure of a backend."""
    pass


class DeadlineExceeded(BackendError):
    """Raised when the call's context was cancelled or its deadline passed."""
    pass
