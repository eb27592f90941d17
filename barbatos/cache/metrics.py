"""
Prometheus Metrics for Barbatos

Exposes metrics for:
- Cache operations per backend, operation and result
- Cache operation latency
- Mock expectation outcomes in test runs
"""

from prometheus_client import (
    Counter, Histogram,
    CollectorRegistry, generate_latest,
    CONTENT_TYPE_LATEST
)
import time
from functools import wraps
from typing import Callable, Any

from barbatos.cache.errors import NotFound
from barbatos.logging_config import get_logger, log_cache_operation

logger = get_logger(__name__)

# Create a registry for Barbatos metrics
REGISTRY = CollectorRegistry()

# ============================================================================
# Cache Operation Metrics
# ============================================================================

CACHE_OPERATIONS_TOTAL = Counter(
    'barbatos_cache_operations_total',
    'Total cache operations by backend, operation and result',
    ['backend', 'operation', 'result'],
    registry=REGISTRY
)

CACHE_OPERATION_LATENCY = Histogram(
    'barbatos_cache_operation_latency_seconds',
    'Cache operation latency',
    ['backend', 'operation'],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    registry=REGISTRY
)

# ============================================================================
# Expectation Engine Metrics
# ============================================================================

MOCK_UNMATCHED_CALLS_TOTAL = Counter(
    'barbatos_mock_unmatched_calls_total',
    'Calls made against a mock cache that no expectation covered',
    ['operation'],
    registry=REGISTRY
)


def track_cache_operation(backend: str, operation: str):
    """
    Decorator recording count and latency of an async cache operation.

    NotFound is counted as a "miss", other exceptions as "error". Each call
    is also logged through log_cache_operation.

    Usage:
        @track_cache_operation('redis', 'get')
        async def get(self, key, *, ctx=BACKGROUND):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            result = 'ok'
            try:
                return await func(*args, **kwargs)
            except NotFound:
                result = 'miss'
                raise
            except Exception:
                result = 'error'
                raise
            finally:
                elapsed = time.perf_counter() - start
                CACHE_OPERATIONS_TOTAL.labels(
                    backend=backend, operation=operation, result=result
                ).inc()
                CACHE_OPERATION_LATENCY.labels(
                    backend=backend, operation=operation
                ).observe(elapsed)
                log_cache_operation(logger, backend, operation, result, elapsed * 1000)
        return wrapper
    return decorator


def get_metrics_text() -> str:
    """Render the Barbatos registry in Prometheus text format."""
    return generate_latest(REGISTRY).decode('utf-8')


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
