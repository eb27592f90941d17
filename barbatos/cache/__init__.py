"""
Cache Abstraction Layer for Barbatos

Provides a uniform cache contract with interchangeable implementations:
- RedisCache: Redis-backed cache for production
- MockCache: programmable substitute for tests (barbatos.cache.mock)

Example usage:
    from barbatos.cache import RedisCache, RedisConfig, NotFound

    cache = await RedisCache.connect(RedisConfig.from_env())
    try:
        name = await cache.get("user:1")
    except NotFound:
        name = None
"""

from barbatos.cache.interface import Cache, Expiration
from barbatos.cache.errors import BackendError, CacheError, DeadlineExceeded, NotFound
from barbatos.cache.config import RedisConfig, get_redis_config
from barbatos.cache.redis_cache import RedisCache

__all__ = [
    # Interface
    "Cache",
    "Expiration",
    # Errors
    "CacheError",
    "NotFound",
    "BackendError",
    "DeadlineExceeded",
    # Implementations
    "RedisCache",
    # Configuration
    "RedisConfig",
    "get_redis_config",
]
