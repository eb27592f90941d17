"""
Redis Cache Implementation

Redis-backed implementation of the cache contract. Each operation maps to a
single Redis command (PING, GET, SET, DEL, KEYS); delete_with_pattern issues
KEYS followed by DEL.
"""

import asyncio
import json
import time
from typing import Any, Awaitable, List, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from barbatos.cache.config import RedisConfig
from barbatos.cache.errors import BackendError, CacheError, DeadlineExceeded, NotFound
from barbatos.cache.interface import Cache, Expiration, expiration_seconds
from barbatos.cache.metrics import track_cache_operation
from barbatos.context import BACKGROUND, Context
from barbatos.logging_config import LogContext, get_logger, log_cache_operation, log_error

logger = get_logger(__name__)


class RedisCache(Cache):
    """Redis-backed cache implementation.

    Values are stored as strings: str, bytes and numbers are written as-is,
    booleans as "1"/"0", anything else JSON-encoded. Replies are decoded as
    UTF-8, so reading back bytes that are not valid UTF-8 is a BackendError.

    The wrapper adds no locking and no retries; concurrency is handled by the
    redis-py connection pool and a failed command is reported as-is.

    Example:
        cache = await RedisCache.connect(RedisConfig(addr="localhost:6379"))
        await cache.set("user:1", "john")
        name = await cache.get("user:1")
        await cache.close()
    """

    def __init__(self, client: aioredis.Redis):
        """Wrap an already connected client.

        Args:
            client: redis.asyncio client created with decode_responses=True
        """
        self._client = client
        self._closed = False

    @classmethod
    async def connect(cls, config: RedisConfig, *, ctx: Context = BACKGROUND) -> "RedisCache":
        """Create a client from config and verify it with PING.

        Raises:
            BackendError: If the server cannot be reached or rejects AUTH
        """
        host, port = config.host_port()
        client = aioredis.Redis(
            host=host,
            port=port,
            password=config.password or None,
            db=config.db,
            decode_responses=True,
        )
        cache = cls(client)
        try:
            await cache._run(ctx, "connect", client.ping(), addr=config.addr)
        except CacheError as e:
            log_error(logger, e, "redis_connect_failed", addr=config.addr, db=config.db)
            await client.aclose()
            raise
        logger.info("redis_cache_connected", addr=config.addr, db=config.db)
        return cache

    async def _run(self, ctx: Context, operation: str, command: Awaitable, **context) -> Any:
        """Await a Redis command under the context's deadline and cancellation.

        Raises:
            DeadlineExceeded: If ctx is done before or during the command
            BackendError: On Redis or transport errors, or a reply that is not UTF-8
        """
        reason = "cache is closed" if self._closed else ctx.err()
        if reason is not None:
            command.close()
            error_cls = BackendError if self._closed else DeadlineExceeded
            raise error_cls(f"{operation}: {reason}", operation=operation, context=context)

        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(command)
        unregister = ctx.add_cancel_callback(lambda: loop.call_soon_threadsafe(task.cancel))
        try:
            return await asyncio.wait_for(task, timeout=ctx.remaining())
        except asyncio.CancelledError:
            if ctx.err() is None:
                raise
            raise DeadlineExceeded(
                f"{operation}: {ctx.err()}", operation=operation, context=context
            ) from None
        except asyncio.TimeoutError as e:
            if ctx.err() is not None:
                raise DeadlineExceeded(
                    f"{operation}: {ctx.err()}", operation=operation, context=context
                ) from e
            raise BackendError(f"{operation} timed out: {e}", operation=operation, context=context) from e
        except (RedisError, OSError, UnicodeDecodeError) as e:
            raise BackendError(f"{operation} failed: {e}", operation=operation, context=context) from e
        finally:
            unregister()

    def _serialize(self, key: str, value: Any) -> Any:
        """Convert a value into something Redis accepts."""
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (str, bytes, int, float)):
            return value
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            raise BackendError(
                f"cannot serialize value for {key}: {e}",
                operation="set_with_expiration",
                context={"key": key, "value_type": type(value).__name__},
            ) from e

    async def is_connected(self, *, ctx: Context = BACKGROUND) -> bool:
        start = time.perf_counter()
        try:
            await self._run(ctx, "is_connected", self._client.ping())
            return True
        except CacheError as e:
            log_cache_operation(
                logger, "redis", "is_connected", "error",
                (time.perf_counter() - start) * 1000, error_message=str(e),
            )
            return False

    @track_cache_operation("redis", "get")
    async def get(self, key: str, *, ctx: Context = BACKGROUND) -> str:
        if not key:
            raise ValueError("key must be a non-empty string")

        value = await self._run(ctx, "get", self._client.get(key), key=key)
        if value is None:
            raise NotFound(key)
        return value

    async def set(self, key: str, value: Any, *, ctx: Context = BACKGROUND) -> None:
        await self.set_with_expiration(key, value, 0, ctx=ctx)

    @track_cache_operation("redis", "set_with_expiration")
    async def set_with_expiration(
        self,
        key: str,
        value: Any,
        expiration: Expiration,
        *,
        ctx: Context = BACKGROUND
    ) -> None:
        seconds = expiration_seconds(expiration)
        data = self._serialize(key, value)

        px: Optional[int] = None
        if seconds > 0:
            # Sub-millisecond TTLs would otherwise round down to "no expiration"
            px = max(1, int(round(seconds * 1000)))

        await self._run(
            ctx, "set_with_expiration", self._client.set(key, data, px=px),
            key=key, expiration=seconds,
        )

    @track_cache_operation("redis", "delete")
    async def delete(self, *keys: str, ctx: Context = BACKGROUND) -> None:
        if not keys:
            raise ValueError("delete requires at least one key")

        await self._run(ctx, "delete", self._client.delete(*keys), keys=list(keys))

    async def delete_with_pattern(self, pattern: str, *, ctx: Context = BACKGROUND) -> None:
        with LogContext(logger, "cache_delete_with_pattern_failed", pattern=pattern) as log:
            keys = await self.keys(pattern, ctx=ctx)
            if not keys:
                return
            await self.delete(*keys, ctx=ctx)
            log.debug("cache_delete_with_pattern", count=len(keys))

    @track_cache_operation("redis", "keys")
    async def keys(self, pattern: str, *, ctx: Context = BACKGROUND) -> List[str]:
        keys = await self._run(ctx, "keys", self._client.keys(pattern), pattern=pattern)
        return list(keys or [])

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.aclose()
        except (RedisError, OSError) as e:
            raise BackendError(f"close failed: {e}", operation="close") from e
        logger.info("redis_cache_closed")
