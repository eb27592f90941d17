"""
Cache Configuration

Connection settings consumed by the Redis backend, loadable from the
environment or from a YAML/JSON file.
"""

import os
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barbatos.config_loader import load_config_with_secrets
from barbatos.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_REDIS_PORT = 6379


class RedisConfig(BaseModel):
    """Redis connection settings.

    Environment Variables:
        CACHE_REDIS_ADDR: host:port of the server (default: localhost:6379)
        CACHE_REDIS_PASSWORD: AUTH password (default: empty, no auth)
        CACHE_REDIS_DB: logical database index (default: 0)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    addr: str = Field("localhost:6379", min_length=1, description="host:port of the Redis server")
    password: str = Field("", description="AUTH password, empty for none")
    db: int = Field(0, ge=0, description="Logical database index")

    @field_validator("addr")
    @classmethod
    def _validate_addr(cls, value: str) -> str:
        split_addr(value)
        return value

    def host_port(self) -> Tuple[str, int]:
        return split_addr(self.addr)

    def __repr__(self) -> str:
        masked = "***" if self.password else ""
        return f"RedisConfig(addr={self.addr!r}, password={masked!r}, db={self.db})"

    __str__ = __repr__

    @classmethod
    def from_env(cls) -> "RedisConfig":
        """Build configuration from CACHE_REDIS_* environment variables."""
        return cls(
            addr=os.getenv("CACHE_REDIS_ADDR", "localhost:6379"),
            password=os.getenv("CACHE_REDIS_PASSWORD", ""),
            db=int(os.getenv("CACHE_REDIS_DB", "0")),
        )

    @classmethod
    def from_file(cls, file_path: str) -> "RedisConfig":
        """Build configuration from a YAML or JSON file.

        The settings may sit at the top level or under a "redis" section.
        Values of the form secrets://NAME are read from the environment.
        """
        data: Dict[str, Any] = load_config_with_secrets(file_path)
        section = data.get("redis", data)
        logger.info("redis_config_loaded", path=file_path)
        return cls(**section)


def split_addr(addr: str) -> Tuple[str, int]:
    """Split "host:port" into its parts.

    Bracketed IPv6 literals ("[::1]:6379") are supported; a missing port
    defaults to 6379.

    Raises:
        ValueError: If the port is not a valid number
    """
    host, port = addr, ""
    if addr.startswith("["):
        end = addr.find("]")
        if end == -1:
            raise ValueError(f"invalid address {addr!r}: missing ']'")
        host = addr[1:end]
        rest = addr[end + 1:]
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"invalid address {addr!r}")
            port = rest[1:]
    elif addr.count(":") == 1:
        host, port = addr.split(":")

    if not port:
        return host or "localhost", DEFAULT_REDIS_PORT
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid port in address {addr!r}")
    return host or "localhost", int(port)


def get_redis_config() -> RedisConfig:
    """Get Redis configuration from environment."""
    return RedisConfig.from_env()
