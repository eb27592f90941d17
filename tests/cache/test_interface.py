"""Tests for the cache contract and error taxonomy."""

from datetime import timedelta

import pytest

from barbatos.cache import BackendError, Cache, CacheError, DeadlineExceeded, NotFound
from barbatos.cache.interface import expiration_seconds
from barbatos.cache.mock import MockCache
from barbatos.cache.redis_cache import RedisCache


def test_cache_is_abstract():
    with pytest.raises(TypeError):
        Cache()


@pytest.mark.parametrize("backend", [RedisCache, MockCache])
def test_backends_implement_contract(backend):
    assert issubclass(backend, Cache)
    assert not getattr(backend, "__abstractmethods__", None)


@pytest.mark.parametrize(
    "expiration,seconds",
    [
        (0, 0.0),
        (5, 5.0),
        (0.25, 0.25),
        (timedelta(milliseconds=100), 0.1),
        (timedelta(0), 0.0),
    ],
)
def test_expiration_seconds(expiration, seconds):
    assert expiration_seconds(expiration) == pytest.approx(seconds)


@pytest.mark.parametrize("expiration", [-1, -0.5, timedelta(seconds=-1)])
def test_negative_expiration_rejected(expiration):
    with pytest.raises(ValueError):
        expiration_seconds(expiration)


def test_error_hierarchy():
    assert issubclass(NotFound, CacheError)
    assert issubclass(BackendError, CacheError)
    assert issubclass(DeadlineExceeded, BackendError)
    assert not issubclass(NotFound, BackendError)


def test_not_found_carries_key():
    error = NotFound("user:1")

    assert error.key == "user:1"
    assert error.operation == "get"
    assert "user:1" in str(error)


def test_error_to_dict():
    error = BackendError("connection refused", operation="keys", context={"pattern": "a*"})

    data = error.to_dict()

    assert data["error_type"] == "BackendError"
    assert data["message"] == "connection refused"
    assert data["operation"] == "keys"
    assert data["context"] == {"pattern": "a*"}
    assert "timestamp" in data
