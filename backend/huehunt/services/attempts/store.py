from functools import wraps
from typing import Optional, Protocol

import redis

from huehunt.errors import CounterStoreError


class CounterStore(Protocol):
    """Key -> integer store with native atomic increments and TTLs.

    ``ttl`` follows Redis: -2 when the key is missing, -1 when it has no
    expiry, otherwise the remaining seconds.
    """

    def get(self, key: str) -> Optional[int]: ...

    def incr(self, key: str) -> int: ...

    def decr(self, key: str) -> int: ...

    def ttl(self, key: str) -> int: ...

    def expire(self, key: str, seconds: int) -> None: ...


def _store_call(fn):
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except redis.RedisError as exc:
            raise CounterStoreError(f"Counter store {fn.__name__} failed: {exc}") from exc
    return wrapper


class RedisCounterStore:
    """CounterStore on a caller-owned Redis client.

    The client's connection lifecycle belongs to whoever built it; this
    class never connects or closes it.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @_store_call
    def get(self, key: str) -> Optional[int]:
        value = self.client.get(key)
        return int(value) if value is not None else None

    @_store_call
    def incr(self, key: str) -> int:
        return int(self.client.incr(key))

    @_store_call
    def decr(self, key: str) -> int:
        return int(self.client.decr(key))

    @_store_call
    def ttl(self, key: str) -> int:
        return int(self.client.ttl(key))

    @_store_call
    def expire(self, key: str, seconds: int) -> None:
        self.client.expire(key, seconds)
