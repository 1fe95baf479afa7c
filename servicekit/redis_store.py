"""Redis connection and the key-value and shipper-location repository."""

from __future__ import annotations

import json

import redis
from redis.exceptions import RedisError

from servicekit.entity import RedisValue, ShipperLocation

DEFAULT_CONN_TIMEOUT = 3.0
OPERATION_TIMEOUT = 5.0
SHIPPER_LOCATION_PREFIX = "shipper:location:"


class KeyNotFoundError(LookupError):
    """The key does not exist in Redis."""

    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key}")
        self.key = key


def connect_redis(url: str, timeout: float = DEFAULT_CONN_TIMEOUT) -> redis.Redis:
    """Open a client for the URL and check it answers within timeout seconds.

    Raises ValueError for a bad URL and ConnectionError if the ping fails.
    """
    try:
        client = redis.Redis.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=OPERATION_TIMEOUT
        )
    except ValueError as exc:
        raise ValueError(f"redis - New - redis.ParseURL: {exc}") from exc
    try:
        client.ping()
    except RedisError as exc:
        client.close()
        raise ConnectionError(f"redis - New - r.client.Ping: {exc}") from exc
    return client


def shipper_location_key(shipper_id: str) -> str:
    """The key holding a shipper's latest location."""
    return SHIPPER_LOCATION_PREFIX + shipper_id


def _text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisRepository:
    """Plain values and latest shipper locations kept without expiry."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def set_value(self, value: RedisValue) -> None:
        self._client.set(value.key, value.value)

    def get_value(self, key: str) -> RedisValue:
        stored = self._client.get(key)
        if stored is None:
            raise KeyNotFoundError(key)
        return RedisValue(key=key, value=_text(stored))

    def set_shipper_location(self, loc: ShipperLocation) -> None:
        payload = json.dumps(loc.to_dict(), ensure_ascii=False)
        self._client.set(shipper_location_key(loc.shipper_id), payload)

    def get_shipper_location(self, shipper_id: str) -> ShipperLocation:
        """Return the cached location; raise ValueError if it cannot be decoded."""
        key = shipper_location_key(shipper_id)
        stored = self._client.get(key)
        if stored is None:
            raise KeyNotFoundError(key)
        data = json.loads(_text(stored))
        if not isinstance(data, dict):
            raise ValueError(f"unexpected shipper location payload under {key}")
        return ShipperLocation.from_dict(data)