from typing import Optional

try:
    import redis
except Exception:  # pragma: no cover
    redis = None

from ...application.ports.kv_store import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, url: str, prefix: str = "sentiment:") -> None:
        if redis is None:
            raise RuntimeError("redis package is not installed")
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))
