from typing import Dict, Optional

from ...application.ports.kv_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
