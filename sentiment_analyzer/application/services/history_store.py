import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from ..ports.kv_store import KeyValueStore
from ...exceptions import InvalidInput, PersistenceCorrupt, PersistenceUnavailable
from ...schemas.analysis.analysis import AnalysisRecord

logger = logging.getLogger(__name__)

HistoryLog = Tuple[AnalysisRecord, ...]

_history_adapter = TypeAdapter(List[AnalysisRecord])


def decode_history(raw: str) -> List[AnalysisRecord]:
    try:
        return _history_adapter.validate_json(raw)
    except ValidationError as e:
        raise PersistenceCorrupt(f"Stored history is unreadable: {e.error_count()} error(s)") from e


def encode_history(records: HistoryLog) -> str:
    return json.dumps([record.to_storage() for record in records], ensure_ascii=False)


@dataclass
class HistoryStore:
    """Bounded, newest-first log of analysis records backed by a key-value store.

    ``load``, ``append`` and ``clear`` run under one lock so a
    read-modify-write cycle is never interleaved with another mutation.
    Write failures of the backing store do not raise: the in-memory log stays
    authoritative, the failure is kept in ``last_warning`` and the store is
    marked stale until a later write succeeds. Reloading a stale store first
    retries the write and keeps the in-memory log if that fails again.
    """

    kv_store: KeyValueStore
    storage_key: str = "sentimentHistory"
    limit: int = 100
    last_warning: Optional[PersistenceUnavailable] = field(default=None, init=False)
    _records: HistoryLog = field(default=(), init=False, repr=False)
    _last_id: int = field(default=0, init=False, repr=False)
    _stale: bool = field(default=False, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    @property
    def records(self) -> HistoryLog:
        return self._records

    @property
    def stale(self) -> bool:
        """True while the backing store is behind the in-memory log."""
        return self._stale

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> HistoryLog:
        with self._lock:
            if self._stale:
                self._persist()
                if self._stale:
                    logger.warning("Store is behind the in-memory history, keeping the in-memory copy")
                    return self._records

            records: List[AnalysisRecord] = []
            try:
                raw = self.kv_store.get(self.storage_key)
            except Exception as e:
                self.last_warning = PersistenceUnavailable(f"History could not be read: {e}")
                logger.warning(f"Reading history from '{self.storage_key}' failed, starting empty: {e}")
                raw = None

            if raw:
                try:
                    records = decode_history(raw)
                except PersistenceCorrupt as e:
                    logger.warning(f"{e.detail}; starting with an empty history")
                    records = []

            self._records = tuple(records[: self.limit])
            if self._records:
                self._last_id = max(self._last_id, max(r.id for r in self._records))
            logger.info(f"Loaded {len(self._records)} history record(s)")
            return self._records

    def next_id(self) -> int:
        """Issue a time-derived id that is strictly greater than any seen so far."""
        with self._lock:
            now_ms = int(time.time() * 1000)
            self._last_id = max(now_ms, self._last_id + 1)
            return self._last_id

    def append(self, record: AnalysisRecord) -> HistoryLog:
        if not record.text or not record.text.strip():
            raise InvalidInput("Cannot store a record with empty text")

        with self._lock:
            existing = next((r for r in self._records if r.id == record.id), None)
            if existing is not None:
                if existing == record:
                    logger.debug(f"Record {record.id} already in history, skipping")
                    return self._records
                raise InvalidInput(f"Record id {record.id} is already used by another record")

            self._records = ((record,) + self._records)[: self.limit]
            self._last_id = max(self._last_id, record.id)
            self._persist()
            return self._records

    def clear(self) -> None:
        with self._lock:
            self._records = ()
            self._persist()
            logger.info("History cleared")

    def _persist(self) -> None:
        try:
            if self._records:
                self.kv_store.set(self.storage_key, encode_history(self._records))
            else:
                self.kv_store.delete(self.storage_key)
            self.last_warning = None
            self._stale = False
        except Exception as e:
            self.last_warning = PersistenceUnavailable(f"History could not be saved: {e}")
            self._stale = True
            logger.warning(f"Persisting {len(self._records)} record(s) failed, keeping them in memory: {e}")
