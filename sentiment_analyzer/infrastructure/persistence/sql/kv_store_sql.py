from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.engine import Engine
from sqlmodel import Session

from ....db.models import KeyValueEntry
from ....application.ports.kv_store import KeyValueStore


class SqlKeyValueStore(KeyValueStore):
    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                entry = KeyValueEntry(key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            session.add(entry)
            session.commit()

    def delete(self, key: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(KeyValueEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()
