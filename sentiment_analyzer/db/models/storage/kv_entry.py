# sentiment_analyzer/db/models/storage/kv_entry.py
from datetime import datetime, timezone
from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(SQLModel, table=True):
    __tablename__ = "kv_entries"
    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=_utcnow)
