# sentiment_analyzer/schemas/analysis/analysis.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def from_score(cls, score: float) -> "Sentiment":
        if score > 0:
            return cls.POSITIVE
        if score < 0:
            return cls.NEGATIVE
        return cls.NEUTRAL


class ScoreResult(BaseModel):
    """Output of a scorer for one piece of text."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., allow_inf_nan=False, description="Signed polarity score")
    positive_tokens: List[str] = Field(default_factory=list, description="Tokens that raised the score")
    negative_tokens: List[str] = Field(default_factory=list, description="Tokens that lowered the score")
    tokens: List[str] = Field(default_factory=list, description="Every token the scorer saw")


class AnalysisRecord(BaseModel):
    """One classified text, as kept in the history log.

    The persisted form uses the short ``positive``/``negative`` keys for the
    word counts. ``sentiment`` is derived from ``score`` and never stored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    text: str = Field(..., min_length=1)
    score: float = Field(..., allow_inf_nan=False)
    positive_word_count: int = Field(default=0, ge=0, alias="positive")
    negative_word_count: int = Field(default=0, ge=0, alias="negative")
    timestamp: datetime

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must contain at least one non-whitespace character")
        return value

    @field_validator("timestamp")
    @classmethod
    def _timestamp_aware(cls, value: datetime) -> datetime:
        # naive values are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def sentiment(self) -> Sentiment:
        return Sentiment.from_score(self.score)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AnalysisRecordResponse(BaseModel):
    id: int
    text: str
    score: float
    sentiment: Sentiment
    positive_word_count: int
    negative_word_count: int
    timestamp: str

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "AnalysisRecordResponse":
        return cls(
            id=record.id,
            text=record.text,
            score=record.score,
            sentiment=record.sentiment,
            positive_word_count=record.positive_word_count,
            negative_word_count=record.negative_word_count,
            timestamp=record.timestamp.isoformat(),
        )


class HistorySummary(BaseModel):
    total: int = Field(..., ge=0, description="Number of records summarized")
    positive_count: int = Field(..., ge=0, description="Records with a positive score")
    negative_count: int = Field(..., ge=0, description="Records with a negative score")
    neutral_count: int = Field(..., ge=0, description="Records with a zero score")


class WordBreakdown(BaseModel):
    positive_words: int = Field(..., ge=0)
    negative_words: int = Field(..., ge=0)
    neutral_words: int = Field(..., ge=0)
    total_words: int = Field(..., ge=0, description="Whitespace separated words in the text")


class AnalysisPreview(BaseModel):
    record: AnalysisRecord
    breakdown: WordBreakdown
    gauge: float = Field(..., ge=0, le=100, description="Score mapped onto a 0-100 bar")


class ExportArtifact(BaseModel):
    filename: str
    content: str
    record_count: int = Field(..., ge=1)
    generated_at: Optional[str] = None
