import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, List, Sequence, Tuple

from ..ports.scorer import Scorer
from .aggregation import score_gauge, word_breakdown
from .history_store import HistoryLog, HistoryStore
from ...exceptions import InvalidInput
from ...schemas.analysis.analysis import AnalysisPreview, AnalysisRecord, ScoreResult

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BatchResult:
    """Lazy result of one batch analysis.

    Lines are scored the first time they are iterated; later iterations
    replay the same records, so iterating twice never re-scores a line or
    issues new ids.
    """

    def __init__(self, lines: Sequence[str], analyze: Callable[[str], AnalysisRecord]) -> None:
        self._lines = tuple(lines)
        self._analyze = analyze
        self._records: List[AnalysisRecord] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[AnalysisRecord]:
        for _, record in self.pairs():
            yield record

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    def pairs(self) -> Iterator[Tuple[str, AnalysisRecord]]:
        for index, line in enumerate(self._lines):
            if index == len(self._records):
                self._records.append(self._analyze(line.strip()))
            yield line, self._records[index]


@dataclass
class AnalysisService:
    scorer: Scorer
    history_store: HistoryStore
    clock: Callable[[], datetime] = field(default=_utcnow)

    def analyze_one(self, text: str) -> AnalysisRecord:
        """Score one text without touching the history."""
        cleaned = self._clean(text)
        return self._build_record(cleaned, self.scorer.score(cleaned))

    def preview(self, text: str) -> AnalysisPreview:
        cleaned = self._clean(text)
        result = self.scorer.score(cleaned)
        return AnalysisPreview(
            record=self._build_record(cleaned, result),
            breakdown=word_breakdown(cleaned, result),
            gauge=score_gauge(result.score),
        )

    def analyze_batch(self, blob: str) -> BatchResult:
        if blob is None or not blob.strip():
            raise InvalidInput("Batch text is empty")
        lines = [line for line in blob.split("\n") if line.strip()]
        logger.info(f"Batch analysis of {len(lines)} line(s)")
        return BatchResult(lines, self.analyze_one)

    def commit(self, record: AnalysisRecord) -> HistoryLog:
        return self.history_store.append(record)

    def commit_batch(self, records: Iterable[AnalysisRecord]) -> List[AnalysisRecord]:
        # every append is independent; earlier commits stay if a later one fails
        committed: List[AnalysisRecord] = []
        for record in records:
            self.history_store.append(record)
            committed.append(record)
        return committed

    def _clean(self, text: str) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise InvalidInput("Text is empty")
        return cleaned

    def _build_record(self, text: str, result: ScoreResult) -> AnalysisRecord:
        return AnalysisRecord(
            id=self.history_store.next_id(),
            text=text,
            score=result.score,
            positive_word_count=len(result.positive_tokens),
            negative_word_count=len(result.negative_tokens),
            timestamp=self.clock(),
        )
