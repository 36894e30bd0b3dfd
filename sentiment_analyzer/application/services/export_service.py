import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ...schemas.analysis.analysis import AnalysisRecord

logger = logging.getLogger(__name__)

CSV_HEADER = ("Text", "Score", "Sentiment", "Positive Words", "Negative Words", "Date", "Time")


def quote_text(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def quote_if_needed(value: str) -> str:
    if "," in value or '"' in value or "\n" in value:
        return quote_text(value)
    return value


def format_score(score: float) -> str:
    """Render a score with exactly one decimal, rounding halves away from zero."""
    rounded = Decimal(score).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "0.0"
    return str(rounded)


@dataclass
class CsvExporter:
    date_format: str = "%x"
    time_format: str = "%X"
    filename_prefix: str = "sentiment-analysis-history"

    def to_csv(self, records: Iterable[AnalysisRecord]) -> Optional[str]:
        """Serialize records in the given order.

        Returns ``None`` when there is nothing to export so callers can warn
        instead of offering a header-only file.
        """
        rows = [self._row(record) for record in records]
        if not rows:
            return None
        logger.info(f"Exported {len(rows)} record(s) to CSV")
        return "\n".join([",".join(CSV_HEADER)] + rows)

    def export_filename(self, day: Optional[date] = None) -> str:
        day = day or datetime.now(timezone.utc).date()
        return f"{self.filename_prefix}-{day.isoformat()}.csv"

    def _row(self, record: AnalysisRecord) -> str:
        local = record.timestamp.astimezone()
        return ",".join([
            quote_text(record.text),
            format_score(record.score),
            record.sentiment.value,
            str(record.positive_word_count),
            str(record.negative_word_count),
            quote_if_needed(local.strftime(self.date_format)),
            quote_if_needed(local.strftime(self.time_format)),
        ])
