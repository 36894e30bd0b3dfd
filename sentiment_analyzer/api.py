import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from .application.services.aggregation import summarize
from .application.services.analysis_service import AnalysisService
from .application.services.export_service import CsvExporter
from .application.services.history_store import HistoryStore
from .exceptions import (
    NothingToExport,
    SentimentAnalyzerError,
    create_error_response,
    create_success_response,
)
from .schemas.analysis.analysis import (
    AnalysisRecord,
    AnalysisRecordResponse,
    ExportArtifact,
    Sentiment,
)

logger = logging.getLogger(__name__)


def _record_data(record: AnalysisRecord) -> dict:
    return AnalysisRecordResponse.from_record(record).model_dump(mode="json")


@dataclass
class SentimentAnalyzerAPI:
    """Entry points used by the presentation layer.

    Every method returns a ``{success, data, error, warning}`` envelope.
    ``warning`` carries non-fatal persistence problems; the history shown to
    the user is still the in-memory one.
    """

    analysis_service: AnalysisService
    history_store: HistoryStore
    exporter: CsvExporter

    def analyze_one(self, text: str) -> dict:
        try:
            record = self.analysis_service.analyze_one(text)
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail)
        return create_success_response(_record_data(record))

    def preview(self, text: str) -> dict:
        try:
            preview = self.analysis_service.preview(text)
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail)
        data = preview.model_dump(mode="json", exclude={"record"})
        data["record"] = _record_data(preview.record)
        return create_success_response(data)

    def analyze_batch(self, blob: str, commit: bool = True) -> dict:
        """Analyze each non-blank line and, by default, commit every record."""
        try:
            batch = self.analysis_service.analyze_batch(blob)
            records = list(batch)
            if commit:
                self.analysis_service.commit_batch(records)
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail, warning=self._warning())
        return create_success_response(
            {
                "records": [_record_data(r) for r in records],
                "summary": summarize(records).model_dump(),
            },
            warning=self._warning() if commit else None,
        )

    def commit(self, record: Union[AnalysisRecord, dict]) -> dict:
        try:
            if not isinstance(record, AnalysisRecord):
                record = AnalysisRecord.model_validate(record)
            self.analysis_service.commit(record)
        except ValidationError as exc:
            return create_error_response(f"Invalid record: {exc.error_count()} error(s)")
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail)
        return create_success_response(_record_data(record), warning=self._warning())

    def save(self, text: str) -> dict:
        """Analyze ``text`` and commit the result in one step."""
        try:
            record = self.analysis_service.analyze_one(text)
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail)
        return self.commit(record)

    def summarize(self, records: Iterable[Union[AnalysisRecord, Sentiment, str, dict]]) -> dict:
        """Summarize records, record payloads returned by this API, or sentiment values."""
        try:
            summary = summarize(records)
        except SentimentAnalyzerError as exc:
            return create_error_response(exc.detail)
        return create_success_response(summary.model_dump())

    def summarize_history(self) -> dict:
        return self.summarize(self.history_store.records)

    def load_history(self, reload: bool = False) -> dict:
        records = self.history_store.load() if reload else self.history_store.records
        return create_success_response(
            [_record_data(r) for r in records],
            warning=self._warning() if reload else None,
        )

    def export_csv(self, day: Optional[date] = None) -> dict:
        records = self.history_store.records
        try:
            content = self.exporter.to_csv(records)
            if content is None:
                raise NothingToExport("No history to export")
        except NothingToExport as exc:
            logger.info("Export requested with an empty history")
            return create_error_response(exc.detail)
        artifact = ExportArtifact(
            filename=self.exporter.export_filename(day),
            content=content,
            record_count=len(records),
            generated_at=datetime.now(timezone.utc).isoformat(),
        )
        return create_success_response(artifact.model_dump())

    def clear_history(self) -> dict:
        self.history_store.clear()
        return create_success_response({"total": 0}, warning=self._warning())

    def _warning(self) -> Optional[str]:
        warning = self.history_store.last_warning
        return warning.detail if warning is not None else None


__all__ = ["SentimentAnalyzerAPI"]
