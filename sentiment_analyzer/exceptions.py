from typing import Any, Optional


class SentimentAnalyzerError(Exception):
    """Base class for every recoverable error raised by the analyzer."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInput(SentimentAnalyzerError):
    """Blank text was submitted for analysis or reached the history store."""


class PersistenceCorrupt(SentimentAnalyzerError):
    """The stored history payload could not be decoded."""


class PersistenceUnavailable(SentimentAnalyzerError):
    """The backing store rejected a write or delete."""


class NothingToExport(SentimentAnalyzerError):
    """Export was requested while the history is empty."""


def create_error_response(error_message: str, warning: Optional[str] = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message,
        "warning": warning,
    }


def create_success_response(data: Any, warning: Optional[str] = None) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None,
        "warning": warning,
    }
