"""Sentiment analysis with a bounded, persistent history."""

__version__ = "1.0.0"
