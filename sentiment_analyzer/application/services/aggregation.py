from collections import Counter
from typing import Any, Iterable, Mapping, Union

from ...exceptions import InvalidInput
from ...schemas.analysis.analysis import (
    AnalysisRecord,
    HistorySummary,
    ScoreResult,
    Sentiment,
    WordBreakdown,
)


def _sentiment_of(item: Any) -> Sentiment:
    if isinstance(item, Sentiment):
        return item
    try:
        if isinstance(item, str):
            return Sentiment(item.lower())
        if isinstance(item, Mapping):
            # score wins over a stored label
            if item.get("score") is not None:
                return Sentiment.from_score(float(item["score"]))
            return Sentiment(str(item["sentiment"]).lower())
        return item.sentiment
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise InvalidInput(f"Cannot read a sentiment from {type(item).__name__} item") from e


def summarize(records: Iterable[Union[AnalysisRecord, Sentiment, str, Mapping]]) -> HistorySummary:
    """Count records per sentiment.

    Accepts full records, serialized record dicts, or bare sentiment values
    (``Sentiment`` or its string form) so the same function serves a batch
    result and the whole history.
    """
    counts: Counter = Counter()
    total = 0
    for item in records:
        counts[_sentiment_of(item)] += 1
        total += 1

    return HistorySummary(
        total=total,
        positive_count=counts[Sentiment.POSITIVE],
        negative_count=counts[Sentiment.NEGATIVE],
        neutral_count=counts[Sentiment.NEUTRAL],
    )


def word_breakdown(text: str, result: ScoreResult) -> WordBreakdown:
    positive = len(result.positive_tokens)
    negative = len(result.negative_tokens)
    return WordBreakdown(
        positive_words=positive,
        negative_words=negative,
        neutral_words=max(0, len(result.tokens) - positive - negative),
        total_words=len(text.split()),
    )


def score_gauge(score: float) -> float:
    # maps the usual -10..+10 range onto 0..100
    return max(0.0, min(100.0, (score + 10) * 5.0))
