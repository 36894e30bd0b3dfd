from typing import Protocol

from ...schemas.analysis.analysis import ScoreResult


class Scorer(Protocol):
    def score(self, text: str) -> ScoreResult:
        ...
