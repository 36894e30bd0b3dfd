import re
from typing import List

from afinn import Afinn

from ...application.ports.scorer import Scorer
from ...schemas.analysis.analysis import ScoreResult


class AfinnScorer(Scorer):
    """Lexicon scorer backed by the AFINN-165 word list.

    Each token contributes its AFINN valence; a token that directly follows
    a negator contributes the opposite valence.
    """

    NEGATORS = frozenset({
        "not", "no", "never", "nor", "neither", "cannot",
        "don't", "dont", "doesn't", "doesnt", "didn't", "didnt",
        "isn't", "isnt", "wasn't", "wasnt", "aren't", "arent",
        "can't", "cant", "won't", "wont", "shouldn't", "wouldn't", "couldn't",
        "ain't", "aint",
    })

    def __init__(self, language: str = "en", emoticons: bool = False) -> None:
        self.afinn = Afinn(language=language, emoticons=emoticons)
        self._token_re = re.compile(r"[\w'\-]+")

    def tokenize(self, text: str) -> List[str]:
        return self._token_re.findall(text.lower())

    def score(self, text: str) -> ScoreResult:
        tokens = self.tokenize(text)
        total = 0.0
        positive: List[str] = []
        negative: List[str] = []

        for i, token in enumerate(tokens):
            value = self.afinn.score(token)
            if value == 0:
                continue
            if i > 0 and tokens[i - 1] in self.NEGATORS:
                value = -value
            total += value
            if value > 0:
                positive.append(token)
            else:
                negative.append(token)

        return ScoreResult(
            score=total,
            positive_tokens=positive,
            negative_tokens=negative,
            tokens=tokens,
        )
