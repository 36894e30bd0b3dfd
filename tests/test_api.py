import re
from datetime import date

import pytest

from sentiment_analyzer.config import Settings
from sentiment_analyzer.infrastructure.persistence.memory_kv_store import InMemoryKeyValueStore
from sentiment_analyzer.main import create_api
from sentiment_analyzer.schemas.analysis.analysis import ScoreResult


class FakeScorer:
    LEXICON = {"love": 3, "hate": -3}

    def score(self, text: str) -> ScoreResult:
        tokens = re.findall(r"[\w']+", text.lower())
        return ScoreResult(
            score=float(sum(self.LEXICON.get(t, 0) for t in tokens)),
            positive_tokens=[t for t in tokens if self.LEXICON.get(t, 0) > 0],
            negative_tokens=[t for t in tokens if self.LEXICON.get(t, 0) < 0],
            tokens=tokens,
        )


class FlakyStore(InMemoryKeyValueStore):
    def __init__(self):
        super().__init__()
        self.broken = False

    def set(self, key, value):
        if self.broken:
            raise OSError("quota exceeded")
        super().set(key, value)


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def api(kv):
    settings = Settings(STORAGE_BACKEND="memory", CSV_DATE_FORMAT="%Y-%m-%d", CSV_TIME_FORMAT="%H:%M:%S")
    return create_api(settings=settings, scorer=FakeScorer(), kv_store=kv)


def test_analyze_one_returns_record_without_saving(api):
    out = api.analyze_one("I love this!")
    assert out["success"] is True
    assert out["data"]["sentiment"] == "positive"
    assert out["data"]["positive_word_count"] == 1
    assert api.load_history()["data"] == []


def test_analyze_one_blank_is_an_error_envelope(api):
    out = api.analyze_one("   ")
    assert out["success"] is False
    assert out["data"] is None
    assert out["error"] == "Text is empty"


def test_commit_accepts_analyze_one_payload(api, kv):
    data = api.analyze_one("I hate that!")["data"]
    out = api.commit(data)

    assert out["success"] is True
    history = api.load_history(reload=True)["data"]
    assert [item["text"] for item in history] == ["I hate that!"]
    assert history[0]["sentiment"] == "negative"
    assert kv.get("sentimentHistory") is not None


def test_commit_rejects_blank_payload(api):
    out = api.commit({"id": 1, "text": "  ", "score": 0, "timestamp": "2024-01-01T00:00:00Z"})
    assert out["success"] is False
    assert api.load_history()["data"] == []


def test_save_analyzes_and_commits(api):
    api.save("I love this!")
    api.save("meh")
    history = api.load_history()["data"]
    assert [item["text"] for item in history] == ["meh", "I love this!"]


def test_analyze_batch_commits_every_line_and_summarizes(api):
    out = api.analyze_batch("I love this!\n\n\nI hate that!\n   \nThis is neutral.")

    assert out["success"] is True
    assert [r["text"] for r in out["data"]["records"]] == ["I love this!", "I hate that!", "This is neutral."]
    assert out["data"]["summary"] == {"total": 3, "positive_count": 1, "negative_count": 1, "neutral_count": 1}
    assert len(api.load_history()["data"]) == 3


def test_analyze_batch_without_commit_leaves_history_alone(api):
    api.analyze_batch("I love this!\nI hate that!", commit=False)
    assert api.load_history()["data"] == []


def test_analyze_batch_blank_is_an_error(api):
    out = api.analyze_batch("\n  \n")
    assert out["success"] is False


def test_export_with_empty_history_signals_nothing_to_export(api):
    out = api.export_csv()
    assert out["success"] is False
    assert out["error"] == "No history to export"


def test_export_csv_returns_named_artifact(api):
    api.save('She said "love it"')
    out = api.export_csv(day=date(2024, 3, 5))

    artifact = out["data"]
    assert artifact["filename"] == "sentiment-analysis-history-2024-03-05.csv"
    assert artifact["record_count"] == 1
    lines = artifact["content"].split("\n")
    assert lines[0] == "Text,Score,Sentiment,Positive Words,Negative Words,Date,Time"
    assert lines[1].startswith('"She said ""love it""",3.0,positive,1,0,')


def test_clear_history_then_reload_is_empty(api, kv):
    api.save("I love this!")
    out = api.clear_history()

    assert out["success"] is True
    assert api.load_history(reload=True)["data"] == []
    assert kv.get("sentimentHistory") is None


def test_summarize_history(api):
    api.analyze_batch("I love this!\nI love that!\nI hate it")
    summary = api.summarize_history()["data"]
    assert summary == {"total": 3, "positive_count": 2, "negative_count": 1, "neutral_count": 0}


def test_persistence_failure_is_reported_as_warning():
    kv = FlakyStore()
    api = create_api(settings=Settings(STORAGE_BACKEND="memory"), scorer=FakeScorer(), kv_store=kv)
    kv.broken = True

    out = api.save("I love this!")

    assert out["success"] is True
    assert "quota exceeded" in out["warning"]
    assert len(api.load_history()["data"]) == 1


def test_corrupt_storage_loads_as_empty_history():
    kv = InMemoryKeyValueStore()
    kv.set("sentimentHistory", "{broken")
    api = create_api(settings=Settings(STORAGE_BACKEND="memory"), scorer=FakeScorer(), kv_store=kv)

    out = api.load_history()
    assert out["success"] is True
    assert out["data"] == []


def test_history_limit_comes_from_settings():
    api = create_api(
        settings=Settings(STORAGE_BACKEND="memory", HISTORY_LIMIT=3),
        scorer=FakeScorer(),
        kv_store=InMemoryKeyValueStore(),
    )
    for i in range(5):
        api.save(f"text {i}")
    assert [item["text"] for item in api.load_history()["data"]] == ["text 4", "text 3", "text 2"]


def test_summarize_accepts_batch_payload(api):
    records = api.analyze_batch("I love it\nI hate it", commit=False)["data"]["records"]
    out = api.summarize(records)

    assert out["success"] is True
    assert out["data"] == {"total": 2, "positive_count": 1, "negative_count": 1, "neutral_count": 0}


def test_summarize_accepts_sentiment_values(api):
    out = api.summarize(["positive", "negative", "neutral"])
    assert out["success"] is True
    assert out["data"]["total"] == 3


def test_summarize_unreadable_item_is_an_error_envelope(api):
    out = api.summarize([{"text": "no score"}])
    assert out["success"] is False
    assert out["data"] is None


def test_commit_same_payload_twice_stores_one_entry(api):
    data = api.analyze_one("I love this!")["data"]
    assert api.commit(data)["success"] is True
    assert api.commit(dict(data))["success"] is True
    assert len(api.load_history()["data"]) == 1


def test_commit_different_record_with_used_id_is_an_error(api):
    data = api.analyze_one("I love this!")["data"]
    api.commit(data)

    out = api.commit({**data, "text": "I hate this!", "score": -3.0})
    assert out["success"] is False
    assert [item["text"] for item in api.load_history(reload=True)["data"]] == ["I love this!"]


def test_reload_after_failed_write_keeps_unsaved_records():
    kv = FlakyStore()
    api = create_api(settings=Settings(STORAGE_BACKEND="memory"), scorer=FakeScorer(), kv_store=kv)
    api.save("I love this!")
    kv.broken = True
    api.save("I hate that!")

    out = api.load_history(reload=True)
    assert [item["text"] for item in out["data"]] == ["I hate that!", "I love this!"]
    assert "quota exceeded" in out["warning"]

    kv.broken = False
    out = api.load_history(reload=True)
    assert [item["text"] for item in out["data"]] == ["I hate that!", "I love this!"]
    assert out["warning"] is None
    assert kv.get("sentimentHistory").count('"text"') == 2
