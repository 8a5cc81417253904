import json

import pytest
import requests

from skript_search.app.data.corpus import CorpusContext, filter_addons, parse_corpus
from skript_search.app.errors import CorpusUnavailableError
from skript_search.core.entries import Entry

from conftest import SAMPLE_CORPUS


class FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self._payload


class FakeSession:
    """Replays queued responses or raises queued exceptions."""

    def __init__(self, *replies) -> None:
        self._replies = list(replies)
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


def _write(tmp_path, payload, name="corpus.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parse_corpus_accepts_list_and_results_wrapper():
    from_list, skipped = parse_corpus(SAMPLE_CORPUS)
    from_wrapper, _ = parse_corpus({"results": SAMPLE_CORPUS})

    assert skipped == 0
    assert len(from_list) == len(SAMPLE_CORPUS)
    assert from_list == from_wrapper


def test_parse_corpus_skips_non_objects():
    entries, skipped = parse_corpus([SAMPLE_CORPUS[0], "oops", 3, None])

    assert [entry.title for entry in entries] == ["Give"]
    assert skipped == 3


@pytest.mark.parametrize("payload", [{"data": []}, "text", 42, {"results": "nope"}])
def test_parse_corpus_rejects_other_shapes(payload):
    with pytest.raises(ValueError):
        parse_corpus(payload)


def test_filter_addons_is_case_insensitive(sample_entries):
    kept = filter_addons(sample_entries, ["SKRIPT-PARTICLE"])

    assert [entry.title for entry in kept] == ["Particle Shape"]
    assert filter_addons(sample_entries, []) == sample_entries
    assert filter_addons([Entry(title="Bare", category="Effect")], ["Skript"]) == []


def test_load_from_file(tmp_path):
    path = _write(tmp_path, {"results": SAMPLE_CORPUS})
    context = CorpusContext(path=path, addons=["Skript"])

    entries = context.load()

    assert context.is_loaded
    assert context.generation == 1
    assert len(entries) == 5
    assert all(entry.addon == "Skript" for entry in entries)
    assert context.source == str(path)


def test_load_is_cached_until_forced(tmp_path):
    path = _write(tmp_path, SAMPLE_CORPUS)
    context = CorpusContext(path=path)
    first = context.load()

    _write(tmp_path, SAMPLE_CORPUS[:1])

    assert context.load() is first
    assert context.generation == 1
    assert len(context.load(force=True)) == 1
    assert context.generation == 2


def test_invalidate_forces_a_reload(tmp_path):
    path = _write(tmp_path, SAMPLE_CORPUS)
    context = CorpusContext(path=path)
    context.load()

    context.invalidate()

    assert not context.is_loaded
    with pytest.raises(CorpusUnavailableError):
        context.entries
    _write(tmp_path, SAMPLE_CORPUS[:2])
    assert len(context.ensure_loaded()) == 2
    assert context.generation == 2


def test_missing_file_fails_after_one_attempt(tmp_path):
    sleeps = []
    context = CorpusContext(path=tmp_path / "missing.json", retries=5, sleep=sleeps.append)

    with pytest.raises(CorpusUnavailableError) as excinfo:
        context.load()

    assert excinfo.value.attempts == 1
    assert sleeps == []
    assert not context.is_loaded


def test_invalid_payload_is_reported(tmp_path):
    context = CorpusContext(path=_write(tmp_path, {"data": []}))

    with pytest.raises(CorpusUnavailableError, match="results"):
        context.load()


def test_url_fetch_retries_then_succeeds():
    sleeps = []
    session = FakeSession(
        requests.ConnectionError("backend waking up"),
        FakeResponse({"results": SAMPLE_CORPUS}),
    )
    context = CorpusContext(
        url="https://example.invalid/all",
        session=session,
        retry_delay=0.5,
        timeout=3.0,
        sleep=sleeps.append,
    )

    entries = context.load()

    assert len(entries) == len(SAMPLE_CORPUS)
    assert sleeps == [0.5]
    assert session.calls == [("https://example.invalid/all", 3.0)] * 2


def test_url_fetch_gives_up_after_all_attempts():
    sleeps = []
    session = FakeSession(
        FakeResponse(None, status_code=503),
        requests.Timeout("slow"),
        FakeResponse(None, status_code=502),
    )
    context = CorpusContext(
        url="https://example.invalid/all",
        session=session,
        retries=3,
        retry_delay=1.0,
        sleep=sleeps.append,
    )

    with pytest.raises(CorpusUnavailableError) as excinfo:
        context.load()

    assert excinfo.value.attempts == 3
    assert "502" in excinfo.value.reason
    assert sleeps == [1.0, 1.0]


def test_context_requires_a_source():
    with pytest.raises(ValueError):
        CorpusContext()


def test_from_entries_is_preloaded(sample_entries):
    context = CorpusContext.from_entries(sample_entries)

    assert context.is_loaded
    assert list(context.entries) == sample_entries
