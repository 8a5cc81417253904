import json

import gradio as gr

from skript_search.app.app import SkriptSearchApp, build_corpus, build_engine_factory
from skript_search.app.config import SearchSettings
from skript_search.app.services.engines import RapidFuzzEngine, SubstringEngine

from conftest import SAMPLE_CORPUS


def test_engine_factory_follows_settings(sample_entries):
    substring = build_engine_factory(SearchSettings(engine="substring"))
    fuzzy = build_engine_factory(SearchSettings(fuzzy_cutoff=80))

    assert substring is SubstringEngine
    assert isinstance(fuzzy(sample_entries), RapidFuzzEngine)


def test_local_corpus_path_wins_over_url(tmp_path):
    settings = SearchSettings(corpus_path=str(tmp_path / "corpus.json"), fetch_retries=4)

    corpus = build_corpus(settings)

    assert corpus.url is None
    assert corpus.source == str(tmp_path / "corpus.json")


def test_url_corpus_by_default():
    corpus = build_corpus(SearchSettings())

    assert corpus.source == SearchSettings().corpus_url
    assert corpus.addons == SearchSettings().addons


def test_app_renders_results_from_injected_corpus(corpus):
    app = SkriptSearchApp(SearchSettings(engine="substring"), corpus=corpus)

    html = app.render("player", short=True)

    assert "for 4 results" in html
    assert app.orchestrator.recent_queries() == ["player"]


def test_reload_corpus_reads_the_source_again(tmp_path):
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(SAMPLE_CORPUS), encoding="utf-8")
    app = SkriptSearchApp(SearchSettings(corpus_path=str(path), addons=()))
    assert len(app.search("give")) >= 1

    path.write_text(json.dumps(SAMPLE_CORPUS[:1]), encoding="utf-8")

    assert app.reload_corpus() == 1
    assert [entry.title for entry in app.search("give").entries] == ["Give"]


def test_app_builds_gradio_interface(corpus):
    app = SkriptSearchApp(SearchSettings(), corpus=corpus)

    assert isinstance(app.create_gradio_interface(), gr.Blocks)
