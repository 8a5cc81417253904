from skript_search.app.services.engines import RapidFuzzEngine, SubstringEngine


def test_rapidfuzz_exact_title_scores_highest(sample_entries):
    engine = RapidFuzzEngine(sample_entries)

    results = engine.search("player")

    top_entry, top_score = results[0]
    assert top_entry.title == "Player"
    assert top_score == 1.0
    assert all(0.5 <= score <= 1.0 for _, score in results)
    scores = [score for _, score in results]
    assert scores == sorted(scores, reverse=True)


def test_rapidfuzz_lists_each_entry_once(sample_entries):
    results = RapidFuzzEngine(sample_entries).search("player")
    titles = [entry.title for entry, _ in results]

    assert len(titles) == len(set(titles))


def test_rapidfuzz_unrelated_query_has_no_results(sample_entries):
    assert RapidFuzzEngine(sample_entries).search("qqqq") == []


def test_rapidfuzz_empty_inputs():
    assert RapidFuzzEngine([]).search("player") == []


def test_rapidfuzz_empty_query(sample_entries):
    assert RapidFuzzEngine(sample_entries).search("") == []


def test_substring_engine_matches_title_syntax_and_category(sample_entries):
    engine = SubstringEngine(sample_entries)

    titles = [entry.title for entry, _ in engine.search("PLAYER")]

    assert titles == ["Give", "Player", "Join", "Offline Player"]
    # "%itemtypes%" in the Give syntax also contains "type"
    assert [entry.title for entry, _ in engine.search("type")] == ["Give", "Player", "Offline Player"]
    assert engine.search("") == []


def test_substring_engine_ignores_addon(sample_entries):
    assert SubstringEngine(sample_entries).search("particle") == [(sample_entries[5], 1.0)]
    assert SubstringEngine(sample_entries).search("skript-particle") == []
