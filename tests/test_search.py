"""Tests for query matching, ordering and the search command line."""

from __future__ import annotations

import pytest

import invert
import pagerank
import search
from invert import InvertedIndex
from search import SearchEngine, SearchResult, count_matches


def make_index(postings):
    index = InvertedIndex()
    for term, names in postings.items():
        for name in names:
            index.add(term, name)
    return index


@pytest.fixture
def pets():
    index = make_index({"cat": ["A", "B"], "dog": ["B", "C"]})
    ranks = {"A": 0.5, "B": 0.3, "C": 0.2}
    return index, ranks


def test_match_count_then_score(pets):
    index, ranks = pets
    results = search.search(["cat", "dog"], index, ranks)
    assert results == [
        SearchResult("B", 2, 0.3),
        SearchResult("A", 1, 0.5),
        SearchResult("C", 1, 0.2),
    ]


def test_repeated_term_counts_once(pets):
    index, ranks = pets
    assert count_matches(["cat", "cat"], index) == {"A": 1, "B": 1}
    assert [result.name for result in search.search(["cat", "cat", "dog"], index, ranks)] == ["B", "A", "C"]


def test_query_terms_are_literal(pets):
    index, ranks = pets
    assert search.search(["Cat"], index, ranks) == []
    assert [result.name for result in search.search(["Cat", "dog"], index, ranks)] == ["B", "C"]


def test_name_breaks_score_ties():
    index = make_index({"x": ["zeta", "alpha", "mid"]})
    ranks = {"zeta": 0.1, "alpha": 0.1, "mid": 0.1}
    assert [result.name for result in search.search(["x"], index, ranks)] == ["alpha", "mid", "zeta"]


def test_unranked_pages_are_excluded(pets):
    index, ranks = pets
    del ranks["B"]
    assert [result.name for result in search.search(["cat", "dog"], index, ranks)] == ["A", "C"]


def test_no_match_is_empty(pets):
    index, ranks = pets
    assert search.search(["bird"], index, ranks) == []


def test_results_capped_at_top_k():
    names = [f"p{i:02d}" for i in range(40)]
    index = make_index({"x": names})
    ranks = {name: 1.0 - i / 100 for i, name in enumerate(names)}
    results = search.search(["x"], index, ranks)
    assert len(results) == 30
    assert [result.name for result in results] == names[:30]
    assert len(search.search(["x"], index, ranks, top_k=5)) == 5


@pytest.fixture
def artifacts(small_collection, tmp_path):
    index_path = tmp_path / "invertedIndex.txt"
    rank_path = tmp_path / "pagerankList.txt"
    invert.main(["--data-dir", str(small_collection), "--output", str(index_path)])
    pagerank.main(["--data-dir", str(small_collection), "--output", str(rank_path)])
    return index_path, rank_path


def test_engine_end_to_end(artifacts):
    engine = SearchEngine(*artifacts)
    assert [result.name for result in engine.search(["mars", "moons"])] == ["url21", "url11"]
    assert [result.name for result in engine.search(["sun", "mars"])] == ["url31", "url21", "url11"]
    assert engine.search(["Mars"]) == []


def test_engine_can_normalize_query_terms(artifacts):
    engine = SearchEngine(*artifacts, normalize_terms=True)
    assert [result.name for result in engine.search(["Mars.", "2020"])] == ["url21", "url11"]


def test_main_prints_one_name_per_line(artifacts, capsys):
    index_path, rank_path = artifacts
    search.main(["craters", "sun", "--index", str(index_path), "--pagerank", str(rank_path)])
    assert capsys.readouterr().out == "url31\nurl11\n"


def test_main_no_match_prints_nothing(artifacts, capsys):
    index_path, rank_path = artifacts
    search.main(["jupiter", "--index", str(index_path), "--pagerank", str(rank_path)])
    assert capsys.readouterr().out == ""


def test_main_missing_artifact_is_fatal(artifacts, tmp_path, capsys):
    index_path, _ = artifacts
    with pytest.raises(SystemExit) as excinfo:
        search.main(["mars", "--index", str(index_path), "--pagerank", str(tmp_path / "missing.txt")])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing.txt" in captured.err


def test_main_requires_a_term():
    with pytest.raises(SystemExit) as excinfo:
        search.main([])
    assert excinfo.value.code == 2


def test_non_positive_top_k_rejected(pets):
    index, ranks = pets
    with pytest.raises(ValueError):
        search.search(["cat"], index, ranks, top_k=0)
    with pytest.raises(ValueError):
        search.search(["cat"], index, ranks, top_k=-1)


@pytest.mark.parametrize("top", ["0", "-1"])
def test_main_rejects_non_positive_top(artifacts, top):
    index_path, rank_path = artifacts
    with pytest.raises(SystemExit) as excinfo:
        search.main(["mars", "--index", str(index_path), "--pagerank", str(rank_path), "--top", top])
    assert excinfo.value.code == 2
