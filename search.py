#!/usr/bin/env python3
"""Rank pages for a set of search terms using match counts and PageRank."""

from __future__ import annotations

import argparse
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence

from collection import MissingInputError, ResourceLimitError
from invert import InvertedIndex, read_index
from normalizer import normalize
from pagerank import read_ranks
from settings import INDEX_FILE, MAX_TERMS, PAGERANK_FILE, TOP_K, dprint, report


class SearchResult(NamedTuple):
    name: str
    matches: int
    score: float


def count_matches(terms: Sequence[str], index: InvertedIndex) -> Dict[str, int]:
    # each distinct query term counts once per document
    matches: Dict[str, int] = defaultdict(int)
    for term in dict.fromkeys(terms):
        for name in index.get(term):
            matches[name] += 1
    return matches


def search(
    terms: Sequence[str],
    index: InvertedIndex,
    ranks: Dict[str, float],
    top_k: int = TOP_K,
) -> List[SearchResult]:
    """Return the top ``top_k`` pages matching any term.

    Terms are matched literally. Pages missing from the rank table are never
    returned. Order is match count, then PageRank, both descending, then name.
    """
    if top_k < 1:
        raise ValueError(f"top_k must be >= 1, got {top_k}")
    matches = count_matches(terms, index)
    results = [
        SearchResult(name, count, ranks[name])
        for name, count in matches.items()
        if count > 0 and name in ranks
    ]
    results.sort(key=lambda result: (-result.matches, -result.score, result.name))
    return results[:top_k]


class SearchEngine:
    """Keeps the loaded index and rank table for repeated queries."""

    def __init__(
        self,
        index_path: Path,
        pagerank_path: Path,
        normalize_terms: bool = False,
        max_terms: int = MAX_TERMS,
    ) -> None:
        self.index = read_index(index_path, max_terms=max_terms)
        self.ranks = read_ranks(pagerank_path)
        self.normalize_terms = normalize_terms
        dprint(f"Loaded {len(self.index)} terms and {len(self.ranks)} ranked pages")

    def prepare_terms(self, terms: Sequence[str]) -> List[str]:
        if not self.normalize_terms:
            return list(terms)
        prepared: List[Optional[str]] = [normalize(term) for term in terms]
        return [term for term in prepared if term is not None]

    def search(self, terms: Sequence[str], top_k: int = TOP_K) -> List[SearchResult]:
        return search(self.prepare_terms(terms), self.index, self.ranks, top_k=top_k)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search the page collection")
    parser.add_argument("terms", nargs="+", help="Search terms, matched exactly against indexed terms")
    parser.add_argument("--index", default=INDEX_FILE, help="Inverted index path (default: invertedIndex.txt)")
    parser.add_argument("--pagerank", default=PAGERANK_FILE, help="PageRank list path (default: pagerankList.txt)")
    parser.add_argument("--top", type=int, default=TOP_K, help="Number of results to print (default: 30)")
    parser.add_argument("--normalize", action="store_true", help="Normalize query terms like indexed terms")
    args = parser.parse_args(argv)
    if args.top < 1:
        parser.error(f"--top must be >= 1, got {args.top}")
    return args


def main(argv=None) -> None:
    args = parse_args(argv)
    try:
        engine = SearchEngine(Path(args.index), Path(args.pagerank), normalize_terms=args.normalize)
    except (MissingInputError, ResourceLimitError) as exc:
        report(str(exc))
        raise SystemExit(1)

    for result in engine.search(args.terms, top_k=args.top):
        print(result.name)


if __name__ == "__main__":
    main()
