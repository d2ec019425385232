#!/usr/bin/env python3
"""Build the inverted index (term -> documents) for the collection."""

from __future__ import annotations

import argparse
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from collection import Document, MissingInputError, ResourceLimitError, load_collection, read_manifest
from normalizer import is_metadata, normalize
from settings import COLLECTION_FILE, DATA_DIR, INDEX_FILE, MAX_DOCUMENTS, MAX_TERMS, dprint, report


class InvertedIndex:
    """Maps each term to the set of documents containing it."""

    def __init__(self, max_terms: int = MAX_TERMS) -> None:
        self.max_terms = max_terms
        self._postings: Dict[str, Set[str]] = defaultdict(set)

    def add(self, term: str, name: str) -> None:
        if term not in self._postings and self.max_terms and len(self._postings) >= self.max_terms:
            raise ResourceLimitError(f"Index exceeds {self.max_terms} terms")
        self._postings[term].add(name)

    def get(self, term: str) -> List[str]:
        # empty list for unknown terms, without creating an entry
        if term not in self._postings:
            return []
        return sorted(self._postings[term])

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for term in sorted(self._postings):
            yield term, sorted(self._postings[term])

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def __len__(self) -> int:
        return len(self._postings)


def index_terms(document: Document) -> Iterator[str]:
    for token in document.body:
        if is_metadata(token):
            continue
        term = normalize(token)
        if term is not None:
            yield term


def build_index(documents: Iterable[Document], max_terms: int = MAX_TERMS) -> InvertedIndex:
    index = InvertedIndex(max_terms=max_terms)
    for document in documents:
        dprint(f"Processing file: {document.name}")
        for term in index_terms(document):
            index.add(term, document.name)
    return index


def write_index(index: InvertedIndex, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        for term, names in index.items():
            handle.write(" ".join([term, *names]) + "\n")


def read_index(path: Path, max_terms: int = MAX_TERMS) -> InvertedIndex:
    index = InvertedIndex(max_terms=max_terms)
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise MissingInputError(f"Error opening {path}") from exc
    with handle:
        for line in handle:
            parts = line.split()
            if not parts:
                continue
            term, names = parts[0], parts[1:]
            for name in names:
                index.add(term, name)
    return index


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build inverted index for the page collection")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding the manifest and page files")
    parser.add_argument("--collection", default=COLLECTION_FILE, help="Manifest file name (default: collection.txt)")
    parser.add_argument("--output", default=INDEX_FILE, help="Index output path (default: invertedIndex.txt)")
    parser.add_argument("--max-documents", type=int, default=MAX_DOCUMENTS, help="Soft limit on manifest size, 0 disables")
    parser.add_argument("--max-terms", type=int, default=MAX_TERMS, help="Soft limit on distinct terms, 0 disables")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    data_dir = Path(args.data_dir)
    try:
        names = read_manifest(data_dir / args.collection, max_documents=args.max_documents)
        # unreadable pages are reported and skipped
        documents = load_collection(names, data_dir, strict=False)
        index = build_index(documents, max_terms=args.max_terms)
    except (MissingInputError, ResourceLimitError) as exc:
        report(str(exc))
        raise SystemExit(1)

    write_index(index, Path(args.output))
    dprint(f"Indexed {len(documents)} documents, vocabulary size {len(index)}")


if __name__ == "__main__":
    main()
