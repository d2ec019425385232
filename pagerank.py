#!/usr/bin/env python3
"""Compute PageRank scores for the page collection's link graph."""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Dict, List, NamedTuple, Sequence, Set, Tuple

from collection import Document, MissingInputError, ResourceLimitError, load_collection, read_manifest
from settings import (
    COLLECTION_FILE,
    DAMPING,
    DATA_DIR,
    MAX_DOCUMENTS,
    MAX_ITERATIONS,
    PAGERANK_FILE,
    TOLERANCE,
    dprint,
    report,
)


DocName = str
Graph = Dict[DocName, Set[DocName]]


class RankEntry(NamedTuple):
    name: DocName
    out_degree: int
    score: float


def build_graph(documents: Sequence[Document]) -> Tuple[List[DocName], Graph]:
    """Return document names in manifest order and the outlink graph.

    Links to pages outside the collection and self-links are dropped.
    """
    # repeated names collapse onto their first occurrence
    unique: Dict[DocName, Document] = {}
    for doc in documents:
        unique.setdefault(doc.name, doc)
    names = list(unique)
    known = set(names)
    adjacency: Graph = {name: set() for name in names}
    for doc in unique.values():
        for link in doc.links:
            if link in known and link != doc.name:
                adjacency[doc.name].add(link)
    return names, adjacency


def check_parameters(damping: float, tol: float, max_iter: int) -> None:
    if not 0.0 <= damping <= 1.0:
        raise ValueError(f"damping must be within [0, 1], got {damping}")
    if tol < 0.0 or math.isnan(tol):
        raise ValueError(f"convergence threshold must be >= 0, got {tol}")
    if max_iter < 1:
        raise ValueError(f"max iterations must be >= 1, got {max_iter}")


def power_iteration(
    doc_names: Sequence[DocName],
    adjacency: Graph,
    damping: float,
    max_iter: int,
    tol: float,
) -> Tuple[Dict[DocName, float], int, float]:
    """Run PageRank power iteration until convergence or max iterations."""
    check_parameters(damping, tol, max_iter)
    doc_names = list(dict.fromkeys(doc_names))
    n = len(doc_names)
    if n == 0:
        return {}, 0, 0.0

    # inbound lists follow manifest order so every run sums in the same order
    inbound: Dict[DocName, List[DocName]] = {doc: [] for doc in doc_names}
    for doc in doc_names:
        for target in adjacency.get(doc, ()):
            inbound[target].append(doc)
    out_degree = {doc: len(adjacency.get(doc, ())) for doc in doc_names}
    dangling = [doc for doc in doc_names if out_degree[doc] == 0]

    # start from uniform probability distribution over all nodes
    rank = {doc: 1.0 / n for doc in doc_names}
    iteration = 0
    delta = float("inf")

    while iteration < max_iter and delta >= tol:
        iteration += 1
        # every new score reads the previous snapshot only
        prev = rank
        # weight sitting on dangling nodes is spread evenly over all n nodes
        dangling_share = sum(prev[doc] for doc in dangling) / n
        rank = {}
        for doc in doc_names:
            incoming = sum(prev[src] / out_degree[src] for src in inbound[doc])
            rank[doc] = (1.0 - damping) / n + damping * (incoming + dangling_share)

        # measure convergence in l1 norm before next iteration
        delta = sum(abs(rank[doc] - prev[doc]) for doc in doc_names)

    return rank, iteration, delta


def rank_table(doc_names: Sequence[DocName], adjacency: Graph, ranks: Dict[DocName, float]) -> List[RankEntry]:
    entries = [
        RankEntry(doc, len(adjacency.get(doc, ())), ranks.get(doc, 0.0))
        for doc in dict.fromkeys(doc_names)
    ]
    # stable sort: equal scores keep manifest order
    return sorted(entries, key=lambda entry: entry.score, reverse=True)


def rank_documents(
    documents: Sequence[Document],
    damping: float = DAMPING,
    tol: float = TOLERANCE,
    max_iter: int = MAX_ITERATIONS,
) -> List[RankEntry]:
    doc_names, adjacency = build_graph(documents)
    ranks, _, _ = power_iteration(doc_names, adjacency, damping, max_iter, tol)
    return rank_table(doc_names, adjacency, ranks)


def write_ranks(entries: Sequence[RankEntry], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        for entry in entries:
            handle.write(f"{entry.name}, {entry.out_degree}, {entry.score:.7f}\n")


def read_ranks(path: Path) -> Dict[DocName, float]:
    """Load ``name, out_degree, score`` lines; lines that do not parse are skipped."""
    scores: Dict[DocName, float] = {}
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise MissingInputError(f"Error opening {path}") from exc
    with handle:
        for line in handle:
            parts = [part.strip() for part in line.split(",")]
            if len(parts) != 3 or not parts[0]:
                continue
            try:
                int(parts[1])
                score = float(parts[2])
            except ValueError:
                continue
            scores[parts[0]] = score
    return scores


def parse_args(argv=None) -> argparse.Namespace:
    # configure cli flags for pagerank computation
    parser = argparse.ArgumentParser(description="Compute PageRank for the page collection")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding the manifest and page files")
    parser.add_argument("--collection", default=COLLECTION_FILE, help="Manifest file name (default: collection.txt)")
    parser.add_argument("--output", default=PAGERANK_FILE, help="Output file for PageRank scores")
    parser.add_argument("--max-documents", type=int, default=MAX_DOCUMENTS, help="Soft limit on manifest size, 0 disables")
    parser.add_argument("--damping", type=float, default=DAMPING, help="Damping factor (default: 0.85)")
    parser.add_argument("--max-iter", type=int, default=MAX_ITERATIONS, help="Maximum iterations")
    parser.add_argument("--tol", type=float, default=TOLERANCE, help="Convergence threshold for L1 delta")
    args = parser.parse_args(argv)
    try:
        check_parameters(args.damping, args.tol, args.max_iter)
    except ValueError as exc:
        parser.error(str(exc))
    return args


def main(argv=None) -> None:
    # parse inputs, build link graph, and run pagerank
    args = parse_args(argv)
    data_dir = Path(args.data_dir)
    try:
        names = read_manifest(data_dir / args.collection, max_documents=args.max_documents)
        # the graph needs every page, so a missing file aborts the run
        documents = load_collection(names, data_dir, strict=True)
    except (MissingInputError, ResourceLimitError) as exc:
        report(str(exc))
        raise SystemExit(1)

    doc_names, adjacency = build_graph(documents)
    ranks, iterations, delta = power_iteration(doc_names, adjacency, args.damping, args.max_iter, args.tol)
    write_ranks(rank_table(doc_names, adjacency, ranks), Path(args.output))

    dprint(f"Processed {len(doc_names)} documents")
    dprint(f"Iterations: {iterations}")
    dprint(f"Final delta: {delta:.6e}")
    dprint(f"Output written to {args.output}")


if __name__ == "__main__":
    main()
