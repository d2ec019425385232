#!/usr/bin/env python3
"""Flask web interface for the page search engine."""

from __future__ import annotations

import argparse
from pathlib import Path

from flask import Flask, jsonify, request

from collection import MissingInputError, ResourceLimitError
from search import SearchEngine
from settings import INDEX_FILE, PAGERANK_FILE, TOP_K, report


def create_app(engine: SearchEngine, top_k: int = TOP_K) -> Flask:
    app = Flask(__name__)

    def _get_int(param: str, default: int) -> int:
        try:
            value = request.args.get(param, None)
            parsed = int(value) if value is not None else default
        except (TypeError, ValueError):
            return default
        return parsed if parsed >= 1 else default

    @app.route("/search", methods=["GET"])
    def search_view():
        terms = request.args.get("q", "").split()
        top = _get_int("top", top_k)
        results = engine.search(terms, top_k=top) if terms else []
        return jsonify(
            query=terms,
            results=[
                {"name": result.name, "matches": result.matches, "score": result.score}
                for result in results
            ],
        )

    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the page search web interface")
    parser.add_argument("--index", default=INDEX_FILE)
    parser.add_argument("--pagerank", default=PAGERANK_FILE)
    parser.add_argument("--normalize", action="store_true")
    parser.add_argument("--top", type=int, default=TOP_K)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
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
    app = create_app(engine, top_k=args.top)
    app.run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
