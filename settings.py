"""Environment-driven settings shared by the index, rank and search scripts."""

from __future__ import annotations

import builtins
import os
import sys

from dotenv import load_dotenv

load_dotenv()
ENVIRONMENT = os.getenv("ENVIRONMENT")


def dprint(*args, **kwargs):
    """Prints only if ENVIRONMENT is not 'prod'."""
    if ENVIRONMENT != "prod":
        kwargs.setdefault("file", sys.stderr)
        builtins.print(*args, **kwargs)


def report(message: str) -> None:
    # operator-facing diagnostics are never silenced
    print(message, file=sys.stderr)


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if not value:
        return default
    try:
        return cast(value)
    except ValueError:
        report(f"Ignoring {name}={value!r}, using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    return _env_number(name, default, int)


def _env_float(name: str, default: float) -> float:
    return _env_number(name, default, float)


DATA_DIR = os.getenv("SEARCH_DATA_DIR", ".")
COLLECTION_FILE = os.getenv("SEARCH_COLLECTION", "collection.txt")
INDEX_FILE = os.getenv("SEARCH_INDEX_FILE", "invertedIndex.txt")
PAGERANK_FILE = os.getenv("SEARCH_PAGERANK_FILE", "pagerankList.txt")

# soft limits, 0 disables the check
MAX_DOCUMENTS = _env_int("SEARCH_MAX_DOCUMENTS", 1000)
MAX_TERMS = _env_int("SEARCH_MAX_TERMS", 100000)

DAMPING = _env_float("SEARCH_DAMPING", 0.85)
TOLERANCE = _env_float("SEARCH_TOLERANCE", 0.0001)
MAX_ITERATIONS = _env_int("SEARCH_MAX_ITERATIONS", 1000)

TOP_K = _env_int("SEARCH_TOP_K", 30)
