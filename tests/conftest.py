"""Pytest fixtures that lay out small page collections on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence

import pytest


def page_text(links: Sequence[str] = (), body: str = "") -> str:
    return "\n".join(
        [
            "#start Section-1",
            " ".join(links),
            "#end Section-1",
            "",
            "#start Section-2",
            body,
            "#end Section-2",
            "",
        ]
    )


def write_collection(root: Path, pages: Dict[str, str], manifest: Sequence[str] = None) -> Path:
    names = list(pages) if manifest is None else list(manifest)
    (root / "collection.txt").write_text(" ".join(names) + "\n", encoding="utf-8")
    for name, text in pages.items():
        (root / f"{name}.txt").write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def small_collection(tmp_path):
    pages = {
        "url11": page_text(["url21", "url31"], "Mars has craters. Its moons are small."),
        "url21": page_text(["url31", "url21"], "Moons, moons: and more moons; of Mars?"),
        "url31": page_text([], "Sun* url11 2020 Section-2 ..."),
    }
    return write_collection(tmp_path, pages)
