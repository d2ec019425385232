"""Read the collection manifest and the per-document section files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from settings import MAX_DOCUMENTS, report

LINK_SECTION = "Section-1"
BODY_SECTION = "Section-2"


class MissingInputError(FileNotFoundError):
    """A manifest, document or artifact file could not be opened."""


class ResourceLimitError(RuntimeError):
    """The collection is larger than a configured soft limit."""


@dataclass(frozen=True)
class Document:
    """One named page: its body tokens and its outbound links."""

    name: str
    body: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()


def read_manifest(path: Path, max_documents: int = MAX_DOCUMENTS) -> List[str]:
    try:
        text = Path(path).read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        raise MissingInputError(f"Error opening {path}: {exc.strerror}") from exc
    # a name listed twice is one page, first occurrence kept
    names = list(dict.fromkeys(text.split()))
    if max_documents and len(names) > max_documents:
        raise ResourceLimitError(
            f"{path} lists {len(names)} documents, limit is {max_documents}"
        )
    return names


def parse_document(name: str, text: str) -> Document:
    """Split a document into its link and body sections.

    A section runs from ``#start <label>`` to ``#end <label>``. Tokens outside
    an open section are ignored, and a section missing its end marker runs to
    the end of the file.
    """
    body: List[str] = []
    links: List[str] = []
    seen_links = set()
    section: Optional[str] = None
    marker: Optional[str] = None

    for token in text.split():
        if marker is not None:
            # the token after a marker is the section label
            section = token if marker == "#start" else None
            marker = None
            continue
        if token in ("#start", "#end"):
            marker = token
            continue
        if section == BODY_SECTION:
            body.append(token)
        elif section == LINK_SECTION and token not in seen_links:
            seen_links.add(token)
            links.append(token)

    return Document(name=name, body=tuple(body), links=tuple(links))


def document_path(name: str, base_dir: Path) -> Path:
    return Path(base_dir) / f"{name}.txt"


def load_document(name: str, base_dir: Path) -> Document:
    path = document_path(name, base_dir)
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        raise MissingInputError(f"Error opening input file: {path}") from exc
    return parse_document(name, text)


def load_collection(names: Iterable[str], base_dir: Path, strict: bool = True) -> List[Document]:
    """Load every named document.

    With ``strict`` a missing file propagates; otherwise it is reported on
    stderr and skipped.
    """
    documents: List[Document] = []
    for name in names:
        try:
            documents.append(load_document(name, base_dir))
        except MissingInputError as exc:
            if strict:
                raise
            report(str(exc))
    return documents
