"""Token normalization for the inverted index."""

from __future__ import annotations

import string
from typing import Optional

TRAILING_PUNCTUATION = ".,:;?*"
SECTION_LABELS = {"Section-1", "Section-2"}
SECTION_MARKERS = ("#start", "#end")
REFERENCE_PREFIX = "url"


def normalize(token: str) -> Optional[str]:
    """Return the canonical term for a raw token, or None when it is rejected."""
    term = token.lower().rstrip(TRAILING_PUNCTUATION)
    if not term or term[0] not in string.ascii_lowercase:
        return None
    return term


def is_reference(token: str, prefix: str = REFERENCE_PREFIX) -> bool:
    """True for document-reference tokens such as ``url11``."""
    rest = token[len(prefix):]
    first = rest[:1]
    return token.startswith(prefix) and first != "" and first in string.digits


def is_metadata(token: str) -> bool:
    # section markers, section labels and reference tokens never reach the index
    if token.startswith(SECTION_MARKERS) or token in SECTION_LABELS:
        return True
    return is_reference(token)
