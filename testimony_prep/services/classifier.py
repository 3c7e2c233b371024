"""Document type detection from filename and content keywords"""

import re
from typing import Callable, List, Optional, Tuple

from testimony_prep.models.document import DocumentType

EXHIBIT_NUMBER_RE = re.compile(r"ex[-_]?\d+", re.IGNORECASE)


def _has_any(text: str, words: Tuple[str, ...]) -> bool:
    return any(word in text for word in words)


# Ordered rules, first match wins. Each rule sees the lowercased name and content.
RULES: List[Tuple[DocumentType, Callable[[str, str], bool]]] = [
    (
        DocumentType.TRANSCRIPT,
        lambda name, content: _has_any(name, ("transcript", "deposition"))
        or _has_any(content, ("q:", "a:")),
    ),
    (
        DocumentType.PRIOR_TESTIMONY,
        lambda name, content: _has_any(name, ("testimony", "statement"))
        or _has_any(content, ("sworn", "under oath")),
    ),
    (
        DocumentType.EXHIBIT,
        lambda name, content: "exhibit" in name or bool(EXHIBIT_NUMBER_RE.search(name)),
    ),
    (
        DocumentType.CASE_FILE,
        lambda name, content: _has_any(name, ("complaint", "motion", "brief", "filing")),
    ),
]


def classify(filename: str, content: Optional[str] = None) -> DocumentType:
    """Detect the document type; precedence follows the order of RULES"""
    name = filename.lower()
    text = (content or "").lower()
    for doc_type, matches in RULES:
        if matches(name, text):
            return doc_type
    return DocumentType.OTHER
