"""Regex fact extraction used to build offline fallback analyses"""

import re
from typing import Iterable, List

from pydantic import BaseModel

from testimony_prep.models.document import Document

NAME_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2}\b")
DATE_RE = re.compile(
    r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+\d{1,2},?\s+\d{4}\b|\b\d{1,2}/\d{1,2}/\d{2,4}\b|\b\d{4}-\d{2}-\d{2}\b",
    re.IGNORECASE,
)
AMOUNT_RE = re.compile(
    r"\$[\d,]+(?:\.\d{2})?|\b\d{1,3}(?:,\d{3})+(?:\.\d{2})?\s*(?:dollars?|USD)?\b",
    re.IGNORECASE,
)
LOCATION_RE = re.compile(r"\b(?:in|at|from|to)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?(?:,\s*[A-Z]{2})?)\b")
PHRASE_RE = re.compile(
    r"\"[^\"]{10,100}\"|'[^']{10,100}'|stated that [^.]{10,80}|claimed that [^.]{10,80}"
    r"|testified that [^.]{10,80}",
    re.IGNORECASE,
)
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


class DocumentSummary(BaseModel):
    name: str
    summary: str


class DocumentDetails(BaseModel):
    """Names, dates, amounts and quotes pulled from the document text"""
    names: List[str] = []
    dates: List[str] = []
    amounts: List[str] = []
    locations: List[str] = []
    key_phrases: List[str] = []
    document_summaries: List[DocumentSummary] = []


def _add_unique(target: List[str], values: Iterable[str]) -> None:
    for value in values:
        if value not in target:
            target.append(value)


def extract_document_details(documents: List[Document]) -> DocumentDetails:
    """Collect a handful of salient facts per document, in first-seen order"""
    details = DocumentDetails()

    for doc in documents:
        content = doc.content or ""

        _add_unique(details.names, [m.group(0) for m in NAME_RE.finditer(content)][:5])
        _add_unique(details.dates, [m.group(0) for m in DATE_RE.finditer(content)][:5])
        _add_unique(details.amounts, [m.group(0) for m in AMOUNT_RE.finditer(content)][:3])
        _add_unique(details.locations, [m.group(1) for m in LOCATION_RE.finditer(content)][:3])
        _add_unique(details.key_phrases, [m.group(0) for m in PHRASE_RE.finditer(content)][:3])

        sentences = [s for s in SENTENCE_SPLIT_RE.split(content) if len(s.strip()) > 20][:2]
        if sentences:
            details.document_summaries.append(
                DocumentSummary(name=doc.name, summary=". ".join(sentences).strip()[:200])
            )

    return details
