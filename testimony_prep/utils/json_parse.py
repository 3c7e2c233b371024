"""Best-effort JSON decoding of LLM output.

Each strategy is a pure function ``str -> Optional[value]``; ``best_effort_decode``
tries them in order and returns the first result of the expected type.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional, Type

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[Any]]

FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
ARRAY_RE = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")
OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def parse_strict(text: str) -> Optional[Any]:
    """Strategy 1: the text is already valid JSON"""
    return _loads(text)


def strip_code_fences(text: str) -> str:
    cleaned = text.lstrip("\ufeff").strip()
    cleaned = FENCE_OPEN_RE.sub("", cleaned)
    cleaned = FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned.strip()


def parse_fenced(text: str) -> Optional[Any]:
    """Strategy 2: drop a BOM and Markdown code fences"""
    return _loads(strip_code_fences(text))


def parse_regex_span(text: str) -> Optional[Any]:
    """Strategy 3: regex out the first array-of-objects, else the widest object"""
    for pattern in (ARRAY_RE, OBJECT_RE):
        match = pattern.search(text)
        if match:
            value = _loads(match.group(0))
            if value is not None:
                return value
    return None


def parse_bracket_slice(text: str) -> Optional[Any]:
    """Strategy 4: slice from the first opening bracket to the last closing one"""
    for open_char, close_char in (("[", "]"), ("{", "}")):
        start = text.find(open_char)
        end = text.rfind(close_char)
        if start != -1 and end > start:
            value = _loads(text[start:end + 1])
            if value is not None:
                return value
    return None


DEFAULT_STRATEGIES: List[Strategy] = [
    parse_strict,
    parse_fenced,
    parse_regex_span,
    parse_bracket_slice,
]


def best_effort_decode(
    text: str,
    expect: Optional[Type] = None,
    strategies: Optional[List[Strategy]] = None,
) -> Optional[Any]:
    """Decode JSON from text, trying each strategy until one yields ``expect``"""
    if not text:
        return None
    for strategy in strategies or DEFAULT_STRATEGIES:
        value = strategy(text)
        if value is None:
            continue
        if expect is None or isinstance(value, expect):
            return value
    logger.warning(f"Could not parse JSON from LLM output: {text[:200]}")
    return None
