"""
Word, page and reading-time estimates for a document.

MIT License - Copyright (c) 2025 BookMagic
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Dict

from .toc import strip_toc

WORDS_PER_PAGE = 250
WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r'<[^>]*>')
_STYLE_OR_SCRIPT_RE = re.compile(r'<(style|script)\b[^>]*>[\s\S]*?</\1\s*>', re.IGNORECASE)
_HEAD_RE = re.compile(r'<head\b[^>]*>[\s\S]*?</head\s*>', re.IGNORECASE)
_WHITESPACE_RE = re.compile(r'\s+')


@dataclass(frozen=True)
class DocumentStats:
    word_count: int
    page_count: int
    reading_time_minutes: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def html_to_plain_text(html: str) -> str:
    """Strip stylesheets, scripts and tags; collapse whitespace."""
    text = _STYLE_OR_SCRIPT_RE.sub(' ', html)
    text = _TAG_RE.sub(' ', text)
    return _WHITESPACE_RE.sub(' ', text).strip()


def document_stats(html: str) -> DocumentStats:
    """Estimate from the body text only.

    The document head and any generated contents page are left out, so a
    styled document counts the same as the HTML it was built from.
    """
    body = strip_toc(_HEAD_RE.sub(' ', html))
    words = len(html_to_plain_text(body).split())
    return DocumentStats(
        word_count=words,
        page_count=math.ceil(words / WORDS_PER_PAGE),
        reading_time_minutes=math.ceil(words / WORDS_PER_MINUTE),
    )
