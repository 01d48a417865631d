# -*- coding: utf-8 -*-
"""
Query tokenization and text preview helpers.

tokenize_query is shared by keyword scoring (stopwords removed) and graph node
matching (stopwords kept, since entity names can be stopwords).
"""
import re
from typing import List

STOPWORDS = frozenset([
    "the", "and", "for", "that", "with", "this", "from", "have", "your",
    "you", "are", "was", "were", "but", "not", "can", "will", "would",
    "could", "should", "into", "about", "what", "when", "where", "which",
    "how", "why", "then", "than", "their", "there", "here", "them",
    "they", "our", "out", "all", "any", "just", "like", "more", "some",
    "such", "also", "its", "over", "under", "between", "in", "on", "of",
    "to", "as", "at", "by", "is", "it", "a", "an",
])

_NON_WORD = re.compile(r'\W+', re.ASCII)
_WHITESPACE = re.compile(r'\s+')


def tokenize_query(
    query: str,
    remove_stopwords: bool = False,
    min_length: int = 3,
) -> List[str]:
    """
    Lowercase, split on ASCII non-word characters, filter by length, dedupe.

    Non-ASCII letters act as separators, so "café" yields "caf", which
    still matches "cafe" as a substring.

    Args:
        query: Raw query text
        remove_stopwords: Drop tokens found in STOPWORDS
        min_length: Minimum token length kept

    Returns:
        Unique tokens in order of first occurrence
    """
    tokens = [t for t in _NON_WORD.split(query.lower()) if len(t) >= min_length]

    if remove_stopwords:
        tokens = [t for t in tokens if t not in STOPWORDS]

    return list(dict.fromkeys(tokens))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text).strip()


def get_preview(text: str, max_chars: int = 200) -> str:
    """Whitespace-collapsed preview, cut at max_chars with a trailing '...'."""
    normalized = collapse_whitespace(text)
    if len(normalized) <= max_chars:
        return normalized
    return normalized[:max_chars] + "..."
