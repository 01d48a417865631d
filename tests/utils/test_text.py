# -*- coding: utf-8 -*-
"""
Module: test_text.py
Package: tests.utils
Purpose: Unit tests for query tokenization and previews
"""

# Standard library
import sys
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Local
from hybrid_rag.utils.text import STOPWORDS, get_preview, tokenize_query


class TestTokenizeQuery:

    def test_lowercases_splits_and_dedupes(self):
        assert tokenize_query("Zelda: zelda, ZELDA and Link!") == ["zelda", "and", "link"]

    def test_min_length(self):
        assert tokenize_query("an ox ate hay") == ["ate", "hay"]
        assert tokenize_query("an ox ate hay", min_length=2) == ["an", "ox", "ate", "hay"]

    def test_stopwords_optional(self):
        assert tokenize_query("the who") == ["the", "who"]
        assert tokenize_query("the who", remove_stopwords=True) == ["who"]

    def test_non_ascii_letters_split_tokens(self):
        assert tokenize_query("Música del café") == ["sica", "del", "caf"]
        assert tokenize_query("naïve") == []

    def test_empty(self):
        assert tokenize_query("") == []
        assert tokenize_query("?! ..") == []

    def test_stopwords_lowercase(self):
        assert all(w == w.lower() for w in STOPWORDS)


class TestPreview:

    def test_short_text_collapsed(self):
        assert get_preview("  a\n\n b\tc ") == "a b c"

    def test_long_text_truncated(self):
        preview = get_preview("x" * 250)

        assert preview == "x" * 200 + "..."

    def test_custom_limit(self):
        assert get_preview("abcdef", max_chars=3) == "abc..."
