# -*- coding: utf-8 -*-
"""
Module: test_embedder.py
Package: tests.utils
Purpose: Unit tests for the Together.ai embedding client

All requests go to a mocked client; no network access.
"""

# Standard library
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

# Project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Third-party
import numpy as np
import pytest

# Local
from hybrid_rag.utils.embedder import EMPTY_TEXT_PLACEHOLDER, TogetherEmbedder
from hybrid_rag.utils.errors import ProviderError


def fake_create(model, input):
    """One 3-dim vector per input: [position, len(text), 1]."""
    return SimpleNamespace(data=[
        SimpleNamespace(index=i, embedding=[float(i), float(len(text)), 1.0])
        for i, text in enumerate(input)
    ])


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def client():
    mock = Mock()
    mock.embeddings.create.side_effect = fake_create
    return mock


@pytest.fixture
def embedder(client):
    return TogetherEmbedder(model_name="BAAI/bge-large-en-v1.5", batch_size=2, client=client)


# ============================================================================
# TESTS
# ============================================================================

class TestInitialization:

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.delenv("TOGETHER_API_KEY", raising=False)

        with pytest.raises(ValueError, match="TOGETHER_API_KEY"):
            TogetherEmbedder()

    def test_dimension_unknown_before_first_call(self, embedder):
        assert embedder.get_embedding_dim() is None


class TestEmbedding:

    def test_single_embedding(self, embedder, client):
        vector = embedder.embed_single("What is a leitmotif?")

        assert isinstance(vector, np.ndarray)
        assert vector.shape == (3,)
        client.embeddings.create.assert_called_once_with(
            model="BAAI/bge-large-en-v1.5", input=["What is a leitmotif?"]
        )

    def test_batches_preserve_order(self, embedder, client):
        texts = ["one", "three", "fiftyfive"]

        vectors = embedder.embed_batch(texts, show_progress=False)

        assert vectors.shape == (3, 3)
        assert client.embeddings.create.call_count == 2
        # second column carries the text length, so order is checkable
        assert vectors[:, 1].tolist() == [3.0, 5.0, 9.0]
        assert embedder.get_embedding_dim() == 3

    def test_response_sorted_by_index(self, embedder, client):
        client.embeddings.create.side_effect = None
        client.embeddings.create.return_value = SimpleNamespace(data=[
            SimpleNamespace(index=1, embedding=[0.0, 1.0]),
            SimpleNamespace(index=0, embedding=[1.0, 0.0]),
        ])

        vectors = embedder.embed_batch(["a", "b"], show_progress=False)

        assert vectors.tolist() == [[1.0, 0.0], [0.0, 1.0]]

    def test_empty_input(self, embedder, client):
        vectors = embedder.embed_batch([])

        assert vectors.shape == (0, 0)
        client.embeddings.create.assert_not_called()

    def test_blank_text_replaced_with_placeholder(self, embedder, client):
        embedder.embed_batch(["  ", "real\x00 text"], show_progress=False)

        sent = client.embeddings.create.call_args.kwargs["input"]
        assert sent == [EMPTY_TEXT_PLACEHOLDER, "real text"]


class TestErrors:

    def test_client_exception_wrapped(self, embedder, client):
        client.embeddings.create.side_effect = StatusError("rate limited", 429)

        with pytest.raises(ProviderError) as excinfo:
            embedder.embed_single("query")

        assert excinfo.value.provider == "Embeddings"
        assert excinfo.value.status == 429
        assert "rate limited" in str(excinfo.value)

    def test_unknown_status(self, embedder, client):
        client.embeddings.create.side_effect = ConnectionError("no route")

        with pytest.raises(ProviderError) as excinfo:
            embedder.embed_single("query")

        assert excinfo.value.status is None

    def test_count_mismatch(self, embedder, client):
        client.embeddings.create.side_effect = None
        client.embeddings.create.return_value = SimpleNamespace(data=[])

        with pytest.raises(ProviderError, match="expected 1 embeddings"):
            embedder.embed_single("query")
