# -*- coding: utf-8 -*-
"""
Module: test_retrieval_processor.py
Package: tests.retrieval
Purpose: Pipeline tests for keyword, embedding and graph retrieval

Uses a mocked embedder (no API calls) and a small in-memory graph:

    w_a --about--> g_shared <--about-- w_b        w_c (isolated)

Query vector is always [1, 0], so doc A chunks dominate cosine ranking.
"""

# Standard library
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Third-party
import pytest

# Local
from hybrid_rag.retrieval.config import RetrievalMode
from hybrid_rag.retrieval.retrieval_processor import RetrievalProcessor
from hybrid_rag.utils.config import RagSettings
from hybrid_rag.utils.dataclasses import (
    Chunk,
    EmbeddedChunk,
    GraphEdge,
    GraphNode,
    GraphRagContext,
    KnowledgeGraph,
)
from hybrid_rag.utils.errors import ProviderError

pytestmark = pytest.mark.retrieval


VECTORS = {
    ("reale_a", 0): (1.0, 0.0),
    ("reale_a", 1): (0.99, 0.1),
    ("reale_a", 2): (0.98, 0.2),
    ("reale_b", 0): (0.5, 0.5),
    ("reale_b", 1): (0.4, 0.6),
    ("reale_b", 2): (0.3, 0.7),
    ("reale_c", 0): (1.0, 0.01),
}

TEXTS = {
    ("reale_a", 1): "Alpha study paragraph on harmony and cadence.",
}


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def chunks():
    return [
        Chunk(doc_id, index, TEXTS.get((doc_id, index), f"{doc_id} paragraph {index} on form."))
        for doc_id, index in VECTORS
    ]


@pytest.fixture
def embedded_chunks(chunks):
    return [EmbeddedChunk(chunk=c, embedding=VECTORS[c.key]) for c in chunks]


@pytest.fixture
def graph():
    nodes = [
        GraphNode.from_dict({"id": "w_a", "type": "work", "title": "Alpha Study",
                             "source_file": "corpus/reale_a.txt"}),
        GraphNode.from_dict({"id": "w_b", "type": "work", "title": "Beta Study",
                             "source_file": "reale_b.txt"}),
        GraphNode.from_dict({"id": "w_c", "type": "work", "title": "Gamma",
                             "source_file": "reale_c.txt"}),
        GraphNode.from_dict({"id": "g_shared", "type": "game", "name": "Shared Game"}),
    ]
    edges = [
        GraphEdge("w_a", "g_shared", "about"),
        GraphEdge("w_b", "g_shared", "about"),
    ]
    return KnowledgeGraph(nodes=nodes, edges=edges)


@pytest.fixture
def embedder():
    mock = MagicMock()
    mock.embed_single.return_value = [1.0, 0.0]
    return mock


@pytest.fixture
def settings():
    return RagSettings(min_chars_for_retrieval=10, max_chunks_per_query=4)


@pytest.fixture
def processor(chunks, embedded_chunks, embedder, graph, settings):
    return RetrievalProcessor(
        chunks=chunks,
        embedded_chunks=embedded_chunks,
        embedder=embedder,
        graph=graph,
        settings=settings,
    )


def keys(context):
    return [r.chunk.key for r in context.results]


# ============================================================================
# EMPTY QUERY
# ============================================================================

class TestEmptyQuery:

    @pytest.mark.parametrize("mode", list(RetrievalMode))
    def test_blank_query_returns_empty_context(self, processor, embedder, mode):
        context = processor.retrieve("   \n\t", mode)

        assert context.query == ""
        assert context.results == []
        assert context.context_text == ""
        embedder.embed_single.assert_not_called()


# ============================================================================
# KEYWORD / EMBEDDING
# ============================================================================

class TestKeywordPipeline:

    def test_keyword_mode(self, processor, embedder):
        context = processor.retrieve("harmony", RetrievalMode.KEYWORD)

        assert keys(context) == [("reale_a", 1)]
        assert context.context_text.startswith("Source 1\ndoc: reale_a\nchunkIndex: 1")
        embedder.embed_single.assert_not_called()

    def test_keyword_mode_without_embedder_or_graph(self, chunks, settings):
        processor = RetrievalProcessor(chunks=chunks, settings=settings)
        context = processor.retrieve("harmony", RetrievalMode.KEYWORD)

        assert keys(context) == [("reale_a", 1)]

    def test_query_is_trimmed(self, processor):
        context = processor.retrieve("  harmony  ", RetrievalMode.KEYWORD)
        assert context.query == "harmony"


class TestEmbeddingPipeline:

    def test_embedding_mode_ranks_by_cosine(self, processor, embedder):
        context = processor.retrieve("anything", RetrievalMode.EMBEDDING)

        assert keys(context) == [
            ("reale_a", 0), ("reale_c", 0), ("reale_a", 1), ("reale_a", 2),
        ]
        embedder.embed_single.assert_called_once_with("anything")

    def test_max_results_override(self, processor):
        context = processor.retrieve("anything", RetrievalMode.EMBEDDING, max_results=2)
        assert len(context.results) == 2

    def test_provider_error_propagates(self, processor, embedder):
        embedder.embed_single.side_effect = ProviderError("Embeddings", status=503, detail="down")

        with pytest.raises(ProviderError) as excinfo:
            processor.retrieve("anything", RetrievalMode.EMBEDDING)

        assert excinfo.value.status == 503

    def test_missing_embedder_raises(self, chunks, embedded_chunks, settings):
        processor = RetrievalProcessor(chunks=chunks, embedded_chunks=embedded_chunks,
                                       settings=settings)
        with pytest.raises(RuntimeError):
            processor.retrieve("anything", RetrievalMode.EMBEDDING)


# ============================================================================
# GRAPH
# ============================================================================

class TestGraphPipeline:

    def test_balanced_across_target_documents(self, processor):
        context = processor.retrieve("shared game", RetrievalMode.GRAPH)

        assert isinstance(context, GraphRagContext)
        assert keys(context) == [
            ("reale_a", 0), ("reale_a", 1), ("reale_b", 0), ("reale_b", 1),
        ]
        assert [n.id for n in context.matched_nodes] == ["g_shared"]
        assert {n.id for n in context.graph_nodes} == {"g_shared", "w_a", "w_b"}
        assert processor.result_balancer.last_per_doc_limit == 2

    def test_non_target_documents_excluded(self, processor):
        context = processor.retrieve("shared game", RetrievalMode.GRAPH)

        # reale_c has the second-best cosine but is not a target document
        assert "reale_c" not in {r.chunk.doc_id for r in context.results}

    def test_single_target_document_not_balanced(self, processor):
        context = processor.retrieve("gamma", RetrievalMode.GRAPH)

        assert keys(context) == [("reale_c", 0)]
        assert processor.result_balancer.last_per_doc_limit is None

    def test_falls_back_to_full_corpus(self, processor):
        context = processor.retrieve("nothing matches", RetrievalMode.GRAPH)

        assert context.matched_nodes == []
        assert keys(context) == [
            ("reale_a", 0), ("reale_c", 0), ("reale_a", 1), ("reale_a", 2),
        ]

    def test_default_mode_is_graph(self, processor):
        assert isinstance(processor.retrieve("shared game"), GraphRagContext)

    def test_graph_mode_without_graph_raises(self, chunks, embedded_chunks, embedder, settings):
        processor = RetrievalProcessor(chunks=chunks, embedded_chunks=embedded_chunks,
                                       embedder=embedder, settings=settings)
        with pytest.raises(RuntimeError):
            processor.retrieve("shared game", RetrievalMode.GRAPH)

    def test_batch_retrieve(self, processor):
        contexts = processor.batch_retrieve(["shared game", "gamma"])

        assert [c.query for c in contexts] == ["shared game", "gamma"]
