# -*- coding: utf-8 -*-
"""
Semantic chunk scoring by cosine similarity.

Brute-force O(n x d) scan over precomputed chunk embeddings; corpora are small
enough that no index structure is used. A vector length disagreement between
the query and any chunk raises DimensionMismatch rather than truncating or
padding. Zero-norm vectors score 0.
"""
# Standard library
from typing import List, Sequence

# Third-party
import numpy as np

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import EmbeddedChunk, ScoredChunk
from hybrid_rag.utils.errors import DimensionMismatch


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|), clipped to [-1, 1].

    Raises:
        DimensionMismatch: If len(a) != len(b).
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch(expected=va.shape[0], actual=vb.shape[0])

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.clip(np.dot(va, vb) / (norm_a * norm_b), -1.0, 1.0))


class SemanticScorer:
    """
    Rank embedded chunks by cosine similarity to a query vector.

    Equal similarities keep input order.
    """

    def score(
        self,
        embedded_chunks: Sequence[EmbeddedChunk],
        query_vector: Sequence[float],
        max_results: int,
    ) -> List[ScoredChunk]:
        """
        Args:
            embedded_chunks: Candidate chunks with embeddings.
            query_vector: Query embedding (same model as the chunks).
            max_results: Maximum results returned.

        Returns:
            ScoredChunk list, highest similarity first.

        Raises:
            DimensionMismatch: If the query length differs from any chunk's.
        """
        if max_results <= 0:
            return []

        query = np.asarray(query_vector, dtype=np.float64)

        scored = []
        for position, ec in enumerate(embedded_chunks):
            if len(ec.embedding) != query.shape[0]:
                raise DimensionMismatch(
                    expected=len(ec.embedding),
                    actual=query.shape[0],
                    stage=f"semantic scoring of {ec.chunk.doc_id}#{ec.chunk.chunk_index}",
                )
            similarity = cosine_similarity(ec.embedding, query)
            scored.append((position, ScoredChunk(chunk=ec.chunk, score=similarity)))

        scored.sort(key=lambda item: (-item[1].score, item[0]))
        return [sc for _, sc in scored[:max_results]]
