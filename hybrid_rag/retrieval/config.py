# -*- coding: utf-8 -*-
"""
Module: config.py
Package: hybrid_rag.retrieval
Purpose: Retrieval modes and tuning constants for the query pipelines

Values here are defaults; RagSettings (hybrid_rag.utils.config) carries the
per-process knobs (chunk size, results per query, minimum chunk length).
"""

from enum import Enum

from hybrid_rag.utils.config import CHAT_MODEL


# ============================================================================
# RETRIEVAL MODE
# ============================================================================

class RetrievalMode(Enum):
    """
    Retrieval strategy for a query.

    KEYWORD: TF-IDF style term scoring over chunk text
    EMBEDDING: Cosine similarity against precomputed chunk embeddings
    GRAPH: Embedding search steered and balanced by knowledge-graph documents
    """
    KEYWORD = "keyword"
    EMBEDDING = "embedding"
    GRAPH = "graph"


# ============================================================================
# GRAPH EXPANSION
# ============================================================================

GRAPH_EXPANSION_CONFIG = {
    'max_seed_nodes': 5,             # Top label matches kept before expansion
    'min_term_length': 3,            # Same floor as keyword tokenization
}


# ============================================================================
# CHUNK RETRIEVAL
# ============================================================================

RETRIEVAL_CONFIG = {
    'graph_pool_multiplier': 3,      # Similarity pool = max_results x this
    'context_separator': "\n\n--------------------\n\n",
}


# ============================================================================
# ANSWER GENERATION
# ============================================================================

ANSWER_GENERATION_CONFIG = {
    'provider': 'anthropic',
    'model': CHAT_MODEL,
    'max_output_tokens': 1024,
    'temperature': 0.0,
}
