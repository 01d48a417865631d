# -*- coding: utf-8 -*-
"""
Retrieval package for keyword, embedding and graph-guided retrieval.

Contains LexicalScorer (TF-IDF term scoring), SemanticScorer (cosine
similarity), GraphExpander (query-term seeding + one-hop expansion),
ResultBalancer (per-document balanced selection), ContextAssembler (context
block rendering), EmbeddingIndexBuilder (cached chunk embeddings),
AnswerGenerator (Claude generation; imported from its module so retrieval
alone does not need anthropic), and RetrievalProcessor (pipeline
orchestrator).
"""
from hybrid_rag.retrieval.config import RetrievalMode
from hybrid_rag.retrieval.lexical_scorer import LexicalScorer
from hybrid_rag.retrieval.semantic_scorer import SemanticScorer, cosine_similarity
from hybrid_rag.retrieval.graph_expander import GraphExpander, ExpansionResult
from hybrid_rag.retrieval.result_balancer import ResultBalancer
from hybrid_rag.retrieval.context_builder import ContextAssembler
from hybrid_rag.retrieval.embedding_index import EmbeddingIndexBuilder
from hybrid_rag.retrieval.retrieval_processor import RetrievalProcessor

__all__ = [
    'RetrievalMode',
    'LexicalScorer',
    'SemanticScorer',
    'cosine_similarity',
    'GraphExpander',
    'ExpansionResult',
    'ResultBalancer',
    'ContextAssembler',
    'EmbeddingIndexBuilder',
    'RetrievalProcessor',
]
