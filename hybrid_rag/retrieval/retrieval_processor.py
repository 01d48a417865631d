# -*- coding: utf-8 -*-
"""
Main retrieval pipeline orchestrator for the three retrieval modes.

Coordinates one query at a time from raw text to an assembled RagContext:
(1) KEYWORD - TF-IDF term scoring over chunk text,
(2) EMBEDDING - query embedding + cosine similarity over the embedded index,
(3) GRAPH - knowledge-graph seeding and one-hop expansion selects target
    documents; semantic search is restricted to them (whole corpus when none
    resolve), a 3x pool is scored, and the pool is balanced across documents
    when more than one document is targeted.

Every mode trims the query first; an empty or whitespace-only query returns an
empty context (query "") without embedding anything. The chunk list, embedded
index and graph are shared read-only; the only suspension point is the query
embedding call, and its failure propagates as ProviderError.

Examples:
    from hybrid_rag.retrieval.retrieval_processor import RetrievalProcessor
    from hybrid_rag.retrieval.config import RetrievalMode

    processor = RetrievalProcessor(
        chunks=chunks,
        embedded_chunks=embedded_chunks,
        embedder=embedder,
        graph=graph,
        settings=settings,
    )
    context = processor.retrieve("How does Undertale reuse motifs?", RetrievalMode.GRAPH)
    print(context.context_text)
"""
# Standard library
import logging
from typing import List, Optional, Sequence

# Config imports (direct)
from hybrid_rag.retrieval.config import RetrievalMode, RETRIEVAL_CONFIG
from hybrid_rag.utils.config import RagSettings

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import (
    Chunk,
    EmbeddedChunk,
    GraphRagContext,
    KnowledgeGraph,
    RagContext,
    ScoredChunk,
)

# Local module imports
from hybrid_rag.retrieval.lexical_scorer import LexicalScorer
from hybrid_rag.retrieval.semantic_scorer import SemanticScorer
from hybrid_rag.retrieval.graph_expander import GraphExpander
from hybrid_rag.retrieval.result_balancer import ResultBalancer
from hybrid_rag.retrieval.context_builder import ContextAssembler

logger = logging.getLogger(__name__)


class RetrievalProcessor:
    """
    Orchestrate keyword, embedding and graph retrieval.

    Components:
    - LexicalScorer (keyword mode)
    - SemanticScorer (embedding and graph modes)
    - GraphExpander + ResultBalancer (graph mode)
    - ContextAssembler (all modes)
    """

    def __init__(
        self,
        chunks: Sequence[Chunk],
        embedded_chunks: Sequence[EmbeddedChunk] = (),
        embedder=None,
        graph: Optional[KnowledgeGraph] = None,
        settings: Optional[RagSettings] = None,
        verbose: bool = False,
    ):
        """
        Initialize retrieval processor.

        Args:
            chunks: Corpus chunks (keyword mode).
            embedded_chunks: Embedded index (embedding and graph modes).
            embedder: Client with embed_single(text) for query vectors.
            graph: Knowledge graph (graph mode).
            settings: Engine configuration (defaults when None).
            verbose: Log per-query diagnostics at INFO.
        """
        self.settings = settings or RagSettings()
        self.chunks = list(chunks)
        self.embedded_chunks = list(embedded_chunks)
        self.embedder = embedder
        self.graph = graph
        self.verbose = verbose

        self.lexical_scorer = LexicalScorer(min_chars=self.settings.min_chars_for_retrieval)
        self.semantic_scorer = SemanticScorer()
        self.graph_expander = GraphExpander(graph) if graph is not None else None
        self.result_balancer = ResultBalancer()
        self.context_assembler = ContextAssembler()

    def retrieve(
        self,
        query: str,
        mode: RetrievalMode = RetrievalMode.GRAPH,
        max_results: Optional[int] = None,
    ) -> RagContext:
        """
        Run the pipeline for mode.

        Args:
            query: Natural language query.
            mode: KEYWORD, EMBEDDING or GRAPH.
            max_results: Result bound (settings.max_chunks_per_query if None).

        Returns:
            RagContext (GraphRagContext in graph mode).
        """
        if mode == RetrievalMode.KEYWORD:
            return self.retrieve_keyword(query, max_results)
        if mode == RetrievalMode.EMBEDDING:
            return self.retrieve_embedding(query, max_results)
        return self.retrieve_graph(query, max_results)

    def retrieve_keyword(self, query: str, max_results: Optional[int] = None) -> RagContext:
        """Keyword pipeline: LexicalScorer -> ContextAssembler."""
        trimmed = query.strip()
        if not trimmed:
            return RagContext(query="", results=[], context_text="")

        results = self.lexical_scorer.score(
            self.chunks, trimmed, self._limit(max_results), verbose=self.verbose
        )
        return self.context_assembler.assemble(trimmed, results)

    def retrieve_embedding(self, query: str, max_results: Optional[int] = None) -> RagContext:
        """Embedding pipeline: embed query -> SemanticScorer -> ContextAssembler."""
        trimmed = query.strip()
        if not trimmed:
            return RagContext(query="", results=[], context_text="")

        query_vector = self._embed_query(trimmed)
        results = self.semantic_scorer.score(
            self.embedded_chunks, query_vector, self._limit(max_results)
        )
        return self.context_assembler.assemble(trimmed, results)

    def retrieve_graph(self, query: str, max_results: Optional[int] = None) -> GraphRagContext:
        """
        Graph pipeline: expand -> restrict -> semantic pool -> balance -> assemble.

        Raises:
            RuntimeError: If no knowledge graph was provided.
        """
        if self.graph_expander is None:
            raise RuntimeError(
                "Graph mode not initialized. Provide a knowledge graph."
            )

        trimmed = query.strip()
        if not trimmed:
            return GraphRagContext(query="", results=[], context_text="")

        limit = self._limit(max_results)
        expansion = self.graph_expander.expand(trimmed, verbose=self.verbose)
        target_doc_ids = expansion.target_doc_ids

        candidates = self._restrict_candidates(target_doc_ids)

        query_vector = self._embed_query(trimmed)
        pool_size = limit * RETRIEVAL_CONFIG['graph_pool_multiplier']
        scored_pool = self.semantic_scorer.score(candidates, query_vector, pool_size)

        final_results: List[ScoredChunk]
        if len(target_doc_ids) > 1:
            final_results = self.result_balancer.balance(scored_pool, target_doc_ids, limit)
        else:
            final_results = scored_pool[:limit]

        context = self.context_assembler.assemble(trimmed, final_results)
        return GraphRagContext(
            query=context.query,
            results=context.results,
            context_text=context.context_text,
            matched_nodes=expansion.matched_nodes,
            graph_nodes=expansion.expanded_nodes,
        )

    def batch_retrieve(
        self,
        queries: List[str],
        mode: RetrievalMode = RetrievalMode.GRAPH,
        max_results: Optional[int] = None,
    ) -> List[RagContext]:
        """Process multiple queries sequentially."""
        return [self.retrieve(q, mode, max_results) for q in queries]

    def _restrict_candidates(self, target_doc_ids) -> List[EmbeddedChunk]:
        level = logging.INFO if self.verbose else logging.DEBUG

        if not target_doc_ids:
            logger.log(
                level,
                "Graph mode: no work nodes resolved to documents; "
                "falling back to full corpus for retrieval."
            )
            return self.embedded_chunks

        candidates = [ec for ec in self.embedded_chunks if ec.chunk.doc_id in target_doc_ids]
        logger.log(
            level,
            f"Graph mode: restricting retrieval to {len(candidates)} chunk(s) "
            f"from {len(target_doc_ids)} work node(s)."
        )
        return candidates

    def _embed_query(self, query: str):
        if self.embedder is None:
            raise RuntimeError("Embedding retrieval not initialized. Provide an embedder.")
        return self.embedder.embed_single(query)

    def _limit(self, max_results: Optional[int]) -> int:
        return self.settings.max_chunks_per_query if max_results is None else max_results
