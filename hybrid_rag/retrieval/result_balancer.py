# -*- coding: utf-8 -*-
"""
Per-document balanced selection from a similarity-ranked pool.

Used by graph mode when the graph resolves more than one target document, so
that a single highly similar document cannot crowd the others out of the
context. Two passes over the pool, both in rank order:

1. Primary: admit chunks from target documents while each document is below
   max(1, max_results // len(target_doc_ids)).
2. Backfill: if slots remain, admit any chunk not yet selected, ignoring
   document and cap.

Output never exceeds max_results and never repeats a (doc_id, chunk_index).
The caller supplies a pool larger than max_results (graph mode uses 3x) so
each target document has candidates before backfill kicks in.

Examples:
    from hybrid_rag.retrieval.result_balancer import ResultBalancer

    balancer = ResultBalancer()
    results = balancer.balance(pool, {"doc_a", "doc_b"}, max_results=4)
    # at most 2 from doc_a and 2 from doc_b in the primary pass
"""
# Standard library
import logging
from typing import Dict, List, Sequence, Set, Tuple

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import ScoredChunk

logger = logging.getLogger(__name__)


class ResultBalancer:
    """Cap per-document representation, then backfill by rank."""

    def __init__(self):
        self.last_per_doc_limit = None
        self.last_backfilled = 0

    def balance(
        self,
        scored_pool: Sequence[ScoredChunk],
        target_doc_ids: Set[str],
        max_results: int,
    ) -> List[ScoredChunk]:
        """
        Args:
            scored_pool: Candidates sorted by similarity, best first.
            target_doc_ids: Documents the graph resolved for the query.
            max_results: Maximum results returned.

        Returns:
            Selected chunks, primary-pass picks first, then backfill, each in
            pool order.
        """
        self.last_per_doc_limit = None
        self.last_backfilled = 0

        if max_results <= 0 or not scored_pool:
            return []

        doc_count = len(target_doc_ids) or 1
        per_doc_limit = max(1, max_results // doc_count)
        self.last_per_doc_limit = per_doc_limit

        selected: List[ScoredChunk] = []
        selected_keys: Set[Tuple[str, int]] = set()
        per_doc_counts: Dict[str, int] = {}

        for sc in scored_pool:
            if len(selected) >= max_results:
                break

            doc_id = sc.chunk.doc_id
            if doc_id not in target_doc_ids:
                continue

            key = sc.chunk.key
            if key in selected_keys:
                continue

            count = per_doc_counts.get(doc_id, 0)
            if count >= per_doc_limit:
                continue

            selected.append(sc)
            selected_keys.add(key)
            per_doc_counts[doc_id] = count + 1

        primary_count = len(selected)

        for sc in scored_pool:
            if len(selected) >= max_results:
                break

            key = sc.chunk.key
            if key in selected_keys:
                continue

            selected.append(sc)
            selected_keys.add(key)

        self.last_backfilled = len(selected) - primary_count
        logger.debug(
            f"Balanced {len(selected)} chunks across {doc_count} documents "
            f"(per-doc limit {per_doc_limit}, backfilled {self.last_backfilled})"
        )
        return selected
