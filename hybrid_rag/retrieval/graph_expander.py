# -*- coding: utf-8 -*-
"""
Graph expander for knowledge-graph guided retrieval.

Maps query terms onto graph node labels, keeps the best matching nodes as
seeds, expands them by exactly one hop over the (undirected) edge set, and
derives the documents those nodes point at. The resulting document ids let
semantic search focus on works structurally connected to entities the query
mentions, without the query having to name the document.

Matching tokenizes the query like keyword retrieval but keeps stopwords:
entity names such as "The Who" or "Over the Garden Wall" are mostly
stopwords, so a query the keyword scorer reduces to nothing can still match
graph nodes here.

Labels:
- work nodes: title, else short_title, else id
- other nodes: name (else id), followed by " " + description when present

Examples:
    from hybrid_rag.graph.graph_loader import load_knowledge_graph
    from hybrid_rag.retrieval.graph_expander import GraphExpander

    graph = load_knowledge_graph("data/graph_nodes.json", "data/graph_edges.json")
    expander = GraphExpander(graph)
    result = expander.expand("How does Undertale use leitmotifs?")
    print(result.target_doc_ids)   # {"reale_undertale_2019"}
    print(expander.last_metrics)
"""

# Standard library
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Optional, Set
import logging

# Config imports (direct)
from hybrid_rag.retrieval.config import GRAPH_EXPANSION_CONFIG

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import GraphNode, KnowledgeGraph
from hybrid_rag.utils.text import tokenize_query

logger = logging.getLogger(__name__)


class ExpansionMetrics:
    """Diagnostics for graph expansion."""
    def __init__(self):
        self.query_terms = 0
        self.seeds_matched = 0
        self.neighbors_added = 0
        self.target_documents = 0

    def __str__(self):
        return (
            f"Expansion: terms={self.query_terms} | "
            f"Seeds: {self.seeds_matched} | "
            f"Neighbors: +{self.neighbors_added} | "
            f"Documents: {self.target_documents}"
        )


@dataclass
class ExpansionResult:
    """Seed nodes, one-hop expanded nodes, and their document ids."""
    matched_nodes: List[GraphNode] = field(default_factory=list)
    expanded_nodes: List[GraphNode] = field(default_factory=list)
    target_doc_ids: Set[str] = field(default_factory=set)


def get_node_label(node: GraphNode) -> str:
    """Human-readable label used for query matching and logging."""
    if node.type.is_work:
        return node.title or node.short_title or node.id

    base = node.name or node.id
    return f"{base} {node.description}" if node.description else base


def get_doc_id_from_node(node: GraphNode) -> Optional[str]:
    """Document id (source file stem) for work nodes; None for everything else."""
    if not node.type.is_work or not node.source_file:
        return None
    return PurePath(node.source_file.replace("\\", "/")).stem


class GraphExpander:
    """
    Query-term seeding plus single-hop neighbor expansion.

    The graph is shared read-only; the expander holds no per-query state apart
    from last_metrics.
    """

    def __init__(
        self,
        graph: KnowledgeGraph,
        max_seed_nodes: int = GRAPH_EXPANSION_CONFIG['max_seed_nodes'],
        min_term_length: int = GRAPH_EXPANSION_CONFIG['min_term_length'],
    ):
        """
        Args:
            graph: Loaded knowledge graph.
            max_seed_nodes: Best-matching nodes kept as expansion seeds.
            min_term_length: Minimum query token length.
        """
        self.graph = graph
        self.max_seed_nodes = max_seed_nodes
        self.min_term_length = min_term_length
        self.last_metrics = None

    def expand(self, query: str, verbose: bool = False) -> ExpansionResult:
        """
        Seed, expand one hop, and derive target documents.

        Args:
            query: Free-text query.
            verbose: Log matched and neighbor nodes at INFO.

        Returns:
            ExpansionResult (all empty when nothing matches).
        """
        self.last_metrics = ExpansionMetrics()

        seeds = self.select_seed_nodes(query)
        expanded = self.expand_neighbors(seeds)
        target_doc_ids = self.target_documents(expanded)

        self.last_metrics.seeds_matched = len(seeds)
        self.last_metrics.neighbors_added = len(expanded) - len(seeds)
        self.last_metrics.target_documents = len(target_doc_ids)

        self._log_expansion(seeds, expanded, verbose)

        return ExpansionResult(
            matched_nodes=seeds,
            expanded_nodes=expanded,
            target_doc_ids=target_doc_ids,
        )

    def select_seed_nodes(self, query: str) -> List[GraphNode]:
        """
        Nodes whose lowercased label contains the most query terms.

        Score = number of distinct terms found as substrings of the label.
        Only score > 0 is kept; ties keep graph node order.
        """
        terms = tokenize_query(query, remove_stopwords=False, min_length=self.min_term_length)
        if self.last_metrics is not None:
            self.last_metrics.query_terms = len(terms)
        if not terms:
            return []

        scored = []
        for position, node in enumerate(self.graph.nodes):
            label = get_node_label(node).lower()
            score = sum(1 for term in terms if term in label)
            if score > 0:
                scored.append((score, position, node))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [node for _, _, node in scored[:self.max_seed_nodes]]

    def expand_neighbors(self, seeds: List[GraphNode]) -> List[GraphNode]:
        """
        Seeds plus every node sharing an edge with a seed.

        Single pass over the symmetric adjacency of the seeds only: nodes added
        here are never expanded further. Ids missing from the node list are
        skipped.
        """
        selected = {}
        for node in seeds:
            selected.setdefault(node.id, node)

        for node in seeds:
            for neighbor_id in self.graph.neighbors(node.id):
                if neighbor_id in selected:
                    continue
                neighbor = self.graph.node_by_id.get(neighbor_id)
                if neighbor is not None:
                    selected[neighbor_id] = neighbor

        return list(selected.values())

    @staticmethod
    def target_documents(nodes: List[GraphNode]) -> Set[str]:
        """Document ids of the work nodes (with a source_file) among nodes."""
        doc_ids = set()
        for node in nodes:
            doc_id = get_doc_id_from_node(node)
            if doc_id:
                doc_ids.add(doc_id)
        return doc_ids

    def _log_expansion(self, seeds: List[GraphNode], expanded: List[GraphNode], verbose: bool):
        level = logging.INFO if verbose else logging.DEBUG
        if not logger.isEnabledFor(level):
            return

        if not seeds:
            logger.log(level, "Graph mode: no graph nodes matched this query.")
        else:
            logger.log(level, "Graph mode: matched graph nodes:")
            for node in seeds:
                logger.log(level, f"  - [{node.type}] {get_node_label(node)} (id={node.id})")

        seed_ids = {node.id for node in seeds}
        neighbors = [node for node in expanded if node.id not in seed_ids]
        if neighbors:
            logger.log(level, "Graph mode: including neighbor nodes:")
            for node in neighbors:
                logger.log(level, f"  - [{node.type}] {get_node_label(node)} (id={node.id})")

        logger.log(level, str(self.last_metrics))
