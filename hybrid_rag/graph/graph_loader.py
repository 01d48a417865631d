# -*- coding: utf-8 -*-
"""
Knowledge graph loader for graph-guided retrieval.

Reads two independently stored JSON arrays, graph_nodes.json and
graph_edges.json, validates their shape, and builds an immutable
KnowledgeGraph with a symmetric adjacency map. Anything that is not an array
of objects with the required keys fails fast with MalformedGraph, since graph
mode cannot run on a partial graph.

Expected shapes:
    graph_nodes.json: [{"id": "w_zelda", "type": "work", "title": "...",
                        "source_file": "corpus/reale_zelda.txt"}, ...]
    graph_edges.json: [{"source": "w_zelda", "target": "g_zelda",
                        "type": "analyzes"}, ...]

Examples:
    from hybrid_rag.graph.graph_loader import load_knowledge_graph
    graph = load_knowledge_graph("data/graph_nodes.json", "data/graph_edges.json")
    print(len(graph.nodes), len(graph.edges))
"""
import json
import logging
from pathlib import Path
from typing import Any, List, Union

from hybrid_rag.utils.dataclasses import GraphEdge, GraphNode, KnowledgeGraph
from hybrid_rag.utils.errors import MalformedGraph
from hybrid_rag.utils.io import load_json

logger = logging.getLogger(__name__)

NODE_REQUIRED_KEYS = ('id', 'type')
EDGE_REQUIRED_KEYS = ('source', 'target', 'type')

# Optional fields that feed node labels and doc ids; must be strings when set
NODE_TEXT_KEYS = ('title', 'short_title', 'name', 'description', 'source_file', 'media_type')
EDGE_TEXT_KEYS = ('description',)


def load_knowledge_graph(
    nodes_path: Union[str, Path],
    edges_path: Union[str, Path],
) -> KnowledgeGraph:
    """
    Load and validate nodes and edges.

    Args:
        nodes_path: JSON array of node objects
        edges_path: JSON array of edge objects

    Returns:
        KnowledgeGraph

    Raises:
        FileNotFoundError: If either file is missing
        MalformedGraph: If either file is not valid JSON, not an array, or
            holds a record without its required keys or with a non-string
            text field (title, name, description, source_file, ...)
    """
    raw_nodes = _load_array(nodes_path, "nodes")
    raw_edges = _load_array(edges_path, "edges")

    nodes = _parse_nodes(raw_nodes, nodes_path)
    edges = [
        GraphEdge.from_dict(_require(record, EDGE_REQUIRED_KEYS, edges_path, i, EDGE_TEXT_KEYS))
        for i, record in enumerate(raw_edges)
    ]

    graph = KnowledgeGraph(nodes=nodes, edges=edges)

    dangling = sum(
        1 for e in edges
        if e.source not in graph.node_by_id or e.target not in graph.node_by_id
    )
    if dangling:
        logger.warning(f"{dangling} edge(s) reference unknown node ids")

    logger.info(f"Loaded knowledge graph: {len(nodes)} nodes, {len(edges)} edges")
    return graph


def _load_array(path: Union[str, Path], what: str) -> List[Any]:
    try:
        data = load_json(path)
    except json.JSONDecodeError as e:
        raise MalformedGraph(path, f"invalid JSON ({e})") from e

    if not isinstance(data, list):
        raise MalformedGraph(path, f"{what} file is not an array")
    return data


def _require(record: Any, keys, path, index: int, text_keys=()) -> dict:
    if not isinstance(record, dict):
        raise MalformedGraph(path, f"record {index} is not an object")
    missing = [k for k in keys if record.get(k) in (None, "")]
    if missing:
        raise MalformedGraph(path, f"record {index} is missing {', '.join(missing)}")
    wrong_type = [
        k for k in text_keys
        if record.get(k) is not None and not isinstance(record[k], str)
    ]
    if wrong_type:
        raise MalformedGraph(path, f"record {index} has non-string {', '.join(wrong_type)}")
    return record


def _parse_nodes(raw_nodes: List[Any], path) -> List[GraphNode]:
    nodes = {}
    for i, record in enumerate(raw_nodes):
        node = GraphNode.from_dict(_require(record, NODE_REQUIRED_KEYS, path, i, NODE_TEXT_KEYS))
        if node.id in nodes:
            logger.warning(f"Duplicate node id {node.id!r}; keeping the later record")
            del nodes[node.id]
        nodes[node.id] = node
    return list(nodes.values())
