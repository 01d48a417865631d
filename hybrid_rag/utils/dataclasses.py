# -*- coding: utf-8 -*-
"""
Core data structures for the hybrid retrieval engine

Single source of truth for chunks, embedded chunks, scored results, knowledge
graph nodes/edges and the per-query RagContext. Import from this module rather
than redefining shapes in individual modules.

Chunks, embedded chunks and the knowledge graph are built once before the query
loop and are treated as read-only afterwards. ScoredChunk and RagContext are
produced fresh per query.

Examples:
    from hybrid_rag.utils.dataclasses import Chunk, ScoredChunk, GraphNode

    chunk = Chunk(doc_id="reale_2016", chunk_index=0, text="Ludomusicology ...")
    scored = ScoredChunk(chunk=chunk, score=0.82)

    node = GraphNode.from_dict({"id": "w1", "type": "work", "title": "Chiptune"})
    assert node.type.kind is NodeKind.WORK
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum


# ============================================================================
# CORPUS
# ============================================================================

@dataclass(frozen=True)
class Chunk:
    """
    Contiguous slice of a source document, the atomic unit of retrieval.

    chunk_index is sequential from 0 within a document.
    """
    doc_id: str
    chunk_index: int
    text: str

    @property
    def key(self) -> Tuple[str, int]:
        """Identity of the chunk within the corpus."""
        return (self.doc_id, self.chunk_index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'doc_id': self.doc_id,
            'chunk_index': self.chunk_index,
            'text': self.text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chunk":
        return cls(
            doc_id=data['doc_id'],
            chunk_index=int(data['chunk_index']),
            text=data['text'],
        )


@dataclass(frozen=True)
class EmbeddedChunk:
    """Chunk with its precomputed embedding vector."""
    chunk: Chunk
    embedding: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chunk': self.chunk.to_dict(),
            'embedding': list(self.embedding),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmbeddedChunk":
        return cls(
            chunk=Chunk.from_dict(data['chunk']),
            embedding=tuple(float(x) for x in data['embedding']),
        )


@dataclass(frozen=True)
class ScoredChunk:
    """
    Chunk with a per-query relevance score.

    Scale depends on the strategy that produced it (TF-IDF sum vs cosine in
    [-1, 1]); scores from different strategies are not comparable.
    """
    chunk: Chunk
    score: float


# ============================================================================
# KNOWLEDGE GRAPH
# ============================================================================

class NodeKind(Enum):
    """Known graph node types. OTHER keeps the raw type string."""
    WORK = "work"
    GAME = "game"
    MEDIA = "media"
    ARTIST = "artist"
    PERFORMANCE = "performance"
    CONCEPT = "concept"
    OTHER = "other"


class MediaKind(Enum):
    """Known media node sub-types. OTHER keeps the raw string."""
    FILM = "film"
    TV_EPISODE = "tv_episode"
    OTHER = "other"


@dataclass(frozen=True)
class NodeType:
    """
    Extensible node type: a known NodeKind, or OTHER with the raw string.

    Unknown types from the graph file stay representable without turning every
    comparison into a bare string check.
    """
    kind: NodeKind
    raw: str

    @classmethod
    def parse(cls, value: str) -> "NodeType":
        try:
            kind = NodeKind(value)
        except ValueError:
            kind = NodeKind.OTHER
        return cls(kind=kind, raw=value)

    @property
    def is_work(self) -> bool:
        return self.kind is NodeKind.WORK

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class MediaType:
    """Extensible media type (film, tv_episode, or OTHER with raw string)."""
    kind: MediaKind
    raw: str

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        try:
            kind = MediaKind(value)
        except ValueError:
            kind = MediaKind.OTHER
        return cls(kind=kind, raw=value)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class GraphNode:
    """
    Knowledge graph entity.

    Works carry title/short_title/source_file; games, artists, performances and
    concepts carry a name; media nodes may carry a media_type.
    """
    id: str
    type: NodeType
    description: Optional[str] = None
    title: Optional[str] = None
    short_title: Optional[str] = None
    source_file: Optional[str] = None
    name: Optional[str] = None
    media_type: Optional[MediaType] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        media_type = data.get('media_type')
        return cls(
            id=str(data['id']),
            type=NodeType.parse(str(data['type'])),
            description=data.get('description'),
            title=data.get('title'),
            short_title=data.get('short_title'),
            source_file=data.get('source_file'),
            name=data.get('name'),
            media_type=MediaType.parse(str(media_type)) if media_type else None,
        )


@dataclass(frozen=True)
class GraphEdge:
    """Typed relation between two nodes (stored directed, expanded undirected)."""
    source: str
    target: str
    type: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        return cls(
            source=str(data['source']),
            target=str(data['target']),
            type=str(data['type']),
            description=data.get('description'),
        )


@dataclass
class KnowledgeGraph:
    """
    Nodes and edges plus lookups built once at construction.

    adjacency is symmetric: every edge is registered under both endpoints, in
    edge-list order. Edges whose endpoints are unknown are still listed in
    adjacency; callers resolve ids through node_by_id.
    """
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    node_by_id: Dict[str, GraphNode] = field(init=False, repr=False)
    adjacency: Dict[str, List[str]] = field(init=False, repr=False)

    def __post_init__(self):
        self.node_by_id = {}
        for node in self.nodes:
            self.node_by_id[node.id] = node

        self.adjacency = {}
        for edge in self.edges:
            self.adjacency.setdefault(edge.source, []).append(edge.target)
            self.adjacency.setdefault(edge.target, []).append(edge.source)

    def neighbors(self, node_id: str) -> List[str]:
        """Ids of nodes sharing an edge with node_id (either direction)."""
        return self.adjacency.get(node_id, [])


# ============================================================================
# QUERY OUTPUT
# ============================================================================

@dataclass
class RagContext:
    """Ranked results and the serialized context block for one query."""
    query: str
    results: List[ScoredChunk]
    context_text: str


@dataclass
class GraphRagContext(RagContext):
    """RagContext plus the graph nodes that steered retrieval."""
    matched_nodes: List[GraphNode] = field(default_factory=list)
    graph_nodes: List[GraphNode] = field(default_factory=list)
