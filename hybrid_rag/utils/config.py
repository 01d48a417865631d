# hybrid_rag/utils/config.py

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Project Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_PATH = Path(os.getenv("RAG_DATA_PATH", PROJECT_ROOT / "data"))
CORPUS_PATH = DATA_PATH / "corpus"
NODES_PATH = DATA_PATH / "graph_nodes.json"
EDGES_PATH = DATA_PATH / "graph_edges.json"
EMBEDDINGS_CACHE_PATH = DATA_PATH / "embeddings.json"

# Embedding Configuration (Together.ai hosted BGE)
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "BAAI/bge-large-en-v1.5")
EMBEDDING_BATCH_SIZE = 64

# Chat Configuration (answer generation)
CHAT_MODEL = os.getenv("CHAT_MODEL", "claude-3-5-haiku-20241022")

# Text Processing
MAX_CHARS_PER_CHUNK = 1200
MAX_CHUNKS_PER_QUERY = 8
MIN_CHARS_FOR_RETRIEVAL = 80


@dataclass(frozen=True)
class RagSettings:
    """
    Immutable engine configuration, built once at process start.

    Passed into the index builder, processor and generator instead of reading
    module globals at call time. The embeddings cache is the only thing
    rebuilt after startup (model or chunk count mismatch).
    """
    corpus_path: Path = CORPUS_PATH
    nodes_path: Path = NODES_PATH
    edges_path: Path = EDGES_PATH
    embeddings_cache_path: Path = EMBEDDINGS_CACHE_PATH
    embedding_model: str = EMBEDDING_MODEL
    embedding_batch_size: int = EMBEDDING_BATCH_SIZE
    chat_model: str = CHAT_MODEL
    max_chars_per_chunk: int = MAX_CHARS_PER_CHUNK
    max_chunks_per_query: int = MAX_CHUNKS_PER_QUERY
    min_chars_for_retrieval: int = MIN_CHARS_FOR_RETRIEVAL
    together_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    @classmethod
    def from_env(cls, data_path: Optional[Path] = None) -> "RagSettings":
        """Settings from the environment (.env loaded on import)."""
        data_path = Path(data_path) if data_path else DATA_PATH
        return cls(
            corpus_path=data_path / "corpus",
            nodes_path=data_path / "graph_nodes.json",
            edges_path=data_path / "graph_edges.json",
            embeddings_cache_path=data_path / "embeddings.json",
            embedding_model=os.getenv("EMBEDDING_MODEL", EMBEDDING_MODEL),
            chat_model=os.getenv("CHAT_MODEL", CHAT_MODEL),
            max_chars_per_chunk=int(os.getenv("MAX_CHARS_PER_CHUNK", MAX_CHARS_PER_CHUNK)),
            max_chunks_per_query=int(os.getenv("MAX_CHUNKS_PER_QUERY", MAX_CHUNKS_PER_QUERY)),
            min_chars_for_retrieval=int(os.getenv("MIN_CHARS_FOR_RETRIEVAL", MIN_CHARS_FOR_RETRIEVAL)),
            together_api_key=os.getenv("TOGETHER_API_KEY"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        )
