# -*- coding: utf-8 -*-
"""
Embedding index builder with a JSON cache keyed by embedding model.

Builds the list of EmbeddedChunk that semantic and graph retrieval score
against. The cache file records the model name and every embedded chunk:

    {"model": "BAAI/bge-large-en-v1.5",
     "chunks": [{"chunk": {"doc_id": ..., "chunk_index": ..., "text": ...},
                 "embedding": [...]}, ...]}

A cache is reused only when its model matches the active model AND its chunk
count matches the current corpus. Any mismatch, or a cache file that cannot
be read or deserialized, triggers a full rebuild (no incremental patching)
and the cache is rewritten.

Examples:
    from hybrid_rag.retrieval.embedding_index import EmbeddingIndexBuilder

    builder = EmbeddingIndexBuilder(embedder, cache_path="data/embeddings.json",
                                    model_name="BAAI/bge-large-en-v1.5")
    embedded_chunks = builder.build(chunks)
"""

# Standard library
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

# Local
from hybrid_rag.utils.dataclasses import Chunk, EmbeddedChunk
from hybrid_rag.utils.errors import DimensionMismatch
from hybrid_rag.utils.io import load_json, save_json

logger = logging.getLogger(__name__)


class EmbeddingIndexBuilder:
    """
    Load embedded chunks from cache or embed the corpus from scratch.

    The embedder needs an embed_batch(texts) method returning one vector per
    text in input order (TogetherEmbedder).
    """

    def __init__(self, embedder, cache_path: Union[str, Path], model_name: str):
        """
        Args:
            embedder: Embedding client with embed_batch().
            cache_path: JSON cache location.
            model_name: Active embedding model; part of the cache validity key.
        """
        self.embedder = embedder
        self.cache_path = Path(cache_path)
        self.model_name = model_name
        self.last_from_cache = False

    def build(self, chunks: Sequence[Chunk]) -> List[EmbeddedChunk]:
        """
        Embedded chunks for the corpus, reusing a valid cache.

        Raises:
            ProviderError: If embedding fails during a rebuild.
            DimensionMismatch: If the provider returns vectors of mixed length.
        """
        cached = self._load_cache()

        if cached is not None and cached.get('model') == self.model_name:
            cached_chunks = cached.get('chunks')
            if not isinstance(cached_chunks, list):
                logger.info("Embeddings cache has no chunk list; rebuilding.")
            elif len(cached_chunks) != len(chunks):
                logger.info(
                    f"Embeddings cache length mismatch (cache = {len(cached_chunks)}, "
                    f"current = {len(chunks)}); rebuilding."
                )
            else:
                embedded = self._from_cache(cached_chunks)
                if embedded is not None:
                    logger.info("Loaded embeddings from cache.")
                    self.last_from_cache = True
                    return embedded
        else:
            logger.info("No valid embeddings cache found; building from scratch.")

        self.last_from_cache = False
        embedded = self._embed(chunks)
        self._save_cache(embedded)
        return embedded

    def _from_cache(self, cached_chunks: list) -> Optional[List[EmbeddedChunk]]:
        try:
            return [EmbeddedChunk.from_dict(item) for item in cached_chunks]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Ignoring malformed embeddings cache {self.cache_path} "
                f"({type(e).__name__}: {e}); rebuilding."
            )
            return None

    def _embed(self, chunks: Sequence[Chunk]) -> List[EmbeddedChunk]:
        if not chunks:
            return []

        vectors = self.embedder.embed_batch([c.text for c in chunks])

        embedded = []
        dimension = None
        for chunk, vector in zip(chunks, vectors):
            values = tuple(float(x) for x in vector)
            if dimension is None:
                dimension = len(values)
            elif len(values) != dimension:
                raise DimensionMismatch(
                    expected=dimension,
                    actual=len(values),
                    stage=f"index build for {chunk.doc_id}#{chunk.chunk_index}",
                )
            embedded.append(EmbeddedChunk(chunk=chunk, embedding=values))

        logger.info(f"Embedded {len(embedded)} chunks ({dimension}-dim).")
        return embedded

    def _load_cache(self) -> Optional[dict]:
        if not self.cache_path.exists():
            return None
        try:
            data = load_json(self.cache_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable embeddings cache {self.cache_path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def _save_cache(self, embedded: List[EmbeddedChunk]):
        save_json(
            {
                'model': self.model_name,
                'chunks': [ec.to_dict() for ec in embedded],
            },
            self.cache_path,
        )
        logger.info("Saved embeddings cache to disk")
