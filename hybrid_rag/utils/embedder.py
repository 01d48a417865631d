"""
Together.ai embedding client for chunks and queries

Remote embedding provider used at index-build time (all chunks, batched) and at
query time (one query string). Vector dimensionality is a property of the model
and is the compatibility contract for semantic scoring.

Usage: EmbeddingIndexBuilder (chunks), RetrievalProcessor (queries)
"""

import logging
import os
from typing import List, Optional

import numpy as np
from together import Together
from tqdm import tqdm

from hybrid_rag.utils.config import EMBEDDING_MODEL, EMBEDDING_BATCH_SIZE
from hybrid_rag.utils.errors import ProviderError

logger = logging.getLogger(__name__)

EMPTY_TEXT_PLACEHOLDER = "(empty)"


class TogetherEmbedder:
    """
    Embedding client backed by the Together.ai embeddings endpoint.

    Example:
        embedder = TogetherEmbedder(api_key="...")

        # Corpus chunks
        vectors = embedder.embed_batch(["Chunk one ...", "Chunk two ..."])

        # Query
        query_vec = embedder.embed_single("What is a leitmotif?")
    """

    def __init__(
        self,
        model_name: str = EMBEDDING_MODEL,
        api_key: Optional[str] = None,
        batch_size: int = EMBEDDING_BATCH_SIZE,
        client: Optional[Together] = None,
    ):
        """
        Initialize embedder.

        Args:
            model_name: Together.ai embedding model identifier
            api_key: Together.ai API key (or from TOGETHER_API_KEY env var)
            batch_size: Texts per embeddings request
            client: Preconfigured client (tests inject a mock here)
        """
        self.model_name = model_name
        self.batch_size = batch_size
        self.embedding_dim = None

        if client is None:
            api_key = api_key or os.getenv("TOGETHER_API_KEY")
            if not api_key:
                raise ValueError(
                    "Together.ai API key required. "
                    "Set TOGETHER_API_KEY in .env file or pass api_key parameter."
                )
            client = Together(api_key=api_key)

        self.client = client
        logger.info(f"Embedding model: {model_name}")

    def embed_single(self, text: str) -> np.ndarray:
        """
        Embed a single text (typically the query).

        Returns:
            1-D embedding vector
        """
        return self.embed_batch([text], show_progress=False)[0]

    def embed_batch(
        self,
        texts: List[str],
        batch_size: Optional[int] = None,
        show_progress: bool = True,
    ) -> np.ndarray:
        """
        Embed multiple texts, preserving input order.

        Args:
            texts: Texts to embed
            batch_size: Texts per request (defaults to instance batch_size)
            show_progress: Show tqdm progress bar over batches

        Returns:
            Array of shape (len(texts), dim); (0, 0) for empty input

        Raises:
            ProviderError: If the embeddings request fails
        """
        if not texts:
            return np.zeros((0, 0), dtype=np.float32)

        batch_size = batch_size or self.batch_size
        inputs = [self._sanitize(text, idx) for idx, text in enumerate(texts)]

        starts = range(0, len(inputs), batch_size)
        if show_progress and len(inputs) > batch_size:
            starts = tqdm(starts, desc="Embedding", unit="batch")

        vectors = []
        for start in starts:
            vectors.extend(self._request(inputs[start:start + batch_size]))

        embeddings = np.asarray(vectors, dtype=np.float32)
        self.embedding_dim = embeddings.shape[1]
        logger.debug(f"Embedded {len(texts)} texts ({self.embedding_dim}-dim)")
        return embeddings

    def get_embedding_dim(self) -> Optional[int]:
        """Dimensionality seen on the last request (None before any call)."""
        return self.embedding_dim

    def _request(self, batch: List[str]) -> List[List[float]]:
        try:
            response = self.client.embeddings.create(model=self.model_name, input=batch)
        except Exception as e:
            status = getattr(e, 'http_status', None) or getattr(e, 'status_code', None)
            raise ProviderError("Embeddings", status=status, detail=str(e)) from e

        data = list(response.data)
        if len(data) != len(batch):
            raise ProviderError(
                "Embeddings",
                detail=f"expected {len(batch)} embeddings, got {len(data)}",
            )

        # The API reports an index per item; keep input order regardless of response order
        if all(getattr(item, 'index', None) is not None for item in data):
            data.sort(key=lambda item: item.index)
        return [item.embedding for item in data]

    @staticmethod
    def _sanitize(text: str, idx: int) -> str:
        cleaned = str(text if text is not None else "").replace("\x00", "").strip()
        if not cleaned:
            logger.warning(
                f"embed_batch: empty string at index {idx}; substituting placeholder."
            )
            return EMPTY_TEXT_PLACEHOLDER
        return cleaned
