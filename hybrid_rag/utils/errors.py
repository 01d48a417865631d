# -*- coding: utf-8 -*-
"""
Error taxonomy for the retrieval engine.

DimensionMismatch and ProviderError are fatal to the query that raised them;
MalformedGraph is fatal when graph mode starts up. An empty query is not an
error and never raises.
"""
from typing import Optional


class RagError(Exception):
    """Base class for all retrieval engine errors."""


class DimensionMismatch(RagError):
    """Query and chunk embedding vectors disagree on length."""

    def __init__(self, expected: int, actual: int, stage: str = "similarity"):
        self.expected = expected
        self.actual = actual
        self.stage = stage
        super().__init__(
            f"Embedding dimension mismatch during {stage}: "
            f"expected {expected}, got {actual}"
        )


class ProviderError(RagError):
    """Remote embedding or generation call failed."""

    def __init__(self, provider: str, status: Optional[int] = None, detail: str = ""):
        self.provider = provider
        self.status = status
        self.detail = detail
        status_str = status if status is not None else "n/a"
        super().__init__(f"{provider} API error (status={status_str}): {detail}")


class MalformedGraph(RagError):
    """Knowledge graph nodes/edges are not shaped as expected."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Malformed knowledge graph file {path}: {reason}")
