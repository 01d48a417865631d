# -*- coding: utf-8 -*-
"""
Context assembly: ranked chunks -> the text block handed to generation.

Each result becomes a labeled block:

    Source 1
    doc: <doc_id>
    chunkIndex: <chunk_index>
    score: <score>

    <trimmed chunk text>

Blocks are joined by a dashed separator. Results are neither filtered nor
reordered.
"""
import math
from decimal import Decimal
from typing import List

from hybrid_rag.retrieval.config import RETRIEVAL_CONFIG
from hybrid_rag.utils.dataclasses import RagContext, ScoredChunk

CONTEXT_SEPARATOR = RETRIEVAL_CONFIG['context_separator']


def format_score(value: float) -> str:
    """
    Shortest round-trip rendering with integral values printed bare and
    exponents unpadded: 1.0 -> "1", 0.5 -> "0.5", 1e-07 -> "1e-7".

    Plain notation for magnitudes in [1e-6, 1e21), scientific otherwise.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)

    k = len(digits)
    n = k + exponent  # position of the decimal point relative to digits

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def format_source_block(rank: int, result: ScoredChunk) -> str:
    chunk = result.chunk
    return "\n".join([
        f"Source {rank}",
        f"doc: {chunk.doc_id}",
        f"chunkIndex: {chunk.chunk_index}",
        f"score: {format_score(result.score)}",
        "",
        chunk.text.strip(),
    ])


class ContextAssembler:
    """Render results plus the query into a RagContext."""

    def __init__(self, separator: str = CONTEXT_SEPARATOR):
        self.separator = separator

    def assemble(self, query: str, results: List[ScoredChunk]) -> RagContext:
        if not results:
            return RagContext(query=query, results=[], context_text="")

        blocks = [format_source_block(i, result) for i, result in enumerate(results, 1)]
        return RagContext(
            query=query,
            results=list(results),
            context_text=self.separator.join(blocks),
        )
