# -*- coding: utf-8 -*-
"""
Paragraph-aware chunker with a hard character limit.

Splits each document on blank lines, packs whole paragraphs into a buffer
while they fit under max_chars, and only cuts inside a paragraph when that
paragraph alone exceeds the limit. An oversize paragraph first tops up the
pending buffer with its head, then continues in max_chars slices.

Every emitted chunk is trimmed, at most max_chars long, and numbered from 0
within its document. Slices that are empty after trimming are not emitted.

Examples:
    from hybrid_rag.processing.chunks.paragraph_chunker import ParagraphChunker

    chunker = ParagraphChunker(max_chars=1200)
    chunks = chunker.chunk_documents(documents)
"""
# Standard library
import logging
import re
from typing import List

# Dataclass imports (direct)
from hybrid_rag.ingestion.document_loader import ResearchDoc
from hybrid_rag.utils.config import MAX_CHARS_PER_CHUNK
from hybrid_rag.utils.dataclasses import Chunk

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r'\n\s*\n')
_PARAGRAPH_SUFFIX = "\n\n"


class ParagraphChunker:
    """Paragraph-aligned chunking bounded by max_chars."""

    def __init__(self, max_chars: int = MAX_CHARS_PER_CHUNK):
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.max_chars = max_chars

    def chunk_documents(self, documents: List[ResearchDoc]) -> List[Chunk]:
        """Chunk all documents, preserving document order."""
        chunks = []
        for doc in documents:
            chunks.extend(self.chunk_text(doc.doc_id, doc.content))

        logger.info(f"Created {len(chunks)} chunk(s) from {len(documents)} document(s)")
        return chunks

    def chunk_text(self, doc_id: str, content: str) -> List[Chunk]:
        """Chunk one document's text."""
        pieces = []
        buffer = ""

        for para in self.split_paragraphs(content):
            para_text = para + _PARAGRAPH_SUFFIX

            if len(para_text) > self.max_chars:
                start = 0
                if buffer:
                    space_left = self.max_chars - len(buffer)
                    if space_left > 0:
                        pieces.append(buffer + para_text[:space_left])
                        start = space_left
                    else:
                        pieces.append(buffer)
                    buffer = ""
                pieces.extend(self._slices(para_text, start))
                continue

            if len(buffer) + len(para_text) <= self.max_chars:
                buffer += para_text
            else:
                if buffer:
                    pieces.append(buffer)
                buffer = para_text

        if buffer:
            pieces.append(buffer)

        chunks = []
        for piece in pieces:
            text = piece.strip()
            if text:
                chunks.append(Chunk(doc_id=doc_id, chunk_index=len(chunks), text=text))
        return chunks

    @staticmethod
    def split_paragraphs(content: str) -> List[str]:
        """Blank-line separated paragraphs, trimmed, empties dropped."""
        return [p.strip() for p in _PARAGRAPH_BREAK.split(content) if p.strip()]

    def _slices(self, text: str, start: int) -> List[str]:
        return [text[i:i + self.max_chars] for i in range(start, len(text), self.max_chars)]
