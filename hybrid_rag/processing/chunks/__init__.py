# -*- coding: utf-8 -*-
"""
Chunking for retrieval: paragraph-aligned, size-bounded chunks.
"""
from hybrid_rag.processing.chunks.paragraph_chunker import ParagraphChunker

__all__ = ['ParagraphChunker']
