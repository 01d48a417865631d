# -*- coding: utf-8 -*-
"""
Ingestion package: corpus document loading.
"""
from hybrid_rag.ingestion.document_loader import DocumentLoader, ResearchDoc

__all__ = ['DocumentLoader', 'ResearchDoc']
