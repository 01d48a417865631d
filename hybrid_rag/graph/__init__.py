# -*- coding: utf-8 -*-
"""
Graph package: knowledge graph loading and validation.
"""
from hybrid_rag.graph.graph_loader import load_knowledge_graph

__all__ = ['load_knowledge_graph']
