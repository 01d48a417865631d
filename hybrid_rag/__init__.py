# -*- coding: utf-8 -*-
"""
Hybrid retrieval engine for research-corpus question answering.

Three interchangeable retrieval strategies (keyword TF-IDF, embedding cosine
similarity, knowledge-graph guided) that all end in a bounded, ranked context
block for answer generation.
"""

__version__ = "0.3.0"
