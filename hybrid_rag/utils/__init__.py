# -*- coding: utf-8 -*-
"""
Utilities package for common functionality across the retrieval engine.

Contains dataclasses, error types, logging setup, JSON I/O helpers, query
tokenization, configuration and the embedding client.
"""
