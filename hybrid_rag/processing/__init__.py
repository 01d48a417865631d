# -*- coding: utf-8 -*-
"""
Processing package: corpus chunking.
"""
