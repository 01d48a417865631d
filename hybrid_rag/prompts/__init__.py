# -*- coding: utf-8 -*-
"""Prompt templates."""
