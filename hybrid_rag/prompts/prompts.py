# -*- coding: utf-8 -*-
"""
LLM prompt templates for answer generation.
"""

# ============================================================================
# ANSWER GENERATION
# ============================================================================

ANSWER_GENERATION_SYSTEM_PROMPT = (
    "You are an assistant that answers questions about a corpus of music theory "
    "and game-music research. Use only the information in the provided sources. "
    "If the answer is not clearly supported by the sources, say you don't know."
)

ANSWER_GENERATION_USER_PROMPT = """Question:
{query}

Sources:
{sources}"""

NO_QUESTION_ANSWER = "No question provided."

NO_CONTEXT_ANSWER = "I don't have any relevant context to answer this question."

EMPTY_RESPONSE_ANSWER = "[No content returned from model]"
