# -*- coding: utf-8 -*-
"""
Answer generator for the hybrid retrieval engine.

Sends the assembled context block verbatim, together with the question, to
Claude and returns the answer text. Queries without a question or without any
retrieved context are answered locally without an API call. API failures are
surfaced as ProviderError; nothing is retried.
"""

# Standard library
import os
from dataclasses import dataclass
from typing import Optional

# Third-party
import anthropic
from anthropic import Anthropic

# Config imports (direct)
from hybrid_rag.retrieval.config import ANSWER_GENERATION_CONFIG

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import RagContext
from hybrid_rag.utils.errors import ProviderError

# Utils
from hybrid_rag.utils.logger import get_logger

# Prompts
from hybrid_rag.prompts.prompts import (
    ANSWER_GENERATION_SYSTEM_PROMPT,
    ANSWER_GENERATION_USER_PROMPT,
    EMPTY_RESPONSE_ANSWER,
    NO_CONTEXT_ANSWER,
    NO_QUESTION_ANSWER,
)

logger = get_logger(__name__)


@dataclass
class GeneratedAnswer:
    """LLM-generated answer with metadata."""
    answer: str
    query: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    chunks_used: int = 0


class AnswerGenerator:
    """
    Generate answers from a RagContext using the Anthropic Messages API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: dict = None,
        client: Optional[Anthropic] = None,
    ):
        """
        Initialize answer generator.

        Args:
            api_key: Anthropic API key (reads from env if None).
            config: Generation config (uses ANSWER_GENERATION_CONFIG if None).
            client: Preconfigured client (tests inject a mock here).
        """
        self.config = config or ANSWER_GENERATION_CONFIG

        if client is None:
            api_key = api_key or os.getenv('ANTHROPIC_API_KEY')
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY not found in environment")
            client = Anthropic(api_key=api_key)

        self.client = client
        logger.info("AnswerGenerator initialized with model: %s", self.config['model'])

    def generate(self, rag_context: RagContext) -> GeneratedAnswer:
        """
        Generate an answer grounded in rag_context.context_text.

        Raises:
            ProviderError: If the API call fails.
        """
        model = self.config['model']

        if not rag_context.query.strip():
            return GeneratedAnswer(answer=NO_QUESTION_ANSWER, query=rag_context.query, model=model)

        if not rag_context.context_text.strip():
            return GeneratedAnswer(answer=NO_CONTEXT_ANSWER, query=rag_context.query, model=model)

        user_prompt = self.build_user_prompt(rag_context)
        logger.info("Generating answer for query: %s", rag_context.query)

        try:
            response = self.client.messages.create(
                model=model,
                max_tokens=self.config['max_output_tokens'],
                temperature=self.config['temperature'],
                system=ANSWER_GENERATION_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            raise ProviderError(
                "Chat", status=getattr(e, 'status_code', None), detail=str(e)
            ) from e

        answer_text = response.content[0].text if response.content else EMPTY_RESPONSE_ANSWER

        logger.info(
            "Answer generated: %d input tokens, %d output tokens",
            response.usage.input_tokens, response.usage.output_tokens
        )

        return GeneratedAnswer(
            answer=answer_text,
            query=rag_context.query,
            model=model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            chunks_used=len(rag_context.results),
        )

    @staticmethod
    def build_user_prompt(rag_context: RagContext) -> str:
        return ANSWER_GENERATION_USER_PROMPT.format(
            query=rag_context.query,
            sources=rag_context.context_text,
        )
