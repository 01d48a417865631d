# -*- coding: utf-8 -*-
"""
Keyword retrieval using TF-IDF style term scoring.

Query terms are lowercased, split on non-word characters, filtered to length
>= 3 and stripped of stopwords. Only chunks whose trimmed text reaches the
minimum retrieval length are scored at all. Document frequency counts raw
substring containment (not token matches), idf = ln(N / df), and a chunk's
score is the sum over terms of non-overlapping occurrence count x idf.

Terms that occur in every candidate get idf 0 and contribute nothing; chunks
can still rank on the remaining terms. Equal scores keep corpus order.

Examples:
    from hybrid_rag.retrieval.lexical_scorer import LexicalScorer

    scorer = LexicalScorer(min_chars=80)
    results = scorer.score(chunks, "leitmotif in Zelda soundtracks", max_results=8)
    for term in scorer.last_term_weights:
        print(term.term, term.df, round(term.idf, 3))
"""
# Standard library
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

# Config imports (direct)
from hybrid_rag.utils.config import MIN_CHARS_FOR_RETRIEVAL

# Dataclass imports (direct)
from hybrid_rag.utils.dataclasses import Chunk, ScoredChunk
from hybrid_rag.utils.text import tokenize_query

logger = logging.getLogger(__name__)


@dataclass
class TermWeight:
    """Diagnostics for one scored query term."""
    term: str
    df: int
    idf: float


class LexicalScorer:
    """
    Deterministic TF-IDF scorer over an in-memory chunk list.

    Pure function of (chunks, query, max_results); last_term_weights only
    records what the most recent call computed.
    """

    def __init__(self, min_chars: int = MIN_CHARS_FOR_RETRIEVAL, min_term_length: int = 3):
        """
        Args:
            min_chars: Minimum trimmed chunk length eligible for scoring.
            min_term_length: Minimum query token length.
        """
        self.min_chars = min_chars
        self.min_term_length = min_term_length
        self.last_term_weights: List[TermWeight] = []

    def score(
        self,
        chunks: Sequence[Chunk],
        query: str,
        max_results: int,
        verbose: bool = False,
    ) -> List[ScoredChunk]:
        """
        Score and rank chunks against the query terms.

        Args:
            chunks: Corpus chunks in corpus order.
            query: Free-text query.
            max_results: Maximum results returned.
            verbose: Log term weights at INFO instead of DEBUG.

        Returns:
            ScoredChunk list, highest score first, every score > 0.
        """
        self.last_term_weights = []

        terms = tokenize_query(query, remove_stopwords=True, min_length=self.min_term_length)
        if not terms or max_results <= 0:
            return []

        candidates = [c for c in chunks if len(c.text.strip()) >= self.min_chars]
        lowered = [c.text.lower() for c in candidates]

        df = self.document_frequencies(terms, lowered)
        if not df:
            return []

        idf = self.inverse_document_frequencies(df, len(candidates))
        self.last_term_weights = [TermWeight(term, df[term], idf[term]) for term in df]
        self._log_term_weights(len(candidates), verbose)

        scored = []
        for position, (chunk, text) in enumerate(zip(candidates, lowered)):
            total = 0.0
            for term, weight in idf.items():
                # str.count is non-overlapping, scanning left to right
                occurrences = text.count(term)
                if occurrences:
                    total += occurrences * weight
            if total > 0:
                scored.append((position, ScoredChunk(chunk=chunk, score=total)))

        scored.sort(key=lambda item: (-item[1].score, item[0]))
        return [sc for _, sc in scored[:max_results]]

    @staticmethod
    def document_frequencies(terms: List[str], lowered_texts: List[str]) -> Dict[str, int]:
        """Count of texts containing each term as a substring; zero-df terms dropped."""
        df = {}
        for term in terms:
            count = sum(1 for text in lowered_texts if term in text)
            if count > 0:
                df[term] = count
        return df

    @staticmethod
    def inverse_document_frequencies(df: Dict[str, int], candidate_count: int) -> Dict[str, float]:
        """ln(N / df) per term."""
        return {term: math.log(candidate_count / count) for term, count in df.items()}

    def _log_term_weights(self, candidate_count: int, verbose: bool):
        level = logging.INFO if verbose else logging.DEBUG
        if not logger.isEnabledFor(level):
            return
        logger.log(level, "Keyword mode: query terms and their IDF weights:")
        for weight in self.last_term_weights:
            logger.log(
                level,
                f'  term="{weight.term}" -> df={weight.df}/{candidate_count}, idf={weight.idf:.3f}',
            )
