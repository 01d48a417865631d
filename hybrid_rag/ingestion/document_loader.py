# -*- coding: utf-8 -*-
"""
Document loader for the research corpus

Loads every .txt file in the corpus directory into ResearchDoc records. The
document id is the filename without its .txt suffix, which is also what graph
work nodes resolve to through their source_file.

Examples:
    loader = DocumentLoader(corpus_dir="data/corpus")
    documents = loader.load_all_documents()
    # Returns: List[ResearchDoc] sorted by filename
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


@dataclass
class ResearchDoc:
    """
    Raw corpus document.

    Attributes:
        doc_id: Filename without .txt (e.g., "reale_2016_chiptune")
        filename: Original filename
        content: Full text content
    """
    doc_id: str
    filename: str
    content: str

    def __repr__(self) -> str:
        return f"ResearchDoc(id={self.doc_id}, chars={len(self.content)})"


class DocumentLoader:
    """
    Plain-text corpus loader.

    Usage:
        loader = DocumentLoader("data/corpus")
        docs = loader.load_all_documents()
    """

    def __init__(self, corpus_dir: Union[str, Path] = 'data/corpus'):
        """
        Args:
            corpus_dir: Directory containing .txt documents
        """
        self.corpus_dir = Path(corpus_dir)

    def load_document(self, path: Path) -> ResearchDoc:
        """Load one text file."""
        content = path.read_text(encoding='utf-8')
        return ResearchDoc(doc_id=self.doc_id_for(path.name), filename=path.name, content=content)

    def load_all_documents(self) -> List[ResearchDoc]:
        """
        Load every .txt file (case-insensitive suffix), sorted by filename.

        Raises:
            FileNotFoundError: If corpus_dir does not exist
        """
        if not self.corpus_dir.is_dir():
            raise FileNotFoundError(f"Corpus directory not found: {self.corpus_dir}")

        paths = sorted(
            p for p in self.corpus_dir.iterdir()
            if p.is_file() and p.suffix.lower() == '.txt'
        )
        documents = [self.load_document(p) for p in paths]

        logger.info(f"Loaded {len(documents)} research document(s) from {self.corpus_dir}")
        return documents

    @staticmethod
    def doc_id_for(filename: str) -> str:
        if filename.lower().endswith('.txt'):
            return filename[:-4]
        return filename
