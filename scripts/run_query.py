#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Script: run_query.py
Package: scripts
Purpose: CLI interface for the hybrid retrieval pipeline

Usage:
    python scripts/run_query.py "How does Undertale reuse motifs?"
    python scripts/run_query.py "leitmotif" --mode keyword --no-answer
    python scripts/run_query.py "chiptune timbre" --mode embedding --output results.json
    python scripts/run_query.py                      # interactive loop

Data layout (see hybrid_rag.utils.config):
    data/corpus/*.txt, data/graph_nodes.json, data/graph_edges.json,
    data/embeddings.json (written on first run)
"""

import sys
import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Local imports
from hybrid_rag.graph.graph_loader import load_knowledge_graph
from hybrid_rag.ingestion.document_loader import DocumentLoader
from hybrid_rag.processing.chunks.paragraph_chunker import ParagraphChunker
from hybrid_rag.retrieval.answer_generator import AnswerGenerator
from hybrid_rag.retrieval.config import RetrievalMode
from hybrid_rag.retrieval.embedding_index import EmbeddingIndexBuilder
from hybrid_rag.retrieval.graph_expander import get_node_label
from hybrid_rag.retrieval.retrieval_processor import RetrievalProcessor
from hybrid_rag.utils.config import RagSettings
from hybrid_rag.utils.embedder import TogetherEmbedder
from hybrid_rag.utils.errors import RagError
from hybrid_rag.utils.logger import get_logger, setup_logging
from hybrid_rag.utils.text import get_preview

logger = get_logger(__name__)

RULE = "=" * 43


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Hybrid keyword / embedding / graph RAG over a research corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_query.py "How does Undertale reuse motifs?"
  python scripts/run_query.py "leitmotif" --mode keyword --no-answer
  python scripts/run_query.py            # interactive
        """
    )

    parser.add_argument(
        'query',
        type=str,
        nargs='?',
        help='Query string (omit for interactive mode)'
    )

    parser.add_argument(
        '--mode',
        type=str,
        choices=[m.value for m in RetrievalMode],
        default=RetrievalMode.GRAPH.value,
        help='Retrieval mode (default: graph)'
    )

    parser.add_argument(
        '--max-results',
        type=int,
        default=None,
        help='Maximum chunks in the context (default: MAX_CHUNKS_PER_QUERY)'
    )

    parser.add_argument(
        '--data-dir',
        type=str,
        default=None,
        help='Data directory holding corpus/, graph and cache files'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log term weights, graph matches and candidate restriction'
    )

    parser.add_argument(
        '--no-answer',
        action='store_true',
        help='Skip answer generation (retrieval only)'
    )

    parser.add_argument(
        '--output',
        type=str,
        help='Save results to JSON file (single-query mode only)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    return parser.parse_args(argv)


# ============================================================================
# PIPELINE LOADING
# ============================================================================

def load_pipeline(settings: RagSettings, mode: RetrievalMode, verbose: bool) -> RetrievalProcessor:
    """
    Load corpus, chunks, embedded index and (for graph mode) the graph.

    Keyword mode needs neither the embedder nor the graph.
    """
    documents = DocumentLoader(settings.corpus_path).load_all_documents()
    print(f"Loaded {len(documents)} research document(s).\n")
    for doc in documents:
        print(f"--- [{doc.doc_id}] ({doc.filename}) ---")
        print(get_preview(doc.content, 200))
        print()

    chunks = ParagraphChunker(settings.max_chars_per_chunk).chunk_documents(documents)
    print(f"Created {len(chunks)} chunk(s) total.\n")

    embedder = None
    embedded_chunks = []
    if mode != RetrievalMode.KEYWORD:
        embedder = TogetherEmbedder(
            model_name=settings.embedding_model,
            api_key=settings.together_api_key,
            batch_size=settings.embedding_batch_size,
        )
        print("Computing embeddings for all chunks / loading cache...")
        builder = EmbeddingIndexBuilder(
            embedder,
            cache_path=settings.embeddings_cache_path,
            model_name=settings.embedding_model,
        )
        embedded_chunks = builder.build(chunks)
        print(f"Embedded {len(embedded_chunks)} chunks.\n")

    graph = None
    if mode == RetrievalMode.GRAPH:
        graph = load_knowledge_graph(settings.nodes_path, settings.edges_path)

    return RetrievalProcessor(
        chunks=chunks,
        embedded_chunks=embedded_chunks,
        embedder=embedder,
        graph=graph,
        settings=settings,
        verbose=verbose,
    )


# ============================================================================
# OUTPUT
# ============================================================================

def preview_rag_context(rag_context) -> None:
    """Print result previews and the context block sent to the model."""
    print(f'\nTop {len(rag_context.results)} chunks for query: "{rag_context.query}"\n')
    for result in rag_context.results:
        chunk = result.chunk
        print(f"Score = {result.score} | doc={chunk.doc_id} | chunkIndex = {chunk.chunk_index}")
        print(get_preview(chunk.text, 200))
        print()

    print("=== RAG context being sent to the LLM ===\n")
    print(f"User question:\n{rag_context.query}\n")
    print("Retrieved context:\n")
    print(rag_context.context_text)
    print(f"\n{RULE}\n")


def to_json(rag_context, mode: RetrievalMode, answer=None) -> dict:
    """Serializable summary of a query run."""
    output = {
        'query': rag_context.query,
        'mode': mode.value,
        'timestamp': datetime.now().isoformat(),
        'results': [
            {
                'doc_id': r.chunk.doc_id,
                'chunk_index': r.chunk.chunk_index,
                'score': r.score,
                'text': r.chunk.text,
            }
            for r in rag_context.results
        ],
        'context_text': rag_context.context_text,
    }
    graph_nodes = getattr(rag_context, 'graph_nodes', None)
    if graph_nodes is not None:
        output['graph_nodes'] = [
            {'id': n.id, 'type': str(n.type), 'label': get_node_label(n)} for n in graph_nodes
        ]
    if answer is not None:
        output['answer'] = answer.answer
        output['model'] = answer.model
    return output


# ============================================================================
# QUERY EXECUTION
# ============================================================================

def run_query(processor, generator, query: str, mode: RetrievalMode, max_results=None):
    """
    Retrieve (and optionally answer) one query.

    Returns:
        (RagContext, GeneratedAnswer or None)
    """
    print("Querying...")
    rag_context = processor.retrieve(query, mode, max_results)

    if not rag_context.results:
        print("No matching chunks found.\n")
        return rag_context, None

    preview_rag_context(rag_context)

    if generator is None:
        return rag_context, None

    answer = generator.generate(rag_context)
    print("=== Model answer ===")
    print(answer.answer)
    print(f"\n{RULE}\n")
    return rag_context, answer


def prompt_retrieval_mode() -> RetrievalMode:
    answer = input("Select retrieval mode: [1] keyword, [2] embedding, [3] graph (default): ").strip()
    if answer == "1":
        mode = RetrievalMode.KEYWORD
    elif answer == "2":
        mode = RetrievalMode.EMBEDDING
    else:
        mode = RetrievalMode.GRAPH
    print(f"Using retrieval mode: {mode.value}\n")
    return mode


def prompt_toggle_verbose() -> bool:
    verbose = input("Enable verbose mode? [y]/n: ").strip().lower() != 'n'
    print("Enabling verbose mode.\n" if verbose else "Disabling verbose mode.\n")
    return verbose


def interactive_loop(settings: RagSettings, skip_answer: bool, max_results=None):
    """Prompt for mode and verbosity, then answer queries until an empty line."""
    mode = prompt_retrieval_mode()
    verbose = prompt_toggle_verbose()

    processor = load_pipeline(settings, mode, verbose)
    generator = None if skip_answer else AnswerGenerator(api_key=settings.anthropic_api_key)

    while True:
        query = input("Enter a search query (or press Enter to exit): ")
        if not query.strip():
            print("No query entered. Exiting.")
            break
        try:
            run_query(processor, generator, query, mode, max_results)
        except RagError as e:
            logger.error(f"Query failed: {e}")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(level=logging.INFO, log_file=args.log_file)

    settings = RagSettings.from_env(args.data_dir)

    if not args.query:
        interactive_loop(settings, args.no_answer, args.max_results)
        return 0

    mode = RetrievalMode(args.mode)
    processor = load_pipeline(settings, mode, args.verbose)
    generator = None if args.no_answer else AnswerGenerator(api_key=settings.anthropic_api_key)

    try:
        rag_context, answer = run_query(processor, generator, args.query, mode, args.max_results)
    except RagError as e:
        logger.error(f"Query failed: {e}")
        return 1

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(to_json(rag_context, mode, answer), f, indent=2, ensure_ascii=False)
        print(f"Results saved to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
