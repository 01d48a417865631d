# -*- coding: utf-8 -*-
"""
Module: test_run_query.py
Package: tests
Purpose: Tests for the query CLI helpers (no network, no data files)
"""

# Standard library
import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
for path in (PROJECT_ROOT, PROJECT_ROOT / "scripts"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Third-party
import pytest

# Local
import run_query
from hybrid_rag.retrieval.answer_generator import GeneratedAnswer
from hybrid_rag.retrieval.config import RetrievalMode
from hybrid_rag.retrieval.context_builder import ContextAssembler
from hybrid_rag.utils.dataclasses import (
    Chunk,
    GraphNode,
    GraphRagContext,
    RagContext,
    ScoredChunk,
)
from hybrid_rag.utils.errors import ProviderError


@pytest.fixture
def rag_context():
    results = [ScoredChunk(Chunk("reale_zelda", 0, "Songs open doors."), 0.9)]
    return ContextAssembler().assemble("ocarina songs", results)


class TestToJson:

    def test_plain_context(self, rag_context):
        output = run_query.to_json(rag_context, RetrievalMode.EMBEDDING)

        assert output['mode'] == "embedding"
        assert output['results'][0]['doc_id'] == "reale_zelda"
        assert 'graph_nodes' not in output
        assert 'answer' not in output
        json.dumps(output)

    def test_graph_context_and_answer(self, rag_context):
        context = GraphRagContext(
            query=rag_context.query,
            results=rag_context.results,
            context_text=rag_context.context_text,
            graph_nodes=[GraphNode.from_dict({"id": "g1", "type": "game", "name": "Zelda"})],
        )
        answer = GeneratedAnswer(answer="Via songs.", query=context.query, model="m")

        output = run_query.to_json(context, RetrievalMode.GRAPH, answer)

        assert output['graph_nodes'] == [{'id': "g1", 'type': "game", 'label': "Zelda"}]
        assert output['answer'] == "Via songs."


class TestRunQuery:

    def test_no_results_skips_generation(self, capsys):
        processor = MagicMock()
        processor.retrieve.return_value = RagContext(query="x", results=[], context_text="")
        generator = MagicMock()

        context, answer = run_query.run_query(processor, generator, "x", RetrievalMode.KEYWORD)

        assert answer is None
        generator.generate.assert_not_called()
        assert "No matching chunks found." in capsys.readouterr().out

    def test_prints_context_and_answer(self, rag_context, capsys):
        processor = MagicMock()
        processor.retrieve.return_value = rag_context
        generator = MagicMock()
        generator.generate.return_value = GeneratedAnswer(
            answer="Via songs.", query=rag_context.query, model="m"
        )

        _, answer = run_query.run_query(processor, generator, "ocarina songs",
                                        RetrievalMode.GRAPH, 3)

        processor.retrieve.assert_called_once_with("ocarina songs", RetrievalMode.GRAPH, 3)
        out = capsys.readouterr().out
        assert "=== RAG context being sent to the LLM ===" in out
        assert "Via songs." in out
        assert answer.answer == "Via songs."


class TestPrompts:

    @pytest.mark.parametrize("reply, expected", [
        ("1", RetrievalMode.KEYWORD),
        ("2", RetrievalMode.EMBEDDING),
        ("3", RetrievalMode.GRAPH),
        ("", RetrievalMode.GRAPH),
    ])
    def test_retrieval_mode(self, monkeypatch, reply, expected):
        monkeypatch.setattr("builtins.input", lambda _: reply)
        assert run_query.prompt_retrieval_mode() is expected

    @pytest.mark.parametrize("reply, expected", [("", True), ("y", True), ("N", False)])
    def test_verbose_toggle(self, monkeypatch, reply, expected):
        monkeypatch.setattr("builtins.input", lambda _: reply)
        assert run_query.prompt_toggle_verbose() is expected


class TestMain:

    def test_provider_error_exit_code(self, monkeypatch, tmp_path):
        processor = MagicMock()
        processor.retrieve.side_effect = ProviderError("Embeddings", status=500, detail="down")
        monkeypatch.setattr(run_query, "load_pipeline", lambda *a, **k: processor)
        monkeypatch.setattr(run_query, "setup_logging", lambda **k: None)

        code = run_query.main(["query", "--no-answer", "--data-dir", str(tmp_path)])

        assert code == 1

    def test_output_file_written(self, monkeypatch, tmp_path, rag_context):
        processor = MagicMock()
        processor.retrieve.return_value = rag_context
        monkeypatch.setattr(run_query, "load_pipeline", lambda *a, **k: processor)
        monkeypatch.setattr(run_query, "setup_logging", lambda **k: None)
        output = tmp_path / "out" / "results.json"

        code = run_query.main([
            "ocarina songs", "--mode", "keyword", "--no-answer",
            "--data-dir", str(tmp_path), "--output", str(output),
        ])

        assert code == 0
        saved = json.loads(output.read_text(encoding="utf-8"))
        assert saved['mode'] == "keyword"
        assert saved['results'][0]['chunk_index'] == 0
