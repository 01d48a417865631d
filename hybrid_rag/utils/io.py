# -*- coding: utf-8 -*-
"""
JSON I/O helpers for engine artifacts (graph files, embeddings cache).

Consistent UTF-8 encoding and size logging for everything read from or written
to data/.

Examples:
    from hybrid_rag.utils.io import load_json, save_json
    nodes = load_json("data/graph_nodes.json")
    save_json({"model": "...", "chunks": []}, "data/embeddings.json")
"""
import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def load_json(path: Union[str, Path]) -> Any:
    """
    Load JSON file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON content

    Raises:
        FileNotFoundError: If path does not exist
        json.JSONDecodeError: If content is not valid JSON
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    logger.debug(f"Loaded {path} ({_size_str(path)})")
    return data


def save_json(
    data: Any,
    path: Union[str, Path],
    indent: int = 2,
) -> str:
    """
    Save data to JSON file, creating parent directories.

    Args:
        data: JSON-serializable data (numpy arrays and dataclasses converted)
        path: Output path
        indent: Indentation level (default 2)

    Returns:
        Path string
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False, default=_serialize)

    logger.info(f"Saved {path} ({_size_str(path)})")
    return str(path)


def _serialize(obj: Any) -> Any:
    """Convert non-JSON-serializable objects."""
    if hasattr(obj, 'tolist'):  # numpy array / scalar
        return obj.tolist()
    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    if hasattr(obj, '__dict__'):
        return obj.__dict__
    return str(obj)


def _size_str(path: Path) -> str:
    """Human-readable file size."""
    size = path.stat().st_size
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
