"""Deterministic, atomic serialisation of MCP config documents."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Union

from .errors import WriteError
from .value_objects import McpConfigDocument

JSONDocument = Union[McpConfigDocument, Mapping[str, Any]]

FILE_MODE = 0o644


def render_document(document: JSONDocument) -> str:
    """Serialise ``document`` with sorted keys, two-space indent and a trailing newline."""

    payload = document.to_dict() if isinstance(document, McpConfigDocument) else document
    try:
        text = json.dumps(payload, indent=2, sort_keys=True, allow_nan=False, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        # ValueError covers both circular references and NaN/Infinity.
        raise WriteError(f"MCP config document is not serialisable: {exc}") from exc
    return text + "\n"


def write_document(path: Path, document: JSONDocument) -> Path:
    """Atomically replace ``path`` with the rendered document."""

    data = render_document(document)
    parent = path.parent
    if not parent.is_dir():
        raise WriteError(f"Directory {parent} does not exist")
    try:
        _atomic_write(path, data)
    except OSError as exc:
        raise WriteError(f"Failed to write {path}: {exc.strerror or exc}") from exc
    return path


def _atomic_write(path: Path, data: str) -> None:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data.encode("utf-8"))
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


__all__ = ["JSONDocument", "render_document", "write_document"]
