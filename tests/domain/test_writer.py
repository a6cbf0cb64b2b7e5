from __future__ import annotations

import json
import math
import os
import stat
import sys
from pathlib import Path

import pytest

from mcpinstall.domain.mcp import (
    DEFAULT_SERVER_URL,
    McpConfigDocument,
    McpServerDescriptor,
    WriteError,
    render_document,
    write_document,
)

EXPECTED = """{
  "mcpServers": {
    "figma-dev-mode-mcp-server": {
      "transport": "sse",
      "url": "http://127.0.0.1:3845/sse"
    }
  }
}
"""


def _document(url: str = DEFAULT_SERVER_URL) -> McpConfigDocument:
    return McpConfigDocument.single(McpServerDescriptor(url=url))


def test_render_is_canonical() -> None:
    assert render_document(_document()) == EXPECTED
    assert render_document(_document().to_dict()) == EXPECTED


def test_write_creates_document(tmp_path: Path) -> None:
    target = tmp_path / ".mcp.json"
    assert write_document(target, _document()) == target
    assert target.read_text(encoding="utf-8") == EXPECTED
    assert [p.name for p in tmp_path.iterdir()] == [".mcp.json"]


def test_write_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / ".mcp.json"
    write_document(target, _document())
    first = target.read_bytes()
    write_document(target, _document())
    assert target.read_bytes() == first


def test_write_overwrites_without_merging(tmp_path: Path) -> None:
    target = tmp_path / ".mcp.json"
    target.write_text(json.dumps({"mcpServers": {"other": {"command": "x"}}, "extra": 1}), encoding="utf-8")
    write_document(target, _document("http://localhost:9000/sse"))
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data == {
        "mcpServers": {
            "figma-dev-mode-mcp-server": {"transport": "sse", "url": "http://localhost:9000/sse"},
        }
    }


def test_missing_parent_directory(tmp_path: Path) -> None:
    target = tmp_path / "missing" / ".mcp.json"
    with pytest.raises(WriteError, match="does not exist"):
        write_document(target, _document())
    assert not target.parent.exists()


def test_parent_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(WriteError):
        write_document(blocker / ".mcp.json", _document())


@pytest.mark.parametrize("value", [math.nan, math.inf])
def test_non_finite_values_are_rejected(tmp_path: Path, value: float) -> None:
    target = tmp_path / ".mcp.json"
    with pytest.raises(WriteError):
        write_document(target, {"mcpServers": {"x": {"url": value}}})
    assert not target.exists()


def test_cyclic_document_is_rejected(tmp_path: Path) -> None:
    cyclic: dict = {"mcpServers": {}}
    cyclic["mcpServers"]["self"] = cyclic
    with pytest.raises(WriteError):
        write_document(tmp_path / ".mcp.json", cyclic)
    assert list(tmp_path.iterdir()) == []


def test_failed_rename_leaves_no_partial_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / ".mcp.json"
    target.write_text("previous\n", encoding="utf-8")

    def _boom(src: str, dst: str) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", _boom)
    with pytest.raises(WriteError, match="No space left"):
        write_document(target, _document())
    assert target.read_text(encoding="utf-8") == "previous\n"
    assert [p.name for p in tmp_path.iterdir()] == [".mcp.json"]


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_written_file_is_world_readable(tmp_path: Path) -> None:
    target = tmp_path / ".mcp.json"
    write_document(target, _document())
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
