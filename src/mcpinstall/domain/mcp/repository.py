"""Filesystem repository for installed MCP config documents."""

from __future__ import annotations

import json
from pathlib import Path

from .errors import ValidationError, WriteError
from .value_objects import InstallScope, McpConfigDocument
from .writer import write_document

PROJECT_CONFIG_NAME = ".mcp.json"


class McpConfigRepository:
    """Resolves where a document lives for a scope and persists it there."""

    def __init__(self, project_root: Path, user_config_path: Path) -> None:
        self._root = project_root
        self._user_config_path = user_config_path

    @property
    def project_root(self) -> Path:
        return self._root

    def target_path(self, scope: InstallScope) -> Path:
        if scope is InstallScope.USER:
            return self._user_config_path
        return self._root / PROJECT_CONFIG_NAME

    def save(self, scope: InstallScope, document: McpConfigDocument) -> Path:
        target = self.target_path(scope)
        if scope is InstallScope.USER:
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise WriteError(f"Cannot create {target.parent}: {exc.strerror or exc}") from exc
        return write_document(target, document)

    def load(self, scope: InstallScope) -> McpConfigDocument | None:
        target = self.target_path(scope)
        if not target.exists():
            return None
        try:
            data = json.loads(target.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{target} is not valid JSON: {exc}") from exc
        return McpConfigDocument.from_dict(data)
