"""Command line interface for the MCP installer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import time
from pathlib import Path
from textwrap import dedent
from typing import Any

from mcpinstall import __version__
from mcpinstall.adapters.settings import YamlSettingsStore
from mcpinstall.app.mcp import McpInstaller, install_mcp_for_project, resolve_install_settings
from mcpinstall.domain.mcp import (
    InstallFailure,
    InstallScope,
    McpConfigRepository,
    ProjectConfig,
    ValidationError,
    render_document,
)
from mcpinstall.logging_config import setup_logging
from mcpinstall.ports.settings_store import ENABLE_KEY, SCOPE_KEY, SERVER_URL_KEY
from mcpinstall.runtime import stream_progress
from mcpinstall.settings import SETTINGS
from mcpinstall.utils import telemetry
from mcpinstall.utils.telemetry import record_structured_event

HELP_OVERVIEW = dedent(
    """
    Provision the Figma dev-mode MCP server registration for a project.

    Quick start:
      - mcpinstall settings set enableFigmaMCP true
      - mcpinstall install PATH --id my-project
      - mcpinstall show PATH
      - mcpinstall settings reset

    Settings keys:
      - enableFigmaMCP   true/false (default: true)
      - figmaMCPUrl      SSE endpoint (default: http://127.0.0.1:3845/sse)
      - mcpInstallScope  project/user (default: project)
    """
)

KNOWN_KEYS = (ENABLE_KEY, SERVER_URL_KEY, SCOPE_KEY)


def _default_project_path(path_arg: str | None) -> Path:
    if path_arg:
        return Path(path_arg).expanduser().resolve()
    return Path(os.getcwd())


def _parse_value(raw: str) -> Any:
    value = raw.strip()
    if value == "":
        return ""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _settings_store() -> YamlSettingsStore:
    return YamlSettingsStore(SETTINGS.settings_file)


def _record(command: str, status: str, payload: dict[str, Any], *, start: float | None = None) -> None:
    duration = None if start is None else (time.perf_counter() - start) * 1000
    record_structured_event(
        SETTINGS,
        f"cli.{command}",
        status=status,
        level="error" if status == "error" else "info",
        component="cli",
        duration_ms=duration,
        payload=payload,
    )


def _install_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    event_context = {"path": str(project_path), "projectId": args.id}
    _record("install", "start", event_context)
    start = time.perf_counter()

    try:
        project = ProjectConfig(id=args.id, name=args.name or project_path.name)
    except ValidationError as exc:
        _record("install", "error", event_context | {"error": str(exc)}, start=start)
        print(f"install failed: {exc}", file=sys.stderr)
        return 2

    installer = McpInstaller.from_settings(SETTINGS)
    outcome = asyncio.run(install_mcp_for_project(installer, project_path, project))

    if isinstance(outcome, InstallFailure):
        _record("install", "error", event_context | {"error": outcome.message}, start=start)
        if getattr(args, "json", False):
            print(json.dumps({"status": "error", "message": outcome.message}, ensure_ascii=False, indent=2))
        else:
            print(f"install failed: {outcome.message}", file=sys.stderr)
        return 1

    status = "installed" if outcome.installed else "skipped"
    _record("install", "success", event_context | {"result": status}, start=start)
    if getattr(args, "json", False):
        payload = {"status": status, "path": str(outcome.path) if outcome.path else None}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    elif outcome.installed:
        print(f"install: registered Figma MCP server -> {outcome.path}")
    else:
        print(f"install: skipped ({ENABLE_KEY} is false)")
    return 0


def _show_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    if args.scope:
        scope = InstallScope(args.scope)
    else:
        scope = resolve_install_settings(_settings_store()).scope
    repository = McpConfigRepository(project_path, SETTINGS.user_mcp_config)
    target = repository.target_path(scope)
    try:
        document = repository.load(scope)
    except (ValidationError, OSError) as exc:
        print(f"show failed: {exc}", file=sys.stderr)
        return 1
    if document is None:
        if getattr(args, "json", False):
            print(json.dumps({"path": str(target), "document": None}, ensure_ascii=False, indent=2))
        else:
            print(f"show: no MCP config at {target}")
        return 1
    if getattr(args, "json", False):
        print(json.dumps({"path": str(target), "document": document.to_dict()}, ensure_ascii=False, indent=2))
    else:
        print(f"# {target}")
        sys.stdout.write(render_document(document))
    return 0


def _settings_cmd(args: argparse.Namespace) -> int:
    store = _settings_store()
    command = args.settings_command
    if command == "get":
        if args.key:
            value = store.get(args.key, None)
            payload: Any = {args.key: value}
        else:
            resolved = resolve_install_settings(store)
            payload = {
                ENABLE_KEY: resolved.enabled,
                SERVER_URL_KEY: resolved.server_url,
                SCOPE_KEY: resolved.scope.value,
            }
        if getattr(args, "json", False):
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            for key, value in payload.items():
                print(f"{key} = {value}")
        return 0
    if command == "set":
        if args.key not in KNOWN_KEYS:
            print(f"settings set: unknown key '{args.key}' (expected one of {', '.join(KNOWN_KEYS)})", file=sys.stderr)
            return 2
        value = _parse_value(args.value)
        store.set(args.key, value)
        _record("settings", "success", {"key": args.key})
        print(f"settings set: {args.key} = {value}")
        return 0
    if command == "reset":
        removed = store.remove(*KNOWN_KEYS)
        _record("settings", "success", {"reset": removed})
        if removed:
            print(f"settings reset: cleared {', '.join(removed)}")
        else:
            print("settings reset: already at defaults")
        return 0
    print("Unsupported settings command", file=sys.stderr)
    return 2


def _events_cmd(args: argparse.Namespace) -> int:
    if args.clear:
        if telemetry.clear(SETTINGS):
            print(f"events: cleared {telemetry.telemetry_log(SETTINGS)}")
        else:
            print("events: nothing to clear")
        return 0
    try:
        for payload in stream_progress(SETTINGS.log_dir, follow=args.follow):
            if getattr(args, "json", False):
                print(json.dumps(payload, ensure_ascii=False))
            else:
                marker = "ok" if payload.get("mcpInstalled") else "--"
                print(f"[{marker}] {payload.get('projectId', '?')}: {payload.get('message', '')}")
            sys.stdout.flush()
    except KeyboardInterrupt:
        return 130
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpinstall",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"mcpinstall {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    install_cmd = sub.add_parser("install", help="Write the MCP config document for a project")
    install_cmd.add_argument("path", nargs="?", help="Project path (default: current directory)")
    install_cmd.add_argument("--id", required=True, help="Project identifier")
    install_cmd.add_argument("--name", help="Project name (default: directory name)")
    install_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    install_cmd.set_defaults(func=_install_cmd)

    show_cmd = sub.add_parser("show", help="Print the installed MCP config document")
    show_cmd.add_argument("path", nargs="?", help="Project path (default: current directory)")
    show_cmd.add_argument("--scope", choices=[scope.value for scope in InstallScope], help="Override the configured scope")
    show_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    show_cmd.set_defaults(func=_show_cmd)

    settings_cmd = sub.add_parser("settings", help="Inspect or change installer preferences")
    settings_sub = settings_cmd.add_subparsers(dest="settings_command", required=True)

    settings_get = settings_sub.add_parser("get", help="Show effective preferences")
    settings_get.add_argument("key", nargs="?", help="Raw key to read (default: all resolved keys)")
    settings_get.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    settings_get.set_defaults(func=_settings_cmd, settings_command="get")

    settings_set = settings_sub.add_parser("set", help="Persist a preference")
    settings_set.add_argument("key", help="Preference key")
    settings_set.add_argument("value", help="Value (JSON literals such as true/false are decoded)")
    settings_set.set_defaults(func=_settings_cmd, settings_command="set")

    settings_reset = settings_sub.add_parser("reset", help="Restore default preferences")
    settings_reset.set_defaults(func=_settings_cmd, settings_command="reset")

    events_cmd = sub.add_parser("events", help="Stream installer progress events")
    events_cmd.add_argument("--follow", action="store_true", help="Keep streaming new events")
    events_cmd.add_argument("--json", action="store_true", help="Emit one JSON object per line")
    events_cmd.add_argument("--clear", action="store_true", help="Delete the event log and exit")
    events_cmd.set_defaults(func=_events_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_file=SETTINGS.log_dir / "mcpinstall.log",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
