"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, NoReturn

import typer

from core.orchestrator import Orchestrator, RuntimeBundle
from session.errors import SessionError, SessionNotFoundError
from session.protocol import SessionManifest


def _runtime(root: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root).build()
    level = str(bundle.config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO))
    return bundle


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(message: str) -> NoReturn:
    _echo({"error": message})
    raise typer.Exit(code=1)


@contextmanager
def _session_errors() -> Iterator[None]:
    try:
        yield
    except SessionNotFoundError:
        _fail("Session not found")
    except SessionError as exc:
        _fail(str(exc))


def _loaded(root: Path | None, session_id: str) -> RuntimeBundle:
    bundle = _runtime(root)
    with _session_errors():
        bundle.store.load_session(session_id)
    return bundle


def import_session(root: Path | None, source: Path) -> None:
    """Import a manifest file as a new session."""
    bundle = _runtime(root)
    try:
        manifest = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        _fail(f"Cannot read manifest {source}: {exc}")
    with _session_errors():
        saved = bundle.store.import_session(manifest)
    _echo({"success": True, "sessionId": saved.session_id, "path": str(saved.path)})


def export_session(root: Path | None, session_id: str, out: Path | None) -> None:
    bundle = _runtime(root)
    with _session_errors():
        manifest: SessionManifest = bundle.store.load_session(session_id)
    if out is None:
        typer.echo(manifest.to_json(indent=2))
        return
    try:
        out.write_text(manifest.to_json(indent=2), encoding="utf-8")
    except OSError as exc:
        _fail(f"Failed to write {out}: {exc}")
    typer.echo(f"Exported {session_id} to {out}")


def list_sessions(root: Path | None) -> None:
    bundle = _runtime(root)
    with _session_errors():
        sessions = bundle.store.list_sessions()
    _echo({"sessions": sessions})


def inspect_session(root: Path | None, session_id: str) -> None:
    inspection = _loaded(root, session_id).inspector.inspect_session()
    if inspection is None:
        _fail("No session loaded")
    _echo(inspection)


def inspect_vfs(root: Path | None, session_id: str, path: str | None) -> None:
    vfs = _loaded(root, session_id).inspector.inspect_vfs(path)
    if vfs is None:
        _fail("No session loaded" if path is None else f"Path not found: {path}")
    _echo({"vfs": vfs})


def vfs_tree(root: Path | None, session_id: str, tree_root: str) -> None:
    tree = _loaded(root, session_id).inspector.get_vfs_tree(tree_root)
    if tree is None:
        _fail("No session loaded")
    _echo({"tree": tree})


def inspect_processes(root: Path | None, session_id: str, app_type: str | None) -> None:
    processes = _loaded(root, session_id).inspector.inspect_processes(app_type)
    _echo({"processes": processes})


def process_detail(root: Path | None, session_id: str, index: int) -> None:
    process = _loaded(root, session_id).inspector.get_process_detail(index)
    if process is None:
        _fail("Process not found")
    _echo({"process": process})


def capture(root: Path | None, session_id: str | None) -> None:
    """Capture the local environment and persist it."""
    bundle = _runtime(root)
    manifest = bundle.capture.capture_session()
    with _session_errors():
        if session_id:
            saved = bundle.store.save_session(session_id, manifest)
        else:
            saved = bundle.store.import_session(manifest)
    _echo({"success": True, "sessionId": saved.session_id, "metadata": manifest.metadata})


def restore(root: Path | None, session_id: str) -> None:
    """Replay a stored session into the local environment."""
    bundle = _loaded(root, session_id)
    manifest = bundle.store.active.current
    with _session_errors():
        report = bundle.restore.restore_session(manifest)
    _echo(
        {
            "success": not report.failed,
            "restored": report.restored,
            "skipped": report.skipped,
            "failed": report.failed,
        }
    )


def config_show(root: Path | None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(root)
    _echo(bundle.config)
