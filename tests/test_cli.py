"""CLI transport tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from typer.testing import CliRunner

from session.protocol import VFSNode, WindowState, create_manifest, create_process_descriptor
from ui.cli.cli import app

runner = CliRunner()


def invoke(root: Path, *args: str) -> tuple[int, Any]:
    result = runner.invoke(app, ["--root", str(root), *args])
    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError:
        payload = result.stdout
    return result.exit_code, payload


def write_manifest(path: Path) -> Path:
    manifest = create_manifest()
    manifest.vfs = {
        "home:/docs": VFSNode(path="home:/docs", is_directory=True, size=0),
        "home:/docs/a.txt": VFSNode(path="home:/docs/a.txt", is_file=True, size=5, mime="text/plain", content="hello"),
    }
    manifest.processes = [
        create_process_descriptor("text-editor", WindowState(title="a.txt"), {"content": "hello", "cursorPosition": 5})
    ]
    manifest.settings = {"theme": "light"}
    path.write_text(manifest.to_json(), encoding="utf-8")
    return path


def imported_session(tmp_path: Path) -> str:
    code, payload = invoke(tmp_path, "import", str(write_manifest(tmp_path / "manifest.json")))
    assert code == 0
    assert payload["success"] is True
    return payload["sessionId"]


def test_import_list_and_inspect(tmp_path: Path) -> None:
    session_id = imported_session(tmp_path)

    code, listing = invoke(tmp_path, "list")
    assert code == 0
    assert [s["id"] for s in listing["sessions"]] == [session_id]

    code, overview = invoke(tmp_path, "inspect", session_id)
    assert code == 0
    assert overview["processCount"] == 1
    assert overview["fileCount"] == 2


def test_vfs_tree_and_process_queries(tmp_path: Path) -> None:
    session_id = imported_session(tmp_path)

    code, node = invoke(tmp_path, "vfs", session_id, "--path", "home:/docs/a.txt")
    assert code == 0
    assert node["vfs"]["content"] == "hello"

    code, tree = invoke(tmp_path, "tree", session_id)
    assert code == 0
    assert tree["tree"]["docs"]["a.txt"]["content"] == "hello"

    code, subtree = invoke(tmp_path, "tree", session_id, "--root", "home:/docs")
    assert code == 0
    assert set(subtree["tree"]) == {"a.txt"}

    code, processes = invoke(tmp_path, "processes", session_id, "--type", "text-editor")
    assert code == 0
    assert processes["processes"][0]["appState"]["cursorPosition"] == 5

    code, detail = invoke(tmp_path, "process", session_id, "4")
    assert code == 1
    assert detail == {"error": "Process not found"}


def test_export_unknown_session_fails(tmp_path: Path) -> None:
    code, payload = invoke(tmp_path, "export", "missing")

    assert code == 1
    assert payload == {"error": "Session not found"}


def test_export_to_unwritable_path_reports_error(tmp_path: Path) -> None:
    session_id = imported_session(tmp_path)

    code, payload = invoke(tmp_path, "export", session_id, "--out", str(tmp_path / "missing" / "out.json"))

    assert code == 1
    assert payload["error"].startswith("Failed to write")


def test_restore_writes_into_local_mount(tmp_path: Path) -> None:
    session_id = imported_session(tmp_path)

    code, report = invoke(tmp_path, "restore", session_id)

    assert code == 0
    assert report["success"] is True
    assert (tmp_path / "workspace" / "home" / "docs" / "a.txt").read_text(encoding="utf-8") == "hello"
    assert "theme: light" in (tmp_path / "workspace" / "settings.yaml").read_text(encoding="utf-8")


def test_capture_saves_local_mount(tmp_path: Path) -> None:
    home = tmp_path / "workspace" / "home"
    home.mkdir(parents=True)
    (home / "hello.txt").write_text("hi", encoding="utf-8")

    code, payload = invoke(tmp_path, "capture", "--id", "snap")

    assert code == 0
    assert payload["sessionId"] == "snap"
    assert payload["metadata"]["fileCount"] == 1
    assert (tmp_path / "sessions" / "snap.json").exists()
