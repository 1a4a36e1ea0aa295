"""Session store tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from session.errors import CorruptDataError, SessionNotFoundError, ValidationError
from session.protocol import SessionManifest, create_manifest
from session.store import SessionStore


def sample_manifest(note: str = "first") -> SessionManifest:
    manifest = create_manifest()
    manifest.metadata = {"note": note}
    manifest.settings = {"theme": "dark"}
    return manifest


def test_save_writes_pretty_json_and_activates(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "sessions")

    saved = store.save_session("desk", sample_manifest())

    assert saved.path == tmp_path / "sessions" / "desk.json"
    text = saved.path.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert list(json.loads(text)) == ["version", "timestamp", "vfs", "processes", "settings", "metadata"]
    assert store.active.session_id == "desk"
    assert store.active.current.metadata == {"note": "first"}


def test_save_overwrites_existing_record(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)
    first = sample_manifest("first")
    first.settings = {"theme": "dark", "font": "mono"}
    store.save_session("desk", first)

    store.save_session("desk", sample_manifest("second"))

    data = json.loads((tmp_path / "desk.json").read_text(encoding="utf-8"))
    assert data["metadata"] == {"note": "second"}
    assert data["settings"] == {"theme": "dark"}
    assert [p.name for p in tmp_path.iterdir()] == ["desk.json"]


def test_save_rejects_invalid_manifest_without_state_change(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)

    with pytest.raises(ValidationError):
        store.save_session("bad", {"version": "0.0.1", "processes": [], "vfs": {}})

    assert store.active.current is None
    assert not (tmp_path / "bad.json").exists()


@pytest.mark.parametrize("session_id", ["../escape", "", ".hidden", "a/b", "desk\n"])
def test_save_rejects_unsafe_ids(tmp_path: Path, session_id: str) -> None:
    with pytest.raises(ValidationError):
        SessionStore(tmp_path).save_session(session_id, sample_manifest())


def test_load_replaces_active_manifest(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)
    store.save_session("one", sample_manifest("one"))
    store.save_session("two", sample_manifest("two"))

    loaded = store.load_session("one")

    assert loaded.metadata == {"note": "one"}
    assert store.active.session_id == "one"
    assert store.active.current is loaded


def test_load_missing_session(tmp_path: Path) -> None:
    with pytest.raises(SessionNotFoundError):
        SessionStore(tmp_path).load_session("nope")


def test_load_corrupt_records(tmp_path: Path) -> None:
    (tmp_path / "garbled.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "old.json").write_text(
        json.dumps({"version": "0.0.1", "processes": [], "vfs": {}}), encoding="utf-8"
    )
    store = SessionStore(tmp_path)

    with pytest.raises(CorruptDataError):
        store.load_session("garbled")
    with pytest.raises(CorruptDataError):
        store.load_session("old")
    assert store.active.current is None


def test_list_sessions_returns_summaries(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)
    store.save_session("b-session", sample_manifest("b"))
    store.save_session("a-session", sample_manifest("a"))
    (tmp_path / "broken.json").write_text("[]", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    sessions = store.list_sessions()

    assert [s["id"] for s in sessions] == ["a-session", "b-session"]
    assert sessions[0]["metadata"] == {"note": "a"}
    assert set(sessions[0]) == {"id", "timestamp", "metadata"}


def test_import_generates_session_id(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)

    saved = store.import_session(sample_manifest().to_dict())

    assert saved.session_id.startswith("session-")
    assert saved.path.exists()
    assert store.active.session_id == saved.session_id
