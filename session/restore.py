"""Replay a session manifest into a live environment."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from environment.settings import SettingsBackend
from environment.vfs import VFSBackend
from session.protocol import ProcessDescriptor, SessionManifest, VFSNode, decode_manifest
from session.registry import SerializerRegistry


@dataclass
class RestoreContext:
    """Collaborators handed to every deserializer."""

    vfs: VFSBackend
    windows: Any
    settings: SettingsBackend


@dataclass
class RestoreReport:
    """Keys restored, skipped and failed during one restore step."""

    restored: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def merge(self, other: RestoreReport) -> RestoreReport:
        self.restored.extend(other.restored)
        self.skipped.extend(other.skipped)
        self.failed.extend(other.failed)
        return self


def path_depth(path: str) -> int:
    return len([part for part in path.split("/") if part])


async def _wait(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _complete(result: Any) -> Any:
    if inspect.isawaitable(result):
        return asyncio.run(_wait(result))
    return result


class SessionRestore:
    """Restores VFS, settings and processes in dependency order."""

    def __init__(
        self,
        vfs: VFSBackend,
        windows: Any,
        settings: SettingsBackend,
        registry: SerializerRegistry,
    ) -> None:
        self.vfs = vfs
        self.windows = windows
        self.settings = settings
        self.registry = registry
        self.logger = logging.getLogger("ds.restore")

    @property
    def context(self) -> RestoreContext:
        return RestoreContext(vfs=self.vfs, windows=self.windows, settings=self.settings)

    def restore_vfs(self, snapshot: Mapping[str, VFSNode | Mapping[str, Any]]) -> RestoreReport:
        """Recreate directories then files, shallowest paths first."""
        report = RestoreReport()
        entries = sorted(snapshot.items(), key=lambda item: path_depth(item[0]))
        for path, raw in entries:
            try:
                node = raw if isinstance(raw, VFSNode) else VFSNode.model_validate(dict(raw))
                if node.is_directory:
                    self.vfs.mkdir(path)
                elif node.is_file and node.content is not None:
                    self.vfs.writefile(path, node.content)
                else:
                    report.skipped.append(path)
                    continue
            except Exception as exc:
                self.logger.warning("Failed to restore %s: %s", path, exc)
                report.failed.append(path)
                continue
            report.restored.append(path)
        return report

    def restore_processes(
        self, processes: Sequence[ProcessDescriptor | Mapping[str, Any]]
    ) -> RestoreReport:
        """Hand each descriptor to its serializer in manifest order."""
        report = RestoreReport()
        for index, raw in enumerate(processes):
            if isinstance(raw, ProcessDescriptor):
                proc = raw
            else:
                try:
                    proc = ProcessDescriptor.model_validate(dict(raw))
                except Exception as exc:
                    self.logger.warning("Skipping malformed process descriptor %d: %s", index, exc)
                    report.failed.append(str(index))
                    continue
            key = f"{index}:{proc.type}"
            serializer = self.registry.lookup(proc.type)
            if serializer is None:
                self.logger.warning("No serializer registered for app type: %s", proc.type)
                report.skipped.append(key)
                continue
            try:
                _complete(serializer.deserialize(self.context, proc.window_state, proc.app_state))
            except Exception as exc:
                self.logger.error("Failed to restore process %s: %s", proc.type, exc)
                report.failed.append(key)
                continue
            report.restored.append(key)
        return report

    def restore_settings(self, settings: Mapping[str, Any]) -> RestoreReport:
        report = RestoreReport()
        for key, value in settings.items():
            try:
                self.settings.set(key, value)
            except Exception as exc:
                self.logger.warning("Failed to apply setting %s: %s", key, exc)
                report.failed.append(key)
                continue
            report.restored.append(key)
        return report

    def restore_session(self, manifest: SessionManifest | Mapping[str, Any]) -> RestoreReport:
        """Restore VFS, then settings, then processes."""
        session = decode_manifest(manifest)
        report = RestoreReport()
        report.merge(self.restore_vfs(session.vfs))
        report.merge(self.restore_settings(session.settings))
        report.merge(self.restore_processes(session.processes))
        self.logger.info(
            "Restored session: %d restored, %d skipped, %d failed",
            len(report.restored),
            len(report.skipped),
            len(report.failed),
        )
        return report
