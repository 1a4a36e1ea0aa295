"""CLI entrypoint for desktop-session."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Desktop session capture, restore and inspection")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path | None = typer.Option(None, "--root", help="Project root holding config/"),
) -> None:
    ctx.obj = root


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manifest JSON file"),
) -> None:
    """Import a manifest as a new session."""
    commands.import_session(ctx.obj, source)


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    session_id: str,
    out: Path | None = typer.Option(None, "--out", help="Write manifest to this file"),
) -> None:
    """Print or write a stored manifest."""
    commands.export_session(ctx.obj, session_id, out)


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List stored sessions."""
    commands.list_sessions(ctx.obj)


@app.command("inspect")
def inspect_cmd(ctx: typer.Context, session_id: str) -> None:
    """Show a session overview."""
    commands.inspect_session(ctx.obj, session_id)


@app.command("vfs")
def vfs_cmd(
    ctx: typer.Context,
    session_id: str,
    path: str | None = typer.Option(None, "--path", help="Return one node instead of the listing"),
) -> None:
    """List captured VFS nodes."""
    commands.inspect_vfs(ctx.obj, session_id, path)


@app.command("tree")
def tree_cmd(
    ctx: typer.Context,
    session_id: str,
    tree_root: str = typer.Option("home:/", "--root", help="Tree root, '/' for everything"),
) -> None:
    """Show captured VFS nodes as a nested tree."""
    commands.vfs_tree(ctx.obj, session_id, tree_root)


@app.command("processes")
def processes_cmd(
    ctx: typer.Context,
    session_id: str,
    app_type: str | None = typer.Option(None, "--type", help="Filter by app type"),
) -> None:
    """List captured processes."""
    commands.inspect_processes(ctx.obj, session_id, app_type)


@app.command("process")
def process_cmd(ctx: typer.Context, session_id: str, index: int) -> None:
    """Show one captured process by position."""
    commands.process_detail(ctx.obj, session_id, index)


@app.command("capture")
def capture_cmd(
    ctx: typer.Context,
    session_id: str | None = typer.Option(None, "--id", help="Session id, generated when omitted"),
) -> None:
    """Capture the local environment into a stored session."""
    commands.capture(ctx.obj, session_id)


@app.command("restore")
def restore_cmd(ctx: typer.Context, session_id: str) -> None:
    """Restore a stored session into the local environment."""
    commands.restore(ctx.obj, session_id)


@config_app.command("show")
def config_show_cmd(ctx: typer.Context) -> None:
    """Show effective configuration."""
    commands.config_show(ctx.obj)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
