"""CLI entry point for http-session-store.

Invoked as::

    http-session [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m http_session_store.cli.main

Commands
--------
- version   — Show version information
- decode    — Decode a serialized session payload
- sessions  — Stored session command group

Sessions sub-commands
---------------------
- sessions list    — List stored session ids
- sessions show    — Decode and display one stored session
- sessions delete  — Remove one stored session
"""
from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from http_session_store.session.serializer import MalformedPairError, type_tag_of
from http_session_store.session.store import Store, StoreInitError
from http_session_store.storage.base import DriverError, SessionDriver

console = Console()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_driver(
    storage: str,
    location: str | None,
    redis_url: str | None,
    key_prefix: str,
) -> SessionDriver:
    """Instantiate the requested driver.

    Parameters
    ----------
    storage:
        Driver name: ``"memory"``, ``"file"``, or ``"redis"``.
    location:
        Directory for the file driver.
    redis_url:
        Connection URL for the redis driver.
    key_prefix:
        Key prefix for the redis driver.

    Returns
    -------
    SessionDriver
        A configured driver instance.
    """
    from http_session_store.storage.file import FileDriver
    from http_session_store.storage.memory import MemoryDriver
    from http_session_store.storage.redis import RedisDriver

    if storage == "memory":
        return MemoryDriver()
    if storage == "file":
        return FileDriver(location)
    if storage == "redis":
        try:
            return RedisDriver(key_prefix=key_prefix, url=redis_url)
        except ImportError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            sys.exit(1)
    console.print(f"[red]Unknown storage driver: {storage!r}[/red]")
    sys.exit(1)


def _decode(payload: str) -> Store:
    try:
        return Store(payload)
    except (StoreInitError, MalformedPairError) as exc:
        console.print(f"[red]Cannot decode payload:[/red] {escape(str(exc))}")
        sys.exit(1)


def _render(store: Store, title: str, json_output: bool) -> None:
    values = store.all()
    if json_output:
        console.print_json(json.dumps(values, default=str))
        return

    if not values:
        console.print("[yellow]Session is empty.[/yellow]")
        return

    table = Table(title=title, show_lines=True)
    table.add_column("Key", style="bold cyan")
    table.add_column("Type", style="green")
    table.add_column("Value")
    for key, value in values.items():
        tag = "-" if value is None else type_tag_of(value).value
        if isinstance(value, (dict, list)):
            shown = json.dumps(value, default=str)
        else:
            shown = str(value)
        table.add_row(escape(key), tag, escape(shown))
    console.print(table)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="http-session-store")
def cli() -> None:
    """Inspect and manage HTTP session payloads"""


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    from http_session_store import __version__

    console.print(f"[bold]http-session-store[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


@cli.command(name="decode")
@click.argument("payload")
@click.option("--json-output", is_flag=True, help="Output decoded values as JSON.")
def decode_command(payload: str, json_output: bool) -> None:
    """Decode a serialized session PAYLOAD.

    Pass ``-`` to read the payload from standard input.
    """
    if payload == "-":
        payload = click.get_text_stream("stdin").read().strip()
    _render(_decode(payload), "Session payload", json_output)


# ---------------------------------------------------------------------------
# sessions command group
# ---------------------------------------------------------------------------


@cli.group(name="sessions")
@click.option(
    "--storage",
    default="file",
    show_default=True,
    type=click.Choice(["memory", "file", "redis"], case_sensitive=False),
    help="Session driver to use.",
)
@click.option("--location", default=None, help="Directory for the file driver.")
@click.option("--redis-url", default=None, help="Connection URL for the redis driver.")
@click.option(
    "--key-prefix",
    default="session:",
    show_default=True,
    help="Key prefix for the redis driver.",
)
@click.pass_context
def sessions_group(
    ctx: click.Context,
    storage: str,
    location: str | None,
    redis_url: str | None,
    key_prefix: str,
) -> None:
    """Stored session commands."""
    ctx.ensure_object(dict)
    if "driver" not in ctx.obj:
        ctx.obj["driver"] = _make_driver(storage.lower(), location, redis_url, key_prefix)


@sessions_group.command(name="list")
@click.pass_context
def sessions_list(ctx: click.Context) -> None:
    """List all stored session ids."""
    driver: SessionDriver = ctx.obj["driver"]
    session_ids = sorted(driver.list())
    if not session_ids:
        console.print("[yellow]No sessions found.[/yellow]")
        return
    for session_id in session_ids:
        console.print(session_id)
    console.print(f"\n[dim]{len(session_ids)} sessions.[/dim]")


@sessions_group.command(name="show")
@click.argument("session_id")
@click.option("--json-output", is_flag=True, help="Output decoded values as JSON.")
@click.pass_context
def sessions_show(ctx: click.Context, session_id: str, json_output: bool) -> None:
    """Decode and display the session stored under SESSION_ID."""
    driver: SessionDriver = ctx.obj["driver"]
    try:
        payload = driver.load(session_id)
    except DriverError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    if payload is None:
        console.print(f"[red]Session not found:[/red] {session_id}")
        sys.exit(1)
    _render(_decode(payload), f"Session {session_id}", json_output)


@sessions_group.command(name="delete")
@click.argument("session_id")
@click.pass_context
def sessions_delete(ctx: click.Context, session_id: str) -> None:
    """Remove the session stored under SESSION_ID."""
    driver: SessionDriver = ctx.obj["driver"]
    if not driver.exists(session_id):
        console.print(f"[red]Session not found:[/red] {session_id}")
        sys.exit(1)
    driver.delete(session_id)
    console.print(f"[green]Session deleted:[/green] {session_id}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    cli()
