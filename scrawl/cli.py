"""
CLI interface for scrawl.

Usage:
    scrawl add work ideas -m "call the plumber"
    scrawl list work --after 3d
    scrawl get work -1
    scrawl time parse 1d2h
"""

import os
import select
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .config import ensure_store_dir, get_store_path, load_config, set_config_value, SETTABLE_KEYS
from .duration import DurationParseError, format_duration, parse_duration, shift_time
from .errors import ArgumentError, ScrawlError, SetupError
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .store import EntryStore, build_filter, system_clock
from .types import Entry, local_datetime


def _has_stdin_data() -> bool:
    """Check if stdin has data available without blocking.

    Returns True only when stdin is a pipe with data ready to read.
    Returns False for TTYs, sockets, and empty pipes.
    """
    if sys.stdin.isatty():
        return False
    try:
        ready, _, _ = select.select([sys.stdin], [], [], 0)
        return bool(ready)
    except (ValueError, OSError):
        return False


# Configure quiet mode by default
# Set SCRAWL_VERBOSE=1 to enable debug mode via environment
if os.environ.get("SCRAWL_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"scrawl {version('scrawl')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_store_override: Optional[Path] = None


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value
    # The error log resolves its location from SCRAWL_DIR
    if value is not None:
        os.environ["SCRAWL_DIR"] = str(value)


def _get_store_override() -> Optional[Path]:
    return _store_override


app = typer.Typer(
    name="scrawl",
    help="Notes and snippets kept as tagged files in one directory.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-d",
        envvar="SCRAWL_DIR",
        help="Path to the store directory (default: ~/.scrawl/)",
        callback=_store_callback,
        is_eager=True,
    )] = None,
):
    """Notes and snippets kept as tagged files in one directory."""


# -----------------------------------------------------------------------------
# Common Options
# -----------------------------------------------------------------------------

TagsArgument = Annotated[
    Optional[list[str]],
    typer.Argument(help="Tags (alphanumeric); entries matching any of them are selected")
]

# Tags followed by the index; negative indices count from the end
TagsIndexArgument = Annotated[
    list[str],
    typer.Argument(help="Optional tags followed by the entry index (0 = first, -1 = last)")
]

IdOption = Annotated[
    Optional[int],
    typer.Option("--id", "-i", help="Only the entry with this ID")
]

AfterOption = Annotated[
    Optional[str],
    typer.Option(
        "--after", "-a",
        help="Only entries at or after (ID/epoch, date 2026-01-15, or duration ago: 3d, 1w2h)"
    )
]

BeforeOption = Annotated[
    Optional[str],
    typer.Option(
        "--before", "-b",
        help="Only entries at or before (ID/epoch, date 2026-01-15, or duration ago: 3d, 1w2h)"
    )
]

OnOption = Annotated[
    Optional[str],
    typer.Option("--on", help="Only entries within 12 hours of this time (same formats as --after)")
]

ReverseOption = Annotated[
    bool,
    typer.Option("--reverse", "-r", help="Flip the order (enumeration order instead of newest first)")
]

PathsOption = Annotated[
    bool,
    typer.Option("--paths", "-p", help="Print bare file paths")
]

# Commands taking a trailing index must accept "-1" as a positional value
INDEX_COMMAND_SETTINGS = {"ignore_unknown_options": True}


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

@contextmanager
def _reporting_errors():
    """Turn ScrawlError into a clean message and its exit code."""
    try:
        yield
    except ScrawlError as e:
        typer.echo(f"Error: {e}", err=True)
        if isinstance(e, ArgumentError):
            typer.echo("Run 'scrawl --help' for usage.", err=True)
        raise typer.Exit(e.exit_code)


def _get_store() -> EntryStore:
    """Open the store, creating its directory on first use."""
    path = ensure_store_dir(get_store_path(_get_store_override()))
    config = load_config(path)
    configure_ops_log(path)
    return EntryStore(config)


def _split_index(args: list[str]) -> tuple[list[str], int]:
    """Separate trailing index from leading tags."""
    if not args:
        raise ArgumentError("Missing entry index")
    *tags, raw = args
    try:
        return tags, int(raw)
    except ValueError as e:
        raise ArgumentError(f"Index must be an integer: {raw!r}") from e


def _format_row(index: int, entry: Entry, now: int, date_format: str) -> str:
    """One line of rich list output: index, ID, date, age, tags."""
    age = format_duration(max(0, now - entry.id)) or "0s"
    tags = ",".join(entry.tags)
    lock = " [encrypted]" if entry.encrypted else ""
    return f"{index:>3}  {entry.id}  {local_datetime(entry.id, date_format)}  {age:>10}  {tags}{lock}".rstrip()


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command()
def add(
    tags: TagsArgument = None,
    id: Annotated[Optional[int], typer.Option(
        "--id", "-i",
        help="Use this ID instead of the current time"
    )] = None,
    encrypt: Annotated[bool, typer.Option(
        "--encrypt", "-e",
        help="Encrypt the body with the configured GPG key"
    )] = False,
    message: Annotated[Optional[str], typer.Option(
        "--message", "-m",
        help="Body text (otherwise read from stdin or the editor)"
    )] = None,
):
    """
    Add a new entry.

    \b
    Examples:
        scrawl add work -m "Ship it"      # Body from the command line
        echo "todo" | scrawl add home     # Body from a pipe
        scrawl add ideas                  # Body from $EDITOR
        scrawl add -e secret              # Encrypted with GPG
    """
    with _reporting_errors():
        store = _get_store()
        if message is not None:
            body = message.encode("utf-8")
        elif _has_stdin_data():
            body = sys.stdin.buffer.read()
        else:
            body = None
        path = store.add(body, tags=tags or (), id=id, encrypt=encrypt)
    typer.echo(str(path))


@app.command("list")
def list_entries(
    tags: TagsArgument = None,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
    reverse: ReverseOption = False,
    paths: PathsOption = False,
):
    """
    List entries, newest first.

    \b
    Examples:
        scrawl list                    # Everything
        scrawl list work home          # Entries tagged work or home
        scrawl list --after 3d         # Added in the last 3 days
        scrawl list --on 2026-01-15    # Added around that date
        scrawl list -p | xargs cat     # Bare paths for piping
    """
    with _reporting_errors():
        store = _get_store()
        now = store.now()
        flt = build_filter(
            now=now, tags=tags or (), id=id,
            after=after, before=before, on=on, reverse=reverse,
        )
        entries = store.select(flt)

    for index, entry in enumerate(entries):
        if paths:
            typer.echo(str(entry.path))
        else:
            typer.echo(_format_row(index, entry, now, store.config.date_format))


@app.command(context_settings=INDEX_COMMAND_SETTINGS)
def get(
    args: TagsIndexArgument,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
    reverse: ReverseOption = False,
    paths: PathsOption = False,
):
    """
    Print the body (or path) of one entry.

    \b
    Examples:
        scrawl get 0           # Newest entry
        scrawl get work -1     # Oldest entry tagged work
        scrawl get -p 0        # Path of the newest entry
    """
    with _reporting_errors():
        tags, index = _split_index(args)
        store = _get_store()
        flt = build_filter(
            now=store.now(), tags=tags, id=id,
            after=after, before=before, on=on, reverse=reverse,
        )
        entry = store.get(flt, index)
        if paths:
            typer.echo(str(entry.path))
            return
        body = store.read(entry)
    typer.echo(body, nl=not body.endswith(b"\n"))


@app.command(context_settings=INDEX_COMMAND_SETTINGS)
def edit(
    args: TagsIndexArgument,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
    reverse: ReverseOption = False,
):
    """
    Open one entry in $EDITOR, re-encrypting it afterwards if needed.

    \b
    Examples:
        scrawl edit 0          # Newest entry
        scrawl edit todo -1    # Oldest entry tagged todo
    """
    with _reporting_errors():
        tags, index = _split_index(args)
        store = _get_store()
        flt = build_filter(
            now=store.now(), tags=tags, id=id,
            after=after, before=before, on=on, reverse=reverse,
        )
        path = store.edit(flt, index)
    typer.echo(str(path))


@app.command(context_settings=INDEX_COMMAND_SETTINGS)
def delete(
    args: TagsIndexArgument,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
    reverse: ReverseOption = False,
    yes: Annotated[bool, typer.Option(
        "--yes", "-y",
        help="Delete without asking"
    )] = False,
):
    """
    Delete one entry.

    \b
    Examples:
        scrawl delete 0          # Newest entry, after confirmation
        scrawl delete tmp -1 -y  # Oldest tmp entry, no questions
    """
    with _reporting_errors():
        tags, index = _split_index(args)
        store = _get_store()
        flt = build_filter(
            now=store.now(), tags=tags, id=id,
            after=after, before=before, on=on, reverse=reverse,
        )
        entry = store.get(flt, index)
        if not yes and not typer.confirm(f"Delete {entry.path}?"):
            raise typer.Exit(1)
        path = store.remove(entry)
    typer.echo(str(path))


@app.command("del", hidden=True, context_settings=INDEX_COMMAND_SETTINGS)
def del_cmd(
    args: TagsIndexArgument,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
    reverse: ReverseOption = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Delete without asking")] = False,
):
    """Delete one entry (alias for 'delete')."""
    delete(args=args, id=id, after=after, before=before, on=on, reverse=reverse, yes=yes)


@app.command("tags")
def tags_cmd(
    tags: TagsArgument = None,
    id: IdOption = None,
    after: AfterOption = None,
    before: BeforeOption = None,
    on: OnOption = None,
):
    """
    List the distinct tags in use, sorted.

    \b
    Examples:
        scrawl tags              # Every tag
        scrawl tags --after 1w   # Tags used this week
    """
    with _reporting_errors():
        store = _get_store()
        flt = build_filter(
            now=store.now(), tags=tags or (), id=id,
            after=after, before=before, on=on,
        )
        vocabulary = store.tags(flt)
    for tag in vocabulary:
        typer.echo(tag)


@app.command("time")
def time_cmd(
    mode: Annotated[str, typer.Argument(help="parse, format, after or before")],
    value: Annotated[str, typer.Argument(help="Shorthand duration (1d2h) or seconds for 'format'")],
    base: Annotated[Optional[int], typer.Option(
        "--from", "-f",
        help="Epoch to shift from for after/before (default: now)"
    )] = None,
    date_format: Annotated[Optional[str], typer.Option(
        "--format", "-F",
        help="strftime format for after/before (default: config date_format)"
    )] = None,
):
    """
    Convert shorthand durations.

    \b
    Examples:
        scrawl time parse 1d2h       # 93600
        scrawl time format 93600     # 1d2h
        scrawl time after 2w         # Date two weeks from now
        scrawl time before 3Kh       # Date 3000 hours ago
    """
    with _reporting_errors():
        if mode == "format":
            try:
                seconds = int(value)
                typer.echo(format_duration(seconds))
            except ValueError as e:
                raise ArgumentError(f"Expected a non-negative number of seconds: {value!r}") from e
            return

        try:
            seconds = parse_duration(value)
        except DurationParseError as e:
            raise ArgumentError(str(e)) from e

        if mode == "parse":
            typer.echo(str(seconds))
        elif mode in ("after", "before"):
            if date_format is None:
                date_format = load_config(get_store_path(_get_store_override())).date_format
            start = system_clock() if base is None else base
            try:
                typer.echo(shift_time(start, seconds, mode, date_format))
            except (ValueError, OverflowError, OSError) as e:
                raise ArgumentError(f"Time out of range: {e}") from e
        else:
            raise ArgumentError(f"Unknown mode {mode!r}: use parse, format, after or before")


@app.command()
def config(
    key: Annotated[Optional[str], typer.Argument(
        help=f"Setting to show or change ({', '.join(SETTABLE_KEYS)})"
    )] = None,
    value: Annotated[Optional[str], typer.Argument(help="New value to save")] = None,
):
    """
    Show or change store settings.

    \b
    Examples:
        scrawl config                          # All settings
        scrawl config date_format              # One setting
        scrawl config gpg_key me@example.com   # Save a setting
    """
    with _reporting_errors():
        cfg = load_config(get_store_path(_get_store_override()))
        if key is not None and value is not None:
            set_config_value(cfg, key, value)
            typer.echo(f"{key} = {value}")
            return
        if key is not None:
            if key not in SETTABLE_KEYS:
                raise SetupError(
                    f"Unknown config key: {key}. Available: {', '.join(SETTABLE_KEYS)}"
                )
            shown = getattr(cfg, key)
            typer.echo("" if shown is None else shown)
            return

    typer.echo(f"store = {cfg.path}")
    for name in SETTABLE_KEYS:
        shown = getattr(cfg, name)
        typer.echo(f"{name} = {'' if shown is None else shown}")


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="scrawl CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
