"""Click CLI commands for content-hasher."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from content_hasher.config import Settings, get_settings
from content_hasher.hasher import BLOCK_SIZE
from content_hasher.pipeline import FileDigest, hash_paths
from content_hasher.reader import hash_file, read_stream, to_hex

console = Console()
err_console = Console(stderr=True)

STDIN_PATH = "-"


def _setup_logging(verbose: bool, level_name: str = "INFO") -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """content-hasher — Dropbox-compatible content hashes for files."""
    settings = get_settings()
    _setup_logging(verbose, settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings


# ---------------------------------------------------------------------------
# hash
# ---------------------------------------------------------------------------


@cli.command("hash")
@click.argument("paths", nargs=-1, required=True)
@click.option("--table", "as_table", is_flag=True, help="Show results as a table with sizes.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None,
              help="Bytes per read (does not change the hash).")
@click.pass_context
def hash_cmd(ctx: click.Context, paths: tuple[str, ...], as_table: bool, chunk_size: int | None) -> None:
    """Print the content hash of each PATH ('-' reads stdin)."""
    settings: Settings = ctx.obj["settings"]
    if chunk_size:
        settings = settings.model_copy(update={"read_chunk_size": chunk_size})

    if paths.count(STDIN_PATH) > 1:
        raise click.BadParameter("'-' (stdin) may be given only once.", param_hint="PATHS")

    file_paths = [Path(p) for p in paths if p != STDIN_PATH]
    file_results = iter(asyncio.run(hash_paths(settings, file_paths)) if file_paths else [])

    # Pair each result with the argument exactly as typed.
    results: list[tuple[str, FileDigest]] = []
    for p in paths:
        results.append((p, _hash_stdin(settings) if p == STDIN_PATH else next(file_results)))

    if as_table:
        _print_table(results)
    else:
        for arg, r in results:
            if r.ok:
                click.echo(f"{r.hexdigest}  {arg}")

    failures = [(arg, r) for arg, r in results if not r.ok]
    for arg, r in failures:
        err_console.print(f"[red]{escape(arg)}: {escape(r.error or 'unknown error')}[/red]")
    if failures:
        sys.exit(1)


def _hash_stdin(settings: Settings) -> FileDigest:
    try:
        with click.open_file(STDIN_PATH, "rb") as stream:
            digest, size = read_stream(stream, settings.read_chunk_size)
    except OSError as exc:
        return FileDigest(path=Path(STDIN_PATH), error=str(exc))
    return FileDigest(path=Path(STDIN_PATH), size=size, digest=digest)


def _print_table(results: list[tuple[str, FileDigest]]) -> None:
    table = Table(title="Content hashes")
    table.add_column("Path", style="cyan", max_width=60)
    table.add_column("Size", justify="right")
    table.add_column("Content hash", style="green", no_wrap=True)

    for arg, r in results:
        if not r.ok:
            continue
        table.add_row(escape(arg), _human_size(r.size), r.hexdigest)

    console.print(table)
    console.print(f"\nTotal: {sum(1 for _, r in results if r.ok)} of {len(results)} hashed")


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------


@cli.command("verify")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("expected")
@click.pass_context
def verify(ctx: click.Context, path: Path, expected: str) -> None:
    """Check PATH against an EXPECTED hex content hash."""
    settings: Settings = ctx.obj["settings"]
    try:
        actual = to_hex(hash_file(path, settings.read_chunk_size))
    except OSError as exc:
        err_console.print(f"[red]Cannot read {escape(str(path))}:[/red] {escape(str(exc))}")
        sys.exit(1)

    if actual == expected.strip().lower():
        console.print(f"[green]OK[/green] {escape(str(path))}")
    else:
        console.print(f"[red]MISMATCH[/red] {escape(str(path))}")
        console.print(f"  expected: {expected.strip().lower()}")
        console.print(f"  actual:   {actual}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


@cli.command("block-size")
def block_size() -> None:
    """Print the fixed block size in bytes."""
    click.echo(BLOCK_SIZE)


def _human_size(nbytes: int) -> str:
    """Convert bytes to a human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if nbytes < 1024:
            return f"{nbytes:.1f} {unit}"
        nbytes /= 1024  # type: ignore[assignment]
    return f"{nbytes:.1f} TB"
