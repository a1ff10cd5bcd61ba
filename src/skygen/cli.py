"""CLI entry point for skygen."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import load_config
from .errors import SkygenError
from .extractors import extract_file, parse_field_tag
from .models import Struct

app = typer.Typer(
    name="skygen",
    help="Extract sky:-marked Go structs into table metadata.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True, highlight=False)
    raise typer.Exit(code=1)


def _expand_paths(paths: list[Path], include_tests: bool) -> list[Path]:
    """Expand directories into their ``.go`` files (sorted, non-recursive)."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.glob("*.go")):
                if not include_tests and candidate.name.endswith("_test.go"):
                    continue
                files.append(candidate)
        else:
            files.append(path)
    return files


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"skygen {__version__}", highlight=False)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit.",
    ),
) -> None:
    """Extract sky:-marked Go structs into table metadata."""


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def extract(
    paths: List[Path] = typer.Argument(..., help="Go files or directories to scan."),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: go or json."),
    include_tests: Optional[bool] = typer.Option(
        None, "--include-tests/--no-include-tests", help="Scan *_test.go files in directories.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Print the structs extracted from each Go file."""
    _setup_logging(verbose)
    try:
        cfg = load_config()
    except SkygenError as exc:
        _fail(str(exc))

    # CLI flags override config values (only when explicitly provided).
    effective_format = output_format or cfg.output_format
    effective_tests = include_tests if include_tests is not None else cfg.include_tests
    if effective_format not in ("go", "json"):
        _fail(f"unknown format {effective_format!r} (use go or json)")

    structs: list[Struct] = []
    for path in _expand_paths(paths, effective_tests):
        try:
            structs.extend(extract_file(path))
        except (SkygenError, OSError) as exc:
            _fail(str(exc))

    if effective_format == "json":
        console.print_json(json.dumps([s.model_dump(mode="json") for s in structs]))
        return
    for struct in structs:
        console.print(struct.go_string(), markup=False, highlight=False, soft_wrap=True)


@app.command()
def tag(
    value: str = typer.Argument(..., help="A sky tag value, e.g. 'id,pk'."),
) -> None:
    """Show how a sky tag value is parsed."""
    column, is_pk = parse_field_tag(value)
    if not column:
        _fail(f"invalid tag value {value!r}")
    console.print(f"column={column} pk={str(is_pk).lower()}", markup=False, highlight=False, soft_wrap=True)
