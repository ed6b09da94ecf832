"""Command-line interface for the stubber package.

Reads a module from a file or stdin and writes the stubbed module to a file or
stdout.  Diagnostics go to stderr.
"""
from __future__ import annotations

from pathlib import Path
import sys
from typing import List, Optional

import typer
from rich.markup import escape

from . import __version__
from .core import context
from .core import replace as replace_module
from .core import report as report_module
from .core.context import console
from .core.select import Options
from .errors import StubberError

__all__ = ["app", "main"]

app = typer.Typer(
    help="stubber – replace WebAssembly function imports with trapping stubs.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"stubber {__version__}")
        raise typer.Exit()


def read_input(path: Optional[Path]) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    return path.read_bytes()


def write_output(path: Optional[Path], data: bytes) -> None:
    if path is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        path.write_bytes(data)


@app.command()
def stub(
    input_path: Optional[Path] = typer.Argument(
        None, exists=True, readable=True, dir_okay=False, help="Input module (.wasm or .wat); stdin when omitted"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file; stdout when omitted"),
    stub_module: List[str] = typer.Option(
        [], "--stub-module", "-m", help="Stub all functions imported from the specified module name"
    ),
    stub_function: List[str] = typer.Option(
        [], "--stub-function", "-f", help='Stub the specified function import (syntax: "<module-name>:<function-name>")'
    ),
    wat: bool = typer.Option(False, "--wat", "-t", help="Emit the text format instead of binary"),
    allow_unpatched_references: bool = typer.Option(
        False,
        "--allow-unpatched-references",
        help="Warn instead of failing when exports, element segments or ref.func point at a moved import",
    ),
    wasm_tools: Optional[str] = typer.Option(
        None, "--wasm-tools", envvar="STUBBER_WASM_TOOLS", help="Path to the wasm-tools executable"
    ),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON run report to this path"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress diagnostics"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show each step"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Replace one or more Wasm module imports with trapping stub functions."""
    context.configure(quiet=quiet, verbose=verbose)

    try:
        options = Options.from_strings(stub_module, stub_function, allow_unpatched_references)
        data = read_input(input_path)
        result, run_report = replace_module.run(options, data, tool=wasm_tools, emit_text=wat)
    except StubberError as exc:
        console.print(f"[red]error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    write_output(output, result)

    if verbose:
        report_module.print_report(run_report)
    if report is not None:
        report_module.write_report(report, run_report)
        console.print(f"[green]Report written to {report}")
    if not run_report.stubbed:
        console.print("[yellow]No imports matched; module re-encoded unchanged.")


def main() -> None:  # pragma: no cover
    """Entry-point for the `stubber` command."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
