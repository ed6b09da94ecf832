"""Shared console and verbosity settings.

Module output goes to stdout, so every diagnostic is written to stderr.
"""
from __future__ import annotations

from rich.console import Console


console = Console(stderr=True, highlight=False)

_verbose = False


# ---------------------------------------------------------------------------
# Verbosity
# ---------------------------------------------------------------------------


def configure(quiet: bool = False, verbose: bool = False) -> None:
    """Set console verbosity for the current process."""
    global _verbose

    console.quiet = quiet
    _verbose = verbose and not quiet


def debug(message: str) -> None:
    """Print *message* only in verbose mode."""
    if _verbose:
        console.print(f"[dim]{message}")


__all__ = ["console", "configure", "debug"]
