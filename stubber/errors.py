"""Exception hierarchy for stubber.

Every error is terminal for an invocation; the CLI reports it once and exits.
"""
from __future__ import annotations


class StubberError(Exception):
    """Base class for all errors raised by stubber."""


class ConfigError(StubberError):
    """Malformed stub configuration (raised before any module bytes are read)."""


class ParseError(StubberError):
    """Input bytes do not form a valid module."""


class UnsupportedInputError(StubberError):
    """Component units, binary/quote modules and other shapes the core rejects."""


class UnpatchedReferenceError(UnsupportedInputError):
    """A relocated function is referenced somewhere calls cannot be patched."""

    def __init__(self, references: list[str]) -> None:
        self.references = references
        super().__init__(
            "relocated functions referenced outside direct calls: " + ", ".join(references)
        )


class IndexOverflowError(StubberError):
    """An ordinal does not fit in a 32-bit function index."""


class EncodeError(StubberError):
    """The mutated module failed final encoding or validation."""


class ToolNotFoundError(StubberError):
    """The wasm-tools executable could not be located."""


__all__ = [
    "StubberError",
    "ConfigError",
    "ParseError",
    "UnsupportedInputError",
    "UnpatchedReferenceError",
    "IndexOverflowError",
    "EncodeError",
    "ToolNotFoundError",
]
