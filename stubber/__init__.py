"""Top-level package for stubber.

This package replaces selected WebAssembly function imports with trapping stubs.
"""

__version__ = "0.1.0"

__all__ = [
    "cli",
    "core",
    "errors",
]
