"""Core functionality for stubber.

Each sub-module covers one step of the transformation: selection,
classification, index reconciliation, call patching and field relocation.
"""

from .select import FunctionSpec, Options, Selector  # noqa: F401
from .fields import Module, parse_module  # noqa: F401
from .reconcile import make_translations  # noqa: F401
from .replace import run, stub_fields, stub_text  # noqa: F401

__all__ = [
    "FunctionSpec",
    "Options",
    "Selector",
    "Module",
    "parse_module",
    "make_translations",
    "run",
    "stub_fields",
    "stub_text",
]
