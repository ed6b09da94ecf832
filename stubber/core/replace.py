"""End-to-end stubbing pipeline.

bytes → text → field tree → classify/patch/relocate → text → bytes
"""
from __future__ import annotations

from typing import Optional, Tuple

from ..errors import ParseError, UnpatchedReferenceError
from . import wasm_tools
from .classify import classify
from .context import console, debug
from .fields import Module, check_unit, parse_module
from .patch import find_unpatched_references
from .relocate import relocate
from .report import StubReport
from .select import Options


def stub_fields(module: Module, options: Options) -> StubReport:
    """Apply the stub transformation to *module* in place."""
    classification = classify(module, options.selector())
    translations = classification.translations or {}

    unpatched = find_unpatched_references(module, translations)
    if unpatched:
        if not options.allow_unpatched_references:
            raise UnpatchedReferenceError(unpatched)
        for reference in unpatched:
            console.print(f"[yellow]warning: {reference} still uses its old index")

    swaps = relocate(module, classification)
    return StubReport(
        stubbed=classification.stubbed_names,
        stub_indices=[translations.get(ordinal, ordinal) for ordinal in classification.stubbed],
        kept_count=len(classification.kept),
        translations=dict(translations),
        swaps=swaps,
        patched_calls=classification.patched_calls,
        unpatched_references=unpatched,
    )


def stub_text(options: Options, text: str) -> Tuple[str, StubReport]:
    """Stub a module given in the text grammar; returns the new text."""
    module = parse_module(text)
    report = stub_fields(module, options)
    return module.to_text(), report


def read_text(data: bytes, tool: str) -> str:
    """Turn binary or text input into canonical printed text."""
    if wasm_tools.is_binary(data):
        return wasm_tools.print_bytes(data, tool)

    try:
        source = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"input is neither a binary module nor UTF-8 text: {exc}") from exc
    check_unit(source)
    debug("canonicalizing text input")
    return wasm_tools.print_bytes(wasm_tools.parse_text(source, tool, ParseError), tool)


def run(
    options: Options,
    data: bytes,
    tool: Optional[str] = None,
    emit_text: bool = False,
) -> Tuple[bytes, StubReport]:
    """Full pipeline; returns the output (binary, or text when *emit_text*) and a report."""
    tool = wasm_tools.find_wasm_tools(tool)
    text, report = stub_text(options, read_text(data, tool))
    encoded = wasm_tools.encode(text, tool)
    if emit_text:
        return text.encode("utf-8"), report
    return encoded, report


def replace(options: Options, wasm: bytes, tool: Optional[str] = None) -> bytes:
    """Replace selected imports of *wasm* with trapping stubs and re-encode."""
    output, _ = run(options, wasm, tool)
    return output


__all__ = ["stub_fields", "stub_text", "read_text", "run", "replace"]
