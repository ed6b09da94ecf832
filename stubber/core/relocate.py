"""Physical field relocation after classification.

The encoder assigns function indices from field order, not from any index
written in the source, so the translation map has to be mirrored by moving
fields.  Each ``kept -> stub`` pair is swapped exactly once.
"""
from __future__ import annotations

from typing import List

from .classify import Classification
from .context import debug
from .fields import Field, ImportField, Module


def hoist_imports(fields: List[Field], stubs: List[Field]) -> int:
    """Move stubs that still precede an import to just after the last import.

    Relative order among stubs and among the remaining fields is kept, so no
    function index changes; only the "imports come first" rule is restored
    around non-func imports.
    """
    last_import = None
    for position, item in enumerate(fields):
        if isinstance(item, ImportField):
            last_import = position
    if last_import is None:
        return 0

    stub_ids = {id(stub) for stub in stubs}
    block = fields[: last_import + 1]
    moved = [item for item in block if id(item) in stub_ids]
    if moved:
        fields[: last_import + 1] = [item for item in block if id(item) not in stub_ids] + moved
    return len(moved)


def relocate(module: Module, classification: Classification) -> int:
    """Swap kept imports with their paired stubs; return the number of swaps."""
    if classification.import_start is None:
        return 0

    translations = classification.ensure_translations()
    positions = classification.positions
    fields = module.fields

    swaps = 0
    for ordinal in classification.kept:
        stub_ordinal = translations.get(ordinal)
        if stub_ordinal is None:
            continue
        first, second = positions[ordinal], positions[stub_ordinal]
        fields[first], fields[second] = fields[second], fields[first]
        debug(f"swapped import ordinal {ordinal} with stub ordinal {stub_ordinal}")
        swaps += 1

    hoisted = hoist_imports(fields, classification.stubs)
    if hoisted:
        debug(f"moved {hoisted} stub(s) past trailing imports")
    return swaps


__all__ = ["hoist_imports", "relocate"]
