"""Import scanning and classification.

A single left-to-right pass over the module's fields splits func-kind imports
into kept and stubbed ordinals, replacing each stubbed import in place with a
trapping definition.  Pre-existing function definitions met during the same
pass get their direct calls patched.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import IndexOverflowError
from .context import debug
from .fields import FuncField, ImportField, Module
from .patch import patch_calls
from .reconcile import Translations, make_translations
from .select import Selector


MAX_INDEX = 0xFFFF_FFFF


@dataclass
class Classification:
    """Outcome of the classification pass."""

    kept: List[int] = field(default_factory=list)
    stubbed: List[int] = field(default_factory=list)
    # absolute field position of every func-kind import, by ordinal
    positions: List[int] = field(default_factory=list)
    stubs: List[FuncField] = field(default_factory=list)
    stubbed_names: List[str] = field(default_factory=list)
    import_start: Optional[int] = None
    translations: Optional[Translations] = None
    patched_calls: int = 0

    @property
    def count(self) -> int:
        return len(self.kept) + len(self.stubbed)

    def ensure_translations(self) -> Translations:
        if self.translations is None:
            self.translations = make_translations(self.stubbed, self.kept)
        return self.translations


def classify(module: Module, selector: Selector) -> Classification:
    """Stub selected func imports of *module* in place and patch direct calls."""
    result = Classification()

    for position, item in enumerate(module.fields):
        if isinstance(item, ImportField) and item.is_func:
            ordinal = result.count
            if ordinal > MAX_INDEX:
                raise IndexOverflowError(f"function ordinal {ordinal} exceeds u32 range")
            if result.import_start is None:
                result.import_start = position
            result.positions.append(position)

            if selector.matches(item.module, item.name):
                stub = item.into_stub()
                module.fields[position] = stub
                result.stubbed.append(ordinal)
                result.stubs.append(stub)
                result.stubbed_names.append(f"{item.module}:{item.name}")
                debug(f"stubbing {item.module}:{item.name} (ordinal {ordinal})")
            else:
                result.kept.append(ordinal)
        elif isinstance(item, FuncField):
            result.patched_calls += patch_calls(item, result.ensure_translations())

    if result.import_start is not None:
        result.ensure_translations()
    return result


__all__ = ["MAX_INDEX", "Classification", "classify"]
