"""Index reconciliation for reclassified imports.

Turning an import into a definition moves it from the imported to the defined
part of the function index space.  The encoder numbers functions by field
order (all imports first, then definitions), so every kept import must end up
in an ordinal slot below ``len(kept)`` and every stub at or above it.  The
correction is an involution over ordinals: each entry ``a -> b`` has a
matching ``b -> a`` and stands for one swap of two import-block fields.

These functions are pure; they know nothing about the field tree.
"""
from __future__ import annotations

from typing import Dict, Sequence

from .context import debug


Translations = Dict[int, int]


def tail_translations(stubbed: Sequence[int], kept: Sequence[int]) -> Translations:
    """Pair *stubbed* and *kept* from their tails, position by position.

    A pair ``(stub, kept)`` produces a swap only when the stub precedes the
    kept import.  Pairing stops when the shorter sequence runs out.
    """
    translations: Translations = {}
    for stub, keep in zip(reversed(stubbed), reversed(kept)):
        if stub < keep:
            translations[stub] = keep
            translations[keep] = stub
    return translations


def displacement_translations(stubbed: Sequence[int], kept: Sequence[int]) -> Translations:
    """Swap each kept import above the boundary with a stub below it.

    Kept ordinals already below ``len(kept)`` never move, which makes this the
    smallest involution that yields a valid layout.
    """
    boundary = len(kept)
    displaced_kept = [ordinal for ordinal in kept if ordinal >= boundary]
    displaced_stubs = [ordinal for ordinal in stubbed if ordinal < boundary]

    translations: Translations = {}
    for stub, keep in zip(displaced_stubs, displaced_kept):
        translations[stub] = keep
        translations[keep] = stub
    return translations


def is_complete(translations: Translations, stubbed: Sequence[int], kept: Sequence[int]) -> bool:
    """True when applying *translations* leaves kept imports ahead of every stub."""
    boundary = len(kept)
    if any(translations.get(ordinal, ordinal) >= boundary for ordinal in kept):
        return False
    return all(translations.get(ordinal, ordinal) >= boundary for ordinal in stubbed)


def make_translations(stubbed: Sequence[int], kept: Sequence[int]) -> Translations:
    """Compute the ordinal translation map for a classified import block."""
    translations = tail_translations(stubbed, kept)
    if is_complete(translations, stubbed, kept):
        return translations

    debug(
        f"tail pairing leaves stubs ahead of imports "
        f"(stubbed={list(stubbed)} kept={list(kept)}); using displacement pairing"
    )
    return displacement_translations(stubbed, kept)


__all__ = [
    "Translations",
    "tail_translations",
    "displacement_translations",
    "is_complete",
    "make_translations",
]
