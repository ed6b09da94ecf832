"""Tests for ordinal translation maps."""
from __future__ import annotations

import random

import pytest

from stubber.core.reconcile import (
    displacement_translations,
    is_complete,
    make_translations,
    tail_translations,
)


def _split(flags):
    stubbed = [i for i, stub in enumerate(flags) if stub]
    kept = [i for i, stub in enumerate(flags) if not stub]
    return stubbed, kept


def test_tail_pairing_swaps_stub_with_later_import():
    assert tail_translations([1], [0, 2]) == {1: 2, 2: 1}


def test_tail_pairing_ignores_stubs_after_imports():
    assert tail_translations([2, 3], [0, 1]) == {}


def test_tail_pairing_all_stubs_first():
    assert tail_translations([0, 1], [2, 3]) == {0: 2, 2: 0, 1: 3, 3: 1}


def test_tail_pairing_only_overlapping_tail():
    # only one pair is formed: (0, 2); the extra stub ordinal 1 is unpaired
    assert tail_translations([0, 1], [2]) == {1: 2, 2: 1}


def test_empty_inputs():
    assert make_translations([], []) == {}
    assert make_translations([], [0, 1, 2]) == {}
    assert make_translations([0, 1, 2], []) == {}


def test_tail_pairing_counterexample_falls_back():
    stubbed, kept = [1, 2], [0, 3]
    tail = tail_translations(stubbed, kept)
    assert tail == {2: 3, 3: 2}
    assert not is_complete(tail, stubbed, kept)

    translations = make_translations(stubbed, kept)
    assert translations == {1: 3, 3: 1}
    assert is_complete(translations, stubbed, kept)


def test_make_translations_prefers_tail_pairing_when_complete():
    assert make_translations([1], [0, 2]) == tail_translations([1], [0, 2])


def test_displacement_leaves_low_kept_ordinals_alone():
    translations = displacement_translations([0, 3], [1, 2, 4])
    assert translations == {0: 4, 4: 0}


@pytest.mark.parametrize("seed", range(20))
def test_random_interleavings(seed):
    rng = random.Random(seed)
    for _ in range(200):
        size = rng.randint(0, 12)
        flags = [rng.random() < 0.5 for _ in range(size)]
        stubbed, kept = _split(flags)
        translations = make_translations(stubbed, kept)

        # symmetric involution
        for a, b in translations.items():
            assert translations[b] == a
            assert a != b

        # kept land below the boundary, stubs at or above it
        assert is_complete(translations, stubbed, kept)

        # the final layout is a permutation of 0..N-1
        final = sorted(translations.get(o, o) for o in range(size))
        assert final == list(range(size))

        # kept imports already in place never move
        boundary = len(kept)
        for ordinal in kept:
            if ordinal < boundary:
                assert ordinal not in translations

        # each swap pairs one stub with one kept ordinal
        moved_kept = [o for o in kept if o in translations]
        assert len(translations) == 2 * len(moved_kept)


def test_exhaustive_small_interleavings():
    for size in range(0, 9):
        for mask in range(1 << size):
            flags = [bool(mask >> i & 1) for i in range(size)]
            stubbed, kept = _split(flags)
            assert is_complete(make_translations(stubbed, kept), stubbed, kept)
