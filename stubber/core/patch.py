"""Direct-call operand patching.

Only ``call``/``return_call`` instructions with a literal numeric operand are
rewritten.  Symbolic ``$name`` operands resolve through the identifier, which
a stub inherits from the import it replaces, so they need no change.

Exports, ``start``, element segments and ``ref.func`` are never rewritten;
:func:`find_unpatched_references` reports the ones a relocation would break.
"""
from __future__ import annotations

from typing import Iterator, List, Tuple

from .fields import Atom, Field, FuncField, Module, OtherField, SList, head, parse_index
from .reconcile import Translations


CALL_INSTRUCTIONS = frozenset({"call", "return_call"})


def _operands(node: SList, keywords) -> Iterator[Tuple[SList, int, int]]:
    """Yield (container, position, value) for each ``keyword N`` pair under *node*."""
    for position, child in enumerate(node):
        if isinstance(child, SList):
            yield from _operands(child, keywords)
        elif isinstance(child, Atom) and child in keywords and position + 1 < len(node):
            value = parse_index(node[position + 1])
            if value is not None:
                yield node, position + 1, value


def patch_calls(func: FuncField, translations: Translations) -> int:
    """Rewrite direct-call operands of *func* found in *translations*."""
    if not translations:
        return 0

    patched = 0
    for container, position, value in list(_operands(func.node, CALL_INSTRUCTIONS)):
        new_value = translations.get(value)
        if new_value is not None:
            func.replace_atom(container, position, str(new_value))
            patched += 1
    return patched


# ---------------------------------------------------------------------------
# Unpatched reference detection
# ---------------------------------------------------------------------------


def _elem_indices(node: SList) -> Iterator[int]:
    """Yield function indices listed in an ``elem`` segment or inline table elem."""
    children = list(node[1:])
    if "func" in [child for child in children if isinstance(child, Atom)]:
        children = children[children.index("func") + 1 :]
    elif any(isinstance(child, SList) for child in children):
        # Expression lists are covered by the ref.func scan.
        return
    for child in children:
        value = parse_index(child)
        if value is not None:
            yield value


def _walk(node: SList) -> Iterator[SList]:
    yield node
    for child in node:
        if isinstance(child, SList):
            yield from _walk(child)


def _describe(field: Field) -> str:
    node = field.node
    label = head(node) or "field"
    if len(node) > 1 and not isinstance(node[1], SList):
        return f"{label} {node[1]}"
    return label


def find_unpatched_references(module: Module, translations: Translations) -> List[str]:
    """List references to translated ordinals that direct-call patching cannot reach."""
    if not translations:
        return []

    found: List[str] = []
    for field in module.fields:
        node = field.node
        kind = head(node)

        if isinstance(field, OtherField) and kind == "export" and len(node) > 2:
            target = node[2]
            if head(target) == "func" and len(target) > 1 and parse_index(target[1]) in translations:
                found.append(f"export {node[1]}")
        elif isinstance(field, OtherField) and kind == "start" and len(node) > 1:
            if parse_index(node[1]) in translations:
                found.append("start function")

        if isinstance(field, OtherField):
            for sub in _walk(node):
                if head(sub) == "elem" and any(v in translations for v in _elem_indices(sub)):
                    found.append(f"element segment in {_describe(field)}")

        for _, _, value in _operands(node, ("ref.func",)):
            if value in translations:
                found.append(f"ref.func {value} in {_describe(field)}")
    return found


__all__ = ["CALL_INSTRUCTIONS", "patch_calls", "find_unpatched_references"]
