"""Helpers for building and inspecting small text-format modules in tests."""
from __future__ import annotations

from typing import List, Sequence, Tuple

from stubber.core.fields import Atom, FuncField, ImportField, Module, SList, parse_index


def module_text(imports: Sequence[Tuple[str, str, str]], with_ids: bool = True, extra: str = "") -> str:
    """Build a module in printer layout.

    *imports* holds ``(module, name, kind)`` triples.  A function ``$F`` calls
    every func import by ordinal and then itself.
    """
    lines = ["(module", "  (type (;0;) (func))"]
    func_count = 0
    for module, name, kind in imports:
        ident = f" ${name}" if with_ids else ""
        if kind == "func":
            lines.append(f'  (import "{module}" "{name}" (func{ident} (type 0)))')
            func_count += 1
        elif kind == "memory":
            lines.append(f'  (import "{module}" "{name}" (memory{ident} 1))')
        elif kind == "global":
            lines.append(f'  (import "{module}" "{name}" (global{ident} i32))')
        else:
            raise ValueError(kind)

    body = "".join(f"    call {ordinal}\n" for ordinal in range(func_count + 1))
    fname = " $F" if with_ids else ""
    lines.append(f"  (func{fname} (type 0)\n{body}  )")
    if extra:
        lines.append(extra)
    lines.append(")")
    return "\n".join(lines) + "\n"


def identity(field) -> str:
    """Stable identity of an import or function: its ``$id`` when present."""
    if isinstance(field, ImportField):
        node = field.descriptor
        if len(node) > 1 and isinstance(node[1], Atom) and node[1].startswith("$"):
            return str(node[1])
        return f"{field.module}:{field.name}"
    node = field.node
    if len(node) > 1 and isinstance(node[1], Atom) and node[1].startswith("$"):
        return str(node[1])
    return f"func@{id(field)}"


def function_space(module: Module) -> List[str]:
    """Function index space as the encoder assigns it: imports, then definitions."""
    imports = [identity(f) for f in module.fields if isinstance(f, ImportField) and f.is_func]
    funcs = [identity(f) for f in module.fields if isinstance(f, FuncField)]
    return imports + funcs


def find_func(module: Module, ident: str) -> FuncField:
    for field in module.fields:
        if isinstance(field, FuncField) and identity(field) == ident:
            return field
    raise KeyError(ident)


def call_operands(func: FuncField) -> List[str]:
    operands: List[str] = []

    def walk(node: SList) -> None:
        for position, child in enumerate(node):
            if isinstance(child, SList):
                walk(child)
            elif child in ("call", "return_call") and position + 1 < len(node):
                operands.append(str(node[position + 1]))

    walk(func.node)
    return operands


def resolve_calls(module: Module, func: FuncField) -> List[str]:
    """Identity each call in *func* resolves to."""
    space = function_space(module)
    resolved = []
    for operand in call_operands(func):
        index = parse_index(Atom(operand))
        resolved.append(operand if index is None else space[index])
    return resolved


def imports_precede_definitions(module: Module) -> bool:
    seen_func = False
    for field in module.fields:
        if isinstance(field, FuncField):
            seen_func = True
        elif isinstance(field, ImportField) and seen_func:
            return False
    return True


def is_trap(func: FuncField) -> bool:
    return func.node[-1] == "unreachable" and not any(
        isinstance(child, SList) and child and child[0] == "local" for child in func.node
    )
