"""Field-tree view of a module in the WebAssembly text grammar.

The text is read into a tree of S-expressions and each top-level module field
is wrapped in one of a small closed set of variants:

* :class:`TypeField` for ``type`` and ``rec`` declarations
* :class:`ImportField` for ``import`` declarations
* :class:`FuncField` for function definitions
* :class:`OtherField` for everything else (exports, tables, memories, ...)

Every field keeps the exact source slice it was read from, so fields that are
never touched print back byte-identical.  Function fields additionally record
operand edits as splices against that slice.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..errors import ParseError, UnsupportedInputError


_WHITESPACE = " \t\n\r"
_ATOM_END = _WHITESPACE + '();"'
_INDEX_RE = re.compile(r"^(?:0x[0-9a-fA-F](?:_?[0-9a-fA-F])*|[0-9](?:_?[0-9])*)$")
_SIMPLE_ESCAPES = {"t": 0x09, "n": 0x0A, "r": 0x0D, '"': 0x22, "'": 0x27, "\\": 0x5C}


# ---------------------------------------------------------------------------
# S-expression nodes
# ---------------------------------------------------------------------------


class Atom(str):
    """Keyword, identifier or number token; ``pos`` is its offset in the source."""

    def __new__(cls, text: str, pos: int = -1) -> "Atom":
        obj = super().__new__(cls, text)
        obj.pos = pos
        return obj


class Quoted(str):
    """String token holding its raw text, quotes and escapes included."""

    def __new__(cls, raw: str, pos: int = -1) -> "Quoted":
        obj = super().__new__(cls, raw)
        obj.pos = pos
        return obj

    @property
    def value(self) -> str:
        try:
            return _unescape(str(self)[1:-1])
        except ValueError as exc:
            raise ParseError(f"malformed escape in string {self}") from exc


class SList(list):
    """Parenthesised list; ``start``/``end`` delimit it in the source."""

    def __init__(self, items=(), start: int = -1, end: int = -1) -> None:
        super().__init__(items)
        self.start = start
        self.end = end


Node = Union[Atom, Quoted, SList]


def _unescape(body: str) -> str:
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.extend(ch.encode("utf-8"))
            i += 1
            continue
        nxt = body[i + 1 : i + 2]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "u":
            close = body.index("}", i)
            out.extend(chr(int(body[i + 3 : close], 16)).encode("utf-8"))
            i = close + 1
        else:
            out.append(int(body[i + 1 : i + 3], 16))
            i += 3
    return out.decode("utf-8", errors="replace")


def parse_index(node: Node) -> Optional[int]:
    """Return the value of an unsigned integer atom, or None for anything else."""
    if not isinstance(node, Atom) or not _INDEX_RE.match(node):
        return None
    digits = node.replace("_", "")
    if digits.startswith("0x"):
        return int(digits, 16)
    return int(digits)


def head(node: Node) -> Optional[str]:
    """Return the leading keyword of a list node."""
    if isinstance(node, SList) and node and isinstance(node[0], Atom):
        return str(node[0])
    return None


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


def _skip_block_comment(text: str, pos: int) -> int:
    depth = 0
    while pos < len(text):
        if text.startswith("(;", pos):
            depth += 1
            pos += 2
        elif text.startswith(";)", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise ParseError("unterminated block comment")


def _read_string(text: str, pos: int) -> int:
    i = pos + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
        elif text[i] == '"':
            return i + 1
        elif text[i] == "\n":
            break
        else:
            i += 1
    raise ParseError(f"unterminated string at offset {pos}")


def parse_sexprs(text: str) -> List[Node]:
    """Read every top-level S-expression in *text*."""
    stack: List[SList] = [SList()]
    pos = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch in _WHITESPACE:
            pos += 1
        elif text.startswith(";;", pos):
            newline = text.find("\n", pos)
            pos = length if newline < 0 else newline + 1
        elif text.startswith("(;", pos):
            pos = _skip_block_comment(text, pos)
        elif ch == "(":
            stack.append(SList(start=pos))
            pos += 1
        elif ch == ")":
            if len(stack) == 1:
                raise ParseError(f"unexpected ')' at offset {pos}")
            node = stack.pop()
            pos += 1
            node.end = pos
            stack[-1].append(node)
        elif ch == '"':
            end = _read_string(text, pos)
            stack[-1].append(Quoted(text[pos:end], pos))
            pos = end
        else:
            end = pos
            while end < length and text[end] not in _ATOM_END:
                end += 1
            if text[pos:end] == "$" and text.startswith('"', end):
                # quoted identifier: $"..."
                end = _read_string(text, end)
            if end == pos:
                raise ParseError(f"unexpected character {ch!r} at offset {pos}")
            stack[-1].append(Atom(text[pos:end], pos))
            pos = end
    if len(stack) != 1:
        raise ParseError("unbalanced parentheses: missing ')'")
    return list(stack[0])


def dump(node: Node) -> str:
    """Print *node* on a single line."""
    if isinstance(node, SList):
        return "(" + " ".join(dump(child) for child in node) + ")"
    return str(node)


# ---------------------------------------------------------------------------
# Field variants
# ---------------------------------------------------------------------------


@dataclass
class Field:
    node: SList
    source: Optional[str] = None

    def render(self) -> str:
        if self.source is not None:
            return self.source
        return dump(self.node)


@dataclass
class TypeField(Field):
    pass


@dataclass
class OtherField(Field):
    @property
    def kind(self) -> Optional[str]:
        return head(self.node)


@dataclass
class ImportField(Field):
    @property
    def module(self) -> str:
        return self.node[1].value

    @property
    def name(self) -> str:
        return self.node[2].value

    @property
    def descriptor(self) -> SList:
        return self.node[3]

    @property
    def kind(self) -> Optional[str]:
        return head(self.descriptor)

    @property
    def is_func(self) -> bool:
        return self.kind == "func"

    def into_stub(self) -> "FuncField":
        """Move this import's id, annotations and type use into a trapping function.

        The descriptor is emptied so the import no longer owns them.
        """
        descriptor = self.descriptor
        stub = SList([Atom("func"), *descriptor[1:], Atom("unreachable")])
        del descriptor[1:]
        return FuncField(stub)


@dataclass
class FuncField(Field):
    edits: List[Tuple[int, int, str]] = field(default_factory=list)

    def replace_atom(self, container: SList, index: int, text: str) -> None:
        """Replace ``container[index]`` and remember the change as a source splice."""
        old = container[index]
        container[index] = Atom(text, old.pos)
        if self.source is not None:
            self.edits.append((old.pos - self.node.start, len(old), text))

    def render(self) -> str:
        if self.source is None:
            return dump(self.node)
        text = self.source
        for offset, size, replacement in sorted(self.edits, reverse=True):
            text = text[:offset] + replacement + text[offset + size :]
        return text


# ---------------------------------------------------------------------------
# Module
# ---------------------------------------------------------------------------


@dataclass
class Module:
    fields: List[Field]
    header: List[Node] = field(default_factory=list)
    wrapped: bool = True

    def to_text(self) -> str:
        body = "".join(f"  {f.render()}\n" for f in self.fields)
        if not self.wrapped:
            return body
        opening = " ".join(["(module", *(dump(node) for node in self.header)])
        return f"{opening}\n{body})\n"


def _unit_items(nodes: List[Node]) -> Tuple[bool, List[Node], List[Node]]:
    """Split the top-level nodes into (wrapped, header, field nodes)."""
    if not nodes:
        raise ParseError("input contains no module")

    first = head(nodes[0])
    if first == "component":
        raise UnsupportedInputError("components not yet supported")
    if first != "module":
        return False, [], nodes
    if len(nodes) > 1:
        raise ParseError("unexpected content after module")

    items = list(nodes[0][1:])
    header: List[Node] = []
    if items and isinstance(items[0], Atom) and items[0].startswith("$"):
        header.append(items.pop(0))
    if items and isinstance(items[0], Atom) and items[0] in ("binary", "quote"):
        raise UnsupportedInputError(f"{items[0]} modules not yet supported")
    return True, header, items


def check_unit(text: str) -> None:
    """Reject components and binary/quote modules without building fields."""
    _unit_items(parse_sexprs(text))


def _make_field(node: Node, text: str) -> Field:
    kind = head(node)
    if kind is None:
        raise ParseError(f"expected a module field, got {dump(node)[:40]!r}")

    source = text[node.start : node.end]
    if kind in ("type", "rec"):
        return TypeField(node, source)
    if kind == "import":
        if (
            len(node) < 4
            or not isinstance(node[1], Quoted)
            or not isinstance(node[2], Quoted)
            or head(node[3]) is None
        ):
            raise ParseError(f"malformed import: {source[:60]!r}")
        return ImportField(node, source)
    if kind == "func":
        if any(head(child) == "import" for child in node[1:]):
            raise UnsupportedInputError(
                "inline function imports must be expanded before stubbing"
            )
        return FuncField(node, source)
    return OtherField(node, source)


def parse_module(text: str) -> Module:
    """Build the field tree for a single module written in the text grammar."""
    wrapped, header, items = _unit_items(parse_sexprs(text))
    return Module(
        fields=[_make_field(node, text) for node in items],
        header=header,
        wrapped=wrapped,
    )


__all__ = [
    "Atom",
    "Quoted",
    "SList",
    "Node",
    "Field",
    "TypeField",
    "ImportField",
    "FuncField",
    "OtherField",
    "Module",
    "parse_sexprs",
    "parse_index",
    "head",
    "dump",
    "check_unit",
    "parse_module",
]
