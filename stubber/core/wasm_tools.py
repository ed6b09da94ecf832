"""Module reading and writing through the ``wasm-tools`` executable.

``wasm-tools print`` turns binary modules into the text grammar, ``parse``
encodes text back to bytes and ``validate`` checks the result.
"""
from __future__ import annotations

import shutil
import subprocess
from typing import List, Optional, Type

from ..errors import EncodeError, ParseError, StubberError, ToolNotFoundError
from .context import debug


WASM_MAGIC = b"\x00asm"


def is_binary(data: bytes) -> bool:
    return data[:4] == WASM_MAGIC


def find_wasm_tools(explicit: Optional[str] = None) -> str:
    """Return the path of the wasm-tools executable."""
    candidate = explicit or "wasm-tools"
    path = shutil.which(candidate)
    if path is None:
        raise ToolNotFoundError(
            f"{candidate} not found; install wasm-tools or pass --wasm-tools"
        )
    return path


def _run(tool: str, args: List[str], data: bytes, error: Type[StubberError]) -> bytes:
    cmd = [tool, *args]
    debug(f"running {' '.join(cmd)}")
    result = subprocess.run(cmd, input=data, capture_output=True)
    if result.returncode != 0:
        err = result.stderr.decode("utf-8", errors="replace").strip()
        raise error(err or f"{' '.join(cmd)} exited with status {result.returncode}")
    return result.stdout


def print_bytes(data: bytes, tool: str) -> str:
    """Binary module → text."""
    return _run(tool, ["print", "-"], data, ParseError).decode("utf-8")


def parse_text(text: str, tool: str, error: Type[StubberError] = EncodeError) -> bytes:
    """Text module → binary, without validation."""
    return _run(tool, ["parse", "-"], text.encode("utf-8"), error)


def validate(data: bytes, tool: str) -> None:
    _run(tool, ["validate", "-"], data, EncodeError)


def encode(text: str, tool: str) -> bytes:
    """Encode and validate *text*; any failure is an :class:`EncodeError`."""
    data = parse_text(text, tool)
    validate(data, tool)
    return data


__all__ = [
    "WASM_MAGIC",
    "is_binary",
    "find_wasm_tools",
    "print_bytes",
    "parse_text",
    "validate",
    "encode",
]
