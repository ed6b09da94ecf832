"""Stub target selection and run options."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple

from ..errors import ConfigError


@dataclass(frozen=True)
class FunctionSpec:
    """A single ``<module-name>:<function-name>`` stub target."""

    module: str
    function: str

    @classmethod
    def parse(cls, text: str) -> "FunctionSpec":
        module, sep, function = text.partition(":")
        if not sep:
            raise ConfigError(f"expected <module-name>:<function-name>; got {text}")
        return cls(module=module, function=function)

    def __str__(self) -> str:
        return f"{self.module}:{self.function}"


@dataclass
class Options:
    """Configuration for a single stubbing run."""

    stub_module: List[str] = field(default_factory=list)
    stub_function: List[FunctionSpec] = field(default_factory=list)
    allow_unpatched_references: bool = False

    @classmethod
    def from_strings(
        cls,
        stub_module: Iterable[str] = (),
        stub_function: Iterable[str] = (),
        allow_unpatched_references: bool = False,
    ) -> "Options":
        """Build options from raw CLI values, validating function specs."""
        return cls(
            stub_module=list(stub_module),
            stub_function=[FunctionSpec.parse(text) for text in stub_function],
            allow_unpatched_references=allow_unpatched_references,
        )

    def selector(self) -> "Selector":
        return Selector(
            modules=frozenset(self.stub_module),
            functions=frozenset((spec.module, spec.function) for spec in self.stub_function),
        )


@dataclass(frozen=True)
class Selector:
    """Exact, case-sensitive predicate over ``(module, function)`` pairs."""

    modules: FrozenSet[str] = frozenset()
    functions: FrozenSet[Tuple[str, str]] = frozenset()

    def matches(self, module: str, function: str) -> bool:
        return module in self.modules or (module, function) in self.functions

    def __bool__(self) -> bool:
        return bool(self.modules or self.functions)


__all__ = ["FunctionSpec", "Options", "Selector"]
