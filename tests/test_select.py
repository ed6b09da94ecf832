from __future__ import annotations

import pytest

from stubber.core.select import FunctionSpec, Options, Selector
from stubber.errors import ConfigError


def test_function_spec_parse():
    spec = FunctionSpec.parse("math:div")
    assert spec == FunctionSpec("math", "div")
    assert str(spec) == "math:div"


def test_function_spec_splits_on_first_colon():
    assert FunctionSpec.parse("wasi:io/poll@0.2:poll") == FunctionSpec("wasi", "io/poll@0.2:poll")


def test_function_spec_missing_separator():
    with pytest.raises(ConfigError, match="onlymodule"):
        FunctionSpec.parse("onlymodule")


def test_options_from_strings_validates_every_spec():
    with pytest.raises(ConfigError):
        Options.from_strings(stub_module=["env"], stub_function=["env:a", "bad"])


def test_selector_module_match():
    selector = Options.from_strings(stub_module=["env"]).selector()
    assert selector.matches("env", "anything")
    assert not selector.matches("Env", "anything")
    assert not selector.matches("env2", "anything")


def test_selector_exact_pair_match():
    selector = Options.from_strings(stub_function=["env:a"]).selector()
    assert selector.matches("env", "a")
    assert not selector.matches("env", "b")
    assert not selector.matches("other", "a")
    assert not selector.matches("env", "A")


def test_selector_either_rule():
    selector = Selector(modules=frozenset({"wasi"}), functions=frozenset({("env", "a")}))
    assert selector.matches("wasi", "fd_write")
    assert selector.matches("env", "a")
    assert not selector.matches("env", "b")


def test_selector_order_irrelevant():
    first = Options.from_strings(["a", "b"], ["x:1", "y:2"]).selector()
    second = Options.from_strings(["b", "a"], ["y:2", "x:1"]).selector()
    assert first == second


def test_empty_selector_is_falsy():
    assert not Options().selector()
    assert Options.from_strings(stub_module=["env"]).selector()
