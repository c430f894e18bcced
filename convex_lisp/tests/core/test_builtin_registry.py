# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Builtin registry construction and classification.
"""

import json
from pathlib import Path

import pytest

from convex_lisp.core.builtins import BuiltinKind, BuiltinRegistry, load_default_registry


def test_classify_functions_and_symbols() -> None:
	reg = BuiltinRegistry.from_names(symbols=["*caller*"], functions=["count", "/"])
	assert reg.classify("count") is BuiltinKind.FUNCTION
	assert reg.classify("/") is BuiltinKind.FUNCTION
	assert reg.classify("*caller*") is BuiltinKind.SYMBOL
	assert reg.classify("my-fn") is None
	assert reg.is_builtin("count")
	assert not reg.is_builtin("my-fn")
	assert len(reg) == 3


def test_empty_registry_classifies_nothing() -> None:
	reg = BuiltinRegistry.empty()
	assert reg.classify("defn") is None
	assert len(reg) == 0


def test_overlapping_sets_are_rejected() -> None:
	with pytest.raises(ValueError, match="disjoint"):
		BuiltinRegistry(symbols=frozenset({"x"}), functions=frozenset({"x", "y"}))


def test_iterables_are_stored_as_frozensets() -> None:
	reg = BuiltinRegistry(symbols=["a", "a"], functions=("f",))  # type: ignore[arg-type]
	assert reg.symbols == frozenset({"a"})
	assert isinstance(reg.functions, frozenset)


def test_from_mapping_validates_shape() -> None:
	reg = BuiltinRegistry.from_mapping({"functions": ["inc"]})
	assert reg.classify("inc") is BuiltinKind.FUNCTION
	assert reg.symbols == frozenset()
	with pytest.raises(ValueError, match="unknown builtin registry keys"):
		BuiltinRegistry.from_mapping({"macros": ["m"]})
	with pytest.raises(ValueError, match="list of non-empty strings"):
		BuiltinRegistry.from_mapping({"symbols": "*caller*"})
	with pytest.raises(ValueError, match="list of non-empty strings"):
		BuiltinRegistry.from_mapping({"symbols": [""]})
	with pytest.raises(ValueError):
		BuiltinRegistry.from_mapping(["inc"])  # type: ignore[arg-type]


def test_from_json(tmp_path: Path) -> None:
	path = tmp_path / "builtins.json"
	path.write_text(json.dumps({"symbols": ["*origin*"], "functions": ["transfer"]}))
	reg = BuiltinRegistry.from_json(path)
	assert reg.classify("*origin*") is BuiltinKind.SYMBOL
	assert reg.classify("transfer") is BuiltinKind.FUNCTION


def test_default_registry_is_disjoint_and_cached() -> None:
	reg = load_default_registry()
	assert reg is load_default_registry()
	assert not (reg.symbols & reg.functions)
	assert reg.classify("defn") is BuiltinKind.FUNCTION
	assert reg.classify("/") is BuiltinKind.FUNCTION
	assert reg.classify("*caller*") is BuiltinKind.SYMBOL
	assert reg.classify("definitely-not-builtin") is None
