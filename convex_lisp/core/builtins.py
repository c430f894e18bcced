# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Builtin-identifier registry.

The registry classifies symbol tokens as builtin symbols (`*caller*`,
`*balance*`, ...) or builtin functions (`defn`, `assoc`, ...). It has no parsing
authority: a name missing from the registry is still a valid symbol, and a
registry never rejects source text.

Registries are immutable values handed to the lexer; the front-end does not
consult any global list. `load_default_registry()` reads the list shipped with
the package and exists for callers such as the CLI.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

_DEFAULT_REGISTRY_PATH = Path(__file__).with_name("builtins.json")


class BuiltinKind(str, Enum):
	SYMBOL = "symbol"
	FUNCTION = "function"


@dataclass(frozen=True)
class BuiltinRegistry:
	"""Two disjoint, immutable name sets: builtin symbols and builtin functions."""

	symbols: frozenset[str] = frozenset()
	functions: frozenset[str] = frozenset()

	def __post_init__(self) -> None:
		# Accept any iterable of names but always store frozensets.
		object.__setattr__(self, "symbols", frozenset(self.symbols))
		object.__setattr__(self, "functions", frozenset(self.functions))
		overlap = self.symbols & self.functions
		if overlap:
			names = ", ".join(sorted(overlap))
			raise ValueError(f"builtin symbols and functions must be disjoint; both contain: {names}")

	@classmethod
	def empty(cls) -> "BuiltinRegistry":
		return cls()

	@classmethod
	def from_names(cls, symbols: Iterable[str] = (), functions: Iterable[str] = ()) -> "BuiltinRegistry":
		return cls(symbols=frozenset(symbols), functions=frozenset(functions))

	@classmethod
	def from_mapping(cls, data: Mapping[str, Any]) -> "BuiltinRegistry":
		"""
		Build a registry from `{"symbols": [...], "functions": [...]}`.

		Both keys are optional; each must hold a list of strings.
		"""
		if not isinstance(data, Mapping):
			raise ValueError("builtin registry data must be an object with 'symbols' and 'functions' lists")
		unknown = set(data) - {"symbols", "functions"}
		if unknown:
			raise ValueError(f"unknown builtin registry keys: {', '.join(sorted(unknown))}")
		return cls(
			symbols=frozenset(_names(data, "symbols")),
			functions=frozenset(_names(data, "functions")),
		)

	@classmethod
	def from_json(cls, path: Path | str) -> "BuiltinRegistry":
		data = json.loads(Path(path).read_text(encoding="utf-8"))
		return cls.from_mapping(data)

	def classify(self, name: str) -> Optional[BuiltinKind]:
		"""Return the builtin kind of `name`, or None for an ordinary identifier."""
		if name in self.functions:
			return BuiltinKind.FUNCTION
		if name in self.symbols:
			return BuiltinKind.SYMBOL
		return None

	def is_builtin(self, name: str) -> bool:
		return name in self.functions or name in self.symbols

	def __len__(self) -> int:
		return len(self.symbols) + len(self.functions)


def _names(data: Mapping[str, Any], key: str) -> list[str]:
	values = data.get(key, [])
	if not isinstance(values, list) or not all(isinstance(v, str) and v for v in values):
		raise ValueError(f"builtin registry '{key}' must be a list of non-empty strings")
	return values


@lru_cache(maxsize=1)
def load_default_registry() -> BuiltinRegistry:
	"""Registry built from the `builtins.json` list shipped with the package."""
	return BuiltinRegistry.from_json(_DEFAULT_REGISTRY_PATH)


__all__ = ["BuiltinKind", "BuiltinRegistry", "load_default_registry"]
