# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Text rendering for syntax trees.

- `to_source` re-emits the exact source text of a node (trivia included), so
  `to_source(parse(text).tree) == text` for any input, valid or not.
- `format_tree` renders an indented outline for humans and the CLI.
"""

from __future__ import annotations

from dataclasses import fields
from enum import Enum
from typing import List

from .ast import Atom, Keyword, Node, Source, Symbol, iter_tokens


def to_source(node: Node) -> str:
	return "".join(tok.full_text for tok in iter_tokens(node))


def format_tree(node: Node, *, spans: bool = True) -> str:
	lines: List[str] = []
	_format(node, 0, lines, label=None, spans=spans)
	return "\n".join(lines)


def _format(node: Node, depth: int, lines: List[str], *, label: str | None, spans: bool) -> None:
	pad = "  " * depth
	head = f"{label}: " if label else ""
	head += type(node).__name__
	if spans:
		sp = node.span
		head += f" [{sp.start}..{sp.end}]"
	head += _scalars(node)
	lines.append(pad + head)
	for f in fields(node):
		if f.name == "parts":
			continue
		value = getattr(node, f.name)
		if isinstance(value, Node):
			_format(value, depth + 1, lines, label=f.name, spans=spans)
		elif isinstance(value, tuple) and value and all(isinstance(v, Node) for v in value):
			for child in value:
				_format(child, depth + 1, lines, label=f.name, spans=spans)


def _scalars(node: Node) -> str:
	if isinstance(node, Source):
		return ""
	if isinstance(node, Symbol):
		suffix = f" ({node.builtin.value})" if node.builtin is not None else ""
		return f" {node.name}{suffix}"
	if isinstance(node, Keyword):
		return f" :{node.name}"
	if isinstance(node, Atom):
		return f" {node.text}"
	out = []
	for f in fields(node):
		value = getattr(node, f.name)
		if isinstance(value, Enum):
			out.append(f"{f.name}={value.value}")
		elif isinstance(value, (bool, str)):
			out.append(f"{f.name}={value!r}")
	return (" " + " ".join(out)) if out else ""


__all__ = ["format_tree", "to_source"]
