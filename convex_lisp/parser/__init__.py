# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Convex Lisp front-end: lexer, structural parser and syntax tree.

`parse` always returns a tree covering the whole input plus every lexical and
syntax diagnostic found on the way; `parse_strict` is the convenience wrapper
for callers that only accept clean input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from convex_lisp.core.builtins import BuiltinRegistry
from convex_lisp.core.diagnostics import ConvexParseError, Diagnostic

from . import ast
from .ast import Source, structure
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import Parser
from .printer import format_tree, to_source


@dataclass
class ParseResult:
	tree: Source
	# Lexical and syntax diagnostics, ordered by source offset.
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not self.diagnostics


def parse(text: str, registry: BuiltinRegistry | None = None, *, file: str | None = None) -> ParseResult:
	"""
	Parse one source unit.

	`registry` classifies builtin symbols and functions; without one no symbol
	is marked builtin. `file` is recorded on every span for reporting.
	"""
	lexer = Lexer(text, registry, file=file)
	parser = Parser(lexer)
	tree = parser.parse()
	# Stable sort: at equal offsets lexical errors stay ahead of syntax errors.
	diagnostics = sorted(lexer.diagnostics + parser.diagnostics, key=lambda d: (d.span.start, d.span.end))
	return ParseResult(tree=tree, diagnostics=diagnostics)


def parse_strict(text: str, registry: BuiltinRegistry | None = None, *, file: str | None = None) -> Source:
	"""Parse `text`, raising `ConvexParseError` if any diagnostic was produced."""
	result = parse(text, registry, file=file)
	if not result.ok:
		raise ConvexParseError(result.diagnostics)
	return result.tree


__all__ = [
	"ParseResult",
	"Token",
	"TokenKind",
	"ast",
	"format_tree",
	"parse",
	"parse_strict",
	"structure",
	"to_source",
	"tokenize",
]
