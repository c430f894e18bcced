# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records produced by the lexer and parser.

Neither kind of error stops a parse: the front-end always returns a
best-effort tree together with the full list of diagnostics, and callers
that need strict validity check that the list is empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .span import Span


class ErrorKind(str, Enum):
	"""Which phase detected a malformation."""

	LEXICAL = "LexicalError"
	SYNTAX = "SyntaxError"


@dataclass
class Diagnostic:
	"""Represents a front-end diagnostic."""

	message: str
	kind: ErrorKind
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	# Token class the lexer/parser was looking for, e.g. "closing '\"'".
	expected: str | None = None
	# Form being parsed when a syntax error was detected (e.g. "defn").
	form: str | None = None
	severity: str = "error"
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def __str__(self) -> str:
		line = self.span.line if self.span.line is not None else "?"
		column = self.span.column if self.span.column is not None else "?"
		return f"{line}:{column}: {self.kind.value}: {self.message}"


class ConvexParseError(ValueError):
	"""
	Raised by `parse_strict` when a source unit produced diagnostics.

	The message is the first diagnostic; all of them are kept on
	`diagnostics` so a caller can render the complete list.
	"""

	def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
		self.diagnostics = list(diagnostics)
		first = str(self.diagnostics[0]) if self.diagnostics else "parse failed"
		extra = len(self.diagnostics) - 1
		if extra > 0:
			first = f"{first} (and {extra} more)"
		super().__init__(first)


__all__ = ["ConvexParseError", "Diagnostic", "ErrorKind"]
