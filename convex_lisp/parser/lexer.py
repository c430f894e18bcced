# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexer for Convex Lisp.

Token shapes and their precedence live in `grammar.lark`; lark's basic lexer
does the matching. This module turns lark tokens into `Token` values:

- whitespace and comments become trivia attached to the following token
  (`Token.leading`), the final `EOF` token carries trailing trivia,
- literal tokens get their decoded `value`,
- symbols are classified against the injected `BuiltinRegistry`,
- malformed input becomes an `ERROR` token plus one `LexicalError` diagnostic.

The lexer never raises on bad input; every character of the source ends up in
exactly one token, so the token stream (trivia included) reproduces the text.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from lark import Lark
from lark import Token as LarkToken

from convex_lisp.core.builtins import BuiltinKind, BuiltinRegistry
from convex_lisp.core.diagnostics import Diagnostic, ErrorKind
from convex_lisp.core.span import Span

from . import literals

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_LARK = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
)


class TokenKind(str, Enum):
	WHITESPACE = "whitespace"
	COMMENT = "comment"
	LPAREN = "("
	RPAREN = ")"
	LBRACKET = "["
	RBRACKET = "]"
	LBRACE = "{"
	RBRACE = "}"
	SET_OPEN = "#{"
	QUOTE = "'"
	QUASIQUOTE = "`"
	UNQUOTE = "~"
	META = "^"
	SLASH = "/"
	COLON = ":"
	NIL = "nil"
	BOOLEAN = "boolean"
	CHARACTER = "character"
	STRING = "string"
	ADDRESS = "address"
	BYTES = "bytes"
	LONG = "long"
	FLOAT = "float"
	KEYWORD = "keyword"
	SYMBOL = "symbol"
	ERROR = "error"
	EOF = "end of input"

	@property
	def is_trivia(self) -> bool:
		return self in _TRIVIA

	@property
	def is_literal(self) -> bool:
		return self in _LITERALS

	@property
	def is_opener(self) -> bool:
		return self in CLOSER_FOR

	@property
	def is_closer(self) -> bool:
		return self in _CLOSERS


_TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT})
_LITERALS = frozenset(
	{
		TokenKind.NIL,
		TokenKind.BOOLEAN,
		TokenKind.CHARACTER,
		TokenKind.STRING,
		TokenKind.ADDRESS,
		TokenKind.BYTES,
		TokenKind.LONG,
		TokenKind.FLOAT,
	}
)
CLOSER_FOR = {
	TokenKind.LPAREN: TokenKind.RPAREN,
	TokenKind.LBRACKET: TokenKind.RBRACKET,
	TokenKind.LBRACE: TokenKind.RBRACE,
	TokenKind.SET_OPEN: TokenKind.RBRACE,
}
_CLOSERS = frozenset({TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE})

# Lark terminal name -> token kind. Terminals missing here are lexical errors.
_TERMINAL_KINDS = {
	"WS": TokenKind.WHITESPACE,
	"COMMENT": TokenKind.COMMENT,
	"SET_OPEN": TokenKind.SET_OPEN,
	"NAN": TokenKind.FLOAT,
	"INF": TokenKind.FLOAT,
	"ADDRESS": TokenKind.ADDRESS,
	"LPAREN": TokenKind.LPAREN,
	"RPAREN": TokenKind.RPAREN,
	"LBRACKET": TokenKind.LBRACKET,
	"RBRACKET": TokenKind.RBRACKET,
	"LBRACE": TokenKind.LBRACE,
	"RBRACE": TokenKind.RBRACE,
	"QUOTE": TokenKind.QUOTE,
	"QUASIQUOTE": TokenKind.QUASIQUOTE,
	"UNQUOTE": TokenKind.UNQUOTE,
	"META": TokenKind.META,
	"CHARACTER": TokenKind.CHARACTER,
	"STRING": TokenKind.STRING,
	"BYTES": TokenKind.BYTES,
	"FLOAT_DECEXP": TokenKind.FLOAT,
	"FLOAT_EXP": TokenKind.FLOAT,
	"FLOAT_DEC": TokenKind.FLOAT,
	"LONG": TokenKind.LONG,
	"NIL": TokenKind.NIL,
	"BOOLEAN": TokenKind.BOOLEAN,
	"KEYWORD": TokenKind.KEYWORD,
	"SYMBOL": TokenKind.SYMBOL,
	"SLASH": TokenKind.SLASH,
	"COLON": TokenKind.COLON,
}

# Error terminal -> (message, expected token class).
_LEXICAL_ERRORS = {
	"BAD_CHARACTER": (
		"malformed character literal",
		"a character name, \\uXXXX or a single character after '\\'",
	),
	"BAD_STRING": ("unterminated string literal", "closing '\"'"),
	"BAD_KEYWORD": ("keyword longer than 64 characters", "keyword name of 1 to 64 characters"),
	"BAD_SYMBOL": ("symbol longer than 64 characters", "symbol of 1 to 64 characters"),
	"UNKNOWN_DISPATCH": (
		"unrecognized '#' form",
		"'#{', '##NaN', '##Inf', '##-Inf' or an address such as #42",
	),
}


@dataclass(frozen=True)
class Token:
	"""A semantic or trivia token with its source span."""

	kind: TokenKind
	text: str
	span: Span
	# Decoded literal value (int, float, str, bytes, bool, None); keyword and
	# symbol tokens carry their name; error tokens carry the error message.
	value: Any = None
	builtin: Optional[BuiltinKind] = None
	# Trivia (whitespace/comments) immediately preceding this token.
	leading: Tuple["Token", ...] = ()

	@property
	def start(self) -> int:
		return self.span.start

	@property
	def end(self) -> int:
		return self.span.end

	@property
	def full_text(self) -> str:
		"""Token text with its leading trivia, as it appeared in the source."""
		if not self.leading:
			return self.text
		return "".join(t.text for t in self.leading) + self.text

	def describe(self) -> str:
		if self.kind is TokenKind.EOF:
			return "end of input"
		if self.kind.is_literal or self.kind in (TokenKind.SYMBOL, TokenKind.KEYWORD):
			return f"{self.kind.value} '{self.text}'"
		return f"'{self.text}'"

	def __repr__(self) -> str:
		return f"Token({self.kind.name}, {self.text!r}, {self.span.start}:{self.span.end})"


class Lexer:
	"""
	Pull-based tokenizer over one source unit.

	`next_token()` returns the next semantic token and keeps returning the same
	`EOF` token once input is exhausted. Lexical errors are collected on
	`diagnostics` as they are encountered.
	"""

	def __init__(self, text: str, registry: BuiltinRegistry | None = None, *, file: str | None = None) -> None:
		self.text = text
		self.registry = registry if registry is not None else BuiltinRegistry.empty()
		self.file = file
		self.diagnostics: List[Diagnostic] = []
		self._raw = _LARK.lex(text)
		self._eof: Optional[Token] = None
		self._line = 1
		self._column = 1

	def __iter__(self) -> Iterator[Token]:
		while True:
			tok = self.next_token()
			yield tok
			if tok.kind is TokenKind.EOF:
				return

	def next_token(self) -> Token:
		if self._eof is not None:
			return self._eof
		leading: list[Token] = []
		for raw in self._raw:
			tok = self._convert(raw)
			if tok.kind.is_trivia:
				leading.append(tok)
				continue
			if leading:
				tok = replace(tok, leading=tuple(leading))
			return tok
		end = len(self.text)
		self._eof = Token(
			kind=TokenKind.EOF,
			text="",
			span=Span(
				start=end,
				end=end,
				line=self._line,
				column=self._column,
				end_line=self._line,
				end_column=self._column,
				file=self.file,
			),
			leading=tuple(leading),
		)
		return self._eof

	def _convert(self, raw: LarkToken) -> Token:
		text = str(raw.value)
		span = Span.from_loc(raw, file=self.file)
		self._line, self._column = raw.end_line, raw.end_column
		kind = _TERMINAL_KINDS.get(raw.type)
		if kind is None:
			return self._error_token(raw.type, text, span)
		value, builtin = self._decode(kind, text, span)
		return Token(kind=kind, text=text, span=span, value=value, builtin=builtin)

	def _decode(self, kind: TokenKind, text: str, span: Span) -> tuple[Any, Optional[BuiltinKind]]:
		if kind is TokenKind.SYMBOL or kind is TokenKind.SLASH:
			return text, self.registry.classify(text)
		if kind is TokenKind.KEYWORD:
			return text[1:], None
		if kind is TokenKind.NIL:
			return None, None
		if kind is TokenKind.BOOLEAN:
			return text == "true", None
		if kind is TokenKind.CHARACTER:
			return literals.decode_character(text), None
		if kind is TokenKind.STRING:
			value, problems = literals.decode_string(text)
			for offset, message in problems:
				self._report(message, self._span_at(span.start + offset, 1), expected="\\uXXXX")
			return value, None
		if kind is TokenKind.ADDRESS:
			return literals.decode_address(text), None
		if kind is TokenKind.BYTES:
			return literals.decode_bytes(text), None
		if kind is TokenKind.LONG:
			return literals.decode_long(text), None
		if kind is TokenKind.FLOAT:
			return literals.decode_float(text), None
		return None, None

	def _error_token(self, terminal: str, text: str, span: Span) -> Token:
		if terminal == "BAD_BYTES":
			digits = len(text) - 2
			if digits == 0:
				message = "blob literal '0x' has no hex digits"
			else:
				message = f"odd-length hex blob ({digits} hex digits)"
			expected = "pairs of hex digits"
		elif terminal in _LEXICAL_ERRORS:
			message, expected = _LEXICAL_ERRORS[terminal]
		else:
			message = f"unrecognized character {text!r}"
			expected = "a form"
		self._report(message, span, expected=expected)
		return Token(kind=TokenKind.ERROR, text=text, span=span, value=message)

	def _report(self, message: str, span: Span, *, expected: str | None) -> None:
		self.diagnostics.append(
			Diagnostic(message=message, kind=ErrorKind.LEXICAL, span=span, expected=expected)
		)

	def _span_at(self, offset: int, length: int) -> Span:
		line = self.text.count("\n", 0, offset) + 1
		column = offset - (self.text.rfind("\n", 0, offset) + 1) + 1
		return Span(
			start=offset,
			end=offset + length,
			line=line,
			column=column,
			end_line=line,
			end_column=column + length,
			file=self.file,
		)


def tokenize(text: str, registry: BuiltinRegistry | None = None) -> tuple[list[Token], list[Diagnostic]]:
	"""Lex `text` completely; the returned list ends with the EOF token."""
	lexer = Lexer(text, registry)
	tokens = list(lexer)
	return tokens, lexer.diagnostics


__all__ = ["CLOSER_FOR", "Lexer", "Token", "TokenKind", "tokenize"]
