# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree for Convex Lisp.

Every node is a frozen dataclass with `parts`: the ordered tokens and child
nodes it owns, delimiters and head symbols included. Named fields give typed
access to the semantic children; the same child objects also appear in
`parts`, which is what the printer walks to re-emit the exact source text.

Trivia never shows up as a node. It hangs off tokens (`Token.leading`) and the
root's EOF token.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union

from convex_lisp.core.builtins import BuiltinKind
from convex_lisp.core.span import Span

from .lexer import Token


class SyntaxStyle(str, Enum):
	"""Surface syntax used for forms that have two spellings."""

	SHORTHAND = "shorthand"  # 'x, `x, ~x, account/name
	EXPLICIT = "explicit"  # (quote x), (lookup account name)


class QuoteKind(str, Enum):
	QUOTE = "quote"
	QUASIQUOTE = "quasiquote"
	UNQUOTE = "unquote"


Part = Union[Token, "Node"]


@dataclass(frozen=True)
class Node:
	parts: Tuple[Part, ...]

	def tokens(self) -> Iterator[Token]:
		"""Yield every token under this node in source order."""
		return iter_tokens(self)

	def children(self) -> Tuple["Node", ...]:
		"""Direct child nodes, in source order."""
		return tuple(p for p in self.parts if isinstance(p, Node))

	@property
	def first_token(self) -> Token:
		return next(iter_tokens(self))

	@property
	def last_token(self) -> Token:
		last = self.parts[-1]
		while isinstance(last, Node):
			last = last.parts[-1]
		return last

	@property
	def span(self) -> Span:
		return self.first_token.span.cover(self.last_token.span)

	@property
	def form_name(self) -> str:
		return _FORM_NAMES.get(type(self), type(self).__name__.lower())


# --- Atoms -----------------------------------------------------------------


@dataclass(frozen=True)
class Atom(Node):
	"""Single-token form."""

	@property
	def token(self) -> Token:
		return self.parts[0]  # type: ignore[return-value]

	@property
	def text(self) -> str:
		return self.token.text


@dataclass(frozen=True)
class Nil(Atom):
	@property
	def value(self) -> None:
		return None


@dataclass(frozen=True)
class Boolean(Atom):
	value: bool


@dataclass(frozen=True)
class Character(Atom):
	value: str


@dataclass(frozen=True)
class String(Atom):
	value: str


@dataclass(frozen=True)
class Address(Atom):
	"""`#42`: an account address (a blob type)."""

	value: int


@dataclass(frozen=True)
class Bytes(Atom):
	"""`0xcafe`: a byte blob."""

	value: bytes


@dataclass(frozen=True)
class Long(Atom):
	value: int


@dataclass(frozen=True)
class Float(Atom):
	value: float


@dataclass(frozen=True)
class Keyword(Atom):
	name: str


@dataclass(frozen=True)
class Symbol(Atom):
	name: str
	builtin: Optional[BuiltinKind]


# --- Collections -----------------------------------------------------------


@dataclass(frozen=True)
class ListForm(Node):
	items: Tuple[Node, ...]


@dataclass(frozen=True)
class VectorForm(Node):
	items: Tuple[Node, ...]


@dataclass(frozen=True)
class SetForm(Node):
	items: Tuple[Node, ...]


@dataclass(frozen=True)
class MapEntry(Node):
	key: Node
	value: Node


@dataclass(frozen=True)
class MapForm(Node):
	entries: Tuple[MapEntry, ...]
	# Trailing key without a value; always reported as a syntax error.
	unpaired: Optional[Node]


@dataclass(frozen=True)
class Metadata(Node):
	"""`^{...}` attached to a definition."""

	map: MapForm


# --- Quoting and lookup ----------------------------------------------------


@dataclass(frozen=True)
class Quote(Node):
	"""
	Quote, quasiquote or unquote of a single form.

	`'x` and `(quote x)` both produce this node; only `style` differs.
	"""

	kind: QuoteKind
	style: SyntaxStyle
	form: Node


@dataclass(frozen=True)
class Lookup(Node):
	"""
	Account-qualified name: `account/name` or `(lookup [account] name)`.

	`account` is None when the call form omits it, meaning the current
	account; resolving that is left to consumers.
	"""

	account: Optional[Union[Address, Symbol]]
	name: Symbol
	style: SyntaxStyle


# --- Definitions and functions ---------------------------------------------


@dataclass(frozen=True)
class Import(Node):
	name: Symbol
	rename: Optional[Symbol]


@dataclass(frozen=True)
class Parameters(Node):
	fixed: Tuple[Symbol, ...]
	variadic: bool
	optional: Tuple[Symbol, ...]


@dataclass(frozen=True)
class Arity(Node):
	"""Parameter vector plus exactly one body form."""

	params: Parameters
	body: Node


@dataclass(frozen=True)
class Def(Node):
	name: Symbol
	meta: Optional[Metadata]
	body: Node


@dataclass(frozen=True)
class DefMacro(Node):
	name: Symbol
	meta: Optional[Metadata]
	arity: Arity


@dataclass(frozen=True)
class Defn(Node):
	"""
	Function definition.

	Single-arity `(defn f [x] x)` has one entry in `arities` and
	`multi=False`; `(defn f ([x] x) ([x y] y))` has one entry per
	parenthesized arity and `multi=True`.
	"""

	name: Symbol
	meta: Optional[Metadata]
	arities: Tuple[Arity, ...]
	multi: bool


@dataclass(frozen=True)
class Fn(Node):
	arity: Arity


@dataclass(frozen=True)
class Macro(Node):
	arity: Arity


# --- Control and binding forms ---------------------------------------------


@dataclass(frozen=True)
class CondPair(Node):
	test: Node
	result: Node


@dataclass(frozen=True)
class Cond(Node):
	"""
	`(cond)` has no pairs and no test, `(cond x)` only `test`, otherwise
	`pairs` plus an optional `fallback`.
	"""

	pairs: Tuple[CondPair, ...]
	test: Optional[Node]
	fallback: Optional[Node]


@dataclass(frozen=True)
class Binding(Node):
	name: Symbol
	expr: Node


@dataclass(frozen=True)
class Bindings(Node):
	items: Tuple[Binding, ...]


@dataclass(frozen=True)
class Let(Node):
	bindings: Bindings
	body: Tuple[Node, ...]


@dataclass(frozen=True)
class Loop(Node):
	bindings: Bindings
	body: Tuple[Node, ...]


@dataclass(frozen=True)
class IfLet(Node):
	bindings: Bindings
	if_true: Node
	if_false: Optional[Node]

	@property
	def binding(self) -> Binding:
		return self.bindings.items[0]


@dataclass(frozen=True)
class WhenLet(Node):
	bindings: Bindings
	body: Tuple[Node, ...]

	@property
	def binding(self) -> Binding:
		return self.bindings.items[0]


@dataclass(frozen=True)
class Dotimes(Node):
	bindings: Bindings
	body: Tuple[Node, ...]

	@property
	def binding(self) -> Binding:
		return self.bindings.items[0]


# --- Errors and root -------------------------------------------------------


@dataclass(frozen=True)
class ErrorNode(Node):
	"""
	Tokens skipped while recovering from an error.

	`form` names what the parser was attempting (None for stray tokens).
	"""

	form: Optional[str]
	message: str


@dataclass(frozen=True)
class Source(Node):
	"""Root of one source unit; the EOF token (last part) holds trailing trivia."""

	forms: Tuple[Node, ...]

	@property
	def eof(self) -> Token:
		return self.parts[-1]  # type: ignore[return-value]


_FORM_NAMES = {
	ListForm: "list",
	VectorForm: "vector",
	SetForm: "set",
	MapForm: "map",
	MapEntry: "map entry",
	DefMacro: "defmacro",
	IfLet: "if-let",
	WhenLet: "when-let",
	CondPair: "cond clause",
	ErrorNode: "error",
}


def iter_tokens(node: Node) -> Iterator[Token]:
	# Explicit stack: trees can be nested deeper than the interpreter's recursion limit.
	stack = [iter(node.parts)]
	while stack:
		for part in stack[-1]:
			if isinstance(part, Node):
				stack.append(iter(part.parts))
				break
			yield part
		else:
			stack.pop()


def walk(node: Node) -> Iterator[Node]:
	"""Pre-order traversal of `node` and all its descendants."""
	stack = [node]
	while stack:
		current = stack.pop()
		yield current
		stack.extend(reversed(current.children()))


# Fields that describe spelling rather than structure.
_STYLE_FIELDS = frozenset({"parts", "style"})


def structure(node: Optional[Node]) -> Any:
	"""
	Trivia- and spelling-free shape of a node as nested tuples.

	Useful for comparing trees that differ only in layout or in which surface
	syntax was used: `structure(parse("'x"))` equals
	`structure(parse("(quote x)"))`.
	"""
	if node is None:
		return None
	items: list[Any] = [type(node).__name__]
	if isinstance(node, Atom) and not isinstance(node, (Symbol, Keyword)):
		items.append(node.text if isinstance(node, Float) else getattr(node, "value", None))
	for f in fields(node):
		if f.name in _STYLE_FIELDS:
			continue
		if isinstance(node, Atom) and f.name == "value":
			continue
		items.append((f.name, _structure_value(getattr(node, f.name))))
	return tuple(items)


def _structure_value(value: Any) -> Any:
	if isinstance(value, Node):
		return structure(value)
	if isinstance(value, tuple):
		return tuple(_structure_value(v) for v in value)
	if isinstance(value, Enum):
		return value.value
	return value


__all__ = [
	"Address",
	"Arity",
	"Atom",
	"Binding",
	"Bindings",
	"Boolean",
	"Bytes",
	"Character",
	"Cond",
	"CondPair",
	"Def",
	"DefMacro",
	"Defn",
	"Dotimes",
	"ErrorNode",
	"Float",
	"Fn",
	"IfLet",
	"Import",
	"Keyword",
	"Let",
	"ListForm",
	"Long",
	"Lookup",
	"Loop",
	"Macro",
	"MapEntry",
	"MapForm",
	"Metadata",
	"Nil",
	"Node",
	"Parameters",
	"Part",
	"Quote",
	"QuoteKind",
	"SetForm",
	"Source",
	"String",
	"Symbol",
	"SyntaxStyle",
	"VectorForm",
	"WhenLet",
	"iter_tokens",
	"structure",
	"walk",
]
