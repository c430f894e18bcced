# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Recursive-descent parser for Convex Lisp.

The parser pulls tokens from a `Lexer` on demand and builds the tree defined
in `ast.py`. Special forms are recognized from the head symbol of a list
(`(defn ...`, `(let ...`), everything else is a plain collection or atom.

Errors come in two strengths:

- soft errors (a missing closer at end of input, `&` without optional
  parameters, an unpaired map key, a stray closing delimiter) are recorded and
  parsing carries on with a best-effort node;
- hard errors raise `FormSyntaxError`. The innermost enclosing form catches
  it, records one diagnostic, skips to that form's balanced closing delimiter
  and stands in an `ErrorNode` holding the skipped tokens.

Either way the parse continues with the next form and the tree still covers
every token of the input. The same holds for forms nested deeper than
`MAX_NESTING`: the first form past the limit is reported once and kept as a
flat `ErrorNode`.
"""

from __future__ import annotations

from typing import List, Optional

from convex_lisp.core.diagnostics import Diagnostic, ErrorKind
from convex_lisp.core.span import Span

from .ast import (
	Address,
	Arity,
	Binding,
	Bindings,
	Boolean,
	Bytes,
	Character,
	Cond,
	CondPair,
	Def,
	DefMacro,
	Defn,
	Dotimes,
	ErrorNode,
	Float,
	Fn,
	IfLet,
	Import,
	Keyword,
	Let,
	ListForm,
	Long,
	Lookup,
	Loop,
	Macro,
	MapEntry,
	MapForm,
	Metadata,
	Nil,
	Node,
	Parameters,
	Quote,
	QuoteKind,
	SetForm,
	Source,
	String,
	Symbol,
	SyntaxStyle,
	VectorForm,
	WhenLet,
)
from .lexer import CLOSER_FOR, Lexer, Token, TokenKind


class FormSyntaxError(ValueError):
	"""
	Hard syntax error inside a form.

	Carries the offending span, the form being parsed and the expected token
	class. Raised from anywhere below `Parser._parse_form` and converted into a
	diagnostic there; it never escapes `Parser.parse`.
	"""

	def __init__(self, message: str, *, span: Span, form: str | None = None, expected: str | None = None) -> None:
		super().__init__(message)
		self.span = span
		self.form = form
		self.expected = expected


_QUOTE_SHORTHAND = {
	TokenKind.QUOTE: QuoteKind.QUOTE,
	TokenKind.QUASIQUOTE: QuoteKind.QUASIQUOTE,
	TokenKind.UNQUOTE: QuoteKind.UNQUOTE,
}

_VALUE_ATOMS = {
	TokenKind.BOOLEAN: Boolean,
	TokenKind.CHARACTER: Character,
	TokenKind.STRING: String,
	TokenKind.ADDRESS: Address,
	TokenKind.BYTES: Bytes,
	TokenKind.LONG: Long,
	TokenKind.FLOAT: Float,
}

# The keyword token that introduces an import alias.
_IMPORT_AS = ":as"

# Forms nested deeper than this are reported and skipped as one error node.
MAX_NESTING = 100


def _parts(*parts):
	return tuple(p for p in parts if p is not None)


class Parser:
	"""Parser for one source unit. Use `parse()` once per instance."""

	def __init__(self, lexer: Lexer) -> None:
		self.lexer = lexer
		self.diagnostics: List[Diagnostic] = []
		self._tokens: List[Token] = []
		self._pos = 0
		# Closers expected by the delimited forms currently being parsed, innermost last.
		self._enclosing: List[TokenKind] = []
		self._depth = 0
		self._special_forms = {
			"lookup": self._parse_lookup_call,
			"quote": self._parse_quote_call,
			"quasiquote": self._parse_quote_call,
			"unquote": self._parse_quote_call,
			"import": self._parse_import,
			"defmacro": self._parse_defmacro,
			"defn": self._parse_defn,
			"def": self._parse_def,
			"fn": self._parse_fn,
			"macro": self._parse_macro,
			"cond": self._parse_cond,
			"let": self._parse_let,
			"loop": self._parse_loop,
			"if-let": self._parse_if_let,
			"when-let": self._parse_when_let,
			"dotimes": self._parse_dotimes,
		}

	def parse(self) -> Source:
		forms: list[Node] = []
		while True:
			tok = self._peek()
			if tok.kind is TokenKind.EOF:
				break
			if tok.kind.is_closer:
				forms.append(self._stray_closer(tok, form=None, expected=None))
				continue
			forms.append(self._parse_form())
		eof = self._advance()
		return Source(parts=(*forms, eof), forms=tuple(forms))

	# --- token cursor ------------------------------------------------------

	def _token_at(self, index: int) -> Token:
		while len(self._tokens) <= index:
			if self._tokens and self._tokens[-1].kind is TokenKind.EOF:
				return self._tokens[-1]
			self._tokens.append(self.lexer.next_token())
		return self._tokens[index]

	def _peek(self, ahead: int = 0) -> Token:
		return self._token_at(self._pos + ahead)

	def _advance(self) -> Token:
		tok = self._peek()
		if tok.kind is not TokenKind.EOF:
			self._pos += 1
		return tok

	def _at(self, kind: TokenKind) -> bool:
		return self._peek().kind is kind

	def _at_form_end(self) -> bool:
		tok = self._peek()
		return tok.kind is TokenKind.EOF or tok.kind.is_closer

	# --- diagnostics and recovery -------------------------------------------

	def _error(self, message: str, span: Span, *, form: str | None, expected: str | None) -> None:
		self.diagnostics.append(
			Diagnostic(message=message, kind=ErrorKind.SYNTAX, span=span, expected=expected, form=form)
		)

	def _stray_closer(self, tok: Token, *, form: str | None, expected: TokenKind | None) -> ErrorNode:
		self._advance()
		if expected is None:
			message = f"unexpected '{tok.text}' with no matching opening delimiter"
			hint = "a form"
		else:
			message = f"unexpected '{tok.text}' in {form}; expected '{expected.value}'"
			hint = f"'{expected.value}'"
		self._error(message, tok.span, form=form, expected=hint)
		return ErrorNode(parts=(tok,), form=form, message=message)

	def _recover(self, start: int, err: FormSyntaxError) -> ErrorNode:
		end = max(self._pos, start + 1)
		if self._token_at(start).kind.is_opener:
			end = max(end, self._matching_close(start))
		self._pos = end
		return ErrorNode(parts=tuple(self._tokens[start:end]), form=err.form, message=str(err))

	def _matching_close(self, start: int) -> int:
		"""
		Index just past the delimiter that closes the opener at `start`.

		A closer that matches an outer opener also closes the unclosed inner
		ones; a closer matching nothing open is skipped. Stops at EOF.
		"""
		pending: list[TokenKind] = []
		index = start
		while True:
			tok = self._token_at(index)
			if tok.kind is TokenKind.EOF:
				return index
			if tok.kind.is_opener:
				pending.append(CLOSER_FOR[tok.kind])
			elif tok.kind.is_closer and tok.kind in pending:
				while pending.pop() is not tok.kind:
					pass
				if not pending:
					return index + 1
			index += 1

	def _skip_too_deep(self, tok: Token) -> ErrorNode:
		# Quote prefixes belong to the form they quote.
		end = self._pos
		while self._token_at(end).kind in _QUOTE_SHORTHAND:
			end += 1
		kind = self._token_at(end).kind
		if kind.is_opener:
			end = self._matching_close(end)
		elif not (kind is TokenKind.EOF or kind.is_closer):
			end += 1
		message = f"forms nested deeper than {MAX_NESTING} levels"
		self._error(message, tok.span, form=None, expected=None)
		parts = tuple(self._tokens[self._pos : end])
		self._pos = end
		return ErrorNode(parts=parts, form=None, message=message)

	# --- forms ---------------------------------------------------------------

	def _parse_form(self) -> Node:
		tok = self._peek()
		if tok.kind is TokenKind.EOF or tok.kind.is_closer:
			raise FormSyntaxError(f"expected a form, found {tok.describe()}", span=tok.span, expected="a form")
		if self._depth >= MAX_NESTING:
			return self._skip_too_deep(tok)
		start = self._pos
		self._depth += 1
		try:
			return self._dispatch(tok)
		except FormSyntaxError as err:
			self._error(str(err), err.span, form=err.form, expected=err.expected)
			return self._recover(start, err)
		finally:
			self._depth -= 1

	def _dispatch(self, tok: Token) -> Node:
		kind = tok.kind
		if kind.is_opener:
			self._enclosing.append(CLOSER_FOR[kind])
			try:
				return self._parse_delimited(tok)
			finally:
				self._enclosing.pop()
		if kind in _QUOTE_SHORTHAND:
			return self._parse_quote_shorthand()
		if kind is TokenKind.SYMBOL or kind is TokenKind.ADDRESS:
			slash = self._peek(1)
			if slash.kind is TokenKind.SLASH and not slash.leading:
				return self._parse_lookup_infix()
			return self._atom_from(self._advance())
		if kind is TokenKind.SLASH:
			# Not a lookup separator here: the division function.
			self._advance()
			return Symbol(parts=(tok,), name=tok.text, builtin=tok.builtin)
		if kind.is_literal or kind is TokenKind.KEYWORD:
			return self._atom_from(self._advance())
		if kind is TokenKind.ERROR:
			# Already reported by the lexer.
			self._advance()
			return ErrorNode(parts=(tok,), form=None, message=tok.value)
		if kind is TokenKind.META:
			raise FormSyntaxError(
				"metadata '^' is only allowed after a definition name",
				span=tok.span,
				expected="a form",
			)
		if kind is TokenKind.COLON:
			raise FormSyntaxError("expected a keyword name after ':'", span=tok.span, expected="keyword name")
		raise FormSyntaxError(f"unexpected {tok.describe()}", span=tok.span, expected="a form")

	def _parse_delimited(self, tok: Token) -> Node:
		if tok.kind is TokenKind.LPAREN:
			# Trivia between '(' and the head symbol is allowed. A head
			# followed by an adjacent '/' is a lookup, not a special form.
			head, after = self._peek(1), self._peek(2)
			lookup = after.kind is TokenKind.SLASH and not after.leading
			if head.kind is TokenKind.SYMBOL and head.text in self._special_forms and not lookup:
				return self._special_forms[head.text]()
			return self._parse_list()
		if tok.kind is TokenKind.LBRACKET:
			return self._parse_vector()
		if tok.kind is TokenKind.LBRACE:
			return self._parse_map()
		return self._parse_set()

	def _expect_form(self, form: str, role: str) -> Node:
		tok = self._peek()
		if tok.kind is TokenKind.EOF or tok.kind.is_closer:
			raise FormSyntaxError(
				f"expected {role} in {form}, found {tok.describe()}",
				span=tok.span,
				form=form,
				expected="a form",
			)
		return self._parse_form()

	def _expect_symbol(self, form: str, role: str) -> Symbol:
		tok = self._peek()
		if tok.kind is not TokenKind.SYMBOL:
			raise FormSyntaxError(
				f"expected a symbol for {role} in {form}, found {tok.describe()}",
				span=tok.span,
				form=form,
				expected="symbol",
			)
		self._advance()
		return self._symbol_from(tok)

	def _expect_close(self, open_tok: Token, form: str) -> Optional[Token]:
		closer = CLOSER_FOR[open_tok.kind]
		tok = self._peek()
		if tok.kind is closer:
			return self._advance()
		if tok.kind is TokenKind.EOF:
			self._error(
				f"unclosed '{open_tok.text}' in {form}; expected '{closer.value}'",
				open_tok.span,
				form=form,
				expected=f"'{closer.value}'",
			)
			return None
		raise FormSyntaxError(
			f"expected '{closer.value}' to close {form}, found {tok.describe()}",
			span=tok.span,
			form=form,
			expected=f"'{closer.value}'",
		)

	def _parse_body(self) -> list[Node]:
		body: list[Node] = []
		while not self._at_form_end():
			body.append(self._parse_form())
		return body

	# --- atoms -------------------------------------------------------------

	def _atom_from(self, tok: Token) -> Node:
		kind = tok.kind
		if kind is TokenKind.SYMBOL:
			return self._symbol_from(tok)
		if kind is TokenKind.KEYWORD:
			return Keyword(parts=(tok,), name=tok.value)
		if kind is TokenKind.NIL:
			return Nil(parts=(tok,))
		return _VALUE_ATOMS[kind](parts=(tok,), value=tok.value)

	@staticmethod
	def _symbol_from(tok: Token) -> Symbol:
		return Symbol(parts=(tok,), name=tok.text, builtin=tok.builtin)

	# --- collections -------------------------------------------------------

	def _parse_items(self, open_tok: Token, form: str) -> tuple[list[Node], Optional[Token]]:
		closer = CLOSER_FOR[open_tok.kind]
		items: list[Node] = []
		while True:
			tok = self._peek()
			if tok.kind is closer:
				return items, self._advance()
			# A closer owned by an enclosing form ends this one unclosed.
			if tok.kind is TokenKind.EOF or tok.kind in self._enclosing:
				self._error(
					f"unclosed '{open_tok.text}' in {form}; expected '{closer.value}'",
					open_tok.span,
					form=form,
					expected=f"'{closer.value}'",
				)
				return items, None
			if tok.kind.is_closer:
				# A wrong closer followed by the end or by an outer form's closer
				# was meant to close this form; anywhere else it is stray.
				after = self._peek(1)
				if after.kind is TokenKind.EOF or after.kind in self._enclosing[:-1]:
					self._error(
						f"expected '{closer.value}' to close {form}, found '{tok.text}'",
						tok.span,
						form=form,
						expected=f"'{closer.value}'",
					)
					return items, self._advance()
				items.append(self._stray_closer(tok, form=form, expected=closer))
				continue
			items.append(self._parse_form())

	def _parse_list(self) -> ListForm:
		open_tok = self._advance()
		items, close = self._parse_items(open_tok, "list")
		return ListForm(parts=_parts(open_tok, *items, close), items=tuple(items))

	def _parse_vector(self) -> VectorForm:
		open_tok = self._advance()
		items, close = self._parse_items(open_tok, "vector")
		return VectorForm(parts=_parts(open_tok, *items, close), items=tuple(items))

	def _parse_set(self) -> SetForm:
		open_tok = self._advance()
		items, close = self._parse_items(open_tok, "set")
		return SetForm(parts=_parts(open_tok, *items, close), items=tuple(items))

	def _parse_map(self) -> MapForm:
		open_tok = self._advance()
		items, close = self._parse_items(open_tok, "map")
		entries = [
			MapEntry(parts=(items[i], items[i + 1]), key=items[i], value=items[i + 1])
			for i in range(0, len(items) - 1, 2)
		]
		unpaired = items[-1] if len(items) % 2 else None
		if unpaired is not None:
			self._error(
				"map literal has an unpaired key; map entries must come in key/value pairs",
				unpaired.span,
				form="map",
				expected="a value form",
			)
		return MapForm(parts=_parts(open_tok, *entries, unpaired, close), entries=tuple(entries), unpaired=unpaired)

	def _parse_optional_metadata(self) -> Optional[Metadata]:
		# The lexer only emits META directly in front of '{'.
		if not self._at(TokenKind.META):
			return None
		prefix = self._advance()
		self._enclosing.append(TokenKind.RBRACE)
		try:
			map_node = self._parse_map()
		finally:
			self._enclosing.pop()
		return Metadata(parts=(prefix, map_node), map=map_node)

	# --- quoting and lookup --------------------------------------------------

	def _parse_quote_shorthand(self) -> Quote:
		prefix = self._advance()
		kind = _QUOTE_SHORTHAND[prefix.kind]
		form = self._expect_form(kind.value, "a quoted form")
		return Quote(parts=(prefix, form), kind=kind, style=SyntaxStyle.SHORTHAND, form=form)

	def _parse_quote_call(self) -> Quote:
		open_tok, head = self._advance(), self._advance()
		kind = QuoteKind(head.text)
		form = self._expect_form(kind.value, "a quoted form")
		close = self._expect_close(open_tok, kind.value)
		return Quote(parts=_parts(open_tok, head, form, close), kind=kind, style=SyntaxStyle.EXPLICIT, form=form)

	def _parse_lookup_infix(self) -> Lookup:
		account_tok = self._advance()
		slash = self._advance()
		name_tok = self._peek()
		if name_tok.kind is not TokenKind.SYMBOL or name_tok.leading:
			raise FormSyntaxError(
				f"expected a symbol directly after '/' in lookup, found {name_tok.describe()}",
				span=name_tok.span,
				form="lookup",
				expected="symbol",
			)
		self._advance()
		account = self._atom_from(account_tok)
		name = self._symbol_from(name_tok)
		return Lookup(parts=(account, slash, name), account=account, name=name, style=SyntaxStyle.SHORTHAND)

	def _parse_lookup_call(self) -> Lookup:
		open_tok, head = self._advance(), self._advance()
		first = self._peek()
		if first.kind is not TokenKind.SYMBOL and first.kind is not TokenKind.ADDRESS:
			raise FormSyntaxError(
				f"expected an account or a name in lookup, found {first.describe()}",
				span=first.span,
				form="lookup",
				expected="address or symbol",
			)
		self._advance()
		second = self._peek()
		if second.kind is TokenKind.SYMBOL:
			self._advance()
			account = self._atom_from(first)
			name = self._symbol_from(second)
		elif first.kind is TokenKind.SYMBOL:
			account = None
			name = self._symbol_from(first)
		else:
			raise FormSyntaxError(
				f"expected a symbol name after the account in lookup, found {second.describe()}",
				span=second.span,
				form="lookup",
				expected="symbol",
			)
		close = self._expect_close(open_tok, "lookup")
		return Lookup(
			parts=_parts(open_tok, head, account, name, close),
			account=account,
			name=name,
			style=SyntaxStyle.EXPLICIT,
		)

	# --- definitions ---------------------------------------------------------

	def _parse_import(self) -> Import:
		open_tok, head = self._advance(), self._advance()
		name = self._expect_symbol("import", "the imported name")
		as_tok = None
		rename = None
		tok = self._peek()
		if tok.kind is TokenKind.KEYWORD and tok.text == _IMPORT_AS:
			as_tok = self._advance()
			rename = self._expect_symbol("import", "the alias after :as")
		close = self._expect_close(open_tok, "import")
		return Import(parts=_parts(open_tok, head, name, as_tok, rename, close), name=name, rename=rename)

	def _parse_def(self) -> Def:
		open_tok, head = self._advance(), self._advance()
		name = self._expect_symbol("def", "the name")
		meta = self._parse_optional_metadata()
		body = self._expect_form("def", "a value")
		close = self._expect_close(open_tok, "def")
		return Def(parts=_parts(open_tok, head, name, meta, body, close), name=name, meta=meta, body=body)

	def _parse_defmacro(self) -> DefMacro:
		open_tok, head = self._advance(), self._advance()
		name = self._expect_symbol("defmacro", "the name")
		meta = self._parse_optional_metadata()
		arity = self._parse_arity("defmacro")
		close = self._expect_close(open_tok, "defmacro")
		return DefMacro(parts=_parts(open_tok, head, name, meta, arity, close), name=name, meta=meta, arity=arity)

	def _parse_defn(self) -> Defn:
		open_tok, head = self._advance(), self._advance()
		name = self._expect_symbol("defn", "the name")
		meta = self._parse_optional_metadata()
		# One token of lookahead decides: '(' starts a list of arities.
		multi = self._at(TokenKind.LPAREN)
		if multi:
			arities = []
			while self._at(TokenKind.LPAREN):
				arities.append(self._parse_arity("defn", wrapped=True))
		else:
			arities = [self._parse_arity("defn")]
		close = self._expect_close(open_tok, "defn")
		return Defn(
			parts=_parts(open_tok, head, name, meta, *arities, close),
			name=name,
			meta=meta,
			arities=tuple(arities),
			multi=multi,
		)

	def _parse_fn(self) -> Fn:
		open_tok, head = self._advance(), self._advance()
		arity = self._parse_arity("fn")
		close = self._expect_close(open_tok, "fn")
		return Fn(parts=_parts(open_tok, head, arity, close), arity=arity)

	def _parse_macro(self) -> Macro:
		open_tok, head = self._advance(), self._advance()
		arity = self._parse_arity("macro")
		close = self._expect_close(open_tok, "macro")
		return Macro(parts=_parts(open_tok, head, arity, close), arity=arity)

	def _parse_arity(self, form: str, *, wrapped: bool = False) -> Arity:
		if not wrapped:
			return self._parse_arity_inner(form, None)
		self._enclosing.append(TokenKind.RPAREN)
		try:
			return self._parse_arity_inner(form, self._advance())
		finally:
			self._enclosing.pop()

	def _parse_arity_inner(self, form: str, open_tok: Optional[Token]) -> Arity:
		params = self._parse_parameters(form)
		body = self._expect_form(form, "a body")
		if not self._at_form_end():
			extra = self._peek()
			raise FormSyntaxError(
				f"an arity takes exactly one body form; found {extra.describe()} after the body in {form}",
				span=extra.span,
				form=form,
				expected="')'",
			)
		close = self._expect_close(open_tok, form) if open_tok is not None else None
		return Arity(parts=_parts(open_tok, params, body, close), params=params, body=body)

	def _parse_parameters(self, form: str) -> Parameters:
		open_tok = self._peek()
		if open_tok.kind is not TokenKind.LBRACKET:
			raise FormSyntaxError(
				f"expected a parameter vector in {form}, found {open_tok.describe()}",
				span=open_tok.span,
				form=form,
				expected="'['",
			)
		self._advance()
		self._enclosing.append(TokenKind.RBRACKET)
		try:
			return self._parse_parameters_inner(open_tok, form)
		finally:
			self._enclosing.pop()

	def _parse_parameters_inner(self, open_tok: Token, form: str) -> Parameters:
		parts: list = [open_tok]
		fixed: list[Symbol] = []
		optional: list[Symbol] = []
		marker: Optional[Token] = None
		while not self._at_form_end():
			tok = self._peek()
			if tok.kind is not TokenKind.SYMBOL:
				raise FormSyntaxError(
					f"parameter must be a symbol, found {tok.describe()}",
					span=tok.span,
					form=form,
					expected="symbol",
				)
			self._advance()
			if tok.text == "&":
				if marker is not None:
					raise FormSyntaxError(
						"duplicate variadic marker '&' in parameters",
						span=tok.span,
						form=form,
						expected="symbol",
					)
				marker = tok
				parts.append(tok)
				continue
			param = self._symbol_from(tok)
			(optional if marker is not None else fixed).append(param)
			parts.append(param)
		close = self._expect_close(open_tok, f"parameters of {form}")
		if close is not None:
			parts.append(close)
		if marker is not None and not optional:
			self._error(
				"variadic marker '&' must be followed by at least one optional parameter",
				marker.span,
				form=form,
				expected="symbol",
			)
		return Parameters(parts=tuple(parts), fixed=tuple(fixed), variadic=marker is not None, optional=tuple(optional))

	# --- control and bindings ------------------------------------------------

	def _parse_cond(self) -> Cond:
		open_tok, head = self._advance(), self._advance()
		forms = self._parse_body()
		close = self._expect_close(open_tok, "cond")
		if len(forms) == 1:
			return Cond(parts=_parts(open_tok, head, forms[0], close), pairs=(), test=forms[0], fallback=None)
		pairs = [
			CondPair(parts=(forms[i], forms[i + 1]), test=forms[i], result=forms[i + 1])
			for i in range(0, len(forms) - 1, 2)
		]
		fallback = forms[-1] if len(forms) % 2 else None
		return Cond(
			parts=_parts(open_tok, head, *pairs, fallback, close),
			pairs=tuple(pairs),
			test=None,
			fallback=fallback,
		)

	def _parse_bindings(self, form: str) -> Bindings:
		open_tok = self._peek()
		if open_tok.kind is not TokenKind.LBRACKET:
			raise FormSyntaxError(
				f"expected a binding vector in {form}, found {open_tok.describe()}",
				span=open_tok.span,
				form=form,
				expected="'['",
			)
		self._advance()
		self._enclosing.append(TokenKind.RBRACKET)
		try:
			return self._parse_bindings_inner(open_tok, form)
		finally:
			self._enclosing.pop()

	def _parse_bindings_inner(self, open_tok: Token, form: str) -> Bindings:
		items: list[Binding] = []
		while not self._at_form_end():
			name = self._expect_symbol(form, "a binding name")
			if self._at_form_end():
				raise FormSyntaxError(
					f"binding '{name.name}' in {form} has no value",
					span=name.span,
					form=form,
					expected="a form",
				)
			expr = self._parse_form()
			items.append(Binding(parts=(name, expr), name=name, expr=expr))
		close = self._expect_close(open_tok, f"bindings of {form}")
		return Bindings(parts=_parts(open_tok, *items, close), items=tuple(items))

	def _parse_single_binding(self, form: str) -> Bindings:
		bindings = self._parse_bindings(form)
		if len(bindings.items) != 1:
			raise FormSyntaxError(
				f"{form} takes exactly one binding, found {len(bindings.items)}",
				span=bindings.span,
				form=form,
				expected="one name/expression pair",
			)
		return bindings

	def _parse_let(self) -> Let:
		open_tok, head = self._advance(), self._advance()
		bindings = self._parse_bindings("let")
		body = self._parse_body()
		close = self._expect_close(open_tok, "let")
		return Let(parts=_parts(open_tok, head, bindings, *body, close), bindings=bindings, body=tuple(body))

	def _parse_loop(self) -> Loop:
		open_tok, head = self._advance(), self._advance()
		bindings = self._parse_bindings("loop")
		body = self._parse_body()
		close = self._expect_close(open_tok, "loop")
		return Loop(parts=_parts(open_tok, head, bindings, *body, close), bindings=bindings, body=tuple(body))

	def _parse_if_let(self) -> IfLet:
		open_tok, head = self._advance(), self._advance()
		bindings = self._parse_single_binding("if-let")
		if_true = self._expect_form("if-let", "a true branch")
		if_false = None if self._at_form_end() else self._parse_form()
		close = self._expect_close(open_tok, "if-let")
		return IfLet(
			parts=_parts(open_tok, head, bindings, if_true, if_false, close),
			bindings=bindings,
			if_true=if_true,
			if_false=if_false,
		)

	def _parse_when_let(self) -> WhenLet:
		open_tok, head = self._advance(), self._advance()
		bindings = self._parse_single_binding("when-let")
		body = self._parse_body()
		close = self._expect_close(open_tok, "when-let")
		return WhenLet(parts=_parts(open_tok, head, bindings, *body, close), bindings=bindings, body=tuple(body))

	def _parse_dotimes(self) -> Dotimes:
		open_tok, head = self._advance(), self._advance()
		bindings = self._parse_single_binding("dotimes")
		body = self._parse_body()
		close = self._expect_close(open_tok, "dotimes")
		return Dotimes(parts=_parts(open_tok, head, bindings, *body, close), bindings=bindings, body=tuple(body))


__all__ = ["FormSyntaxError", "MAX_NESTING", "Parser"]
