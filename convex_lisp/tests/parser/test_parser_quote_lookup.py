# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Quoting and account lookup: shorthand and call spellings build the same node.
"""

import pytest

from convex_lisp.core.builtins import BuiltinKind, load_default_registry
from convex_lisp.core.diagnostics import ErrorKind
from convex_lisp.parser import ast, parse, structure


def _only_form(src: str, registry=None):
	result = parse(src, registry)
	assert result.diagnostics == []
	(form,) = result.tree.forms
	return form


@pytest.mark.parametrize(
	"shorthand, explicit, kind",
	[
		("'x", "(quote x)", ast.QuoteKind.QUOTE),
		("`(a ~b)", "(quasiquote (a (unquote b)))", ast.QuoteKind.QUASIQUOTE),
		("~x", "(unquote x)", ast.QuoteKind.UNQUOTE),
	],
)
def test_quote_spellings_are_equivalent(shorthand: str, explicit: str, kind: ast.QuoteKind) -> None:
	short = _only_form(shorthand)
	call = _only_form(explicit)
	assert isinstance(short, ast.Quote) and isinstance(call, ast.Quote)
	assert short.kind is kind and call.kind is kind
	assert short.style is ast.SyntaxStyle.SHORTHAND
	assert call.style is ast.SyntaxStyle.EXPLICIT
	assert structure(short) == structure(call)


def test_nested_quotes() -> None:
	form = _only_form("''x")
	assert isinstance(form, ast.Quote)
	assert isinstance(form.form, ast.Quote)
	assert isinstance(form.form.form, ast.Symbol)


def test_quote_without_form_is_one_error() -> None:
	for src in ("'", "(quote)", "[']"):
		result = parse(src)
		assert len(result.diagnostics) == 1, src
		assert result.diagnostics[0].kind is ErrorKind.SYNTAX


def test_infix_lookup_matches_call_form() -> None:
	infix = _only_form("#8/foo")
	call = _only_form("(lookup #8 foo)")
	assert isinstance(infix, ast.Lookup) and isinstance(call, ast.Lookup)
	assert isinstance(infix.account, ast.Address)
	assert infix.account.value == 8
	assert infix.name.name == "foo"
	assert structure(infix) == structure(call)

	sym = _only_form("lib/transfer")
	assert isinstance(sym.account, ast.Symbol)
	assert sym.account.name == "lib"
	assert structure(sym) == structure(_only_form("(lookup lib transfer)"))


def test_lookup_call_without_account() -> None:
	form = _only_form("(lookup foo)")
	assert isinstance(form, ast.Lookup)
	assert form.account is None
	assert form.name.name == "foo"


def test_spaced_slash_is_division_symbol() -> None:
	result = parse("a / b")
	assert result.ok
	a, slash, b = result.tree.forms
	assert isinstance(slash, ast.Symbol)
	assert slash.name == "/"
	assert (a.name, b.name) == ("a", "b")


def test_slash_as_function_head() -> None:
	form = _only_form("(/ 6 3)", load_default_registry())
	assert isinstance(form, ast.ListForm)
	head = form.items[0]
	assert isinstance(head, ast.Symbol)
	assert head.name == "/"
	assert head.builtin is BuiltinKind.FUNCTION


def test_lookup_missing_name() -> None:
	result = parse("a/ 1")
	assert len(result.diagnostics) == 1
	diag = result.diagnostics[0]
	assert diag.form == "lookup"
	assert diag.expected == "symbol"
	err, one = result.tree.forms
	assert isinstance(err, ast.ErrorNode)
	assert [t.text for t in err.tokens()] == ["a", "/"]
	assert isinstance(one, ast.Long)


def test_lookup_call_rejects_non_name() -> None:
	result = parse("(lookup 1 foo) x")
	assert len(result.diagnostics) == 1
	err, x = result.tree.forms
	assert isinstance(err, ast.ErrorNode)
	assert err.form == "lookup"
	assert isinstance(x, ast.Symbol)


def test_special_form_name_as_lookup_account() -> None:
	form = _only_form("(def/x 1)")
	assert isinstance(form, ast.ListForm)
	head, one = form.items
	assert isinstance(head, ast.Lookup)
	assert (head.account.name, head.name.name) == ("def", "x")
	assert one.value == 1
	assert isinstance(_only_form("(def x 1)"), ast.Def)
