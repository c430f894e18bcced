# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
cond shapes and the binding forms (let, loop, if-let, when-let, dotimes).
"""

from convex_lisp.parser import ast, parse


def _only_form(src: str):
	result = parse(src)
	assert result.diagnostics == [], result.diagnostics
	(form,) = result.tree.forms
	return form


def test_cond_shapes() -> None:
	empty = _only_form("(cond)")
	assert (empty.pairs, empty.test, empty.fallback) == ((), None, None)

	bare = _only_form("(cond a)")
	assert bare.pairs == ()
	assert bare.test.name == "a"
	assert bare.fallback is None

	one = _only_form("(cond a b)")
	assert len(one.pairs) == 1
	assert (one.pairs[0].test.name, one.pairs[0].result.name) == ("a", "b")
	assert one.test is None and one.fallback is None

	with_fallback = _only_form("(cond a b c)")
	assert len(with_fallback.pairs) == 1
	assert with_fallback.fallback.name == "c"

	two = _only_form("(cond a b c d)")
	assert [p.result.name for p in two.pairs] == ["b", "d"]
	assert two.fallback is None


def test_let_and_loop() -> None:
	let = _only_form("(let [a 1, b (inc a)] a b)")
	assert isinstance(let, ast.Let)
	assert [b.name.name for b in let.bindings.items] == ["a", "b"]
	assert isinstance(let.bindings.items[1].expr, ast.ListForm)
	assert len(let.body) == 2

	empty = _only_form("(let [] 1)")
	assert empty.bindings.items == ()

	loop = _only_form("(loop [i 0] (recur (inc i)))")
	assert isinstance(loop, ast.Loop)
	assert loop.bindings.items[0].name.name == "i"


def test_if_let() -> None:
	form = _only_form("(if-let [x (f)] x :none)")
	assert isinstance(form, ast.IfLet)
	assert form.binding.name.name == "x"
	assert isinstance(form.if_true, ast.Symbol)
	assert form.if_false.name == "none"

	no_else = _only_form("(if-let [x 1] x)")
	assert no_else.if_false is None


def test_when_let_and_dotimes() -> None:
	when = _only_form("(when-let [x (f)] (g x) (h x))")
	assert isinstance(when, ast.WhenLet)
	assert when.binding.name.name == "x"
	assert len(when.body) == 2

	times = _only_form("(dotimes [i 10] (f i))")
	assert isinstance(times, ast.Dotimes)
	assert times.binding.expr.value == 10


def test_single_binding_forms_reject_other_counts() -> None:
	for src in ("(if-let [x 1 y 2] x)", "(when-let [] x)", "(dotimes [i 1 j 2] i)"):
		result = parse(src)
		assert len(result.diagnostics) == 1, src
		assert "exactly one binding" in result.diagnostics[0].message
		(form,) = result.tree.forms
		assert isinstance(form, ast.ErrorNode)


def test_binding_errors() -> None:
	cases = {
		"(let [a] a)": "has no value",
		"(let a 1)": "binding vector",
		"(let [1 2] 3)": "binding name",
		"(if-let [x 1] x y z)": "to close if-let",
	}
	for src, fragment in cases.items():
		result = parse(src)
		assert len(result.diagnostics) == 1, src
		assert fragment in result.diagnostics[0].message, src
