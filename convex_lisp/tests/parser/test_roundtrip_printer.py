# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lossless printing and the tree outline.
"""

import pytest

from convex_lisp.core.builtins import load_default_registry
from convex_lisp.parser import ast, format_tree, parse, to_source

PROGRAM = """\
;; fungible token sketch
(import convex.fungible :as fun)

(def supply ^{:doc "initial supply"} 1000000)

(defn transfer
  ([to amount] (transfer *caller* to amount))
  ([from to amount]
    (let [bal (fun/balance #9 from),
          ok? (>= bal amount)]
      (cond
        ok? (do (assoc {:from from} :to to) 'done)
        :else (fail :FUNDS "insufficient")))))

(defmacro unless [test body] `(if ~test nil ~body))
(when-let [x (lookup #8 thing)] x)
#{1 2 ##NaN 0xbeef \\space}  ; trailing
"""

BROKEN = [
	"",
	"   \n, ; only trivia\n",
	"(a b",
	"a ) ] }",
	"(fn [x & ] x)",
	"(def x [1 ) 2)",
	"(defn f ([x] x) ([y] y z))",
	'(str "unterminated\n next line',
	"{:a 1 :b} #zz 0x1 ^oops ^{:m 1}",
	"(let [a] a) (if-let [x 1 y 2] x) : a/ b",
	"'" + "s" * 80 + " (quote)",
]


@pytest.mark.parametrize("src", [PROGRAM, *BROKEN])
def test_printing_reproduces_source(src: str) -> None:
	result = parse(src, load_default_registry())
	assert to_source(result.tree) == src


def test_program_parses_cleanly() -> None:
	result = parse(PROGRAM, load_default_registry())
	assert result.ok, [str(d) for d in result.diagnostics]
	kinds = [type(f) for f in result.tree.forms]
	assert kinds == [ast.Import, ast.Def, ast.Defn, ast.DefMacro, ast.WhenLet, ast.SetForm]
	assert result.tree.eof.leading[-1].text == "\n"


def test_every_token_appears_once() -> None:
	result = parse(PROGRAM)
	texts = [t.full_text for t in result.tree.tokens()]
	assert "".join(texts) == PROGRAM
	assert texts[-1].endswith("\n")


def test_format_tree_outline() -> None:
	result = parse("(def x 1)")
	assert format_tree(result.tree).splitlines() == [
		"Source [0..9]",
		"  forms: Def [0..9]",
		"    name: Symbol [5..6] x",
		"    body: Long [7..8] 1",
	]


def test_format_tree_shows_builtins_and_flags() -> None:
	result = parse("(defn f [x] (count x))", load_default_registry())
	text = format_tree(result.tree, spans=False)
	assert "Defn multi=False" in text
	assert "Symbol count (function)" in text
	assert "[" not in text


def test_walk_visits_nested_nodes() -> None:
	result = parse("(let [a 'b] a)")
	names = [type(n).__name__ for n in ast.walk(result.tree)]
	assert names[:3] == ["Source", "Let", "Bindings"]
	assert "Quote" in names
