# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Span arithmetic and diagnostic rendering.
"""

from convex_lisp.core.diagnostics import ConvexParseError, Diagnostic, ErrorKind
from convex_lisp.core.span import Span


def test_span_cover_spans_both_ranges() -> None:
	a = Span(start=0, end=3, line=1, column=1, end_line=1, end_column=4)
	b = Span(start=5, end=8, line=1, column=6, end_line=1, end_column=9, file="x.cvx")
	for covered in (a.cover(b), b.cover(a)):
		assert (covered.start, covered.end) == (0, 8)
		assert (covered.line, covered.column) == (1, 1)
		assert (covered.end_line, covered.end_column) == (1, 9)
		assert covered.file == "x.cvx"
	assert len(a.cover(b)) == 8


def test_span_from_loc_reads_lexer_positions() -> None:
	class Loc:
		start_pos = 4
		end_pos = 7
		line = 2
		column = 3
		end_line = 2
		end_column = 6

	span = Span.from_loc(Loc(), file="a.cvx")
	assert (span.start, span.end, span.line, span.column) == (4, 7, 2, 3)
	assert span.file == "a.cvx"
	assert Span.from_loc(span) is span
	assert Span.from_loc(None) == Span()


def test_diagnostic_str_includes_location_and_kind() -> None:
	d = Diagnostic(message="boom", kind=ErrorKind.SYNTAX, span=Span(start=0, end=1, line=2, column=3))
	assert str(d) == "2:3: SyntaxError: boom"
	assert d.severity == "error"
	unknown = Diagnostic(message="bad", kind=ErrorKind.LEXICAL)
	assert str(unknown) == "?:?: LexicalError: bad"


def test_parse_error_summarizes_diagnostics() -> None:
	diags = [
		Diagnostic(message="first", kind=ErrorKind.LEXICAL, span=Span(line=1, column=1)),
		Diagnostic(message="second", kind=ErrorKind.SYNTAX, span=Span(line=1, column=5)),
	]
	err = ConvexParseError(diags)
	assert isinstance(err, ValueError)
	assert str(err) == "1:1: LexicalError: first (and 1 more)"
	assert err.diagnostics == diags
