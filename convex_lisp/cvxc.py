# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line front-end for the Convex Lisp parser.

Parses one or more source files and reports lexical and syntax diagnostics.
Nothing is evaluated; this is a checker and inspection tool.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from convex_lisp.core.builtins import BuiltinRegistry, load_default_registry
from convex_lisp.core.diagnostics import Diagnostic
from convex_lisp.parser import format_tree, parse, to_source

STDIN_NAME = "-"


def _diag_to_json(diag: Diagnostic, source: str) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	span = diag.span
	return {
		"kind": diag.kind.value,
		"message": diag.message,
		"severity": diag.severity,
		"file": span.file or source,
		"line": span.line,
		"column": span.column,
		"start": span.start,
		"end": span.end,
		"expected": diag.expected,
		"form": diag.form,
		"notes": list(diag.notes),
	}


def _format_diag(diag: Diagnostic, source: str) -> str:
	span = diag.span
	line = span.line if span.line is not None else "?"
	column = span.column if span.column is not None else "?"
	return f"{span.file or source}:{line}:{column}: {diag.severity}: {diag.kind.value}: {diag.message}"


def _read_source(name: str) -> str:
	if name == STDIN_NAME:
		return sys.stdin.read()
	return Path(name).read_text(encoding="utf-8")


def _load_registry(args: argparse.Namespace) -> BuiltinRegistry:
	if args.no_builtins:
		return BuiltinRegistry.empty()
	if args.builtins is not None:
		return BuiltinRegistry.from_json(args.builtins)
	return load_default_registry()


def main(argv: Optional[List[str]] = None) -> int:
	"""
	Parse the given files and report diagnostics.

	Exit codes: 0 when every file parsed cleanly, 1 when any diagnostic was
	produced or a round-trip check failed, 2 when input could not be read or
	the builtin list is invalid.

	With --json, prints one payload (`exit_code`, `files`) to stdout; otherwise
	diagnostics go to stderr as `file:line:col: severity: kind: message`.
	"""
	parser = argparse.ArgumentParser(prog="cvxc", description="Convex Lisp syntax checker")
	parser.add_argument("sources", nargs="+", help="Source file(s) to parse; '-' reads stdin")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (kind/message/severity/file/line/column/offsets)",
	)
	parser.add_argument("--tree", action="store_true", help="Print the syntax tree outline of each file")
	parser.add_argument(
		"--check-roundtrip",
		action="store_true",
		help="Verify that printing the tree reproduces the input exactly",
	)
	parser.add_argument("--builtins", type=Path, help="Builtin list JSON ({\"symbols\": [...], \"functions\": [...]})")
	parser.add_argument("--no-builtins", action="store_true", help="Do not classify any symbol as builtin")
	args = parser.parse_args(argv)

	try:
		registry = _load_registry(args)
	except (OSError, ValueError) as err:
		# json.JSONDecodeError is a ValueError.
		print(f"cvxc: cannot load builtins: {err}", file=sys.stderr)
		return 2

	exit_code = 0
	reports: list[dict] = []
	for name in args.sources:
		try:
			text = _read_source(name)
		except (OSError, UnicodeDecodeError) as err:
			print(f"cvxc: cannot read {name}: {err}", file=sys.stderr)
			return 2
		label = "<stdin>" if name == STDIN_NAME else name
		result = parse(text, registry, file=label)
		roundtrip_ok = None
		if args.check_roundtrip:
			roundtrip_ok = to_source(result.tree) == text
		if not result.ok or roundtrip_ok is False:
			exit_code = 1

		if args.json:
			report = {
				"file": label,
				"ok": result.ok,
				"diagnostics": [_diag_to_json(d, label) for d in result.diagnostics],
			}
			if roundtrip_ok is not None:
				report["roundtrip"] = roundtrip_ok
			if args.tree:
				report["tree"] = format_tree(result.tree)
			reports.append(report)
			continue

		for d in result.diagnostics:
			print(_format_diag(d, label), file=sys.stderr)
		if roundtrip_ok is False:
			print(f"{label}: error: printed tree does not reproduce the source text", file=sys.stderr)
		if args.tree:
			print(format_tree(result.tree))

	if args.json:
		print(json.dumps({"exit_code": exit_code, "files": reports}))
	return exit_code


__all__ = ["main"]
