# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Literal value decoding for Convex Lisp tokens.

The lexer has already decided the token shape; these helpers only turn the
raw text into a Python value. String decoding also reports malformed escapes
so the lexer can turn them into diagnostics.
"""

from __future__ import annotations

import math
from typing import List, Tuple

# Named character literals (`\newline` and friends).
CHARACTER_NAMES = {
	"backspace": "\b",
	"formfeed": "\f",
	"newline": "\n",
	"return": "\r",
	"space": " ",
	"tab": "\t",
}

_STRING_ESCAPES = {
	"n": "\n",
	"t": "\t",
	"r": "\r",
	"b": "\b",
	"f": "\f",
	'"': '"',
	"'": "'",
	"\\": "\\",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def decode_string(raw: str) -> Tuple[str, List[Tuple[int, str]]]:
	"""
	Decode a complete STRING token (quotes included).

	Returns the decoded value and a list of `(offset, message)` problems, where
	offset is relative to the start of `raw`. Unknown escapes stand for the
	escaped character itself; `\\u` must be followed by four hex digits.
	"""
	body = raw[1:-1]
	out: list[str] = []
	problems: list[tuple[int, str]] = []
	i = 0
	n = len(body)
	while i < n:
		ch = body[i]
		if ch != "\\":
			out.append(ch)
			i += 1
			continue
		# The lexer guarantees a character follows every backslash.
		esc = body[i + 1]
		if esc == "u":
			digits = body[i + 2 : i + 6]
			if len(digits) == 4 and all(d in _HEX_DIGITS for d in digits):
				out.append(chr(int(digits, 16)))
				i += 6
				continue
			problems.append((i + 1, "malformed unicode escape; expected \\u followed by four hex digits"))
			out.append("u")
			i += 2
			continue
		out.append(_STRING_ESCAPES.get(esc, esc))
		i += 2
	return "".join(out), problems


def decode_character(raw: str) -> str:
	"""Decode a CHARACTER token such as `\\a`, `\\space` or `\\u00e9`."""
	body = raw[1:]
	named = CHARACTER_NAMES.get(body)
	if named is not None:
		return named
	if len(body) == 5 and body[0] == "u":
		return chr(int(body[1:], 16))
	return body


def decode_long(raw: str) -> int:
	"""Decode a LONG token; a trailing dot (`1.`) is allowed and ignored."""
	return int(raw[:-1] if raw.endswith(".") else raw)


def decode_float(raw: str) -> float:
	if raw == "##NaN":
		return math.nan
	if raw == "##Inf":
		return math.inf
	if raw == "##-Inf":
		return -math.inf
	return float(raw)


def decode_address(raw: str) -> int:
	return int(raw[1:])


def decode_bytes(raw: str) -> bytes:
	return bytes.fromhex(raw[2:])


__all__ = [
	"CHARACTER_NAMES",
	"decode_address",
	"decode_bytes",
	"decode_character",
	"decode_float",
	"decode_long",
	"decode_string",
]
