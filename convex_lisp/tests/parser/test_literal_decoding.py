# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import math

from convex_lisp.parser import literals


def test_decode_string_escapes() -> None:
	value, problems = literals.decode_string(r'"tab\there é \q \\"')
	assert value == "tab\there é q \\"
	assert problems == []


def test_decode_string_reports_bad_unicode_escape() -> None:
	value, problems = literals.decode_string(r'"x\uZZZZ"')
	assert value == "xuZZZZ"
	assert len(problems) == 1
	offset, message = problems[0]
	assert offset == 2
	assert "four hex digits" in message


def test_decode_numbers() -> None:
	assert literals.decode_long("1.") == 1
	assert literals.decode_long("-12") == -12
	assert literals.decode_float("1e2") == 100.0
	assert math.isnan(literals.decode_float("##NaN"))
	assert literals.decode_float("##-Inf") == -math.inf


def test_decode_character_and_blobs() -> None:
	assert literals.decode_character(r"\tab") == "\t"
	assert literals.decode_character(r"\u0041") == "A"
	assert literals.decode_character(r"\u") == "u"
	assert literals.decode_address("#0") == 0
	assert literals.decode_bytes("0xDEADbeef") == b"\xde\xad\xbe\xef"
