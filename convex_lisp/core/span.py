# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation shared by tokens, nodes and diagnostics.

Offsets are character offsets into the source text (end exclusive). Line and
column are 1-based, matching what lark reports for its tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a contiguous source range."""

	start: int = 0
	end: int = 0
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	file: Optional[str] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lexer token or another location object.

		Spans are returned unchanged. Lark tokens expose `start_pos`/`end_pos`;
		anything else is read best-effort through `start`/`end`.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		start = getattr(loc, "start_pos", None)
		if start is None:
			start = getattr(loc, "start", 0) or 0
		end = getattr(loc, "end_pos", None)
		if end is None:
			end = getattr(loc, "end", start) or start
		return cls(
			start=start,
			end=end,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			file=file or getattr(loc, "file", None),
		)

	def cover(self, other: "Span") -> "Span":
		"""Smallest span containing both `self` and `other`."""
		first, last = (self, other) if self.start <= other.start else (other, self)
		tail = last if last.end >= first.end else first
		return Span(
			start=first.start,
			end=tail.end,
			line=first.line,
			column=first.column,
			end_line=tail.end_line,
			end_column=tail.end_column,
			file=self.file or other.file,
		)

	def __len__(self) -> int:
		return self.end - self.start


__all__ = ["Span"]
