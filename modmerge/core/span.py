# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to declarations and diagnostics.

Front ends fill in file/line/column when they know them; synthetic
declarations built in tests simply use `Span()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort file/line/column location."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_meta(cls, meta: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Build a Span from a lark `Meta` (or any object with the same fields).

		Lark leaves `meta.empty` set for rules that matched nothing; those map
		to a file-only span.
		"""
		if meta is None or getattr(meta, "empty", False):
			return cls(file=file)
		return cls(
			file=file,
			line=getattr(meta, "line", None),
			column=getattr(meta, "column", None),
			end_line=getattr(meta, "end_line", None),
			end_column=getattr(meta, "end_column", None),
		)

	def format_location(self) -> str:
		"""Render `file:line:col`, using `?` for unknown parts."""
		file = self.file or "<unknown>"
		line = str(self.line) if self.line is not None else "?"
		col = str(self.column) if self.column is not None else "?"
		return f"{file}:{line}:{col}"


__all__ = ["Span"]
