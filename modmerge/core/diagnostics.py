# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records and the per-session sink the processor writes notes to.

The processor never prints. It records `note` diagnostics prefixed with the
round number; the CLI decides how to render them (stderr text or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .span import Span


@dataclass
class Diagnostic:
	"""A processor diagnostic (note/warning/error)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


class DiagnosticSink:
	"""
	Collects diagnostics for one session.

	`debug()` notes are dropped unless the sink was created with `debug=True`;
	`info()` notes are always kept.
	"""

	def __init__(self, *, debug: bool = False) -> None:
		self.debug_enabled = debug
		self.diagnostics: list[Diagnostic] = []

	def info(self, round_no: int, message: str, *, phase: str = "round") -> None:
		self.diagnostics.append(Diagnostic(message=f"[{round_no}] {message}", phase=phase, severity="note"))

	def debug(self, round_no: int, message: str, *, phase: str = "round") -> None:
		if self.debug_enabled:
			self.info(round_no, message, phase=phase)

	def error(self, message: str, *, code: str | None = None, phase: str | None = None, span: Span | None = None, notes: list[str] | None = None) -> None:
		self.diagnostics.append(
			Diagnostic(message=message, code=code, phase=phase, severity="error", span=span or Span(), notes=list(notes or []))
		)

	def notes(self) -> list[str]:
		return [d.message for d in self.diagnostics if d.severity == "note"]

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.diagnostics)


def diagnostic_to_json(diag: Diagnostic) -> dict[str, Any]:
	"""Render a diagnostic for `--json` output."""
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


__all__ = ["Diagnostic", "DiagnosticSink", "diagnostic_to_json"]
