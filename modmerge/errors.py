# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from modmerge.core.span import Span


INVALID_MODULE_KIND = "invalid-module-kind"
DUPLICATE_APPLICATION_MODULE = "duplicate-application-module"
LATE_LIBRARY_MODULE = "late-library-module"
ARTIFACT_WRITE_FAILED = "artifact-write-failed"
AGGREGATOR_ALREADY_EMITTED = "aggregator-already-emitted"
INDEX_ARTIFACT_MISSING = "index-artifact-missing"
ROUND_LIMIT_EXCEEDED = "round-limit-exceeded"
INVALID_CONFIG = "invalid-config"


@dataclass(eq=False)
class ModuleMergeError(Exception):
	"""
	A structured, serializable fatal error raised by the merge engine.

	Every condition is fatal for the session: there is no retry model, so the
	error carries enough context (offending declaration, all application
	candidates, artifact location) to fix the build without re-running it.
	"""

	reason_code: str
	message: str
	declaration: str | None = None
	candidates: list[str] | None = None
	artifact_path: str | None = None
	round: int | None = None
	span: Span | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"declaration": self.declaration,
			"candidates": list(self.candidates) if self.candidates is not None else None,
			"artifact_path": self.artifact_path,
			"round": self.round,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.round is not None:
			parts.append(f"round={self.round}")
		if self.declaration:
			parts.append(f"declaration={self.declaration}")
		if self.candidates:
			parts.append(f"candidates=[{', '.join(self.candidates)}]")
		if self.artifact_path:
			parts.append(f"artifact_path={self.artifact_path}")
		return " ".join(parts)


__all__ = [
	"AGGREGATOR_ALREADY_EMITTED",
	"ARTIFACT_WRITE_FAILED",
	"DUPLICATE_APPLICATION_MODULE",
	"INDEX_ARTIFACT_MISSING",
	"INVALID_CONFIG",
	"INVALID_MODULE_KIND",
	"LATE_LIBRARY_MODULE",
	"ModuleMergeError",
	"ROUND_LIMIT_EXCEEDED",
]
