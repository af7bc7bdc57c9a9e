# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference host: drives the processor over caller-supplied declaration batches.

Pass i receives batch i (and an empty batch once the batches run out). The
loop keeps going while batches remain or the last round asked for more
rounds; artifacts written in a round are published to the store only after
the round returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from modmerge.artifacts.store import ArtifactStore, GeneratedArtifact
from modmerge.config import MergeOptions
from modmerge.core.diagnostics import DiagnosticSink
from modmerge.errors import ROUND_LIMIT_EXCEEDED, ModuleMergeError
from modmerge.frontend.parser import parse_file
from modmerge.processor.declarations import Declaration, TypeHierarchy
from modmerge.processor.processor import ModuleProcessor, RoundResult


@dataclass
class BuildReport:
	rounds: list[RoundResult] = field(default_factory=list)
	aggregator: GeneratedArtifact | None = None
	index_artifacts: list[GeneratedArtifact] = field(default_factory=list)


class BuildSession:
	def __init__(self, store: ArtifactStore, options: MergeOptions | None = None) -> None:
		self.store = store
		self.options = options or MergeOptions()
		self.sink = DiagnosticSink(debug=self.options.debug)
		self.hierarchy = TypeHierarchy()
		self.processor = ModuleProcessor(store, self.hierarchy.is_subtype, options=self.options, sink=self.sink)

	def run(self, batches: Sequence[Iterable[Declaration]], *, classpath: Iterable[Declaration] = ()) -> BuildReport:
		"""
		Run passes until the processor reaches a fixpoint.

		`classpath` declarations are known to the type hierarchy from the
		start but are never handed to the processor as newly visible.
		"""
		self.hierarchy.add_all(classpath)
		report = BuildReport()
		pending = [list(b) for b in batches]
		while True:
			if len(report.rounds) >= self.options.max_rounds:
				raise ModuleMergeError(
					reason_code=ROUND_LIMIT_EXCEEDED,
					message=f"processing did not reach a fixpoint within {self.options.max_rounds} rounds",
					round=len(report.rounds),
				)
			batch = pending.pop(0) if pending else []
			# Every declaration must be known to the hierarchy before any of
			# them is classified, since supertypes may come later in the batch.
			self.hierarchy.add_all(batch)
			result = self.processor.process_round(batch)
			self.store.end_round()
			report.rounds.append(result)
			for artifact in result.artifacts:
				if artifact.kind == "aggregator":
					report.aggregator = artifact
				else:
					report.index_artifacts.append(artifact)
			if not pending and not result.needs_more_rounds:
				return report

	def run_files(self, passes: Sequence[Sequence[Path]], *, classpath: Sequence[Path] = ()) -> BuildReport:
		"""Parse each group of files into one batch and run them."""
		known: list[Declaration] = []
		for path in classpath:
			known.extend(parse_file(path).declarations)
		batches: list[list[Declaration]] = []
		for files in passes:
			batch: list[Declaration] = []
			for path in files:
				batch.extend(parse_file(path).declarations)
			batches.append(batch)
		return self.run(batches, classpath=known)


__all__ = ["BuildReport", "BuildSession"]
