# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixpoint driver for module discovery.

The host calls `ModuleProcessor.process_round` once per pass with the
declarations that became visible in that pass. Each round we:

1. classify every module-tagged declaration and accumulate application
   modules (more than one over the whole session is fatal),
2. if any new library modules were found, write one index artifact for them
   and ask for another round; the aggregator is never written in the same
   round, since the fresh index is not visible to the symbol table yet,
3. otherwise, if an application module is known and the aggregator has not
   been written, read every index artifact back from the store and write the
   aggregator. After that the processor expects to be done: any further
   library module is an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from modmerge.artifacts.aggregator_generator import generate_aggregator
from modmerge.artifacts.index_generator import generate_index
from modmerge.artifacts.markers import index_modules, index_sequence
from modmerge.artifacts.store import ArtifactExistsError, ArtifactStore, GeneratedArtifact
from modmerge.config import MergeOptions
from modmerge.core.diagnostics import DiagnosticSink
from modmerge.errors import (
	AGGREGATOR_ALREADY_EMITTED,
	ARTIFACT_WRITE_FAILED,
	DUPLICATE_APPLICATION_MODULE,
	INDEX_ARTIFACT_MISSING,
	LATE_LIBRARY_MODULE,
	ModuleMergeError,
)
from modmerge.processor.classifier import partition_declarations
from modmerge.processor.declarations import Declaration, SubtypeQuery
from modmerge.processor.round_state import RoundState


class RoundPhase(Enum):
	EMITTING_INDEX = "emitting-index"
	IDLE = "idle"
	FINISHED = "finished"


@dataclass
class RoundResult:
	"""Outcome of one round, returned to the host."""

	round: int
	phase: RoundPhase
	needs_more_rounds: bool
	artifacts: list[GeneratedArtifact] = field(default_factory=list)


class ModuleProcessor:
	def __init__(
		self,
		store: ArtifactStore,
		is_subtype: SubtypeQuery,
		*,
		options: MergeOptions | None = None,
		sink: DiagnosticSink | None = None,
	) -> None:
		self.store = store
		self.is_subtype = is_subtype
		self.options = options or MergeOptions()
		self.sink = sink or DiagnosticSink(debug=self.options.debug)
		self.state = RoundState()

	def process_round(self, declarations: Iterable[Declaration]) -> RoundResult:
		state = self.state
		round_no = state.next_round()
		tagged = [d for d in declarations if d.is_tagged(self.options.module_tag)]

		# Applications must be accumulated before we can return early below,
		# otherwise a round that also writes an index would lose them.
		libraries, applications = partition_declarations(
			tagged,
			self.is_subtype,
			library_contract=self.options.library_contract,
			application_contract=self.options.application_contract,
			round_no=round_no,
		)
		self.sink.debug(round_no, f"got library modules: {[d.fqn for d in libraries]}")
		self.sink.debug(round_no, f"got application modules: {[d.fqn for d in applications]}")

		state.application_modules.extend(applications)
		if len(state.application_modules) > 1:
			names = state.application_names()
			raise ModuleMergeError(
				reason_code=DUPLICATE_APPLICATION_MODULE,
				message=f"more than one application module found: {names}",
				candidates=names,
				round=round_no,
				span=applications[-1].span if applications else None,
			)

		# Every library seen after the aggregator is fatal, even one that was
		# already indexed: the aggregator's invocation list is final.
		if libraries and state.aggregator_emitted:
			late = [d.fqn for d in libraries]
			raise ModuleMergeError(
				reason_code=LATE_LIBRARY_MODULE,
				message=f"cannot process library modules after writing the aggregator: {late}",
				candidates=late,
				round=round_no,
			)

		new_names = self._new_library_names(libraries, round_no)
		if new_names:
			sequence = self._next_index_sequence()
			artifact = generate_index(new_names, namespace=self.options.index_namespace, round_no=round_no, sequence=sequence)
			self._write(artifact, round_no)
			state.record_index(artifact.name, new_names, sequence)
			self.sink.info(round_no, f"wrote {artifact.name} with: {new_names}")
			self.sink.debug(round_no, "wrote an index this round, deferring the aggregator until it is visible")
			return RoundResult(round=round_no, phase=RoundPhase.EMITTING_INDEX, needs_more_rounds=True, artifacts=[artifact])

		# application_modules only grows, so aggregator_emitted is what keeps
		# the aggregator from being written more than once.
		if state.aggregator_emitted:
			return RoundResult(round=round_no, phase=RoundPhase.FINISHED, needs_more_rounds=False)
		if not state.application_modules:
			return RoundResult(round=round_no, phase=RoundPhase.IDLE, needs_more_rounds=False)

		application = state.application_modules[0]
		self.sink.debug(round_no, f"processing application module: {application.fqn}")
		libraries_in_order = self.reconcile_library_names()
		artifact = self.emit_aggregator(application.fqn, libraries_in_order, round_no)
		self.sink.info(round_no, f"wrote {artifact.name} with: {libraries_in_order}")
		return RoundResult(round=round_no, phase=RoundPhase.FINISHED, needs_more_rounds=False, artifacts=[artifact])

	def _new_library_names(self, libraries: list[Declaration], round_no: int) -> list[str]:
		out: list[str] = []
		for decl in libraries:
			if decl.fqn in self.state.merged_library_names or decl.fqn in out:
				self.sink.debug(round_no, f"library module already indexed, skipping: {decl.fqn}")
				continue
			out.append(decl.fqn)
		return out

	def _persisted_indexes(self) -> list[tuple[int, str, list[str]]]:
		"""Visible index artifacts as (sequence, name, modules), in emission order."""
		persisted: list[tuple[int, str, list[str]]] = []
		for stored in self.store.list_namespace(self.options.index_namespace):
			# Other modules may share the namespace; only indexes carry a marker.
			if stored.index_marker is None:
				continue
			try:
				modules = index_modules(stored.index_marker)
				sequence = index_sequence(stored.index_marker)
			except ValueError as err:
				raise ModuleMergeError(
					reason_code=INDEX_ARTIFACT_MISSING,
					message=f"malformed index artifact: {err}",
					artifact_path=stored.location,
					round=self.state.round,
				) from err
			persisted.append((sequence, stored.name, modules))
		persisted.sort(key=lambda item: (item[0], item[1]))
		return persisted

	def _next_index_sequence(self) -> int:
		"""One past the highest sequence in the store or written by this session."""
		highest = self.state.last_index_sequence
		for sequence, _, _ in self._persisted_indexes():
			highest = max(highest, sequence)
		return highest + 1

	def reconcile_library_names(self) -> list[str]:
		"""
		Ordered library list for the aggregator, read from persisted indexes.

		Index markers are concatenated in emission order (their store-wide
		sequence), so indexes written by earlier runs come before this
		session's; the first occurrence of a name wins. Every name this
		session indexed must be visible in the store.
		"""
		ordered: dict[str, None] = {}
		for _, _, modules in self._persisted_indexes():
			for name in modules:
				ordered.setdefault(name, None)

		missing = [n for n in self.state.merged_library_names if n not in ordered]
		if missing:
			raise ModuleMergeError(
				reason_code=INDEX_ARTIFACT_MISSING,
				message=f"indexed library modules are not visible in {self.options.index_namespace}: {missing}",
				candidates=missing,
				round=self.state.round,
			)
		self.sink.debug(self.state.round, f"found library modules: {list(ordered)}")
		return list(ordered)

	def emit_aggregator(self, application: str, libraries: list[str], round_no: int) -> GeneratedArtifact:
		if self.state.aggregator_emitted:
			raise ModuleMergeError(
				reason_code=AGGREGATOR_ALREADY_EMITTED,
				message="the aggregator can only be written once per session",
				declaration=application,
				round=round_no,
			)
		artifact = generate_aggregator(
			application,
			libraries,
			namespace=self.options.aggregator_namespace,
			name=self.options.aggregator_name,
		)
		self._write(artifact, round_no)
		self.state.aggregator_emitted = True
		return artifact

	def _write(self, artifact: GeneratedArtifact, round_no: int) -> str:
		self.sink.debug(round_no, f"writing {artifact.kind} artifact {artifact.qualified_name}")
		try:
			return self.store.write(artifact)
		except (ArtifactExistsError, OSError) as err:
			location = err.location if isinstance(err, ArtifactExistsError) else self.store.location_of(artifact.namespace, artifact.name)
			raise ModuleMergeError(
				reason_code=ARTIFACT_WRITE_FAILED,
				message=f"failed to write {artifact.kind} artifact {artifact.qualified_name}: {err}",
				artifact_path=location,
				round=round_no,
			) from err


__all__ = ["ModuleProcessor", "RoundPhase", "RoundResult"]
