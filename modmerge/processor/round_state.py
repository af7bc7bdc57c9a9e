# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field

from modmerge.processor.declarations import Declaration


@dataclass
class RoundState:
	"""
	Accumulated discovery state for one multi-pass session.

	`merged_library_names` maps each indexed library fqn to the round that
	indexed it; its insertion order is the emission order. `last_index_sequence`
	is the store-wide sequence of the newest index this session wrote (0 before
	the first). Nothing here is ever removed: application candidates accumulate
	so duplicates are caught across rounds, and `aggregator_emitted` only flips
	once.
	"""

	application_modules: list[Declaration] = field(default_factory=list)
	merged_library_names: dict[str, int] = field(default_factory=dict)
	index_artifacts: list[str] = field(default_factory=list)
	last_index_sequence: int = 0
	aggregator_emitted: bool = False
	round: int = 0

	def next_round(self) -> int:
		self.round += 1
		return self.round

	def record_index(self, artifact_name: str, names: list[str], sequence: int) -> None:
		for name in names:
			self.merged_library_names.setdefault(name, self.round)
		self.index_artifacts.append(artifact_name)
		self.last_index_sequence = sequence

	def library_names(self) -> list[str]:
		return list(self.merged_library_names)

	def application_names(self) -> list[str]:
		return [d.fqn for d in self.application_modules]


__all__ = ["RoundState"]
