# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Index artifact generation.

One index module is written per round that discovered new library modules.
It contains nothing but the `MODULE_INDEX` marker; its only purpose is to be
found through the symbol table in a later round (or a later process).
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from modmerge.artifacts.markers import INDEX_MARKER, render_marker
from modmerge.artifacts.store import GeneratedArtifact

INDEXER_NAME_PREFIX = "ModuleIndexer_"
MAX_INDEXER_NAME_LEN = 120


def indexer_name(names: Sequence[str]) -> str:
	"""
	Deterministic artifact name for an index over `names`.

	Readable (`ModuleIndexer_a_b_Foo_a_b_Bar`) when short enough, otherwise
	the prefix plus 16 hex digits of the sha256 of the joined names.
	"""
	readable = INDEXER_NAME_PREFIX + "_".join(n.replace(".", "_") for n in names)
	if len(readable) <= MAX_INDEXER_NAME_LEN:
		return readable
	digest = hashlib.sha256("\n".join(names).encode("utf-8")).hexdigest()
	return INDEXER_NAME_PREFIX + digest[:16]


def generate_index(names: Sequence[str], *, namespace: str, round_no: int, sequence: int) -> GeneratedArtifact:
	"""
	`sequence` is the store-wide emission position of this index; it orders
	indexes written by different processes into the same store.
	"""
	if not names:
		raise ValueError("an index artifact needs at least one library module")
	marker = {"modules": list(names), "round": round_no, "sequence": sequence}
	lines = [
		"# Generated by modmerge. Do not edit.",
		f'"""Library modules discovered in round {round_no}."""',
		"",
		render_marker(INDEX_MARKER, marker),
	]
	return GeneratedArtifact(
		namespace=namespace,
		name=indexer_name(names),
		kind="index",
		marker=marker,
		source="\n".join(lines),
	)


__all__ = ["INDEXER_NAME_PREFIX", "generate_index", "indexer_name"]
