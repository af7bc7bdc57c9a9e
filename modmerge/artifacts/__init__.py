# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generated artifacts.

Both artifact kinds are rendered as Python modules whose module-level marker
literal (`MODULE_INDEX` / `MODULE_AGGREGATOR`) is the machine-readable part.
Markers are always read back from the persisted source, never from memory,
so an artifact written by an earlier process is indistinguishable from one
written in this session.
"""

from __future__ import annotations

__all__ = [
	"aggregator_generator",
	"index_generator",
	"markers",
	"store",
]
