# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module discovery/merge engine.

- `declarations`: declaration records and the reference subtype query,
- `classifier`: library/application/invalid classification,
- `round_state`: per-session accumulated state,
- `processor`: the per-pass fixpoint driver.
"""

from __future__ import annotations

__all__ = [
	"classifier",
	"declarations",
	"processor",
	"round_state",
]
