# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Marker literals embedded in generated sources.

Markers only contain strings, ints and lists/dicts of those, so their JSON
rendering is also a valid Python literal. Reading uses `ast.literal_eval`;
generated code is never imported or executed to recover a marker.
"""

from __future__ import annotations

import ast
import json
from typing import Any, Mapping

INDEX_MARKER = "MODULE_INDEX"
AGGREGATOR_MARKER = "MODULE_AGGREGATOR"


def render_marker(variable: str, marker: Mapping[str, Any]) -> str:
	"""Render `variable = {...}` deterministically (sorted keys, tab indent)."""
	body = json.dumps(dict(marker), sort_keys=True, ensure_ascii=False, indent="\t")
	return f"{variable} = {body}\n"


def read_marker(source: str, variable: str) -> dict[str, Any] | None:
	"""
	Return the literal assigned to top-level `variable` in `source`.

	Returns None when the module has no such assignment (e.g. a hand-written
	file that happens to live in a generated namespace).
	"""
	try:
		tree = ast.parse(source)
	except SyntaxError as err:
		raise ValueError(f"generated source is not valid Python: {err}") from err
	for node in tree.body:
		if not isinstance(node, ast.Assign) or len(node.targets) != 1:
			continue
		target = node.targets[0]
		if isinstance(target, ast.Name) and target.id == variable:
			value = ast.literal_eval(node.value)
			if not isinstance(value, dict):
				raise ValueError(f"marker '{variable}' must be a dict literal")
			return value
	return None


def index_sequence(marker: Mapping[str, Any]) -> int:
	"""Validated store-wide emission `sequence` of an index marker."""
	sequence = marker.get("sequence")
	if not isinstance(sequence, int) or isinstance(sequence, bool) or sequence < 1:
		raise ValueError("index marker 'sequence' must be a positive integer")
	return sequence


def index_modules(marker: Mapping[str, Any]) -> list[str]:
	"""Validated `modules` list of an index marker."""
	modules = marker.get("modules")
	if not isinstance(modules, list) or not all(isinstance(m, str) and m for m in modules):
		raise ValueError("index marker 'modules' must be a list of non-empty strings")
	return list(modules)


__all__ = ["AGGREGATOR_MARKER", "INDEX_MARKER", "index_modules", "index_sequence", "read_marker", "render_marker"]
