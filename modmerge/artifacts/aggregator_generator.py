# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Aggregator artifact generation.

The aggregator is a Python module defining one class (default name
`GeneratedApplicationModule`). Constructing it imports and instantiates every
module class; `apply(context, registry)` then calls each library module in
list order and the application module last. The ordered list is also kept in
the `MODULE_AGGREGATOR` marker so tooling can read it without importing.
"""

from __future__ import annotations

from typing import Sequence

from modmerge.artifacts.markers import AGGREGATOR_MARKER, render_marker
from modmerge.artifacts.store import GeneratedArtifact


def _module_attr(index: int) -> str:
	return f"_library_{index}"


def generate_aggregator(application: str, libraries: Sequence[str], *, namespace: str, name: str) -> GeneratedArtifact:
	"""Render the aggregator. An empty `libraries` list is valid."""
	if len(set(libraries)) != len(libraries):
		raise ValueError(f"duplicate library modules passed to aggregator: {list(libraries)}")
	marker = {"application": application, "libraries": list(libraries)}

	lines: list[str] = [
		"# Generated by modmerge. Do not edit.",
		'"""Invokes every library module, then the application module."""',
		"",
		"from __future__ import annotations",
		"",
		"import importlib",
		"",
		render_marker(AGGREGATOR_MARKER, marker),
		"",
		"def _load(fqn):",
		'\tmodule_name, _, class_name = fqn.rpartition(".")',
		"\treturn getattr(importlib.import_module(module_name), class_name)",
		"",
		"",
		f"class {name}:",
		"\tdef __init__(self):",
	]
	for i, lib in enumerate(libraries):
		lines.append(f"\t\tself.{_module_attr(i)} = _load({lib!r})()")
	lines.append(f"\t\tself._application = _load({application!r})()")
	lines.append("")
	lines.append("\tdef apply(self, context, registry):")
	for i in range(len(libraries)):
		lines.append(f"\t\tself.{_module_attr(i)}.apply(context, registry)")
	lines.append("\t\tself._application.apply(context, registry)")
	lines.append("")

	return GeneratedArtifact(
		namespace=namespace,
		name=name,
		kind="aggregator",
		marker=marker,
		source="\n".join(lines),
	)


__all__ = ["generate_aggregator"]
