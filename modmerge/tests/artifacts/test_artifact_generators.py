# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import sys
import types

import pytest

from modmerge.artifacts.aggregator_generator import generate_aggregator
from modmerge.artifacts.index_generator import INDEXER_NAME_PREFIX, generate_index, indexer_name
from modmerge.artifacts.markers import AGGREGATOR_MARKER, INDEX_MARKER, index_sequence, read_marker
from modmerge.module import ApplicationModule, LibraryModule


def test_index_source_carries_only_the_marker() -> None:
	art = generate_index(["a.b.X", "a.Y"], namespace="gen.index", round_no=3, sequence=5)
	assert art.kind == "index"
	assert art.qualified_name == "gen.index.ModuleIndexer_a_b_X_a_Y"
	assert read_marker(art.source, INDEX_MARKER) == {"modules": ["a.b.X", "a.Y"], "round": 3, "sequence": 5}
	assert "def " not in art.source
	assert "class " not in art.source


def test_index_rejects_empty_names() -> None:
	with pytest.raises(ValueError):
		generate_index([], namespace="gen.index", round_no=1, sequence=1)


def test_index_sequence_must_be_positive() -> None:
	assert index_sequence({"modules": [], "sequence": 3}) == 3
	for bad in (0, -1, True, "2", None):
		with pytest.raises(ValueError):
			index_sequence({"modules": [], "sequence": bad})
	with pytest.raises(ValueError):
		index_sequence({"modules": []})


def test_long_indexer_names_are_hashed() -> None:
	names = [f"com.example.very.long.package.name.Module{i}" for i in range(10)]
	name = indexer_name(names)
	assert name.startswith(INDEXER_NAME_PREFIX)
	assert len(name) == len(INDEXER_NAME_PREFIX) + 16
	assert indexer_name(list(names)) == name
	assert indexer_name(list(reversed(names))) != name


def test_index_rendering_is_deterministic() -> None:
	a = generate_index(["a.X", "a.Y"], namespace="gen.index", round_no=1, sequence=1)
	b = generate_index(["a.X", "a.Y"], namespace="gen.index", round_no=1, sequence=1)
	assert a == b


def test_aggregator_marker_lists_libraries_in_order() -> None:
	art = generate_aggregator("app.Z", ["b.Y", "a.X"], namespace="gen", name="GeneratedApplicationModule")
	assert art.kind == "aggregator"
	assert read_marker(art.source, AGGREGATOR_MARKER) == {"application": "app.Z", "libraries": ["b.Y", "a.X"]}
	assert read_marker(art.source, INDEX_MARKER) is None


def test_aggregator_rejects_duplicate_libraries() -> None:
	with pytest.raises(ValueError):
		generate_aggregator("app.Z", ["a.X", "a.X"], namespace="gen", name="Agg")


def test_generated_aggregator_applies_libraries_then_application(monkeypatch: pytest.MonkeyPatch) -> None:
	calls: list[tuple[str, object, object]] = []

	class First(LibraryModule):
		def apply(self, context, registry) -> None:
			calls.append(("First", context, registry))

	class Second(LibraryModule):
		def apply(self, context, registry) -> None:
			calls.append(("Second", context, registry))

	class App(ApplicationModule):
		def apply(self, context, registry) -> None:
			calls.append(("App", context, registry))

	fake = types.ModuleType("modmerge_fake_modules")
	fake.First = First
	fake.Second = Second
	fake.App = App
	monkeypatch.setitem(sys.modules, "modmerge_fake_modules", fake)

	art = generate_aggregator(
		"modmerge_fake_modules.App",
		["modmerge_fake_modules.Second", "modmerge_fake_modules.First"],
		namespace="gen",
		name="GeneratedApplicationModule",
	)
	ns: dict[str, object] = {}
	exec(compile(art.source, "<aggregator>", "exec"), ns)
	ns["GeneratedApplicationModule"]().apply("ctx", "reg")
	assert calls == [("Second", "ctx", "reg"), ("First", "ctx", "reg"), ("App", "ctx", "reg")]


def test_generated_aggregator_without_libraries(monkeypatch: pytest.MonkeyPatch) -> None:
	calls: list[str] = []

	class App(ApplicationModule):
		def apply(self, context, registry) -> None:
			calls.append("App")

	fake = types.ModuleType("modmerge_fake_app_only")
	fake.App = App
	monkeypatch.setitem(sys.modules, "modmerge_fake_app_only", fake)

	art = generate_aggregator("modmerge_fake_app_only.App", [], namespace="gen", name="Merged")
	ns: dict[str, object] = {}
	exec(compile(art.source, "<aggregator>", "exec"), ns)
	ns["Merged"]().apply(None, None)
	assert calls == ["App"]
