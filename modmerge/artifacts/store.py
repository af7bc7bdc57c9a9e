# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Artifact stores: the sink generated artifacts are written to, and the
symbol-table view the processor queries.

Visibility follows the pass model: an artifact written during a round is
*pending* and hidden from `list_namespace` until the host calls
`end_round()`. A location written earlier in the same session can never be
written again; content left there by an earlier process is replaced.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from modmerge.artifacts.markers import AGGREGATOR_MARKER, INDEX_MARKER, read_marker


@dataclass(frozen=True)
class GeneratedArtifact:
	"""A rendered artifact ready to be persisted."""

	namespace: str
	name: str
	kind: str  # "index" | "aggregator"
	marker: dict[str, Any]
	source: str

	@property
	def qualified_name(self) -> str:
		return f"{self.namespace}.{self.name}"


@dataclass(frozen=True)
class StoredArtifact:
	"""A persisted artifact as seen through the symbol table."""

	namespace: str
	name: str
	location: str
	index_marker: dict[str, Any] | None = None
	aggregator_marker: dict[str, Any] | None = None

	@property
	def qualified_name(self) -> str:
		return f"{self.namespace}.{self.name}"


class ArtifactExistsError(Exception):
	"""The target location is already occupied."""

	def __init__(self, location: str) -> None:
		super().__init__(f"artifact location already occupied: {location}")
		self.location = location


def _stored(namespace: str, name: str, location: str, source: str) -> StoredArtifact:
	return StoredArtifact(
		namespace=namespace,
		name=name,
		location=location,
		index_marker=read_marker(source, INDEX_MARKER),
		aggregator_marker=read_marker(source, AGGREGATOR_MARKER),
	)


class ArtifactStore:
	"""Base class: pending-visibility and per-session write tracking."""

	def __init__(self) -> None:
		self._pending: set[tuple[str, str]] = set()
		self._written: set[tuple[str, str]] = set()

	def write(self, artifact: GeneratedArtifact) -> str:
		"""Persist `artifact` and return its location."""
		key = (artifact.namespace, artifact.name)
		if key in self._written:
			raise ArtifactExistsError(self.location_of(artifact.namespace, artifact.name))
		location = self._write_source(artifact.namespace, artifact.name, artifact.source)
		self._written.add(key)
		self._pending.add(key)
		return location

	def list_namespace(self, namespace: str) -> list[StoredArtifact]:
		"""Visible artifacts in `namespace`, sorted by name."""
		out: list[StoredArtifact] = []
		for name in sorted(self._names(namespace)):
			if (namespace, name) in self._pending:
				continue
			source = self._read_source(namespace, name)
			out.append(_stored(namespace, name, self.location_of(namespace, name), source))
		return out

	def end_round(self) -> None:
		"""Publish everything written during the round that just ended."""
		self._pending.clear()

	def location_of(self, namespace: str, name: str) -> str:
		raise NotImplementedError

	def _write_source(self, namespace: str, name: str, source: str) -> str:
		raise NotImplementedError

	def _read_source(self, namespace: str, name: str) -> str:
		raise NotImplementedError

	def _names(self, namespace: str) -> list[str]:
		raise NotImplementedError


class MemoryArtifactStore(ArtifactStore):
	"""In-process store, used by tests and embedders."""

	def __init__(self) -> None:
		super().__init__()
		self.sources: dict[tuple[str, str], str] = {}

	def location_of(self, namespace: str, name: str) -> str:
		return f"{namespace}.{name}"

	def _write_source(self, namespace: str, name: str, source: str) -> str:
		self.sources[(namespace, name)] = source
		return self.location_of(namespace, name)

	def _read_source(self, namespace: str, name: str) -> str:
		return self.sources[(namespace, name)]

	def _names(self, namespace: str) -> list[str]:
		return [name for (ns, name) in self.sources if ns == namespace]


class FileArtifactStore(ArtifactStore):
	"""
	Directory-backed store: `<root>/<namespace as path>/<name>.py`.

	Files are written to a temporary sibling and moved into place, so a reader
	never sees a half-written artifact.
	"""

	def __init__(self, root: Path) -> None:
		super().__init__()
		self.root = Path(root)

	def _dir(self, namespace: str) -> Path:
		return self.root.joinpath(*namespace.split("."))

	def _path(self, namespace: str, name: str) -> Path:
		return self._dir(namespace) / f"{name}.py"

	def location_of(self, namespace: str, name: str) -> str:
		return str(self._path(namespace, name))

	def _write_source(self, namespace: str, name: str, source: str) -> str:
		path = self._path(namespace, name)
		path.parent.mkdir(parents=True, exist_ok=True)
		tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
		tmp.write_bytes(source.encode("utf-8"))
		os.replace(tmp, path)
		return str(path)

	def _read_source(self, namespace: str, name: str) -> str:
		return self._path(namespace, name).read_text(encoding="utf-8")

	def _names(self, namespace: str) -> list[str]:
		d = self._dir(namespace)
		if not d.is_dir():
			return []
		return [p.stem for p in d.glob("*.py") if p.is_file() and p.name != "__init__.py"]


__all__ = [
	"ArtifactExistsError",
	"ArtifactStore",
	"FileArtifactStore",
	"GeneratedArtifact",
	"MemoryArtifactStore",
	"StoredArtifact",
]
