# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Merge configuration (v0).

Options come from an optional JSON file and are then overridden by CLI flags.
The file format is deliberately strict: unknown fields are rejected so typos
never silently fall back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from modmerge.errors import INVALID_CONFIG, ModuleMergeError
from modmerge.module import APPLICATION_MODULE_FQN, LIBRARY_MODULE_FQN

CONFIG_FORMAT = "modmerge-config"
CONFIG_VERSION = 0


@dataclass(frozen=True)
class MergeOptions:
	index_namespace: str = "modmerge_generated.index"
	aggregator_namespace: str = "modmerge_generated"
	aggregator_name: str = "GeneratedApplicationModule"
	library_contract: str = LIBRARY_MODULE_FQN
	application_contract: str = APPLICATION_MODULE_FQN
	module_tag: str = "module"
	max_rounds: int = 64
	debug: bool = False

	def with_overrides(self, overrides: Mapping[str, Any]) -> "MergeOptions":
		"""Return a copy with every non-None override applied."""
		return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _err(path: Path, msg: str) -> ModuleMergeError:
	return ModuleMergeError(reason_code=INVALID_CONFIG, message=msg, artifact_path=str(path))


def load_config(path: Path, base: MergeOptions | None = None) -> MergeOptions:
	"""Load `path` on top of `base` (defaults when omitted)."""
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except (OSError, ValueError) as err:
		raise _err(path, f"cannot read config: {err}") from err
	if not isinstance(data, dict):
		raise _err(path, "config must be a JSON object")
	if data.get("format") != CONFIG_FORMAT or data.get("version") != CONFIG_VERSION:
		raise _err(path, "unsupported config format/version")

	known = {f.name: f for f in fields(MergeOptions)}
	unknown = sorted(set(data.keys()) - set(known) - {"format", "version"})
	if unknown:
		raise _err(path, f"config has unknown fields: {', '.join(unknown)}")

	values: dict[str, Any] = {}
	for name, value in data.items():
		if name in ("format", "version"):
			continue
		default = getattr(MergeOptions, name)
		# bool is an int subclass; keep max_rounds strictly numeric and debug strictly boolean.
		if isinstance(default, bool):
			ok = isinstance(value, bool)
		elif isinstance(default, int):
			ok = isinstance(value, int) and not isinstance(value, bool) and value > 0
		else:
			ok = isinstance(value, str) and bool(value)
		if not ok:
			raise _err(path, f"config field '{name}' has an invalid value: {value!r}")
		values[name] = value
	return replace(base or MergeOptions(), **values)


__all__ = ["CONFIG_FORMAT", "CONFIG_VERSION", "MergeOptions", "load_config"]
