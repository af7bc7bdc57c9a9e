# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from modmerge.artifacts.store import FileArtifactStore
from modmerge.config import MergeOptions, load_config
from modmerge.core.diagnostics import Diagnostic, DiagnosticSink, diagnostic_to_json
from modmerge.errors import ModuleMergeError
from modmerge.frontend.parser import DeclarationParseError
from modmerge.host import BuildSession


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="modmerge", description="Merge tagged library/application modules into a generated aggregator")
	sub = p.add_subparsers(dest="cmd", required=True)

	build = sub.add_parser("build", help="Run discovery passes over declaration files and write generated artifacts")
	build.add_argument("sources", nargs="*", type=Path, help="Declaration files (.mdecl) visible in the first pass")
	build.add_argument(
		"--pass",
		dest="passes",
		nargs="+",
		type=Path,
		action="append",
		default=None,
		help="Declaration files that become visible in a later pass (repeatable; one pass per flag)",
	)
	build.add_argument(
		"--classpath",
		nargs="+",
		type=Path,
		action="extend",
		default=None,
		help="Declaration files whose types are known but never processed (e.g. base classes)",
	)
	build.add_argument("--out", type=Path, required=True, help="Output directory for generated artifacts")
	build.add_argument("--config", type=Path, default=None, help="Path to a modmerge-config JSON file")
	build.add_argument("--max-rounds", type=int, default=None, help="Abort if no fixpoint is reached within this many rounds")
	build.add_argument("--debug", action="store_true", default=None, help="Record per-round debug notes")
	build.add_argument("--json", action="store_true", help="Emit machine-readable JSON report")

	inspect = sub.add_parser("inspect", help="List persisted index artifacts and the aggregator")
	inspect.add_argument("--out", type=Path, required=True, help="Output directory used by `build`")
	inspect.add_argument("--config", type=Path, default=None, help="Path to a modmerge-config JSON file")
	inspect.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	return p


def _error_diagnostic(err: Exception) -> Diagnostic:
	if isinstance(err, DeclarationParseError):
		return Diagnostic(message=str(err), phase="parser", severity="error", span=err.span)
	if isinstance(err, ModuleMergeError):
		notes = [f"candidate: {c}" for c in err.candidates or []]
		if err.artifact_path:
			notes.append(f"artifact: {err.artifact_path}")
		return Diagnostic(message=err.format_human(), code=err.reason_code, phase="merge", severity="error", span=err.span, notes=notes)
	raise TypeError(f"unexpected error type {type(err).__name__}")


def _print_diagnostics(diags: list[Diagnostic]) -> None:
	for d in diags:
		print(f"{d.span.format_location()}: {d.severity}: {d.message}", file=sys.stderr)
		for note in d.notes:
			print(f"  {note}", file=sys.stderr)


def _load_options(p: argparse.ArgumentParser, args: argparse.Namespace) -> MergeOptions:
	opts = MergeOptions()
	if args.config is not None:
		try:
			opts = load_config(args.config, opts)
		except ModuleMergeError as err:
			p.error(str(err))
	return opts


def _run_build(p: argparse.ArgumentParser, args: argparse.Namespace) -> int:
	opts = _load_options(p, args).with_overrides({"max_rounds": args.max_rounds, "debug": args.debug})
	passes: list[list[Path]] = [list(args.sources)]
	passes.extend(list(group) for group in args.passes or [])
	session = BuildSession(FileArtifactStore(args.out), opts)
	sink: DiagnosticSink = session.sink
	report = None
	try:
		report = session.run_files(passes, classpath=list(args.classpath or []))
	except (ModuleMergeError, DeclarationParseError) as err:
		sink.diagnostics.append(_error_diagnostic(err))
	except OSError as err:
		sink.error(f"cannot read declaration file: {err}", phase="parser")

	exit_code = 1 if sink.has_errors() else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [diagnostic_to_json(d) for d in sink.diagnostics],
			"aggregator": report.aggregator.marker if report is not None and report.aggregator is not None else None,
			"rounds": len(report.rounds) if report is not None else None,
		}
		print(json.dumps(payload, sort_keys=True, separators=(",", ":")))
		return exit_code
	_print_diagnostics(sink.diagnostics)
	return exit_code


def _run_inspect(p: argparse.ArgumentParser, args: argparse.Namespace) -> int:
	opts = _load_options(p, args)
	store = FileArtifactStore(args.out)
	try:
		indexes = [s for s in store.list_namespace(opts.index_namespace) if s.index_marker is not None]
		aggregator = next(
			(s for s in store.list_namespace(opts.aggregator_namespace) if s.name == opts.aggregator_name and s.aggregator_marker is not None),
			None,
		)
	except (OSError, ValueError) as err:
		print(f"{args.out}:?:?: error: {err}", file=sys.stderr)
		return 1
	obj = {
		"indexes": [{"name": s.name, "location": s.location, "marker": s.index_marker} for s in indexes],
		"aggregator": aggregator.aggregator_marker if aggregator is not None else None,
	}
	if args.json:
		print(json.dumps(obj, sort_keys=True, separators=(",", ":")))
	else:
		print(json.dumps(obj, indent=2, sort_keys=True))
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)

	if args.cmd == "build":
		return _run_build(p, args)
	if args.cmd == "inspect":
		return _run_inspect(p, args)
	raise AssertionError("unreachable")


__all__ = ["main"]
