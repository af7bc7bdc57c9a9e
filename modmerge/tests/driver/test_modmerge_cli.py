# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from modmerge.cli import main as modmerge_main


def _write_file(path: Path, text: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def _lib_file(tmp_path: Path, name: str) -> Path:
	return _write_file(
		tmp_path / f"{name}.mdecl",
		f"package libs\nimport modmerge.module.LibraryModule\n@module\nclass {name} : LibraryModule\n",
	)


def _app_file(tmp_path: Path, name: str) -> Path:
	return _write_file(
		tmp_path / f"{name}.mdecl",
		f"package app\nimport modmerge.module.ApplicationModule\n@module\nclass {name} : ApplicationModule\n",
	)


def test_build_json_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	out = tmp_path / "out"
	rc = modmerge_main(
		[
			"build",
			str(_lib_file(tmp_path, "Photos")),
			str(_app_file(tmp_path, "Main")),
			"--pass",
			str(_lib_file(tmp_path, "Video")),
			"--out",
			str(out),
			"--json",
		]
	)
	payload = json.loads(capsys.readouterr().out)
	assert rc == 0
	assert payload["exit_code"] == 0
	assert payload["rounds"] == 3
	assert payload["aggregator"] == {"application": "app.Main", "libraries": ["libs.Photos", "libs.Video"]}
	assert all(d["severity"] == "note" for d in payload["diagnostics"])
	assert (out / "modmerge_generated" / "GeneratedApplicationModule.py").is_file()


def test_build_duplicate_application_exits_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc = modmerge_main(
		[
			"build",
			str(_app_file(tmp_path, "A1")),
			str(_app_file(tmp_path, "A2")),
			"--out",
			str(tmp_path / "out"),
			"--json",
		]
	)
	payload = json.loads(capsys.readouterr().out)
	assert rc == 1
	assert payload["aggregator"] is None
	err = payload["diagnostics"][-1]
	assert err["code"] == "duplicate-application-module"
	assert err["phase"] == "merge"
	assert err["notes"] == ["candidate: app.A1", "candidate: app.A2"]
	assert not (tmp_path / "out").exists()


def test_build_parse_error_human_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	bad = _write_file(tmp_path / "bad.mdecl", "class : Nope\n")
	rc = modmerge_main(["build", str(bad), "--out", str(tmp_path / "out")])
	err = capsys.readouterr().err
	assert rc == 1
	assert f"{bad}:1:" in err
	assert "error: invalid declaration syntax" in err


def test_build_missing_source_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc = modmerge_main(["build", str(tmp_path / "missing.mdecl"), "--out", str(tmp_path / "out")])
	assert rc == 1
	assert "cannot read declaration file" in capsys.readouterr().err


def test_build_debug_notes_on_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc = modmerge_main(["build", str(_lib_file(tmp_path, "Photos")), "--out", str(tmp_path / "out"), "--debug"])
	err = capsys.readouterr().err
	assert rc == 0
	assert "note: [1] got library modules: ['libs.Photos']" in err
	assert "note: [1] wrote ModuleIndexer_libs_Photos with: ['libs.Photos']" in err


def test_build_uses_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	cfg = _write_file(
		tmp_path / "modmerge.json",
		json.dumps({"format": "modmerge-config", "version": 0, "aggregator_namespace": "gen", "aggregator_name": "Merged"}),
	)
	out = tmp_path / "out"
	rc = modmerge_main(["build", str(_app_file(tmp_path, "Main")), "--out", str(out), "--config", str(cfg), "--json"])
	capsys.readouterr()
	assert rc == 0
	assert (out / "gen" / "Merged.py").is_file()

	rc = modmerge_main(["inspect", "--out", str(out), "--config", str(cfg), "--json"])
	obj = json.loads(capsys.readouterr().out)
	assert rc == 0
	assert obj == {"indexes": [], "aggregator": {"application": "app.Main", "libraries": []}}


def test_bad_config_is_a_usage_error(tmp_path: Path) -> None:
	cfg = _write_file(tmp_path / "modmerge.json", json.dumps({"format": "modmerge-config", "version": 9}))
	with pytest.raises(SystemExit) as exc:
		modmerge_main(["build", "--out", str(tmp_path / "out"), "--config", str(cfg)])
	assert exc.value.code == 2


def test_inspect_lists_indexes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	out = tmp_path / "out"
	modmerge_main(["build", str(_lib_file(tmp_path, "Photos")), "--out", str(out), "--json"])
	capsys.readouterr()
	rc = modmerge_main(["inspect", "--out", str(out), "--json"])
	obj = json.loads(capsys.readouterr().out)
	assert rc == 0
	assert obj["aggregator"] is None
	assert [i["name"] for i in obj["indexes"]] == ["ModuleIndexer_libs_Photos"]
	assert obj["indexes"][0]["marker"] == {"modules": ["libs.Photos"], "round": 1, "sequence": 1}
