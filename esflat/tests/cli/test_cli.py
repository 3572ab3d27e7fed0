# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
CLI checks: exit codes, JSON diagnostics and output placement.
"""

from __future__ import annotations

import json
from pathlib import Path

from esflat.cli import load_modules, main, module_name_for


def _write(root: Path, rel: str, text: str) -> Path:
	path = root / rel
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def _project(tmp_path: Path):
	math = _write(tmp_path, "math.js", "export function sin(x) { return x; }\nexport var pi = 3;\n")
	main_js = _write(tmp_path, "main.js", 'import { sin, pi } from "./math";\nvar y = sin(pi);\nexport default y;\n')
	return math, main_js


def test_module_name_for(tmp_path: Path):
	assert module_name_for(tmp_path / "math" / "fib.js", tmp_path) == "math/fib"
	assert module_name_for(tmp_path / "data.mjs", tmp_path) == "data.mjs"


def test_bundle_goes_to_stdout(tmp_path: Path, capsys):
	math, main_js = _project(tmp_path)
	assert main([str(math), str(main_js)]) == 0
	out = capsys.readouterr().out
	assert out.startswith("var math$$ = {}, main$$ = {};\n")
	assert "main$$.default = main$$.y;" in out


def test_output_file_and_json_status(tmp_path: Path, capsys):
	math, main_js = _project(tmp_path)
	target = tmp_path / "out" / "bundle.js"
	target.parent.mkdir()
	assert main([str(math), str(main_js), "-o", str(target), "--json"]) == 0
	assert target.read_text(encoding="utf-8").startswith("var math$$")
	payload = json.loads(capsys.readouterr().out)
	assert payload == {"exit_code": 0, "diagnostics": []}


def test_explicit_root_names_nested_modules(tmp_path: Path, capsys):
	fib = _write(tmp_path, "src/math/fib.js", "export default function fib(n) { return n; }\n")
	app = _write(tmp_path, "src/app.js", 'import fib from "./math/fib";\nfib(1);\n')
	assert main([str(fib), str(app), "--root", str(tmp_path / "src")]) == 0
	out = capsys.readouterr().out
	assert "var math$fib$$ = {}, app$$ = {};" in out
	assert "math$fib$$.default(1);" in out


def test_reassigned_import_json_diagnostics(tmp_path: Path, capsys):
	lib = _write(tmp_path, "lib.js", "export var v = 1;\n")
	bad = _write(tmp_path, "main.js", 'import { v } from "./lib";\nv = 2;\nv++;\n')
	assert main([str(lib), str(bad), "--json", "--collect-all"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	lines = [(d["line"], d["column"]) for d in payload["diagnostics"]]
	assert lines == [(2, 1), (3, 1)]
	first = payload["diagnostics"][0]
	assert first["phase"] == "rewrite"
	assert first["code"] == "E-IMPORT-REASSIGN"
	assert first["file"] == str(bad.resolve())


def test_fail_fast_reports_one_violation(tmp_path: Path, capsys):
	lib = _write(tmp_path, "lib.js", "export var v = 1;\n")
	bad = _write(tmp_path, "main.js", 'import { v } from "./lib";\nv = 2;\nv++;\n')
	assert main([str(lib), str(bad)]) == 1
	err = capsys.readouterr().err
	assert err.count("cannot reassign imported binding `v`") == 1
	assert "note:" in err


def test_parse_errors_are_collected_per_file(tmp_path: Path, capsys):
	good = _write(tmp_path, "good.js", "var a = 1;\n")
	broken = _write(tmp_path, "broken.js", "var = ;\n")
	dup = _write(tmp_path, "dup.js", "export default 1;\nexport default 2;\n")
	assert main([str(good), str(broken), str(dup), "--json"]) == 1
	diagnostics = json.loads(capsys.readouterr().out)["diagnostics"]
	assert [d["phase"] for d in diagnostics] == ["parser", "parser"]
	assert diagnostics[0]["file"] == str(broken.resolve())
	assert diagnostics[0]["line"] == 1
	assert "duplicate `export default`" in diagnostics[1]["message"]


def test_missing_module_is_a_resolve_error(tmp_path: Path, capsys):
	app = _write(tmp_path, "app.js", 'import { x } from "./gone";\n')
	assert main([str(app), "--json"]) == 1
	(diagnostic,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diagnostic["phase"] == "resolve"
	assert "cannot resolve module `./gone`" in diagnostic["message"]


def test_missing_file(tmp_path: Path, capsys):
	assert main([str(tmp_path / "nope.js")]) == 1
	assert "no such file" in capsys.readouterr().err


def test_load_modules_continues_after_failures(tmp_path: Path):
	a = _write(tmp_path, "a.js", "var a;\n")
	b = _write(tmp_path, "b.js", "var ;\n")
	c = _write(tmp_path, "c.js", "var c;\n")
	container, diagnostics = load_modules([a, b, c], tmp_path)
	assert [mod.name for mod in container] == ["a", "c"]
	assert len(diagnostics) == 1


def test_duplicate_let_is_reported_not_raised(tmp_path: Path, capsys):
	bad = _write(tmp_path, "main.js", "let a;\nlet a;\na = 1;\n")
	assert main([str(bad), "--json"]) == 1
	(diagnostic,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diagnostic["code"] == "E-SCOPE"
	assert diagnostic["line"] == 3


def test_block_scoped_redeclarations_bundle(tmp_path: Path, capsys):
	app = _write(tmp_path, "app.js", "function f(a) { if (a) { let t = 1; t++; } else { let t = 2; t++; } }\nf(1);\n")
	assert main([str(app)]) == 0
	assert "app$$.f(1);" in capsys.readouterr().out
