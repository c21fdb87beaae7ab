# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: outputs, diagnostics, exit codes.
"""

import json

import pytest

from seqbind.driver import main

GOOD = "-module(good).\nf(Req@) ->\n    Req@ = g(Req@),\n    Req@.\n"
BAD = "-module(bad).\nf() ->\n    X@.\n"


def _write(tmp_path, name, text):
	path = tmp_path / name
	path.write_text(text)
	return path


def test_prints_rewritten_source(tmp_path, capsys):
	src = _write(tmp_path, "good.erl", GOOD)
	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	assert "f(Req@0) ->" in out
	assert "Req@1 = g(Req@0)," in out


def test_output_file(tmp_path, capsys):
	src = _write(tmp_path, "good.erl", GOOD)
	dest = tmp_path / "out.erl"
	assert main([str(src), "-o", str(dest)]) == 0
	assert "Req@1" in dest.read_text()
	assert capsys.readouterr().out == ""


def test_output_file_requires_single_source(tmp_path):
	a = _write(tmp_path, "a.erl", GOOD)
	b = _write(tmp_path, "b.erl", GOOD)
	with pytest.raises(SystemExit) as exc:
		main([str(a), str(b), "-o", str(tmp_path / "out.erl")])
	assert exc.value.code == 2


def test_no_rewrite_flag(tmp_path, capsys):
	src = _write(tmp_path, "good.erl", GOOD)
	assert main([str(src), "--no-rewrite"]) == 0
	out = capsys.readouterr().out
	assert "Req@0" not in out
	assert "Req@ = g(Req@)" in out


def test_human_diagnostics(tmp_path, capsys):
	good = _write(tmp_path, "good.erl", GOOD)
	bad = _write(tmp_path, "bad.erl", BAD)
	assert main([str(bad), str(good)]) == 1
	captured = capsys.readouterr()
	# the good unit is still emitted
	assert "f(Req@0) ->" in captured.out
	lines = captured.err.splitlines()
	assert lines[0].startswith(f"{bad}:3:5: error: ")
	assert "  note: in unit bad" in lines
	assert "  note: in function f/0" in lines


def test_json_diagnostics(tmp_path, capsys):
	good = _write(tmp_path, "good.erl", GOOD)
	bad = _write(tmp_path, "bad.erl", BAD)
	assert main([str(good), str(bad), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "E-SEQ-UNBOUND"
	assert diag["phase"] == "rewrite"
	assert diag["file"] == str(bad)
	assert (diag["line"], diag["column"]) == (3, 5)
	(unit,) = payload["units"]
	assert unit["file"] == str(good)
	assert "Req@1" in unit["source"]


def test_parse_error_diagnostic(tmp_path, capsys):
	src = _write(tmp_path, "broken.erl", "f() -> ok\ng() -> ok.\n")
	assert main([str(src), "--json"]) == 1
	(diag,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["code"] == "E-PARSE"
	assert diag["phase"] == "parser"
	assert diag["line"] == 2


def test_missing_file(tmp_path, capsys):
	assert main([str(tmp_path / "nope.erl")]) == 1
	err = capsys.readouterr().err
	assert "cannot read source" in err


def test_trace(tmp_path, capsys):
	src = _write(tmp_path, "good.erl", GOOD)
	assert main([str(src), "--trace", "good:f/1"]) == 0
	err = capsys.readouterr().err
	assert "%% good:f/1" in err
	assert "    3 |     Req@1 = g(Req@0)" in err
	assert "%%   Req@1 -> (Req, 1)" in err


def test_trace_of_unknown_function(tmp_path, capsys):
	src = _write(tmp_path, "good.erl", GOOD)
	assert main([str(src), "--trace", "nope/0"]) == 0
	assert "no rewritten function good:nope/0" in capsys.readouterr().err


def test_bad_trace_target(tmp_path):
	src = _write(tmp_path, "good.erl", GOOD)
	with pytest.raises(SystemExit):
		main([str(src), "--trace", "f"])
