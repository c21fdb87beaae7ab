# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: parse each file, rewrite it, print the result.

Files are independent compilation units: a file that fails to parse or
rewrite is reported and skipped, the rest are still processed.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .core.diagnostics import Diagnostic
from .errors import SeqbindError
from .parser import parse_file
from .printer import format_unit
from .rewrite import RewriteOptions, format_trace, rewrite_unit


def _parse_trace_target(text: str) -> Tuple[Optional[str], str, int]:
	"""`name/arity` or `module:name/arity`."""
	head, sep, arity = text.rpartition("/")
	if not sep or not arity.isdigit() or not head:
		raise argparse.ArgumentTypeError(f"expected NAME/ARITY or MODULE:NAME/ARITY, got '{text}'")
	module, _, name = head.rpartition(":")
	return (module or None, name, int(arity))


def _process(path: Path, options: RewriteOptions, trace: Optional[Tuple[Optional[str], str, int]]) -> Tuple[str, str]:
	"""Return (rewritten source, trace text) for one file; raises SeqbindError."""
	unit = parse_file(path)
	result = rewrite_unit(unit, options)
	trace_text = ""
	if trace is not None:
		module, name, arity = trace
		try:
			trace_text = format_trace(result.trace(name, arity, module))
		except KeyError as err:
			trace_text = f"%% {err.args[0]}\n"
	return format_unit(result.unit), trace_text


def main(argv: list[str] | None = None) -> int:
	"""
	With --json, prints structured diagnostics and an exit_code on stdout;
	otherwise prints `file:line:col: error: message` lines to stderr.
	"""
	parser = argparse.ArgumentParser(description="seqbind: rewrite sequential (Name@) variables into versioned names")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to Erlang source file(s)")
	parser.add_argument("-o", "--output", type=Path, help="Write the rewritten source here (single input only)")
	parser.add_argument(
		"--no-rewrite",
		dest="enabled",
		action="store_false",
		default=True,
		help="Parse and print the units without rewriting them",
	)
	parser.add_argument(
		"--trace",
		type=_parse_trace_target,
		metavar="[MODULE:]NAME/ARITY",
		help="Print the rewritten function with original line numbers and its version table",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column)",
	)
	args = parser.parse_args(argv)

	if args.output is not None and len(args.source) != 1:
		parser.error("-o/--output requires exactly one source file")

	options = RewriteOptions(enabled=args.enabled)
	diagnostics: List[Tuple[Path, Diagnostic]] = []
	outputs: List[Tuple[Path, str]] = []
	for path in args.source:
		try:
			text, trace_text = _process(path, options, args.trace)
		except SeqbindError as err:
			diagnostics.append((path, err.to_diagnostic()))
			continue
		except OSError as err:
			diagnostics.append((path, Diagnostic(message=f"cannot read source: {err}", phase="driver")))
			continue
		if trace_text:
			print(trace_text, end="", file=sys.stderr)
		if args.output is not None:
			args.output.write_text(text)
		else:
			outputs.append((path, text))

	exit_code = 1 if diagnostics else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json(path) for path, d in diagnostics],
			"units": [{"file": str(path), "source": text} for path, text in outputs],
		}
		print(json.dumps(payload))
	else:
		for _, text in outputs:
			print(text, end="")
		for path, d in diagnostics:
			print(d.format_human(path), file=sys.stderr)
			for note in d.notes:
				print(f"  note: {note}", file=sys.stderr)
	return exit_code


__all__ = ["main"]
