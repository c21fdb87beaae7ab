# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser entry points.

`parse_unit` turns Erlang source text into a SourceTree Unit; syntax errors
come back as ParseError with the offending line/column.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from lark.exceptions import UnexpectedInput

from ..ast import Unit
from ..core.span import Span
from ..errors import ParseError
from .parser import build_unit, parse_tree


def parse_unit(source: str, file: Optional[str] = None) -> Unit:
	try:
		tree = parse_tree(source)
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		if line is not None and line < 0:
			line, column = None, None
		message = str(err).strip().splitlines()[0] if str(err).strip() else type(err).__name__
		raise ParseError(
			message=f"syntax error: {message}",
			unit=file,
			span=Span(file=file, line=line, column=column),
		) from err
	return build_unit(tree, file)


def parse_file(path: Path) -> Unit:
	return parse_unit(path.read_text(), file=str(path))


__all__ = ["parse_unit", "parse_file"]
