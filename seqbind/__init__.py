# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
seqbind: sequential variables for Erlang-style single-assignment code.

Write `Req@` for a variable you keep "reassigning"; the rewrite turns every
occurrence into a concrete version (`Req@0`, `Req@1`, ...) so each rebinding
is a fresh single-assignment variable.

Pipeline:
  parser (text → SourceTree) → rewrite (SourceTree → SourceTree) → printer

Packages:
  core     spans and diagnostics
  parser   lark-based Erlang-subset front-end
  rewrite  the renaming engine
"""

from .ast import Unit
from .errors import (
	ConflictingRedeclaration,
	MalformedLetBlock,
	ParseError,
	SeqbindError,
	UnboundSequentialVariable,
)
from .parser import parse_file, parse_unit
from .printer import format_unit
from .rewrite import RewriteOptions, RewriteResult, rewrite_unit, rewrite_units

__all__ = [
	"Unit",
	"SeqbindError",
	"UnboundSequentialVariable",
	"MalformedLetBlock",
	"ConflictingRedeclaration",
	"ParseError",
	"parse_unit",
	"parse_file",
	"format_unit",
	"RewriteOptions",
	"RewriteResult",
	"rewrite_unit",
	"rewrite_units",
]
