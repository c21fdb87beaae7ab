# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Sequential-variable rewrite.

Public API:
  - rewrite_unit(unit, options) -> RewriteResult
  - rewrite_units(units, options) -> list[UnitOutcome]

The rewrite is a pure function of its input tree: it either returns a fully
rewritten unit or raises a SeqbindError; no partially rewritten unit is ever
returned. Components:

  classify.py    binding vs reference per occurrence
  scope.py       forkable per-base-name counters
  walker.py      evaluation-order traversal driving the two above
  let_block.py   `seqbind:let(...)` scoped rebinding
  synthesize.py  builds the output tree from the walker's decisions
  debug.py       per-function trace for tooling
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from .. import ast as A
from ..errors import SeqbindError
from .debug import FunctionKey, FunctionTrace, format_trace
from .names import MARKER, VersionedName
from .synthesize import strip_versions, synthesize
from .walker import RenamingWalker


@dataclass(frozen=True)
class RewriteOptions:
	"""Per-unit configuration: the rewrite can only be switched on or off."""

	enabled: bool = True


@dataclass(frozen=True)
class RewriteResult:
	unit: A.Unit
	traces: Mapping[FunctionKey, FunctionTrace]

	def trace(self, name: str, arity: int, module: Optional[str] = None) -> FunctionTrace:
		"""Debug trace for `module:name/arity` (module defaults to the unit's)."""
		key = (module if module is not None else self.unit.module, name, arity)
		try:
			return self.traces[key]
		except KeyError:
			raise KeyError(f"no rewritten function {key[0]}:{name}/{arity}") from None


@dataclass(frozen=True)
class UnitOutcome:
	"""Batch result for one unit: exactly one of `result`/`error` is set."""

	unit: A.Unit
	result: Optional[RewriteResult] = None
	error: Optional[SeqbindError] = None

	@property
	def ok(self) -> bool:
		return self.error is None


def unit_name(unit: A.Unit) -> str:
	return unit.module or unit.file or "<unit>"


def rewrite_unit(unit: A.Unit, options: Optional[RewriteOptions] = None) -> RewriteResult:
	"""
	Rewrite every sequential variable of `unit`.

	Attributes and unknown forms are kept as they are. With the rewrite
	disabled the input unit is returned untouched.
	"""
	options = options or RewriteOptions()
	if not options.enabled:
		return RewriteResult(unit=unit, traces={})
	walker = RenamingWalker(unit=unit_name(unit))
	traces: dict[FunctionKey, FunctionTrace] = {}
	forms: List[A.Node] = []
	for form in unit.forms:
		if not isinstance(form, A.Function):
			forms.append(form)
			continue
		walked = walker.walk_function(form)
		rewritten = synthesize(form, walked.resolutions)
		assert isinstance(rewritten, A.Function)
		forms.append(rewritten)
		trace = FunctionTrace(
			module=unit.module,
			original=form,
			function=rewritten,
			versions=walked.resolutions.versions(),
			let_blocks=frozenset(walked.resolutions.let_blocks),
			originals=dict(walked.resolutions.originals),
		)
		traces[trace.key] = trace
	new_forms = tuple(forms)
	if all(a is b for a, b in zip(new_forms, unit.forms)):
		return RewriteResult(unit=unit, traces=traces)
	return RewriteResult(unit=A.Unit(module=unit.module, forms=new_forms, file=unit.file, loc=unit.loc), traces=traces)


def rewrite_units(units: Iterable[A.Unit], options: Optional[RewriteOptions] = None) -> List[UnitOutcome]:
	"""Rewrite units independently; an error in one does not affect the others."""
	outcomes: List[UnitOutcome] = []
	for unit in units:
		try:
			outcomes.append(UnitOutcome(unit=unit, result=rewrite_unit(unit, options)))
		except SeqbindError as err:
			outcomes.append(UnitOutcome(unit=unit, error=err))
	return outcomes


__all__ = [
	"MARKER",
	"VersionedName",
	"RewriteOptions",
	"RewriteResult",
	"UnitOutcome",
	"FunctionKey",
	"FunctionTrace",
	"format_trace",
	"rewrite_unit",
	"rewrite_units",
	"strip_versions",
	"unit_name",
]
