# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Debug view of a rewritten function.

The rewrite itself needs none of this, but it keeps it for tooling: for every
function, the rewritten tree (nodes keep their original spans, so original
line numbers survive) and the reverse mapping from each versioned name back
to (base name, counter).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Mapping, Optional, Tuple

from .. import ast as A
from ..printer import format_clause_head, format_node
from .names import VersionedName
from .synthesize import strip_versions

FunctionKey = Tuple[Optional[str], str, int]


@dataclass(frozen=True)
class FunctionTrace:
	module: Optional[str]
	original: A.Function
	function: A.Function
	versions: Mapping[str, VersionedName]
	let_blocks: FrozenSet[A.Path] = frozenset()
	# path → spelling before the rewrite, for every renamed variable
	originals: Mapping[A.Path, str] = field(default_factory=dict)

	@property
	def key(self) -> FunctionKey:
		return (self.module, self.function.name, self.function.arity)

	def resolve(self, spelling: str) -> Optional[Tuple[str, int]]:
		"""`Req@2` → `("Req", 2)`; None for names the rewrite did not produce."""
		version = self.versions.get(spelling)
		if version is None:
			return None
		return (version.base, version.counter)

	def restore(self) -> A.Function:
		"""The rewritten function with every renamed variable spelled as in the source."""
		restored = strip_versions(self.function, self.originals, self.let_blocks)
		assert isinstance(restored, A.Function)
		return restored

	def lines(self) -> List[Tuple[Optional[int], str]]:
		"""(original line, rewritten text) per clause head and body expression."""
		out: List[Tuple[Optional[int], str]] = []
		for clause in self.function.clauses:
			out.append((clause.loc.line, format_clause_head(self.function.name, clause)))
			for expr in clause.body:
				out.append((expr.loc.line, "    " + format_node(expr)))
		return out


def format_trace(trace: FunctionTrace) -> str:
	module = trace.module or "?"
	rows = [f"%% {module}:{trace.function.key}"]
	for line, text in trace.lines():
		label = f"{line:>5}" if line is not None else "    ?"
		rows.append(f"{label} | {text}")
	if trace.versions:
		rows.append("%% versions")
		for spelling, version in sorted(trace.versions.items(), key=lambda kv: (kv[1].base, kv[1].counter)):
			rows.append(f"%%   {spelling} -> ({version.base}, {version.counter})")
	return "\n".join(rows) + "\n"


__all__ = ["FunctionKey", "FunctionTrace", "format_trace"]
