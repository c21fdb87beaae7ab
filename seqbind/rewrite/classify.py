# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Occurrence classifier.

Decides, from a variable and the syntactic position it sits in, whether the
occurrence binds a new version of a sequential variable, reads the current
one, or is not the rewrite's business at all.

Positions:
  ARGUMENT  function-clause / fun-clause argument patterns; everything in
            there binds, including a marked variable aliasing the whole
            argument (`#req{} = Req@`).
  PATTERN   match left-hand sides, case/receive/try clause patterns, catch
            clause heads.
  VALUE     everything else: match right-hand sides, call arguments,
            constructor elements in expressions, guards, branch subjects.

A bare variable whose name is the base of a sequential variable of the same
function is a dropped-suffix occurrence when it sits in a pattern: it matches
against the current version instead of binding anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import AbstractSet, Optional

from ..ast import Var
from .names import marked_base, parse_versioned


class Position(Enum):
	ARGUMENT = auto()
	PATTERN = auto()
	VALUE = auto()

	@property
	def is_pattern(self) -> bool:
		return self is not Position.VALUE


class Role(Enum):
	BINDING = auto()
	REFERENCE = auto()


class OccurrenceKind(Enum):
	MARKED = auto()          # `Req@`
	DROPPED_SUFFIX = auto()  # `Req` in a pattern while `Req@` is sequential
	EXPLICIT = auto()        # `Req@3`, passed through
	PLAIN = auto()           # any other variable


@dataclass(frozen=True)
class Occurrence:
	kind: OccurrenceKind
	base: Optional[str] = None
	role: Optional[Role] = None

	@property
	def renamed(self) -> bool:
		return self.kind in (OccurrenceKind.MARKED, OccurrenceKind.DROPPED_SUFFIX)


def classify(var: Var, position: Position, sequential: AbstractSet[str]) -> Occurrence:
	"""
	Classify one variable occurrence.

	`sequential` is the set of base names used with the marker anywhere in the
	enclosing function.
	"""
	base = marked_base(var.name)
	if base is not None:
		role = Role.BINDING if position.is_pattern else Role.REFERENCE
		return Occurrence(kind=OccurrenceKind.MARKED, base=base, role=role)
	if parse_versioned(var.name) is not None:
		return Occurrence(kind=OccurrenceKind.EXPLICIT)
	if position.is_pattern and var.name in sequential:
		# Value-equality against the current version; never a binding.
		return Occurrence(kind=OccurrenceKind.DROPPED_SUFFIX, base=var.name, role=Role.REFERENCE)
	return Occurrence(kind=OccurrenceKind.PLAIN)


__all__ = ["Position", "Role", "OccurrenceKind", "Occurrence", "classify"]
