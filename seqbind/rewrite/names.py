# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Sequential variable names.

A variable is *marked* when its name ends with the marker `@` (`Req@`). Its
base name is the name without the marker. The rewrite replaces marked names
with versioned names `Base@N`. Writing `Base@N` directly is the debug form: it
is recognized and passed through untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MARKER = "@"

_VERSIONED_RE = re.compile(r"^(?P<base>.+)@(?P<counter>[0-9]+)$")


@dataclass(frozen=True)
class VersionedName:
	"""A base name resolved to a concrete counter: `Base@N`."""

	base: str
	counter: int

	@property
	def spelling(self) -> str:
		return f"{self.base}{MARKER}{self.counter}"

	def __str__(self) -> str:
		return self.spelling


def marked_base(name: str) -> str | None:
	"""Return the base name of a marked variable (`Req@` → `Req`), else None."""
	if len(name) > len(MARKER) and name.endswith(MARKER):
		return name[: -len(MARKER)]
	return None


def parse_versioned(name: str) -> VersionedName | None:
	"""Decompose the explicit form `Base@N`; None for anything else."""
	m = _VERSIONED_RE.match(name)
	if m is None:
		return None
	return VersionedName(base=m.group("base"), counter=int(m.group("counter")))


def is_marked(name: str) -> bool:
	return marked_base(name) is not None


__all__ = ["MARKER", "VersionedName", "marked_base", "parse_versioned", "is_marked"]
