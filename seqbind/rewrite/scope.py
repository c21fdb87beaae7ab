# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Scope stack: nested, forkable counters per base name.

Each clause-like construct (function clause, fun clause, case/if/receive/try
clause) and each let-block runs in its own frame. A pushed frame starts with a
snapshot of the counters visible at the push, records its own increments
locally, and is thrown away by the matching pop, so the parent sees exactly
what it saw before the push.

Only the top frame is ever mutated.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional


@dataclass
class ScopeFrame:
	"""Counters for one scope; `parent` is the frame it was forked from."""

	counters: Dict[str, int] = field(default_factory=dict)
	parent: Optional["ScopeFrame"] = None

	def lookup(self, base: str) -> Optional[int]:
		frame: Optional[ScopeFrame] = self
		while frame is not None:
			if base in frame.counters:
				return frame.counters[base]
			frame = frame.parent
		return None

	def visible(self) -> Dict[str, int]:
		"""All counters visible from this frame (innermost wins)."""
		chain = []
		frame: Optional[ScopeFrame] = self
		while frame is not None:
			chain.append(frame)
			frame = frame.parent
		out: Dict[str, int] = {}
		for f in reversed(chain):
			out.update(f.counters)
		return out


class ScopeStack:
	"""
	Stack of ScopeFrames for one traversal.

	A ScopeStack belongs to exactly one in-flight rewrite; it holds no global
	state and must not be shared between concurrent rewrites.
	"""

	def __init__(self) -> None:
		self._top = ScopeFrame()
		self._depth = 0

	@property
	def depth(self) -> int:
		return self._depth

	@property
	def top(self) -> ScopeFrame:
		return self._top

	def push(self) -> ScopeFrame:
		self._top = ScopeFrame(counters=self._top.visible(), parent=self._top)
		self._depth += 1
		return self._top

	def pop(self) -> None:
		if self._top.parent is None:
			raise RuntimeError("scope stack underflow: pop without matching push")
		self._top = self._top.parent
		self._depth -= 1

	@contextmanager
	def frame(self) -> Iterator[ScopeFrame]:
		"""push() on entry, pop() on exit (also when the body raises)."""
		frame = self.push()
		try:
			yield frame
		finally:
			self.pop()

	def lookup(self, base: str) -> Optional[int]:
		return self._top.lookup(base)

	def bind(self, base: str) -> int:
		"""Allocate the next counter for `base` in the top frame."""
		current = self.lookup(base)
		counter = 0 if current is None else current + 1
		self._top.counters[base] = counter
		return counter


__all__ = ["ScopeFrame", "ScopeStack"]
