# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Output synthesizer.

The walker only decides; this module builds the output tree. Every `Var`
whose path was resolved gets its versioned spelling, every expanded let-block
call becomes a `begin ... end` block over the same (rewritten) arguments, and
everything else is copied unchanged. Unchanged subtrees are shared with the
input rather than copied.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import AbstractSet, Dict, Mapping, Set

from .. import ast as A
from .let_block import let_call
from .names import VersionedName


@dataclass
class Resolutions:
	"""Decisions recorded by the walker, keyed by path from the function root."""

	renames: Dict[A.Path, VersionedName] = field(default_factory=dict)
	let_blocks: Set[A.Path] = field(default_factory=set)
	# path → spelling before the rewrite
	originals: Dict[A.Path, str] = field(default_factory=dict)

	def versions(self) -> Dict[str, VersionedName]:
		"""Reverse mapping: versioned spelling → (base, counter)."""
		return {v.spelling: v for v in self.renames.values()}


def synthesize(node: A.Node, resolutions: Resolutions, path: A.Path = ()) -> A.Node:
	rename = resolutions.renames.get(path)
	if rename is not None and isinstance(node, A.Var):
		return replace(node, name=rename.spelling)
	rebuilt = A.rebuild(node, lambda rel, child: synthesize(child, resolutions, path + rel))
	if path in resolutions.let_blocks and isinstance(rebuilt, A.Call):
		return A.Block(body=rebuilt.args, loc=node.loc)
	return rebuilt


def strip_versions(
	node: A.Node,
	originals: Mapping[A.Path, str],
	let_blocks: AbstractSet[A.Path] = frozenset(),
	path: A.Path = (),
) -> A.Node:
	"""
	Undo a rewrite using its recorded metadata.

	Every `Var` at a path in `originals` gets back the spelling it had before
	the rewrite (`Req@2` → `Req@`, or `Req` for a dropped-suffix match), and
	blocks at `let_blocks` go back to the let-block call. Names the rewrite did
	not produce are left alone even when they look versioned. The result has
	the same shape as the pre-rewrite tree.
	"""
	original = originals.get(path)
	if original is not None and isinstance(node, A.Var):
		return replace(node, name=original)
	if path in let_blocks and isinstance(node, A.Block):
		# the walker recorded the block contents under the call's `args`
		args = tuple(
			strip_versions(child, originals, let_blocks, path + ("args", idx))
			for idx, child in enumerate(node.body)
		)
		return let_call(args, loc=node.loc)
	return A.rebuild(node, lambda rel, child: strip_versions(child, originals, let_blocks, path + rel))


__all__ = ["Resolutions", "synthesize", "strip_versions"]
