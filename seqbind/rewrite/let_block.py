# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Let-block expander.

`seqbind:let(E1, ..., En)` evaluates E1..En in order and yields En, like
`begin ... end`, but every sequential variable bound inside is forgotten
afterwards: code after the block resolves against the versions visible
before it. The walker hands the call over here; its arguments are walked in a
pushed frame and the call is marked so the synthesizer emits a plain block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from .. import ast as A
from ..core.span import Span
from ..errors import MalformedLetBlock

if TYPE_CHECKING:
	from .walker import FunctionWalk

LET_MODULE = "seqbind"
LET_FUNCTION = "let"


def _atom_text(node: A.Node) -> str | None:
	if not isinstance(node, A.Atom):
		return None
	name = node.name
	if len(name) >= 2 and name[0] == "'" and name[-1] == "'":
		return name[1:-1]
	return name


def is_let_block(node: A.Node) -> bool:
	"""True for a call spelled `seqbind:let(...)` (quoted atoms allowed)."""
	if not isinstance(node, A.Call) or not isinstance(node.callee, A.Remote):
		return False
	return _atom_text(node.callee.module) == LET_MODULE and _atom_text(node.callee.function) == LET_FUNCTION


def let_call(body: Tuple[A.Node, ...], loc: Span = Span()) -> A.Call:
	"""Build the let-block call form around `body`."""
	remote = A.Remote(module=A.Atom(LET_MODULE, loc=loc), function=A.Atom(LET_FUNCTION, loc=loc), loc=loc)
	return A.Call(callee=remote, args=tuple(body), loc=loc)


class LetBlockExpander:
	"""Expands let-blocks on behalf of a FunctionWalk."""

	def expand(self, walk: "FunctionWalk", call: A.Call, path: A.Path) -> None:
		if not call.args:
			raise walk.error(
				MalformedLetBlock,
				f"{LET_MODULE}:{LET_FUNCTION}() needs at least one expression",
				call,
			)
		with walk.stack.frame():
			for idx, expr in enumerate(call.args):
				walk.expr(expr, path + ("args", idx))
		walk.resolutions.let_blocks.add(path)

	def reject(self, walk: "FunctionWalk", call: A.Call, where: str) -> MalformedLetBlock:
		return walk.error(
			MalformedLetBlock,
			f"{LET_MODULE}:{LET_FUNCTION}(...) is not allowed in {where}; it must be used where a value is expected",
			call,
		)


__all__ = ["LET_MODULE", "LET_FUNCTION", "is_let_block", "let_call", "LetBlockExpander"]
