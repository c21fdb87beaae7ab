# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Renaming walker.

Walks one function in evaluation order and records, for every sequential
variable occurrence, the version it stands for. Output is built afterwards by
`synthesize`; this module never constructs tree nodes.

Order rules:
  * sequences (bodies, arguments, constructor elements) left to right;
  * a match walks its value before its pattern, so the value sees the
    versions from before the match;
  * every clause of a function/fun/case/if/receive/try gets its own frame,
    forked from the state before the construct; sibling clauses never see
    each other's bindings and nothing bound in a clause outlives it;
  * `begin ... end` is not a scope, let-blocks are (see let_block.py).

All occurrences of one base name inside a single pattern denote one variable:
the first allocates the version, the rest reuse it. A dropped-suffix match in
that pattern reads the version from before the pattern.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, Optional, Type, TypeVar

from .. import ast as A
from ..core.span import Span
from ..errors import ConflictingRedeclaration, SeqbindError, UnboundSequentialVariable
from .classify import OccurrenceKind, Position, Role, classify
from .let_block import LetBlockExpander, is_let_block
from .names import VersionedName, marked_base
from .scope import ScopeStack
from .synthesize import Resolutions

E = TypeVar("E", bound=SeqbindError)

# Node kinds whose children are walked in the position of the node itself.
_STRUCTURAL = (
	A.Tuple,
	A.ListExpr,
	A.Record,
	A.RecordField,
	A.RecordAccess,
	A.BinOp,
	A.UnOp,
	A.Remote,
	A.Catch,
	A.CatchPattern,
)
_LEAVES = (A.Atom, A.Literal, A.FunRef)


def sequential_bases(node: A.Node) -> FrozenSet[str]:
	"""Base names written with the marker anywhere under `node`."""
	found: set[str] = set()

	def _scan(n: A.Node) -> None:
		if isinstance(n, A.Var):
			base = marked_base(n.name)
			if base is not None:
				found.add(base)
			return
		for _, child in A.iter_children(n):
			_scan(child)

	_scan(node)
	return frozenset(found)


@dataclass
class WalkedFunction:
	function: A.Function
	resolutions: Resolutions


class FunctionWalk:
	"""
	Traversal state for one function: the scope stack and the decisions so far.

	Paths passed around are relative to the function node.
	"""

	def __init__(self, function: A.Function, unit: Optional[str], let_expander: LetBlockExpander) -> None:
		self.function = function
		self.unit = unit
		self.stack = ScopeStack()
		self.resolutions = Resolutions()
		self._let = let_expander
		self._sequential = sequential_bases(function)
		# base → version for the pattern currently being walked
		self._pattern_bound: Optional[Dict[str, int]] = None
		# counters visible when that pattern started; dropped-suffix matches read these
		self._pattern_before: Optional[Dict[str, int]] = None
		# explicit `Base@N` spellings, first occurrence of each
		self._explicit: Dict[str, A.Var] = {}
		self._in_guard = False

	def error(self, kind: Type[E], message: str, node: A.Node, base: Optional[str] = None) -> E:
		return kind(
			message=message,
			unit=self.unit,
			function=self.function.key,
			base_name=base,
			span=getattr(node, "loc", Span()),
		)

	# Entry ----------------------------------------------------------------

	def run(self) -> Resolutions:
		for idx, clause in enumerate(self.function.clauses):
			self.clause(clause, ("clauses", idx), Position.ARGUMENT)
		if self.stack.depth != 0:
			raise RuntimeError(f"unbalanced scope stack after {self.function.key}")
		self._check_explicit()
		return self.resolutions

	def _check_explicit(self) -> None:
		"""An explicit `Base@N` must not coincide with a version the rewrite produced."""
		generated = self.resolutions.versions()
		for spelling, node in self._explicit.items():
			version = generated.get(spelling)
			if version is not None:
				raise self.error(
					ConflictingRedeclaration,
					f"'{spelling}' is written explicitly but is also a generated version of '{version.base}@'",
					node,
					version.base,
				)

	# Clauses ----------------------------------------------------------------

	def clause(self, clause: A.Clause, path: A.Path, position: Position) -> None:
		"""Walk one clause in its own frame: patterns, then guards, then body."""
		with self.stack.frame():
			with self._pattern_group():
				for idx, pat in enumerate(clause.patterns):
					self.pattern(pat, path + ("patterns", idx), position)
			self.guards(clause.guards, path + ("guards",))
			self.body(clause.body, path + ("body",))

	def guards(self, guards: A.Guard, path: A.Path) -> None:
		prev, self._in_guard = self._in_guard, True
		try:
			for alt_idx, conj in enumerate(guards):
				for idx, test in enumerate(conj):
					self.expr(test, path + (alt_idx, idx))
		finally:
			self._in_guard = prev

	def body(self, exprs: tuple, path: A.Path) -> None:
		for idx, expr in enumerate(exprs):
			self.expr(expr, path + (idx,))

	def clauses(self, clauses: tuple, path: A.Path) -> None:
		for idx, clause in enumerate(clauses):
			self.clause(clause, path + (idx,), Position.PATTERN)

	# Expressions ----------------------------------------------------------------

	def expr(self, node: A.Node, path: A.Path) -> None:
		if isinstance(node, A.Var):
			self.var(node, path, Position.VALUE)
		elif isinstance(node, _LEAVES):
			return
		elif isinstance(node, A.Match):
			self.expr(node.value, path + ("value",))
			with self._pattern_group():
				self.pattern(node.pattern, path + ("pattern",), Position.PATTERN)
		elif isinstance(node, A.Call):
			if is_let_block(node):
				if self._in_guard:
					raise self._let.reject(self, node, "a guard")
				self._let.expand(self, node, path)
				return
			self._children(node, path, Position.VALUE)
		elif isinstance(node, A.Block):
			self.body(node.body, path + ("body",))
		elif isinstance(node, A.Case):
			self.expr(node.subject, path + ("subject",))
			self.clauses(node.clauses, path + ("clauses",))
		elif isinstance(node, A.If):
			self.clauses(node.clauses, path + ("clauses",))
		elif isinstance(node, A.Receive):
			self.clauses(node.clauses, path + ("clauses",))
			if node.after is not None:
				self.expr(node.after.timeout, path + ("after", "timeout"))
				with self.stack.frame():
					self.body(node.after.body, path + ("after", "body"))
		elif isinstance(node, A.Try):
			self._try(node, path)
		elif isinstance(node, A.Fun):
			for idx, clause in enumerate(node.clauses):
				self.clause(clause, path + ("clauses", idx), Position.ARGUMENT)
		elif isinstance(node, _STRUCTURAL):
			self._children(node, path, Position.VALUE)
		# Unknown node kinds are left alone.

	def _try(self, node: A.Try, path: A.Path) -> None:
		with self.stack.frame():
			self.body(node.body, path + ("body",))
			self.clauses(node.clauses, path + ("clauses",))
		self.clauses(node.catch_clauses, path + ("catch_clauses",))
		if node.after:
			with self.stack.frame():
				self.body(node.after, path + ("after",))

	# Patterns ----------------------------------------------------------------

	def pattern(self, node: A.Node, path: A.Path, position: Position) -> None:
		if isinstance(node, A.Var):
			self.var(node, path, position)
		elif isinstance(node, _LEAVES):
			return
		elif isinstance(node, A.Match):
			# Alias inside a pattern: both sides are patterns.
			self.pattern(node.pattern, path + ("pattern",), position)
			self.pattern(node.value, path + ("value",), position)
		elif isinstance(node, A.Call) and is_let_block(node):
			raise self._let.reject(self, node, "a pattern")
		elif isinstance(node, _STRUCTURAL):
			self._children(node, path, position)
		elif isinstance(node, (A.Call, A.Block, A.Case, A.If, A.Receive, A.Try, A.Fun)):
			# Not a legal pattern; read it as an expression.
			self.expr(node, path)

	def _children(self, node: A.Node, path: A.Path, position: Position) -> None:
		for rel, child in A.iter_children(node):
			if position is Position.VALUE:
				self.expr(child, path + rel)
			else:
				self.pattern(child, path + rel, position)

	@contextmanager
	def _pattern_group(self) -> Iterator[None]:
		prev = (self._pattern_bound, self._pattern_before)
		self._pattern_bound, self._pattern_before = {}, self.stack.top.visible()
		try:
			yield
		finally:
			self._pattern_bound, self._pattern_before = prev

	# Variables ----------------------------------------------------------------

	def var(self, node: A.Var, path: A.Path, position: Position) -> None:
		occ = classify(node, position, self._sequential)
		if occ.kind is OccurrenceKind.EXPLICIT:
			self._explicit.setdefault(node.name, node)
		if not occ.renamed:
			return
		base = occ.base
		assert base is not None
		if occ.kind is OccurrenceKind.DROPPED_SUFFIX and position is Position.ARGUMENT:
			raise self.error(
				ConflictingRedeclaration,
				f"'{base}' is a sequential variable; an argument pattern always binds, write '{base}@'",
				node,
				base,
			)
		if occ.role is Role.BINDING:
			counter = self._bind(base)
		else:
			counter = self._resolve(occ.kind, base)
			if counter is None:
				what = f"'{base}'" if occ.kind is OccurrenceKind.DROPPED_SUFFIX else f"'{node.name}'"
				raise self.error(
					UnboundSequentialVariable,
					f"{what} is used before any binding of sequential variable '{base}@'",
					node,
					base,
				)
		self.resolutions.renames[path] = VersionedName(base=base, counter=counter)
		self.resolutions.originals[path] = node.name

	def _resolve(self, kind: OccurrenceKind, base: str) -> Optional[int]:
		# A dropped-suffix match compares against the value from before the
		# pattern, not against a version bound earlier in the same pattern.
		if kind is OccurrenceKind.DROPPED_SUFFIX and self._pattern_before is not None:
			return self._pattern_before.get(base)
		return self.stack.lookup(base)

	def _bind(self, base: str) -> int:
		group = self._pattern_bound
		if group is not None and base in group:
			return group[base]
		counter = self.stack.bind(base)
		if group is not None:
			group[base] = counter
		return counter


class RenamingWalker:
	"""Walks the functions of one unit; one FunctionWalk per function."""

	def __init__(self, unit: Optional[str] = None, let_expander: Optional[LetBlockExpander] = None) -> None:
		self.unit = unit
		self.let_expander = let_expander or LetBlockExpander()

	def walk_function(self, function: A.Function) -> WalkedFunction:
		walk = FunctionWalk(function, self.unit, self.let_expander)
		return WalkedFunction(function=function, resolutions=walk.run())


__all__ = ["FunctionWalk", "RenamingWalker", "WalkedFunction", "sequential_bases"]
