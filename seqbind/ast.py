# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
SourceTree: the immutable tree of one compilation unit.

Pipeline placement:
  Erlang text → parser (seqbind/parser) → SourceTree (this file) → rewrite → printer

Guiding rules:
- Nodes are purely syntactic. Patterns and expressions share node kinds; the
  position a node sits in decides how it is read (the rewrite tracks that).
- Nodes are frozen; sequences are tuples. A rewrite builds new nodes.
- Every node carries a `loc` Span pointing back at the original source.
- Any `Node` subclass not listed here is "unknown" and passes through the
  rewrite unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Iterator, Optional, Union

from .core.span import Span


class Node:
	"""Base class for all SourceTree nodes."""

	loc: Span


# A path addresses a node from the root: field names and tuple indices.
PathElem = Union[str, int]
Path = tuple[PathElem, ...]


# Leaves

@dataclass(frozen=True)
class Var(Node):
	"""Variable occurrence (pattern or expression). `_` is the wildcard."""
	name: str
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Atom(Node):
	"""Atom, spelled as in source (quoted atoms keep their quotes)."""
	name: str
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Literal(Node):
	"""Number, string or char literal kept as its source text."""
	text: str
	loc: Span = field(default_factory=Span)


# Data constructors

@dataclass(frozen=True)
class Tuple(Node):
	"""`{E1, ..., En}`."""
	elements: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class ListExpr(Node):
	"""`[E1, ..., En | Tail]`; `[]` has no elements and no tail."""
	elements: tuple[Node, ...]
	tail: Optional[Node] = None
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class RecordField(Node):
	"""`name = Value` inside a record expression or pattern."""
	name: str
	value: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Record(Node):
	"""`#name{...}`, or `Base#name{...}` (record update) when `base` is set."""
	name: str
	fields: tuple[RecordField, ...]
	base: Optional[Node] = None
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class RecordAccess(Node):
	"""`Subject#record.field`."""
	subject: Node
	record: str
	field_name: str
	loc: Span = field(default_factory=Span)


# Operators and calls

@dataclass(frozen=True)
class Match(Node):
	"""`Pattern = Value`; inside a pattern this is an alias (both sides patterns)."""
	pattern: Node
	value: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class BinOp(Node):
	"""Binary operator, including send (`!`), `andalso` and `orelse`."""
	op: str
	left: Node
	right: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class UnOp(Node):
	"""Prefix operator: `-`, `+`, `not`, `bnot`."""
	op: str
	operand: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Remote(Node):
	"""`Module:Function` (callee of a remote call)."""
	module: Node
	function: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Call(Node):
	"""`Callee(Args...)`; `callee` is an Atom, a Remote, or any expression."""
	callee: Node
	args: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class FunRef(Node):
	"""`fun name/Arity` or `fun module:name/Arity`."""
	module: Optional[str]
	name: str
	arity: int
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Catch(Node):
	"""Prefix `catch Expr`."""
	expr: Node
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Block(Node):
	"""`begin E1, ..., En end`."""
	body: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


# Clause-like constructs

Guard = tuple[tuple[Node, ...], ...]


@dataclass(frozen=True)
class Clause(Node):
	"""
	One guarded alternative.

	`patterns` is the argument list of a function/fun clause, a single pattern
	for case/receive/try clauses, and empty for `if` clauses. `guards` is a
	guard sequence: alternatives (`;`) of conjunctions (`,`).
	"""
	patterns: tuple[Node, ...]
	guards: Guard
	body: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class CatchPattern(Node):
	"""`Class:Reason:Stack` head of a catch clause (class/stack optional)."""
	cls: Optional[Node]
	reason: Node
	stack: Optional[Node] = None
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Case(Node):
	subject: Node
	clauses: tuple[Clause, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class If(Node):
	clauses: tuple[Clause, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class After(Node):
	"""`after Timeout -> Body` section of a receive."""
	timeout: Node
	body: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Receive(Node):
	clauses: tuple[Clause, ...]
	after: Optional[After] = None
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Try(Node):
	"""`try Body of Clauses catch CatchClauses after After end`."""
	body: tuple[Node, ...]
	clauses: tuple[Clause, ...] = ()
	catch_clauses: tuple[Clause, ...] = ()
	after: tuple[Node, ...] = ()
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Fun(Node):
	"""Anonymous function literal `fun (...) -> ... end`."""
	clauses: tuple[Clause, ...]
	loc: Span = field(default_factory=Span)


# Forms

@dataclass(frozen=True)
class Function(Node):
	name: str
	arity: int
	clauses: tuple[Clause, ...]
	loc: Span = field(default_factory=Span)

	@property
	def key(self) -> str:
		return f"{self.name}/{self.arity}"


@dataclass(frozen=True)
class Attribute(Node):
	"""`-name(Args).` module attribute."""
	name: str
	args: tuple[Node, ...]
	loc: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Unit(Node):
	"""One compilation unit (one source file)."""
	module: Optional[str]
	forms: tuple[Node, ...]
	file: Optional[str] = None
	loc: Span = field(default_factory=Span)

	def functions(self) -> Iterator[Function]:
		for form in self.forms:
			if isinstance(form, Function):
				yield form


# Generic traversal helpers

def iter_children(node: Node) -> Iterator[tuple[Path, Node]]:
	"""
	Yield `(relative_path, child)` for every direct child node, in field order.

	Tuple-valued fields (including the nested guard tuples) are flattened with
	their indices in the path. Non-dataclass nodes have no visible children.
	"""
	if not hasattr(node, "__dataclass_fields__"):
		return
	for f in fields(node):  # type: ignore[arg-type]
		if f.name == "loc":
			continue
		yield from _iter_value((f.name,), getattr(node, f.name))


def _iter_value(path: Path, value: object) -> Iterator[tuple[Path, Node]]:
	if isinstance(value, Node):
		yield path, value
	elif isinstance(value, tuple):
		for idx, item in enumerate(value):
			yield from _iter_value(path + (idx,), item)


def rebuild(node: Node, fn) -> Node:
	"""
	Return a copy of `node` with every direct child replaced by `fn(path, child)`.

	Shape is preserved: tuples keep their lengths, `None` stays `None`. When no
	child changes, the original node object is returned.
	"""
	if not hasattr(node, "__dataclass_fields__"):
		return node
	changes: dict[str, object] = {}
	for f in fields(node):  # type: ignore[arg-type]
		if f.name == "loc":
			continue
		old = getattr(node, f.name)
		new = _rebuild_value((f.name,), old, fn)
		if new is not old:
			changes[f.name] = new
	if not changes:
		return node
	return replace(node, **changes)  # type: ignore[type-var]


def _rebuild_value(path: Path, value: object, fn) -> object:
	if isinstance(value, Node):
		return fn(path, value)
	if isinstance(value, tuple):
		items = tuple(_rebuild_value(path + (idx,), item, fn) for idx, item in enumerate(value))
		if all(a is b for a, b in zip(items, value)):
			return value
		return items
	return value


def count_nodes(node: Node) -> int:
	return 1 + sum(count_nodes(child) for _, child in iter_children(node))


def shape(node: Node) -> tuple:
	"""
	Structural fingerprint ignoring variable spelling and spans.

	Two trees that differ only in the names of their `Var` leaves have equal
	shapes.
	"""
	if isinstance(node, Var):
		return ("Var",)
	return (type(node).__name__,) + tuple((path, shape(child)) for path, child in iter_children(node))


__all__ = [
	"Node",
	"Path",
	"Var",
	"Atom",
	"Literal",
	"Tuple",
	"ListExpr",
	"RecordField",
	"Record",
	"RecordAccess",
	"Match",
	"BinOp",
	"UnOp",
	"Remote",
	"Call",
	"FunRef",
	"Catch",
	"Block",
	"Guard",
	"Clause",
	"CatchPattern",
	"Case",
	"If",
	"After",
	"Receive",
	"Try",
	"Fun",
	"Function",
	"Attribute",
	"Unit",
	"iter_children",
	"rebuild",
	"count_nodes",
	"shape",
]
