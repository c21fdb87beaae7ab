# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark front-end: Erlang-subset text → SourceTree (seqbind.ast).

The grammar lives next to this file (`grammar.lark`); the LALR parser is built
once at import. Builders walk the lark tree by rule name and attach a Span to
every node they create.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree

from .. import ast as A
from ..core.span import Span
from ..errors import ParseError

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def parse_tree(source: str) -> Tree:
	"""Raw lark parse; raises lark's UnexpectedInput on syntax errors."""
	return _PARSER.parse(source)


def build_unit(tree: Tree, file: Optional[str] = None) -> A.Unit:
	return _Builder(file).unit(tree)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree, name: Optional[str] = None) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and (name is None or _name(c) == name)]


def _subtree(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == name), None)


def _tokens(tree: Tree, ttype: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type == ttype]


class _Builder:
	def __init__(self, file: Optional[str]) -> None:
		self.file = file

	def span(self, node: Tree | Token) -> Span:
		if isinstance(node, Token):
			return Span.from_loc(node, self.file)
		return Span.from_loc(node.meta, self.file)

	def error(self, message: str, node: Tree | Token) -> ParseError:
		return ParseError(message=message, unit=self.file, span=self.span(node))

	# Forms ----------------------------------------------------------------

	def unit(self, tree: Tree) -> A.Unit:
		forms: List[A.Node] = []
		module: Optional[str] = None
		for child in _trees(tree):
			kind = _name(child)
			if kind == "attribute":
				attr = self.attribute(child)
				if attr.name == "module" and len(attr.args) == 1 and isinstance(attr.args[0], A.Atom):
					module = attr.args[0].name
				forms.append(attr)
			elif kind == "function":
				forms.append(self.function(child))
			else:
				raise self.error(f"unexpected form '{kind}'", child)
		return A.Unit(module=module, forms=tuple(forms), file=self.file, loc=self.span(tree))

	def attribute(self, tree: Tree) -> A.Attribute:
		name = _tokens(tree, "ATOM")[0]
		args = self.exprs(_subtree(tree, "exprs"))
		return A.Attribute(name=name.value, args=args, loc=self.span(tree))

	def function(self, tree: Tree) -> A.Function:
		heads: List[Tuple[str, A.Clause]] = []
		for clause_tree in _trees(tree, "function_clause"):
			name = _tokens(clause_tree, "ATOM")[0].value
			heads.append((name, self.clause(clause_tree, patterns=self.exprs(_subtree(clause_tree, "exprs")))))
		name, first = heads[0]
		arity = len(first.patterns)
		for other_name, clause in heads[1:]:
			if other_name != name or len(clause.patterns) != arity:
				raise ParseError(
					message=f"head mismatch: {other_name}/{len(clause.patterns)} in definition of {name}/{arity}",
					unit=self.file,
					span=clause.loc,
				)
		return A.Function(name=name, arity=arity, clauses=tuple(c for _, c in heads), loc=self.span(tree))

	# Clauses ----------------------------------------------------------------

	def clause(self, tree: Tree, patterns: Tuple[A.Node, ...]) -> A.Clause:
		guard_tree = _subtree(tree, "guard")
		return A.Clause(
			patterns=patterns,
			guards=self.guard(guard_tree) if guard_tree is not None else (),
			body=self.body(_subtree(tree, "body")),
			loc=self.span(tree),
		)

	def guard(self, tree: Tree) -> A.Guard:
		"""`guard` and `guard_seq` trees: alternatives of conjunctions."""
		return tuple(tuple(self.expr(e) for e in conj.children) for conj in _trees(tree, "guard_conj"))

	def body(self, tree: Optional[Tree]) -> Tuple[A.Node, ...]:
		if tree is None:
			return ()
		return tuple(self.expr(e) for e in tree.children)

	def exprs(self, tree: Optional[Tree]) -> Tuple[A.Node, ...]:
		return self.body(tree)

	def cr_clauses(self, tree: Optional[Tree]) -> Tuple[A.Clause, ...]:
		if tree is None:
			return ()
		out = []
		for clause_tree in _trees(tree, "cr_clause"):
			out.append(self.clause(clause_tree, patterns=(self.expr(clause_tree.children[0]),)))
		return tuple(out)

	# Expressions ----------------------------------------------------------------

	def expr(self, node: Tree | Token) -> A.Node:
		if isinstance(node, Token):
			raise self.error(f"unexpected token {node.type}", node)
		kind = _name(node)
		loc = self.span(node)
		ch = node.children
		if kind == "var":
			return A.Var(name=ch[0].value, loc=loc)
		if kind == "atom":
			return A.Atom(name=ch[0].value, loc=loc)
		if kind in ("integer", "float", "char"):
			return A.Literal(text=ch[0].value, loc=loc)
		if kind == "string":
			return A.Literal(text=" ".join(tok.value for tok in ch), loc=loc)
		if kind == "catch_expr":
			return A.Catch(expr=self.expr(ch[0]), loc=loc)
		if kind == "match":
			return A.Match(pattern=self.expr(ch[0]), value=self.expr(ch[1]), loc=loc)
		if kind == "send":
			return A.BinOp(op="!", left=self.expr(ch[0]), right=self.expr(ch[1]), loc=loc)
		if kind in ("orelse", "andalso"):
			return A.BinOp(op=kind, left=self.expr(ch[0]), right=self.expr(ch[1]), loc=loc)
		if kind == "binop":
			op = ch[1].children[0].value
			return A.BinOp(op=op, left=self.expr(ch[0]), right=self.expr(ch[2]), loc=loc)
		if kind == "unop":
			op = ch[0].children[0].value
			return A.UnOp(op=op, operand=self.expr(ch[1]), loc=loc)
		if kind == "record":
			name = _tokens(node, "ATOM")[0].value
			return A.Record(name=name, fields=self.record_fields(_subtree(node, "record_fields")), loc=loc)
		if kind == "record_update":
			name = _tokens(node, "ATOM")[0].value
			return A.Record(
				name=name,
				fields=self.record_fields(_subtree(node, "record_fields")),
				base=self.expr(ch[0]),
				loc=loc,
			)
		if kind == "record_access":
			record, field_name = _tokens(node, "ATOM")
			return A.RecordAccess(subject=self.expr(ch[0]), record=record.value, field_name=field_name.value, loc=loc)
		if kind == "call":
			return A.Call(callee=self.expr(ch[0]), args=self.exprs(_subtree(node, "exprs")), loc=loc)
		if kind == "remote":
			return A.Remote(module=self.expr(ch[0]), function=self.expr(ch[1]), loc=loc)
		if kind == "tuple":
			return A.Tuple(elements=self.exprs(_subtree(node, "exprs")), loc=loc)
		if kind == "nil":
			return A.ListExpr(elements=(), loc=loc)
		if kind == "list":
			tail = self.expr(ch[1]) if len(ch) > 1 else None
			return A.ListExpr(elements=self.exprs(ch[0]), tail=tail, loc=loc)
		if kind == "block":
			return A.Block(body=self.body(ch[0]), loc=loc)
		if kind == "case_expr":
			return A.Case(subject=self.expr(ch[0]), clauses=self.cr_clauses(ch[1]), loc=loc)
		if kind == "if_expr":
			clauses = tuple(
				A.Clause(
					patterns=(),
					guards=self.guard(_subtree(c, "guard_seq")),
					body=self.body(_subtree(c, "body")),
					loc=self.span(c),
				)
				for c in _trees(node, "if_clause")
			)
			return A.If(clauses=clauses, loc=loc)
		if kind == "receive_expr":
			return self.receive(node, loc)
		if kind == "try_expr":
			return self.try_(node, loc)
		if kind == "fun_expr":
			clauses = tuple(
				self.clause(c, patterns=self.exprs(_subtree(c, "exprs")))
				for c in _trees(node, "fun_clause")
			)
			return A.Fun(clauses=clauses, loc=loc)
		if kind == "fun_ref":
			atoms = _tokens(node, "ATOM")
			arity = int(_tokens(node, "INT")[0].value)
			if len(atoms) == 2:
				return A.FunRef(module=atoms[0].value, name=atoms[1].value, arity=arity, loc=loc)
			return A.FunRef(module=None, name=atoms[0].value, arity=arity, loc=loc)
		raise self.error(f"unsupported expression '{kind}'", node)

	def record_fields(self, tree: Optional[Tree]) -> Tuple[A.RecordField, ...]:
		if tree is None:
			return ()
		return tuple(
			A.RecordField(name=f.children[0].value, value=self.expr(f.children[1]), loc=self.span(f))
			for f in _trees(tree, "record_field")
		)

	def receive(self, node: Tree, loc: Span) -> A.Receive:
		clauses = self.cr_clauses(_subtree(node, "cr_clauses"))
		rest = [c for c in node.children if not (isinstance(c, Tree) and _name(c) == "cr_clauses")]
		after = None
		if rest:
			timeout, body = rest
			after = A.After(timeout=self.expr(timeout), body=self.body(body), loc=self.span(timeout))
		return A.Receive(clauses=clauses, after=after, loc=loc)

	def try_(self, node: Tree, loc: Span) -> A.Try:
		body = self.body(node.children[0])
		try_of = _subtree(node, "try_of")
		clauses = self.cr_clauses(_subtree(try_of, "cr_clauses")) if try_of is not None else ()
		try_catch = _subtree(node, "try_catch")
		catch_clauses: Tuple[A.Clause, ...] = ()
		after: Tuple[A.Node, ...] = ()
		if try_catch is not None:
			handlers = _subtree(try_catch, "try_clauses")
			if handlers is not None:
				catch_clauses = tuple(
					self.clause(c, patterns=(self.catch_pattern(c.children[0]),))
					for c in _trees(handlers, "try_clause")
				)
			after_tree = _subtree(try_catch, "try_after")
			if after_tree is not None:
				after = self.body(after_tree.children[0])
		return A.Try(body=body, clauses=clauses, catch_clauses=catch_clauses, after=after, loc=loc)

	def catch_pattern(self, tree: Tree) -> A.CatchPattern:
		loc = self.span(tree)
		if _name(tree) == "catch_pattern3":
			cls, reason, stack = (self.expr(c) for c in tree.children)
			return A.CatchPattern(cls=cls, reason=reason, stack=stack, loc=loc)
		inner = self.expr(tree.children[0])
		if isinstance(inner, A.Remote):
			return A.CatchPattern(cls=inner.module, reason=inner.function, loc=loc)
		return A.CatchPattern(cls=None, reason=inner, loc=loc)


__all__ = ["parse_tree", "build_unit"]
