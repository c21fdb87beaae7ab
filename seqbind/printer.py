# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
SourceTree → Erlang text.

Layout is fixed (four-space indentation, one body expression per line) and
operators are parenthesized by precedence, so printing a parsed unit yields
text that parses back to the same tree shape.
"""

from __future__ import annotations

from typing import List

from . import ast as A

INDENT = "    "

# Binding strength, loosest first.
_PREC_CATCH = 0
_PREC_MATCH = 1
_PREC_PREFIX = 8
_PREC_RECORD = 9
_PREC_REMOTE = 10
_PREC_MAX = 11

_BINOP_PREC = {
	"!": 1,
	"orelse": 2,
	"andalso": 3,
	"==": 4, "/=": 4, "=<": 4, "<": 4, ">=": 4, ">": 4, "=:=": 4, "=/=": 4,
	"++": 5, "--": 5,
	"+": 6, "-": 6, "bor": 6, "bxor": 6, "bsl": 6, "bsr": 6, "or": 6, "xor": 6,
	"*": 7, "/": 7, "div": 7, "rem": 7, "band": 7, "and": 7,
}
_RIGHT_ASSOC = {"!", "++", "--", "orelse", "andalso"}
_NON_ASSOC = {"==", "/=", "=<", "<", ">=", ">", "=:=", "=/="}
_WORD_PREFIX = {"not", "bnot"}


def _prec(node: A.Node) -> int:
	if isinstance(node, A.Catch):
		return _PREC_CATCH
	if isinstance(node, A.Match):
		return _PREC_MATCH
	if isinstance(node, A.BinOp):
		return _BINOP_PREC.get(node.op, _PREC_MATCH)
	if isinstance(node, A.UnOp):
		return _PREC_PREFIX
	if isinstance(node, A.RecordAccess) or (isinstance(node, A.Record) and node.base is not None):
		return _PREC_RECORD
	if isinstance(node, A.Remote):
		return _PREC_REMOTE
	return _PREC_MAX


def _wrap(node: A.Node, min_prec: int, indent: int) -> str:
	text = format_node(node, indent)
	if _prec(node) < min_prec:
		return f"({text})"
	return text


def _seq(nodes, indent: int) -> str:
	return ", ".join(format_node(n, indent) for n in nodes)


def _body(exprs, indent: int) -> str:
	pad = INDENT * indent
	return ",\n".join(pad + format_node(e, indent) for e in exprs)


def format_guard(guards: A.Guard, indent: int = 0) -> str:
	return "; ".join(_seq(conj, indent) for conj in guards)


def _clause(head: str, clause: A.Clause, indent: int) -> str:
	guard = f" when {format_guard(clause.guards, indent)}" if clause.guards else ""
	return f"{INDENT * indent}{head}{guard} ->\n{_body(clause.body, indent + 1)}"


def _clauses(clauses, indent: int, head_of) -> str:
	return ";\n".join(_clause(head_of(c), c, indent) for c in clauses)


def _pattern_head(clause: A.Clause, indent: int) -> str:
	return _seq(clause.patterns, indent)


def format_clause_head(name: str, clause: A.Clause) -> str:
	guard = f" when {format_guard(clause.guards)}" if clause.guards else ""
	return f"{name}({_seq(clause.patterns, 0)}){guard} ->"


def format_node(node: A.Node, indent: int = 0) -> str:
	"""Render one node; `indent` is the nesting level of the line it starts on."""
	if isinstance(node, A.Var):
		return node.name
	if isinstance(node, A.Atom):
		return node.name
	if isinstance(node, A.Literal):
		return node.text
	if isinstance(node, A.Tuple):
		return "{" + _seq(node.elements, indent) + "}"
	if isinstance(node, A.ListExpr):
		tail = f" | {format_node(node.tail, indent)}" if node.tail is not None else ""
		return "[" + _seq(node.elements, indent) + tail + "]"
	if isinstance(node, A.RecordField):
		return f"{node.name} = {format_node(node.value, indent)}"
	if isinstance(node, A.Record):
		base = _wrap(node.base, _PREC_RECORD, indent) if node.base is not None else ""
		return f"{base}#{node.name}{{{_seq(node.fields, indent)}}}"
	if isinstance(node, A.RecordAccess):
		return f"{_wrap(node.subject, _PREC_RECORD, indent)}#{node.record}.{node.field_name}"
	if isinstance(node, A.Match):
		return f"{_wrap(node.pattern, _PREC_MATCH + 1, indent)} = {_wrap(node.value, _PREC_MATCH, indent)}"
	if isinstance(node, A.BinOp):
		p = _prec(node)
		left_min, right_min = p + 1, p + 1
		if node.op in _RIGHT_ASSOC:
			right_min = p
		elif node.op not in _NON_ASSOC:
			left_min = p
		return f"{_wrap(node.left, left_min, indent)} {node.op} {_wrap(node.right, right_min, indent)}"
	if isinstance(node, A.UnOp):
		sep = " " if node.op in _WORD_PREFIX or isinstance(node.operand, A.UnOp) else ""
		return f"{node.op}{sep}{_wrap(node.operand, _PREC_PREFIX, indent)}"
	if isinstance(node, A.Remote):
		return f"{_wrap(node.module, _PREC_MAX, indent)}:{_wrap(node.function, _PREC_MAX, indent)}"
	if isinstance(node, A.Call):
		callee = node.callee
		head = format_node(callee, indent) if isinstance(callee, A.Remote) else _wrap(callee, _PREC_MAX, indent)
		return f"{head}({_seq(node.args, indent)})"
	if isinstance(node, A.FunRef):
		qual = f"{node.module}:" if node.module is not None else ""
		return f"fun {qual}{node.name}/{node.arity}"
	if isinstance(node, A.Catch):
		return f"catch {_wrap(node.expr, _PREC_CATCH, indent)}"
	if isinstance(node, A.CatchPattern):
		parts = [node.cls, node.reason, node.stack]
		return ":".join(format_node(p, indent) for p in parts if p is not None)
	if isinstance(node, A.Block):
		return f"begin\n{_body(node.body, indent + 1)}\n{INDENT * indent}end"
	if isinstance(node, A.Case):
		clauses = _clauses(node.clauses, indent + 1, lambda c: _pattern_head(c, indent + 1))
		return f"case {format_node(node.subject, indent)} of\n{clauses}\n{INDENT * indent}end"
	if isinstance(node, A.If):
		clauses = ";\n".join(
			f"{INDENT * (indent + 1)}{format_guard(c.guards, indent + 1)} ->\n{_body(c.body, indent + 2)}"
			for c in node.clauses
		)
		return f"if\n{clauses}\n{INDENT * indent}end"
	if isinstance(node, A.Receive):
		parts: List[str] = ["receive"]
		if node.clauses:
			parts.append(_clauses(node.clauses, indent + 1, lambda c: _pattern_head(c, indent + 1)))
		if node.after is not None:
			parts.append(f"{INDENT * indent}after {format_node(node.after.timeout, indent)} ->")
			parts.append(_body(node.after.body, indent + 1))
		parts.append(f"{INDENT * indent}end")
		return "\n".join(parts)
	if isinstance(node, A.Try):
		parts = [f"try\n{_body(node.body, indent + 1)}"]
		if node.clauses:
			parts.append(f"{INDENT * indent}of\n" + _clauses(node.clauses, indent + 1, lambda c: _pattern_head(c, indent + 1)))
		if node.catch_clauses:
			parts.append(f"{INDENT * indent}catch\n" + _clauses(node.catch_clauses, indent + 1, lambda c: _pattern_head(c, indent + 1)))
		if node.after:
			parts.append(f"{INDENT * indent}after\n{_body(node.after, indent + 1)}")
		parts.append(f"{INDENT * indent}end")
		return "\n".join(parts)
	if isinstance(node, A.Fun):
		clauses = ";\n".join(
			_clause(f"({_seq(c.patterns, indent + 1)})", c, indent + 1) for c in node.clauses
		)
		return f"fun\n{clauses}\n{INDENT * indent}end"
	if isinstance(node, A.Function):
		return format_function(node)
	if isinstance(node, A.Attribute):
		return f"-{node.name}({_seq(node.args, indent)})."
	raise TypeError(f"cannot print node of type {type(node).__name__}")


def format_function(fn: A.Function) -> str:
	return ";\n".join(_clause(f"{fn.name}({_seq(c.patterns, 0)})", c, 0) for c in fn.clauses) + "."


def format_unit(unit: A.Unit) -> str:
	chunks: List[str] = []
	prev_attr = False
	for form in unit.forms:
		is_attr = isinstance(form, A.Attribute)
		if chunks and not (is_attr and prev_attr):
			chunks.append("")
		chunks.append(format_node(form))
		prev_attr = is_attr
	return "\n".join(chunks) + "\n"


__all__ = ["format_node", "format_function", "format_unit", "format_guard", "format_clause_head"]
