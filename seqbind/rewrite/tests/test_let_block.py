# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Let-block expansion: scoped rebinding that reverts on exit.
"""

import pytest

from seqbind import ast as A
from seqbind.errors import MalformedLetBlock
from seqbind.rewrite import rewrite_unit
from seqbind.rewrite.let_block import is_let_block, let_call


def V(name):
	return A.Var(name)


def let(*exprs):
	return let_call(tuple(exprs))


def rewrite_body(patterns, body, guards=()):
	clause = A.Clause(patterns=tuple(patterns), guards=guards, body=tuple(body))
	fn = A.Function(name="f", arity=len(patterns), clauses=(clause,))
	result = rewrite_unit(A.Unit(module="m", forms=(fn,)))
	return next(result.unit.functions()).clauses[0], result


def test_recognizes_plain_and_quoted_spellings():
	assert is_let_block(let(A.Atom("ok")))
	quoted = A.Call(callee=A.Remote(A.Atom("'seqbind'"), A.Atom("'let'")), args=(A.Atom("ok"),))
	assert is_let_block(quoted)
	other = A.Call(callee=A.Remote(A.Atom("lists"), A.Atom("let")), args=(A.Atom("ok"),))
	assert not is_let_block(other)
	assert not is_let_block(A.Call(callee=A.Atom("let"), args=()))


def test_let_block_bindings_revert_after_block():
	# f(X@) -> Y = seqbind:let(X@ = g(X@), X@ = h(X@), X@), {Y, X@}.
	block = let(
		A.Match(V("X@"), A.Call(A.Atom("g"), (V("X@"),))),
		A.Match(V("X@"), A.Call(A.Atom("h"), (V("X@"),))),
		V("X@"),
	)
	clause, _ = rewrite_body([V("X@")], [A.Match(V("Y"), block), A.Tuple((V("Y"), V("X@")))])
	expanded = clause.body[0].value
	assert isinstance(expanded, A.Block)
	first, second, last = expanded.body
	assert first.value.args[0].name == "X@0"
	assert first.pattern.name == "X@1"
	assert second.value.args[0].name == "X@1"
	assert second.pattern.name == "X@2"
	assert last.name == "X@2"
	assert clause.body[1].elements[1].name == "X@0"


def test_nested_let_blocks_restore_innermost_first():
	inner = let(A.Match(V("X@"), A.Literal("2")), V("X@"))
	outer = let(A.Match(V("X@"), A.Literal("1")), inner, V("X@"))
	clause, _ = rewrite_body([V("X@")], [outer, V("X@")])
	o = clause.body[0]
	assert o.body[0].pattern.name == "X@1"
	i = o.body[1]
	assert isinstance(i, A.Block)
	assert i.body[0].pattern.name == "X@2"
	assert i.body[1].name == "X@2"
	assert o.body[2].name == "X@1"
	assert clause.body[1].name == "X@0"


def test_let_block_inside_case_clause():
	case = A.Case(
		subject=V("X@"),
		clauses=(
			A.Clause(
				patterns=(A.Atom("a"),),
				guards=(),
				body=(A.Match(V("X@"), A.Literal("1")), let(A.Match(V("X@"), A.Literal("2")), V("X@")), V("X@")),
			),
		),
	)
	clause, _ = rewrite_body([V("X@")], [case, V("X@")])
	c = clause.body[0].clauses[0]
	assert clause.body[0].subject.name == "X@0"
	assert c.body[0].pattern.name == "X@1"
	assert c.body[1].body[0].pattern.name == "X@2"
	assert c.body[1].body[1].name == "X@2"
	assert c.body[2].name == "X@1"
	assert clause.body[1].name == "X@0"


def test_empty_let_block_is_malformed():
	with pytest.raises(MalformedLetBlock) as info:
		rewrite_body([], [let()])
	assert info.value.function == "f/0"


def test_let_block_in_pattern_is_malformed():
	with pytest.raises(MalformedLetBlock):
		rewrite_body([], [A.Match(let(V("X@")), A.Literal("1"))])


def test_let_block_in_argument_is_malformed():
	with pytest.raises(MalformedLetBlock):
		rewrite_body([let(A.Atom("ok"))], [A.Atom("ok")])


def test_let_block_in_guard_is_malformed():
	guard = ((let(A.Atom("true")),),)
	with pytest.raises(MalformedLetBlock):
		rewrite_body([V("X@")], [V("X@")], guards=guard)


def test_let_block_is_recorded_for_debugging():
	_, result = rewrite_body([], [let(A.Atom("ok"))])
	trace = result.trace("f", 0)
	assert ("clauses", 0, "body", 0) in trace.let_blocks
	restored = trace.restore()
	assert is_let_block(restored.clauses[0].body[0])


def test_restore_puts_nested_let_blocks_and_names_back():
	inner = let(A.Match(V("X@"), A.Literal("2")), V("X@"))
	outer = let(A.Match(V("X@"), A.Literal("1")), inner, V("X@"))
	_, result = rewrite_body([V("X@")], [A.Match(V("Y"), outer), A.Tuple((V("Y"), V("X@")))])
	trace = result.trace("f", 1)
	assert trace.restore() == trace.original
