# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser tests: Erlang-subset text → SourceTree.
"""

import pytest

from seqbind import ast as A
from seqbind.errors import ParseError
from seqbind.parser import parse_unit
from seqbind.rewrite.let_block import is_let_block


def _only_body(src: str):
	unit = parse_unit(src)
	fn = next(unit.functions())
	return fn.clauses[0].body


def test_module_attribute_names_the_unit():
	unit = parse_unit("-module(shop).\n-export([buy/1]).\nbuy(X) -> X.\n", file="shop.erl")
	assert unit.module == "shop"
	assert unit.file == "shop.erl"
	assert [type(f).__name__ for f in unit.forms] == ["Attribute", "Attribute", "Function"]
	fn = next(unit.functions())
	assert fn.key == "buy/1"
	assert fn.loc.line == 3
	assert fn.loc.file == "shop.erl"


def test_unit_without_module_attribute():
	unit = parse_unit("f() -> ok.")
	assert unit.module is None


def test_multi_clause_function_with_guards():
	unit = parse_unit(
		"""
		sign(N) when N > 0 -> pos;
		sign(N) when N < 0; N == -1 -> neg;
		sign(_) -> zero.
		"""
	)
	fn = next(unit.functions())
	assert fn.arity == 1
	assert len(fn.clauses) == 3
	assert len(fn.clauses[1].guards) == 2
	assert fn.clauses[2].guards == ()
	test = fn.clauses[0].guards[0][0]
	assert isinstance(test, A.BinOp) and test.op == ">"


def test_head_mismatch_is_a_parse_error():
	with pytest.raises(ParseError) as exc:
		parse_unit("f(X) -> X;\ng(X) -> X.\n")
	assert "head mismatch" in exc.value.message
	assert exc.value.span.line == 2


def test_sequential_variables_are_plain_vars():
	(match, result) = _only_body("f(Req@) -> Req@ = g(Req@), Req@.")
	assert isinstance(match, A.Match)
	assert match.pattern == A.Var("Req@", loc=match.pattern.loc)
	assert isinstance(match.value, A.Call)
	assert result.name == "Req@"


def test_match_is_right_associative_and_looser_than_operators():
	(expr,) = _only_body("f() -> A = B = 1 + 2 * 3.")
	assert isinstance(expr, A.Match)
	assert isinstance(expr.value, A.Match)
	sum_ = expr.value.value
	assert isinstance(sum_, A.BinOp) and sum_.op == "+"
	assert isinstance(sum_.right, A.BinOp) and sum_.right.op == "*"


def test_send_and_word_operators():
	(send, logic) = _only_body("f(P) -> P ! {self(), hi}, not true andalso false orelse true.")
	assert isinstance(send, A.BinOp) and send.op == "!"
	assert isinstance(logic, A.BinOp) and logic.op == "orelse"
	assert isinstance(logic.left, A.BinOp) and logic.left.op == "andalso"
	assert isinstance(logic.left.left, A.UnOp) and logic.left.left.op == "not"


def test_data_constructors():
	(tup, lst, cons, nil) = _only_body('f() -> {a, 1, 2.5, $x, "s" "t"}, [1, 2], [H | T], [].')
	assert [type(e).__name__ for e in tup.elements] == ["Atom", "Literal", "Literal", "Literal", "Literal"]
	assert tup.elements[4].text == '"s" "t"'
	assert len(lst.elements) == 2 and lst.tail is None
	assert cons.tail.name == "T"
	assert nil.elements == () and nil.tail is None


def test_records():
	(new, upd, acc) = _only_body("f(R) -> #st{n = 1}, R#st{n = 2}, R#st.n.")
	assert isinstance(new, A.Record) and new.base is None
	assert new.fields[0].name == "n"
	assert isinstance(upd, A.Record) and upd.base.name == "R"
	assert isinstance(acc, A.RecordAccess) and acc.record == "st" and acc.field_name == "n"


def test_remote_calls_and_fun_refs():
	(call, local, ref) = _only_body("f(X) -> lists:map(fun g/1, X), g(X), fun lists:sum/1.")
	assert isinstance(call.callee, A.Remote)
	assert call.callee.module.name == "lists"
	assert call.args[0] == A.FunRef(module=None, name="g", arity=1, loc=call.args[0].loc)
	assert isinstance(local.callee, A.Atom)
	assert ref.module == "lists" and ref.arity == 1


def test_let_block_is_parsed_as_a_remote_call():
	(let,) = _only_body("f(X@) -> seqbind:let(X@ = 1, X@).")
	assert is_let_block(let)
	assert len(let.args) == 2


def test_case_and_if():
	(case, if_) = _only_body(
		"""
		f(X) ->
			case X of
				{ok, V} when V > 1 -> V;
				_ -> 0
			end,
			if X > 0 -> pos; true -> other end.
		"""
	)
	assert isinstance(case, A.Case)
	assert len(case.clauses) == 2
	assert isinstance(case.clauses[0].patterns[0], A.Tuple)
	assert case.clauses[0].guards
	assert isinstance(if_, A.If)
	assert [c.patterns for c in if_.clauses] == [(), ()]


def test_receive_with_after():
	(recv, only_after) = _only_body(
		"f() -> receive {msg, M} -> M after 100 -> timeout end, receive after 0 -> ok end."
	)
	assert len(recv.clauses) == 1
	assert recv.after.timeout.text == "100"
	assert recv.after.body[0].name == "timeout"
	assert only_after.clauses == ()
	assert only_after.after is not None


def test_try_of_catch_after():
	(expr,) = _only_body(
		"""
		f(X) ->
			try g(X) of
				ok -> done
			catch
				throw:T -> T;
				error:R:S -> {R, S};
				Other -> Other
			after
				cleanup()
			end.
		"""
	)
	assert isinstance(expr, A.Try)
	assert len(expr.clauses) == 1
	pats = [c.patterns[0] for c in expr.catch_clauses]
	assert all(isinstance(p, A.CatchPattern) for p in pats)
	assert pats[0].cls.name == "throw" and pats[0].stack is None
	assert pats[1].stack.name == "S"
	assert pats[2].cls is None and pats[2].reason.name == "Other"
	assert isinstance(expr.after[0], A.Call)


def test_try_with_only_after():
	(expr,) = _only_body("f() -> try g() after h() end.")
	assert expr.catch_clauses == ()
	assert len(expr.after) == 1


def test_fun_expression_and_catch():
	(fun, caught) = _only_body("f() -> fun (0) -> zero; (N) when N > 0 -> pos end, catch g().")
	assert isinstance(fun, A.Fun)
	assert len(fun.clauses) == 2
	assert fun.clauses[1].guards
	assert isinstance(caught, A.Catch)


def test_comments_are_ignored():
	unit = parse_unit("% header\nf() -> ok. % trailing\n")
	assert next(unit.functions()).clauses[0].body[0].name == "ok"


def test_spans_point_at_source():
	(match,) = _only_body("f() ->\n    Req@ = 1.")
	assert match.loc.line == 2
	assert match.pattern.loc.column == 5


def test_syntax_error_reports_position():
	with pytest.raises(ParseError) as exc:
		parse_unit("f() -> ok\ng() -> ok.\n", file="bad.erl")
	err = exc.value
	assert err.reason_code == "E-PARSE"
	assert err.unit == "bad.erl"
	assert err.span.line == 2


def test_truncated_input_is_a_parse_error():
	with pytest.raises(ParseError):
		parse_unit("f() -> {ok,")
