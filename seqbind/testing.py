# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests: parse+rewrite in one call and small tree queries.
"""

from __future__ import annotations

from typing import List

from . import ast as A
from .parser import parse_unit
from .rewrite import RewriteOptions, RewriteResult, rewrite_unit


def rewrite_source(source: str, *, enabled: bool = True) -> RewriteResult:
	return rewrite_unit(parse_unit(source, file="t.erl"), RewriteOptions(enabled=enabled))


def function(unit: A.Unit, name: str) -> A.Function:
	for fn in unit.functions():
		if fn.name == name:
			return fn
	raise KeyError(name)


def var_names(node: A.Node) -> List[str]:
	"""Every Var spelling under `node`, in field order (patterns before values)."""
	if isinstance(node, A.Var):
		return [node.name]
	out: List[str] = []
	for _, child in A.iter_children(node):
		out.extend(var_names(child))
	return out


def body(unit: A.Unit, name: str, clause: int = 0) -> tuple:
	return function(unit, name).clauses[clause].body


__all__ = ["rewrite_source", "function", "var_names", "body"]
