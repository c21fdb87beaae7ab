# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Occurrence classification by syntactic position.
"""

from seqbind.ast import Var
from seqbind.rewrite.classify import OccurrenceKind, Position, Role, classify
from seqbind.rewrite.names import VersionedName, marked_base, parse_versioned


def test_marked_names_bind_in_patterns_and_read_in_values():
	var = Var("Req@")
	for position in (Position.ARGUMENT, Position.PATTERN):
		occ = classify(var, position, frozenset({"Req"}))
		assert occ.kind is OccurrenceKind.MARKED
		assert occ.base == "Req"
		assert occ.role is Role.BINDING
	occ = classify(var, Position.VALUE, frozenset({"Req"}))
	assert occ.role is Role.REFERENCE


def test_explicit_versions_pass_through():
	occ = classify(Var("Req@3"), Position.PATTERN, frozenset({"Req"}))
	assert occ.kind is OccurrenceKind.EXPLICIT
	assert not occ.renamed


def test_bare_base_name_in_pattern_is_dropped_suffix():
	occ = classify(Var("Req"), Position.PATTERN, frozenset({"Req"}))
	assert occ.kind is OccurrenceKind.DROPPED_SUFFIX
	assert occ.role is Role.REFERENCE
	assert occ.base == "Req"


def test_bare_base_name_in_value_is_plain():
	occ = classify(Var("Req"), Position.VALUE, frozenset({"Req"}))
	assert occ.kind is OccurrenceKind.PLAIN


def test_unrelated_variables_are_plain():
	assert classify(Var("X"), Position.PATTERN, frozenset({"Req"})).kind is OccurrenceKind.PLAIN
	assert classify(Var("_"), Position.ARGUMENT, frozenset({"Req"})).kind is OccurrenceKind.PLAIN


def test_name_helpers():
	assert marked_base("Req@") == "Req"
	assert marked_base("@") is None
	assert marked_base("Req") is None
	assert parse_versioned("Req@12") == VersionedName("Req", 12)
	assert parse_versioned("Req@") is None
	assert VersionedName("Req", 2).spelling == "Req@2"
