# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structured, serializable errors raised by the parser and the rewrite.

Every error is fatal to the compilation unit that produced it: callers either
get a fully rewritten unit or one of these, never partial output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from .core.diagnostics import Diagnostic
from .core.span import Span


# Mutable: contextlib assigns __traceback__ on exceptions leaving a @contextmanager.
@dataclass(eq=False)
class SeqbindError(Exception):
	"""
	Base error: stable reason code plus unit/function context.

	`function` is spelled `name/arity`; `base_name` is the sequential variable
	(without the marker) the error is about, when there is one.
	"""

	reason_code: ClassVar[str] = "E-SEQ"
	phase: ClassVar[str] = "rewrite"

	message: str
	unit: str | None = None
	function: str | None = None
	base_name: str | None = None
	span: Span = field(default_factory=Span)

	def __str__(self) -> str:
		return self.format_human()

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.unit:
			parts.append(f"unit={self.unit}")
		if self.function:
			parts.append(f"function={self.function}")
		if self.span.line is not None:
			parts.append(f"at={self.span.describe()}")
		return " ".join(parts)

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"unit": self.unit,
			"function": self.function,
			"base_name": self.base_name,
			"line": self.span.line,
			"column": self.span.column,
		}

	def to_diagnostic(self) -> Diagnostic:
		notes: list[str] = []
		if self.unit:
			notes.append(f"in unit {self.unit}")
		if self.function:
			notes.append(f"in function {self.function}")
		return Diagnostic(
			message=self.message,
			code=self.reason_code,
			phase=self.phase,
			severity="error",
			span=self.span,
			notes=notes,
		)


@dataclass(eq=False)
class UnboundSequentialVariable(SeqbindError):
	"""A reference (or dropped-suffix match) with no visible binding."""

	reason_code: ClassVar[str] = "E-SEQ-UNBOUND"


@dataclass(eq=False)
class MalformedLetBlock(SeqbindError):
	"""`seqbind:let(...)` with no expressions, or outside a value position."""

	reason_code: ClassVar[str] = "E-SEQ-LET"


@dataclass(eq=False)
class ConflictingRedeclaration(SeqbindError):
	"""A suffix-less sequential name where a fresh binding is required, or an
	explicit `Base@N` that collides with a generated version."""

	reason_code: ClassVar[str] = "E-SEQ-REDECL"


@dataclass(eq=False)
class ParseError(SeqbindError):
	"""Source text that the grammar does not accept."""

	reason_code: ClassVar[str] = "E-PARSE"
	phase: ClassVar[str] = "parser"


__all__ = [
	"SeqbindError",
	"UnboundSequentialVariable",
	"MalformedLetBlock",
	"ConflictingRedeclaration",
	"ParseError",
]
