# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser, the rewrite and the driver.

A message plus optional code/phase/span metadata; the driver renders these
either as `file:line:col: severity: message` lines or as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a rewrite diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Pipeline phase that produced the diagnostic ("parser" or "rewrite").
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self, source: Path | None = None) -> dict[str, Any]:
		"""Render to a structured JSON-friendly dict."""
		file = self.span.file
		if file is None and source is not None:
			file = str(source)
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def format_human(self, source: Path | None = None) -> str:
		file = self.span.file or (str(source) if source is not None else "<unit>")
		return f"{file}:{self.span.describe()}: {self.severity}: {self.message}"


__all__ = ["Diagnostic"]
