# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Common diagnostic structure for the parser, the goto rewrite and the driver.

A diagnostic is a message plus a span; the driver renders it either as
`file:line:col: severity: message` or as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase label ("parser", "goto", ...) so JSON output and tests can tell
	# which stage rejected the input.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self, source: Optional[str] = None) -> str:
		"""Human-readable one-line rendering used by the CLI."""
		file = self.span.file or source or "<input>"
		if not self.span.is_known():
			return f"{file}: {self.severity}: {self.message}"
		return f"{file}:{self.span}: {self.severity}: {self.message}"

	def to_json(self, source: Optional[str] = None) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or source,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
