# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
User-facing errors raised by the forward-goto rewrite.

Every error carries a best-effort location (`loc`) so the driver can turn it
into a pinned diagnostic instead of crashing. Internal invariant violations
are plain `AssertionError`s; they indicate a bug in the pass, not bad input.
"""

from __future__ import annotations

from fwdgoto.core.diagnostics import Diagnostic
from fwdgoto.core.span import Span


class ForwardGotoError(ValueError):
	"""Base class for goto rewrite errors; `code` is stable for tests/JSON."""

	code = "GOTO_ERROR"

	def __init__(self, message: str, *, loc: Span | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.loc = loc or Span()

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=self.message, code=self.code, phase="goto", span=self.loc)


class UnmatchedTarget(ForwardGotoError):
	"""A `label` no earlier `goto` names (or one its branches cannot reach)."""

	code = "GOTO_UNMATCHED_TARGET"


class UnmatchedBranch(ForwardGotoError):
	"""A `goto` whose target never follows it."""

	code = "GOTO_UNMATCHED_BRANCH"


class DuplicateTarget(ForwardGotoError):
	code = "GOTO_DUPLICATE_TARGET"


class InvalidResultPosition(ForwardGotoError):
	"""A value-producing tail statement would end up inside a synthesized loop."""

	code = "GOTO_INVALID_RESULT_POSITION"


__all__ = [
	"ForwardGotoError",
	"UnmatchedTarget",
	"UnmatchedBranch",
	"DuplicateTarget",
	"InvalidResultPosition",
]
