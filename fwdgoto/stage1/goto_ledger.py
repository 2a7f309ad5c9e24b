# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Branch/target ledger for the forward-goto rewrite.

The ledger is per-function bookkeeping with no knowledge of the tree shape.
The walker tells it where it is (`level`, `index`) and what it saw:

  * `gotos`  : pending branch name → position of the shallowest statement
                known to contain a branch for it. Positions only ever move
                toward shallower levels (`hoist`).
  * `labels` : targets seen whose continuation graph is not built yet.
  * `incoming`: labels whose fall-through ends at the current point; a split
                 turns them into the predecessors of a new continuation.
  * `continuations`: the continuation arena (see goto_continuations.py).
  * `continuation_level`: shallowest level holding an unresolved target.
                 Sequences at or below it cannot fall through.

Scope entry/exit is a context manager so the hoist on exit also runs when an
error unwinds the walker.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set

from fwdgoto.core.span import Span
from .goto_continuations import ContinuationArena
from .goto_errors import DuplicateTarget, UnmatchedBranch, UnmatchedTarget

logger = logging.getLogger(__name__)


@dataclass
class BranchSite:
	"""Merge-point candidate for a pending branch: statement `index` in a sequence at `level`."""
	level: int
	index: int
	loc: Span = field(default_factory=Span)


class GotoLedger:
	"""Pending branches, active targets and the scope cursor for one function body."""

	def __init__(self) -> None:
		self.level = 0
		self.index = 0
		self.continuation_level = 0
		self.gotos: Dict[str, BranchSite] = {}
		self.labels: Dict[str, Span] = {}
		self.incoming: List[str] = []
		self.continuations = ContinuationArena()
		# Every branch name ever registered / every target ever defined. These
		# survive resolution so late duplicates and backward jumps are caught.
		self._branch_names: Set[str] = set()
		self._defined: Set[str] = set()

	# Markers ------------------------------------------------------------

	def register_branch(self, name: str, *, loc: Span | None = None) -> None:
		"""Record the first-seen position of a branch to `name`; later ones are folded in."""
		if name in self._defined:
			raise UnmatchedBranch(
				f"branch to '{name}' appears after its target; only forward jumps are supported",
				loc=loc,
			)
		self._branch_names.add(name)
		if name not in self.gotos:
			self.gotos[name] = BranchSite(level=self.level, index=self.index, loc=loc or Span())
			logger.debug("branch '%s' at level %d index %d", name, self.level, self.index)

	def register_target(self, name: str, *, loc: Span | None = None) -> None:
		"""Activate target `name` at the current point."""
		if name not in self._branch_names:
			raise UnmatchedTarget(f"target '{name}' has no preceding branch", loc=loc)
		if name in self._defined:
			raise DuplicateTarget(f"target '{name}' is already defined", loc=loc)
		self._defined.add(name)
		self.labels[name] = loc or Span()
		self.incoming.append(name)
		self.continuation_level = self.level
		logger.debug("target '%s' at level %d index %d", name, self.level, self.index)

	# Scope cursor -------------------------------------------------------

	def hoist(self, level: int, index: int) -> None:
		"""
		Pull every pending branch recorded deeper than `level` up to
		`(level, index)`: the end of the enclosing statement is the earliest
		point a structured exit can reach it from there.

		Branches already at `level` keep their (leftmost) index.
		"""
		for site in self.gotos.values():
			if site.level > level:
				site.level = level
				site.index = index

	@contextmanager
	def scope(self) -> Iterator[None]:
		"""
		Enter the nested sequence of the statement at `self.index`.

		On exit (normal or exceptional) the level drops back, pending branches
		are hoisted to the enclosing statement and the nested incoming labels
		are merged in front of the enclosing ones.
		"""
		outer_index = self.index
		outer_incoming = self.incoming
		self.level += 1
		self.incoming = []
		try:
			yield
		finally:
			self.level -= 1
			self.continuation_level = min(self.continuation_level, self.level)
			self.hoist(self.level, outer_index)
			self.index = outer_index
			self.incoming = self.incoming + outer_incoming

	@contextmanager
	def sealed(self) -> Iterator[None]:
		"""
		Read-only cut for loop bodies, conditions, selectors and initializers.

		Branches inside still register (leaving the cut is a forward exit), but
		targets and merge bookkeeping stay inside and must be resolved there:
		control cannot enter a loop body or a condition from outside.
		"""
		saved = (self.labels, self.incoming, self.continuations, self.continuation_level)
		self.labels = {}
		self.incoming = []
		self.continuations = ContinuationArena()
		completed = False
		try:
			yield
			completed = True
		finally:
			leftover = self.labels
			self.labels, self.incoming, self.continuations, self.continuation_level = saved
		if completed and leftover:
			name, loc = next(iter(leftover.items()))
			raise UnmatchedTarget(
				f"target '{name}' cannot be reached from its branch: it is inside a loop body or a condition",
				loc=loc,
			)

	def should_split(self) -> bool:
		"""True iff the rest of the current sequence must move into a continuation."""
		return bool(self.labels) and self.level <= self.continuation_level

	# Resolution ---------------------------------------------------------

	def resolve(self, name: str) -> BranchSite:
		"""Retire target `name`; returns its branch site."""
		del self.labels[name]
		return self.gotos.pop(name)

	def pull_into_span(self, level: int, lowest_index: int) -> None:
		"""Branches of targets not seen yet that sit inside a rewrapped span now live in its first statement."""
		for site in self.gotos.values():
			if site.level == level and site.index > lowest_index:
				site.index = lowest_index

	def finish(self) -> None:
		"""Check the ledger is drained at the end of a function body."""
		if self.gotos:
			name, site = next(iter(self.gotos.items()))
			raise UnmatchedBranch(f"branch to '{name}' has no matching target after it", loc=site.loc)
		assert not self.labels, f"unresolved targets left behind: {sorted(self.labels)}"
		assert not self.incoming, f"dangling incoming labels: {self.incoming}"
		assert not self.continuations, "continuations left behind"


__all__ = ["BranchSite", "GotoLedger"]
