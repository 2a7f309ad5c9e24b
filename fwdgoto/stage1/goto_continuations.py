# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Continuation synthesis for the forward-goto rewrite.

When a sequence cannot fall through (a target inside it is still waiting for
its branches), the rest of the sequence is cut off and recorded as a
*continuation*: the statement suffix plus the labels whose fall-through leads
into it. Continuations live in an arena keyed by fresh synthetic labels; the
edges are label references, so the graph is acyclic by construction (a
predecessor always exists before its successor).

Once every active target's branches have been hoisted to the current level,
`retrieve_continuations` drains the arena into a `ContinuationPlan`: the span
to rewrap, the label closing the whole construct, and the continuations in
post-order (every record after all of its predecessors). The restructurer
turns that plan into nested labeled loops.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from . import hir_nodes as H

if TYPE_CHECKING:
	from .goto_ledger import GotoLedger

logger = logging.getLogger(__name__)


@dataclass
class Continuation:
	"""A relocated statement suffix entered from `predecessors`, left through `label`."""
	label: str
	statements: List[H.HStmt]
	predecessors: List[str]


class ContinuationArena:
	"""Continuation records indexed by their synthetic label."""

	def __init__(self) -> None:
		self._records: Dict[str, Continuation] = {}

	def add(self, record: Continuation) -> None:
		assert record.label not in self._records, f"continuation '{record.label}' allocated twice"
		self._records[record.label] = record

	def take(self, label: str) -> Optional[Continuation]:
		"""Remove and return the record for `label` (None for target labels)."""
		return self._records.pop(label, None)

	def __contains__(self, label: object) -> bool:
		return label in self._records

	def __len__(self) -> int:
		return len(self._records)


@dataclass
class ContinuationPlan:
	"""Everything the restructurer needs to rewrap one statement span."""
	lowest_index: int
	highest_index: int
	end_label: str
	steps: List[Continuation]


class ContinuationSynthesizer:
	"""Push/retrieve continuations on a ledger; owns the synthetic label counter."""

	def __init__(
		self, ledger: "GotoLedger", *, label_prefix: str = "__cont", taken: Optional[Set[str]] = None
	) -> None:
		self.ledger = ledger
		self.label_prefix = label_prefix
		# Labels already used in the function; fresh labels skip them and are added.
		self.taken = taken if taken is not None else set()
		self._counter = 0

	def _fresh_label(self) -> str:
		while True:
			label = f"{self.label_prefix}{self._counter}"
			self._counter += 1
			if label not in self.taken:
				self.taken.add(label)
				return label

	def push_continuation(self, statements: List[H.HStmt]) -> str:
		"""
		Record `statements` as the continuation of the pending incoming labels.

		Returns the label control must exit to right before the split. With
		several incoming labels any of them leads to the new continuation; the
		last (outermost once wrapped) is used.
		"""
		ledger = self.ledger
		incoming = ledger.incoming
		assert incoming, "continuation pushed without a pending incoming label"
		if not statements and len(incoming) == 1:
			return incoming[0]
		label = self._fresh_label()
		ledger.continuations.add(Continuation(label=label, statements=list(statements), predecessors=list(incoming)))
		ledger.incoming = [label]
		logger.debug("continuation %s: %d statements after %s", label, len(statements), incoming)
		return incoming[-1]

	def retrieve_continuations(self) -> Optional[ContinuationPlan]:
		"""
		Drain the ledger into a plan once every active target is resolvable
		at the current level; otherwise return None and leave it untouched.
		"""
		ledger = self.ledger
		if not ledger.labels:
			return None
		for name in ledger.labels:
			site = ledger.gotos.get(name)
			assert site is not None, f"active target '{name}' without branch site"
			if site.level != ledger.level:
				return None

		indices = [ledger.resolve(name).index for name in list(ledger.labels)]
		lowest, highest = min(indices), max(indices)
		ledger.pull_into_span(ledger.level, lowest)

		if len(ledger.incoming) > 1:
			self.push_continuation([])
		end_label = ledger.incoming[0]
		ledger.incoming = []

		arena = ledger.continuations
		steps: List[Continuation] = []

		def visit(label: str) -> None:
			record = arena.take(label)
			if record is None:
				# Target labels are the leaves of the graph.
				return
			for pred in record.predecessors:
				visit(pred)
			steps.append(record)

		visit(end_label)
		assert not arena, "continuations unreachable from the end label"
		return ContinuationPlan(lowest_index=lowest, highest_index=highest, end_label=end_label, steps=steps)


__all__ = ["Continuation", "ContinuationArena", "ContinuationPlan", "ContinuationSynthesizer"]
