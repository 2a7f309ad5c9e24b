# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Forward-goto elimination (stage1).

Pipeline placement:
  source → HIR (with goto/label markers) → [this pass] → HIR with labeled loops only

Goal:
  `goto 'l` / `label 'l` are forward-only jump markers. This pass rewrites
  them into nested labeled loops that never iterate plus labeled breaks, so
  later consumers only see structured control flow.

Canonical expansion (single branch/target pair in one sequence):

    goto 'l;                'l: loop {
    a();          ==>           break 'l;
    label 'l;                   a();
    b();                        break 'l;
                                break 'l;
                            }
                            b();

When the target sits deeper than its branches (inside an `if` arm, a match
arm, a nested block), every enclosing sequence from the target up to the
level of the branches is split after the statement holding the target; the
cut-off suffixes become continuations that are re-emitted after the labeled
loops (see goto_continuations.py and goto_restructure.py).

Notes:
  * The walk is depth-first, left to right; the ledger (goto_ledger.py)
    tracks the level/index cursor.
  * After a span is rewrapped the walker walks the new loop once more (as a
    transparent scope) so markers inside relocated continuations are seen.
  * Loop bodies, conditions, match selectors and let-initializers are sealed:
    targets inside them are only reachable from branches inside them.
  * The pass works on a copy; a function either rewrites completely or
    reports exactly one error.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Set, Tuple

from fwdgoto.core.diagnostics import Diagnostic
from . import hir_nodes as H
from .goto_continuations import ContinuationSynthesizer
from .goto_errors import ForwardGotoError, InvalidResultPosition
from .goto_ledger import GotoLedger
from .goto_restructure import restructure
from .hir_utils import collect_labels, demote_jump_tail, exit_stmt, is_synthetic_exit, iter_unbound_breaks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteConfig:
	"""
	Knobs for synthesized names. Names already written in the function are
	skipped, so a source label that happens to start with a prefix is safe.
	"""
	label_prefix: str = "__cont"
	loop_label_prefix: str = "__loop"


class ForwardGotoRewriter:
	"""
	Rewrite the goto/label markers of one function body.

	A rewriter instance owns the ledger for exactly one body; use
	`rewrite_function` / `rewrite_program` rather than reusing instances.
	"""

	def __init__(self, config: Optional[RewriteConfig] = None) -> None:
		self.config = config or RewriteConfig()
		self.ledger = GotoLedger()
		self._taken: Set[str] = set()
		self.synthesizer = ContinuationSynthesizer(
			self.ledger, label_prefix=self.config.label_prefix, taken=self._taken
		)
		self._user_loops: List[H.HLoop] = []
		self._loop_counter = 0

	# Public entry point -------------------------------------------------

	def rewrite_block(self, block: H.HBlock) -> H.HBlock:
		"""Rewrite `block` in place and check every marker was resolved."""
		self._taken.update(collect_labels(block))
		self._walk_sequence(block.statements)
		self.ledger.finish()
		return block

	# Sequences ----------------------------------------------------------

	def _walk_sequence(self, statements: List[H.HStmt]) -> None:
		ledger = self.ledger
		i = 0
		while i < len(statements):
			ledger.index = i
			self._visit_stmt(statements[i])

			plan = self.synthesizer.retrieve_continuations()
			if plan is not None:
				i = restructure(statements, plan, i)
				self._rebind_unbound_breaks(statements[i])
				# Walk the new loop again: relocated continuations were never visited.
				continue

			if ledger.should_split():
				self._split(statements, i)
				return
			i += 1

	def _split(self, statements: List[H.HStmt], i: int) -> None:
		"""Move everything after statement `i` into a continuation and exit toward it."""
		current = statements[i] = demote_jump_tail(statements[i])
		if isinstance(current, H.HTailExpr):
			raise InvalidResultPosition(
				"a target inside the block's value expression cannot be reached by a forward branch",
				loc=current.loc,
			)
		suffix = statements[i + 1 :]
		# Trailing synthesized exits only close the loop being split; once the
		# suffix is relocated, falling off its end reaches the next continuation.
		while suffix and is_synthetic_exit(suffix[-1]):
			suffix.pop()
		suffix = [demote_jump_tail(stmt) for stmt in suffix]
		for stmt in suffix:
			if isinstance(stmt, H.HTailExpr):
				raise InvalidResultPosition(
					"a forward branch skips over the block's value expression; end it with ';'",
					loc=stmt.loc,
				)
		del statements[i + 1 :]
		target = self.synthesizer.push_continuation(suffix)
		statements.append(exit_stmt(target))

	def _rebind_unbound_breaks(self, wrapped: H.HStmt) -> None:
		"""
		Plain `break`s moved inside a synthesized loop would exit it instead
		of the user loop they belong to; name that loop and bind them to it.
		"""
		breaks = list(iter_unbound_breaks(wrapped))
		if not breaks or not self._user_loops:
			return
		owner = self._user_loops[-1]
		if owner.label is None:
			owner.label = self._fresh_loop_label()
		for brk in breaks:
			brk.label = owner.label

	def _fresh_loop_label(self) -> str:
		while True:
			label = f"{self.config.loop_label_prefix}{self._loop_counter}"
			self._loop_counter += 1
			if label not in self._taken:
				self._taken.add(label)
				return label

	# Statements ---------------------------------------------------------

	def _visit_stmt(self, stmt: H.HStmt) -> None:
		if isinstance(stmt, H.HLet):
			with self.ledger.sealed():
				stmt.value = self._visit_expr(stmt.value)
			return
		if isinstance(stmt, H.HAssign):
			stmt.value = self._visit_expr(stmt.value)
			return
		if isinstance(stmt, (H.HExprStmt, H.HTailExpr)):
			stmt.expr = self._visit_expr(stmt.expr)
			return
		raise NotImplementedError(f"ForwardGotoRewriter does not handle stmt {type(stmt).__name__}")

	def _walk_block(self, block: H.HBlock) -> None:
		with self.ledger.scope():
			self._walk_sequence(block.statements)

	# Expressions --------------------------------------------------------

	def _visit_expr(self, expr: H.HExpr) -> H.HExpr:
		"""Visit `expr`; returns its replacement (markers become breaks)."""
		ledger = self.ledger
		if isinstance(expr, H.HBranchMarker):
			ledger.register_branch(expr.name, loc=expr.loc)
			return H.HBreak(label=expr.name, loc=expr.loc)
		if isinstance(expr, H.HTargetMarker):
			ledger.register_target(expr.name, loc=expr.loc)
			return H.HBreak(label=expr.name, loc=expr.loc)
		if isinstance(expr, H.HIf):
			with ledger.sealed():
				expr.cond = self._visit_expr(expr.cond)
			self._walk_block(expr.then_block)
			if expr.else_branch is not None:
				expr.else_branch = self._visit_expr(expr.else_branch)
			return expr
		if isinstance(expr, H.HMatch):
			with ledger.sealed():
				expr.scrutinee = self._visit_expr(expr.scrutinee)
			for arm in expr.arms:
				self._walk_block(arm.block)
			return expr
		if isinstance(expr, H.HBlockExpr):
			self._walk_block(expr.block)
			return expr
		if isinstance(expr, H.HLoop):
			if expr.synthetic:
				self._walk_block(expr.body)
				return expr
			self._user_loops.append(expr)
			try:
				with ledger.scope(), ledger.sealed():
					self._walk_sequence(expr.body.statements)
			finally:
				self._user_loops.pop()
			return expr
		if isinstance(expr, H.HCall):
			expr.args = [self._visit_expr(a) for a in expr.args]
			return expr
		if isinstance(expr, H.HUnary):
			expr.expr = self._visit_expr(expr.expr)
			return expr
		if isinstance(expr, H.HBinary):
			expr.left = self._visit_expr(expr.left)
			expr.right = self._visit_expr(expr.right)
			return expr
		if isinstance(expr, (H.HVar, H.HLiteralInt, H.HLiteralString, H.HLiteralBool, H.HBreak)):
			return expr
		raise NotImplementedError(f"ForwardGotoRewriter does not handle expr {type(expr).__name__}")


def rewrite_function(fn: H.HFunction, config: Optional[RewriteConfig] = None) -> H.HFunction:
	"""
	Return `fn` with every goto/label marker eliminated.

	The input is left untouched; on error nothing is returned and the first
	`ForwardGotoError` propagates.
	"""
	body = copy.deepcopy(fn.body)
	logger.debug("rewriting forward gotos in %s", fn.name)
	ForwardGotoRewriter(config).rewrite_block(body)
	return replace(fn, body=body)


def rewrite_program(
	program: H.HProgram, config: Optional[RewriteConfig] = None
) -> Tuple[H.HProgram, List[Diagnostic]]:
	"""
	Rewrite every function of `program`.

	Functions that fail keep their original body and contribute one
	diagnostic each; the others are rewritten.
	"""
	functions: List[H.HFunction] = []
	diagnostics: List[Diagnostic] = []
	for fn in program.functions:
		try:
			functions.append(rewrite_function(fn, config))
		except ForwardGotoError as err:
			logger.debug("rewrite of %s failed: %s", fn.name, err)
			diagnostics.append(err.to_diagnostic())
			functions.append(fn)
	return H.HProgram(functions=functions), diagnostics


__all__ = ["RewriteConfig", "ForwardGotoRewriter", "rewrite_function", "rewrite_program"]
