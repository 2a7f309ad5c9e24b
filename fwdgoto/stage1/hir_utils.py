# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
HIR helpers shared by the goto rewrite, the printer and tests.
"""

from __future__ import annotations

from typing import Iterator, Set

from . import hir_nodes as H


def exit_stmt(label: str) -> H.HExprStmt:
	"""Synthesized early exit: `break 'label;`."""
	return H.HExprStmt(expr=H.HBreak(label=label, synthetic=True))


def loop_stmt(label: str, statements: list[H.HStmt]) -> H.HExprStmt:
	"""Synthesized labeled repeat block holding `statements`."""
	return H.HExprStmt(expr=H.HLoop(body=H.HBlock(statements=statements), label=label, synthetic=True))


def is_synthetic_exit(stmt: H.HStmt) -> bool:
	return isinstance(stmt, H.HExprStmt) and isinstance(stmt.expr, H.HBreak) and stmt.expr.synthetic


def demote_jump_tail(stmt: H.HStmt) -> H.HStmt:
	"""
	A tail that only jumps (`label 'a`, `goto 'a`, `break`) never produces a
	value; turn it into a plain statement so it can be followed by an exit.
	"""
	if isinstance(stmt, H.HTailExpr) and isinstance(stmt.expr, (H.HBreak, H.HBranchMarker, H.HTargetMarker)):
		return H.HExprStmt(expr=stmt.expr, loc=stmt.loc)
	return stmt


def iter_unbound_breaks(node: H.HNode) -> Iterator[H.HBreak]:
	"""
	Yield unlabeled `break`s under `node` that bind to a loop outside it.

	Bodies of user loops are skipped (their breaks bind to them); synthetic
	loops are looked through, since wrapping code in one must not change what
	a plain `break` exits.
	"""
	if isinstance(node, H.HBreak):
		if node.label is None:
			yield node
	elif isinstance(node, H.HLoop):
		if node.synthetic:
			yield from iter_unbound_breaks(node.body)
	elif isinstance(node, H.HBlock):
		for stmt in node.statements:
			yield from iter_unbound_breaks(stmt)
	elif isinstance(node, (H.HExprStmt, H.HTailExpr)):
		yield from iter_unbound_breaks(node.expr)
	elif isinstance(node, (H.HLet, H.HAssign)):
		yield from iter_unbound_breaks(node.value)
	elif isinstance(node, H.HBlockExpr):
		yield from iter_unbound_breaks(node.block)
	elif isinstance(node, H.HIf):
		yield from iter_unbound_breaks(node.cond)
		yield from iter_unbound_breaks(node.then_block)
		if node.else_branch is not None:
			yield from iter_unbound_breaks(node.else_branch)
	elif isinstance(node, H.HMatch):
		yield from iter_unbound_breaks(node.scrutinee)
		for arm in node.arms:
			yield from iter_unbound_breaks(arm.block)
	elif isinstance(node, H.HCall):
		for arg in node.args:
			yield from iter_unbound_breaks(arg)
	elif isinstance(node, H.HUnary):
		yield from iter_unbound_breaks(node.expr)
	elif isinstance(node, H.HBinary):
		yield from iter_unbound_breaks(node.left)
		yield from iter_unbound_breaks(node.right)


def count_markers(node: H.HNode) -> int:
	"""Number of goto/label markers still present under `node`."""
	if isinstance(node, (H.HBranchMarker, H.HTargetMarker)):
		return 1
	if isinstance(node, H.HFunction):
		return count_markers(node.body)
	if isinstance(node, H.HBlock):
		return sum(count_markers(s) for s in node.statements)
	if isinstance(node, (H.HExprStmt, H.HTailExpr)):
		return count_markers(node.expr)
	if isinstance(node, (H.HLet, H.HAssign)):
		return count_markers(node.value)
	if isinstance(node, H.HBlockExpr):
		return count_markers(node.block)
	if isinstance(node, H.HLoop):
		return count_markers(node.body)
	if isinstance(node, H.HIf):
		total = count_markers(node.cond) + count_markers(node.then_block)
		if node.else_branch is not None:
			total += count_markers(node.else_branch)
		return total
	if isinstance(node, H.HMatch):
		return count_markers(node.scrutinee) + sum(count_markers(a.block) for a in node.arms)
	if isinstance(node, H.HCall):
		return sum(count_markers(a) for a in node.args)
	if isinstance(node, H.HUnary):
		return count_markers(node.expr)
	if isinstance(node, H.HBinary):
		return count_markers(node.left) + count_markers(node.right)
	return 0


def collect_labels(node: H.HNode) -> Set[str]:
	"""Every label name written under `node`: markers, loop labels and labeled breaks."""
	found: Set[str] = set()
	_collect_labels(node, found)
	return found


def _collect_labels(node: H.HNode, found: Set[str]) -> None:
	if isinstance(node, (H.HBranchMarker, H.HTargetMarker)):
		found.add(node.name)
	elif isinstance(node, H.HBreak):
		if node.label is not None:
			found.add(node.label)
	elif isinstance(node, H.HLoop):
		if node.label is not None:
			found.add(node.label)
		_collect_labels(node.body, found)
	elif isinstance(node, H.HFunction):
		_collect_labels(node.body, found)
	elif isinstance(node, H.HBlock):
		for stmt in node.statements:
			_collect_labels(stmt, found)
	elif isinstance(node, (H.HExprStmt, H.HTailExpr)):
		_collect_labels(node.expr, found)
	elif isinstance(node, (H.HLet, H.HAssign)):
		_collect_labels(node.value, found)
	elif isinstance(node, H.HBlockExpr):
		_collect_labels(node.block, found)
	elif isinstance(node, H.HIf):
		_collect_labels(node.cond, found)
		_collect_labels(node.then_block, found)
		if node.else_branch is not None:
			_collect_labels(node.else_branch, found)
	elif isinstance(node, H.HMatch):
		_collect_labels(node.scrutinee, found)
		for arm in node.arms:
			_collect_labels(arm.block, found)
	elif isinstance(node, H.HCall):
		for arg in node.args:
			_collect_labels(arg, found)
	elif isinstance(node, H.HUnary):
		_collect_labels(node.expr, found)
	elif isinstance(node, H.HBinary):
		_collect_labels(node.left, found)
		_collect_labels(node.right, found)


__all__ = [
	"exit_stmt",
	"loop_stmt",
	"is_synthetic_exit",
	"demote_jump_tail",
	"iter_unbound_breaks",
	"count_markers",
	"collect_labels",
]
