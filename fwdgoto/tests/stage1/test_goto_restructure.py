# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Tests for rewrapping a statement span into synthesized labeled loops.
"""

import pytest

from fwdgoto import stage1 as H
from fwdgoto.stage1.goto_continuations import Continuation, ContinuationPlan
from fwdgoto.stage1.goto_restructure import restructure
from fwdgoto.stage1.hir_utils import is_synthetic_exit


def _emit(text: str) -> H.HExprStmt:
	return H.HExprStmt(expr=H.HCall(fn=H.HVar(name="emit"), args=[H.HLiteralString(value=text)]))


def _loop(stmt: H.HStmt) -> H.HLoop:
	assert isinstance(stmt, H.HExprStmt)
	assert isinstance(stmt.expr, H.HLoop)
	assert stmt.expr.synthetic
	return stmt.expr


def _exit_label(stmt: H.HStmt) -> str:
	assert is_synthetic_exit(stmt)
	return stmt.expr.label


def test_span_without_continuations_becomes_one_loop():
	s0, s1, s2, s3 = _emit("s0"), _emit("s1"), _emit("s2"), _emit("s3")
	statements = [s0, s1, s2, s3]
	plan = ContinuationPlan(lowest_index=1, highest_index=1, end_label="L", steps=[])

	at = restructure(statements, plan, 2)

	assert at == 1
	assert len(statements) == 3
	assert statements[0] is s0
	assert statements[2] is s3
	loop = _loop(statements[1])
	assert loop.label == "L"
	body = loop.body.statements
	assert body[:2] == [s1, s2]
	assert _exit_label(body[2]) == "L"


def test_continuation_follows_its_predecessor_loop():
	span, after = _emit("span"), _emit("after")
	statements = [span]
	step = Continuation(label="__cont0", statements=[after], predecessors=["a"])
	plan = ContinuationPlan(lowest_index=0, highest_index=0, end_label="__cont0", steps=[step])

	restructure(statements, plan, 0)

	outer = _loop(statements[0])
	assert outer.label == "__cont0"
	wrapper, moved, closing = outer.body.statements
	assert moved is after
	assert _exit_label(closing) == "__cont0"

	inner = _loop(wrapper)
	assert inner.label == "a"
	first, skip_all, close_inner = inner.body.statements
	assert first is span
	# Falling off the span skips the continuation entirely.
	assert _exit_label(skip_all) == "__cont0"
	assert _exit_label(close_inner) == "a"


def test_merge_of_two_predecessors_nests_them():
	statements = [_emit("span")]
	step = Continuation(label="m", statements=[], predecessors=["x", "y"])
	plan = ContinuationPlan(lowest_index=0, highest_index=0, end_label="m", steps=[step])

	restructure(statements, plan, 0)

	outer = _loop(statements[0])
	y_loop, closing = outer.body.statements
	assert _exit_label(closing) == "m"
	y = _loop(y_loop)
	assert y.label == "y"
	x_loop, y_exit = y.body.statements
	assert _exit_label(y_exit) == "y"
	x = _loop(x_loop)
	assert x.label == "x"
	# Leaving `x` falls into `y`'s exit: both lead to the merge.
	assert _exit_label(x.body.statements[-1]) == "y"


def test_value_tail_in_span_is_rejected():
	statements = [_emit("span"), H.HTailExpr(expr=H.HLiteralInt(value=1))]
	plan = ContinuationPlan(lowest_index=0, highest_index=0, end_label="L", steps=[])

	with pytest.raises(H.InvalidResultPosition):
		restructure(statements, plan, 1)


def test_jump_tail_in_span_becomes_a_statement():
	jump = H.HBreak(label="L")
	statements = [_emit("span"), H.HTailExpr(expr=jump)]
	plan = ContinuationPlan(lowest_index=0, highest_index=0, end_label="L", steps=[])

	restructure(statements, plan, 1)

	_, moved, closing = _loop(statements[0]).body.statements
	assert isinstance(moved, H.HExprStmt)
	assert moved.expr is jump
	assert _exit_label(closing) == "L"
