# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Loop/break restructuring for the forward-goto rewrite.

Input: a statement list, the index of the statement just walked, and the
`ContinuationPlan` drained from the ledger. Output: the span
`[plan.lowest_index, current]` replaced in place by a single synthesized
loop statement.

Shape for a plan with steps `(preds, stmts, label)`:

    'end: loop {
        'p_n: loop {            // wrappers of the last step, outermost last
            ...
            'p_1: loop {
                <span>
                break 'end;     // fall-through of the span skips every continuation
                break 'p_2;
            }
            break 'p_n;
        }
        <stmts of the last step>
        break 'end;
    }

Each loop body ends in an early exit, so no synthesized loop iterates; a
`break 'x` anywhere inside lands right after loop `'x`, which is where the
code following target/continuation `x` was placed.
"""

from __future__ import annotations

import logging
from typing import List

from . import hir_nodes as H
from .goto_continuations import ContinuationPlan
from .goto_errors import InvalidResultPosition
from .hir_utils import demote_jump_tail, exit_stmt, loop_stmt

logger = logging.getLogger(__name__)


def restructure(statements: List[H.HStmt], plan: ContinuationPlan, current: int) -> int:
	"""
	Rewrap `statements[plan.lowest_index:current + 1]` according to `plan`.

	Returns the index of the spliced loop statement.
	"""
	lowest = plan.lowest_index
	assert 0 <= lowest <= current < len(statements), "restructure span out of range"
	span = [demote_jump_tail(stmt) for stmt in statements[lowest : current + 1]]
	for stmt in span:
		if isinstance(stmt, H.HTailExpr):
			raise InvalidResultPosition(
				"value-producing expression would be moved inside a synthesized loop; end it with ';'",
				loc=stmt.loc,
			)

	inner: List[H.HStmt] = [*span, exit_stmt(plan.end_label)]
	for step in plan.steps:
		preds = step.predecessors
		for pos, pred in enumerate(preds):
			next_label = preds[pos + 1] if pos + 1 < len(preds) else pred
			inner = [loop_stmt(pred, [*inner, exit_stmt(next_label)])]
		inner = [*inner, *step.statements, exit_stmt(step.label)]

	statements[lowest : current + 1] = [loop_stmt(plan.end_label, inner)]
	logger.debug(
		"rewrapped statements %d..%d into '%s' (%d continuations)",
		lowest,
		current,
		plan.end_label,
		len(plan.steps),
	)
	return lowest


__all__ = ["restructure"]
