# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
HIR → source text.

Pipeline placement:
  HIR (before or after the goto rewrite) → [this module] → text the parser accepts

Used by the driver to show rewritten functions and by tests to compare trees
without caring about spans. Output is indented with tabs; block-like
statements (`if`, `match`, `loop`, `{}`) are printed without `;`, and a
block-like tail value is parenthesized so it parses back as a value.
"""

from __future__ import annotations

import json
from typing import List

from . import hir_nodes as H

_BINARY_SYMBOLS = {
	H.BinaryOp.OR: "||",
	H.BinaryOp.AND: "&&",
	H.BinaryOp.EQ: "==",
	H.BinaryOp.NE: "!=",
	H.BinaryOp.LT: "<",
	H.BinaryOp.LE: "<=",
	H.BinaryOp.GT: ">",
	H.BinaryOp.GE: ">=",
	H.BinaryOp.ADD: "+",
	H.BinaryOp.SUB: "-",
	H.BinaryOp.MUL: "*",
	H.BinaryOp.MOD: "%",
}

_BINARY_PREC = {
	H.BinaryOp.OR: 1,
	H.BinaryOp.AND: 2,
	H.BinaryOp.EQ: 3,
	H.BinaryOp.NE: 3,
	H.BinaryOp.LT: 3,
	H.BinaryOp.LE: 3,
	H.BinaryOp.GT: 3,
	H.BinaryOp.GE: 3,
	H.BinaryOp.ADD: 4,
	H.BinaryOp.SUB: 4,
	H.BinaryOp.MUL: 5,
	H.BinaryOp.MOD: 5,
}
_CMP_PREC = 3
_UNARY_PREC = 6

_BLOCKLIKE = (H.HIf, H.HMatch, H.HLoop, H.HBlockExpr)


def format_program(program: H.HProgram) -> str:
	return "\n".join(format_function(fn) for fn in program.functions)


def format_function(fn: H.HFunction) -> str:
	params = ", ".join(fn.params)
	return f"fn {fn.name}({params}) {_block(fn.body, 0)}\n"


def format_expr(expr: H.HExpr) -> str:
	return _expr(expr, 0, 0)


def _indent(depth: int) -> str:
	return "\t" * depth


def _block(block: H.HBlock, depth: int) -> str:
	"""`{ ... }` whose closing brace sits at `depth`."""
	if not block.statements:
		return "{}"
	lines: List[str] = ["{"]
	for stmt in block.statements:
		lines.append(_indent(depth + 1) + _stmt(stmt, depth + 1))
	lines.append(_indent(depth) + "}")
	return "\n".join(lines)


def _stmt(stmt: H.HStmt, depth: int) -> str:
	if isinstance(stmt, H.HLet):
		return f"let {stmt.name} = {_expr(stmt.value, 0, depth)};"
	if isinstance(stmt, H.HAssign):
		return f"{stmt.target.name} = {_expr(stmt.value, 0, depth)};"
	if isinstance(stmt, H.HExprStmt):
		if isinstance(stmt.expr, _BLOCKLIKE):
			return _expr(stmt.expr, 0, depth)
		return f"{_expr(stmt.expr, 0, depth)};"
	if isinstance(stmt, H.HTailExpr):
		if isinstance(stmt.expr, _BLOCKLIKE):
			return f"({_expr(stmt.expr, 0, depth)})"
		return _expr(stmt.expr, 0, depth)
	raise NotImplementedError(f"cannot format stmt {type(stmt).__name__}")


def _expr(expr: H.HExpr, prec: int, depth: int) -> str:
	"""
	Render `expr` as an operand that binds at least as tightly as `prec`
	(0 = any expression position).
	"""
	if isinstance(expr, H.HLiteralInt):
		text = str(expr.value)
		return f"({text})" if expr.value < 0 and prec > 0 else text
	if isinstance(expr, H.HLiteralString):
		return json.dumps(expr.value)
	if isinstance(expr, H.HLiteralBool):
		return "true" if expr.value else "false"
	if isinstance(expr, H.HVar):
		return expr.name
	if isinstance(expr, H.HCall):
		args = ", ".join(_expr(a, 0, depth) for a in expr.args)
		return f"{_expr(expr.fn, _UNARY_PREC + 1, depth)}({args})"
	if isinstance(expr, H.HUnary):
		symbol = "-" if expr.op is H.UnaryOp.NEG else "!"
		text = f"{symbol}{_expr(expr.expr, _UNARY_PREC, depth)}"
		return f"({text})" if prec > _UNARY_PREC else text
	if isinstance(expr, H.HBinary):
		op_prec = _BINARY_PREC[expr.op]
		# Left-associative; comparisons do not chain.
		left_prec = op_prec + 1 if op_prec == _CMP_PREC else op_prec
		left = _expr(expr.left, left_prec, depth)
		right = _expr(expr.right, op_prec + 1, depth)
		text = f"{left} {_BINARY_SYMBOLS[expr.op]} {right}"
		return f"({text})" if prec > op_prec else text
	if isinstance(expr, H.HBreak):
		return f"break '{expr.label}" if expr.label is not None else "break"
	if isinstance(expr, H.HBranchMarker):
		return f"goto '{expr.name}"
	if isinstance(expr, H.HTargetMarker):
		return f"label '{expr.name}"
	if isinstance(expr, _BLOCKLIKE):
		text = _blocklike(expr, depth)
		return f"({text})" if prec > 0 else text
	raise NotImplementedError(f"cannot format expr {type(expr).__name__}")


def _blocklike(expr: H.HExpr, depth: int) -> str:
	if isinstance(expr, H.HBlockExpr):
		return _block(expr.block, depth)
	if isinstance(expr, H.HLoop):
		prefix = f"'{expr.label}: " if expr.label is not None else ""
		return f"{prefix}loop {_block(expr.body, depth)}"
	if isinstance(expr, H.HIf):
		text = f"if {_expr(expr.cond, 0, depth)} {_block(expr.then_block, depth)}"
		if isinstance(expr.else_branch, H.HIf):
			text += f" else {_blocklike(expr.else_branch, depth)}"
		elif isinstance(expr.else_branch, H.HBlockExpr):
			text += f" else {_block(expr.else_branch.block, depth)}"
		return text
	if isinstance(expr, H.HMatch):
		lines = [f"match {_expr(expr.scrutinee, 0, depth)} {{"]
		for arm in expr.arms:
			pattern = "_" if arm.pattern is None else _expr(arm.pattern, 0, depth + 1)
			lines.append(f"{_indent(depth + 1)}{pattern} => {_block(arm.block, depth + 1)}")
		lines.append(_indent(depth) + "}")
		return "\n".join(lines)
	raise NotImplementedError(f"cannot format expr {type(expr).__name__}")


__all__ = ["format_program", "format_function", "format_expr"]
