# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Tree-walking interpreter over HIR.

Pipeline placement:
  HIR after the goto rewrite → [this module] → return value + emitted trace

It exists to observe the rewrite: running a function before and after must
emit the same trace. Goto markers are not executable; a program that still
contains them fails at the first one reached.

Execution model:
  * Each block gets its own environment; `let` binds in it, assignment walks
    outwards.
  * A block evaluates to its tail value, or `None` without one.
  * `break` unwinds as a `BreakSignal` to the innermost loop, or to the loop
    with the matching label.
  * The only builtin is `emit(value)`, which appends to `Interpreter.trace`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from fwdgoto.stage1 import hir_nodes as H

logger = logging.getLogger(__name__)


class BreakSignal(Exception):
	def __init__(self, label: Optional[str]) -> None:
		super().__init__(label)
		self.label = label


class Environment:
	def __init__(self, parent: Environment | None = None) -> None:
		self.parent = parent
		self.values: Dict[str, object] = {}

	def define(self, name: str, value: object) -> None:
		# Shadowing within one block is allowed.
		self.values[name] = value

	def set(self, name: str, value: object) -> None:
		if name in self.values:
			self.values[name] = value
			return
		if self.parent:
			self.parent.set(name, value)
			return
		raise RuntimeError(f"Unknown variable '{name}'")

	def get(self, name: str) -> object:
		if name in self.values:
			return self.values[name]
		if self.parent:
			return self.parent.get(name)
		raise RuntimeError(f"Unknown identifier '{name}'")


@dataclass
class BuiltinFunction:
	name: str
	impl: Callable[["Interpreter", Sequence[object]], object]


def _emit(interp: "Interpreter", args: Sequence[object]) -> object:
	if len(args) != 1:
		raise RuntimeError(f"emit expects 1 arg, got {len(args)}")
	interp.trace.append(args[0])
	return None


BUILTINS: Dict[str, BuiltinFunction] = {
	"emit": BuiltinFunction("emit", _emit),
}


@dataclass
class UserFunction:
	definition: H.HFunction
	interpreter: Interpreter  # type: ignore  # forward reference

	def __call__(self, args: Sequence[object]) -> object:
		if len(args) != len(self.definition.params):
			raise RuntimeError(
				f"{self.definition.name} expects {len(self.definition.params)} args, got {len(args)}"
			)
		env = Environment(parent=self.interpreter.global_env)
		for param, value in zip(self.definition.params, args):
			env.define(param, value)
		try:
			return self.interpreter._eval_block(self.definition.body, env)
		except BreakSignal as signal:
			target = f"'{signal.label}" if signal.label else "loop"
			raise RuntimeError(f"break to {target} escaped function '{self.definition.name}'") from None


class Interpreter:
	def __init__(
		self,
		program: H.HProgram,
		builtins: Mapping[str, BuiltinFunction] | None = None,
	) -> None:
		self.program = program
		self.builtins = builtins or BUILTINS
		self.trace: List[object] = []
		self.global_env = Environment()
		for name, builtin in self.builtins.items():
			self.global_env.define(name, builtin)
		for fn in program.functions:
			self.global_env.define(fn.name, UserFunction(fn, self))

	def call(self, name: str, *args: object) -> object:
		func = self.global_env.get(name)
		logger.debug("calling %s%r", name, args)
		return self._invoke(func, list(args))

	# Statements ---------------------------------------------------------

	def _eval_block(self, block: H.HBlock, env: Environment) -> object:
		scope = Environment(parent=env)
		value: object = None
		for stmt in block.statements:
			value = self._exec_stmt(stmt, scope)
		return value

	def _exec_stmt(self, stmt: H.HStmt, env: Environment) -> object:
		"""Execute `stmt`; returns the block value contribution (tail only)."""
		if isinstance(stmt, H.HLet):
			env.define(stmt.name, self._eval_expr(stmt.value, env))
			return None
		if isinstance(stmt, H.HAssign):
			env.set(stmt.target.name, self._eval_expr(stmt.value, env))
			return None
		if isinstance(stmt, H.HExprStmt):
			self._eval_expr(stmt.expr, env)
			return None
		if isinstance(stmt, H.HTailExpr):
			return self._eval_expr(stmt.expr, env)
		raise RuntimeError(f"Unsupported statement {stmt}")

	# Expressions --------------------------------------------------------

	def _eval_expr(self, expr: H.HExpr, env: Environment) -> object:
		if isinstance(expr, (H.HLiteralInt, H.HLiteralString, H.HLiteralBool)):
			return expr.value
		if isinstance(expr, H.HVar):
			return env.get(expr.name)
		if isinstance(expr, H.HCall):
			func = self._eval_expr(expr.fn, env)
			args = [self._eval_expr(arg, env) for arg in expr.args]
			return self._invoke(func, args)
		if isinstance(expr, H.HUnary):
			value = self._eval_expr(expr.expr, env)
			if expr.op is H.UnaryOp.NEG:
				return -value  # type: ignore[operator]
			return not bool(value)
		if isinstance(expr, H.HBinary):
			return self._eval_binary(expr, env)
		if isinstance(expr, H.HBlockExpr):
			return self._eval_block(expr.block, env)
		if isinstance(expr, H.HIf):
			if bool(self._eval_expr(expr.cond, env)):
				return self._eval_block(expr.then_block, env)
			if expr.else_branch is not None:
				return self._eval_expr(expr.else_branch, env)
			return None
		if isinstance(expr, H.HMatch):
			value = self._eval_expr(expr.scrutinee, env)
			for arm in expr.arms:
				if arm.pattern is None or self._eval_expr(arm.pattern, env) == value:
					return self._eval_block(arm.block, env)
			raise RuntimeError(f"no match arm for {value!r}")
		if isinstance(expr, H.HLoop):
			return self._eval_loop(expr, env)
		if isinstance(expr, H.HBreak):
			raise BreakSignal(expr.label)
		if isinstance(expr, (H.HBranchMarker, H.HTargetMarker)):
			raise RuntimeError(f"goto marker '{expr.name}' reached; run the forward-goto rewrite first")
		raise RuntimeError(f"Unsupported expression {expr}")

	def _eval_loop(self, loop: H.HLoop, env: Environment) -> object:
		while True:
			try:
				self._eval_block(loop.body, env)
			except BreakSignal as signal:
				if signal.label is None or signal.label == loop.label:
					return None
				raise
			if loop.synthetic:
				raise RuntimeError(f"synthesized loop '{loop.label}' ran past its end")

	def _eval_binary(self, expr: H.HBinary, env: Environment) -> object:
		op = expr.op
		if op is H.BinaryOp.AND:
			if not bool(self._eval_expr(expr.left, env)):
				return False
			return bool(self._eval_expr(expr.right, env))
		if op is H.BinaryOp.OR:
			if bool(self._eval_expr(expr.left, env)):
				return True
			return bool(self._eval_expr(expr.right, env))
		left = self._eval_expr(expr.left, env)
		right = self._eval_expr(expr.right, env)
		if op is H.BinaryOp.ADD:
			return left + right  # type: ignore[operator]
		if op is H.BinaryOp.SUB:
			return left - right  # type: ignore[operator]
		if op is H.BinaryOp.MUL:
			return left * right  # type: ignore[operator]
		if op is H.BinaryOp.MOD:
			return left % right  # type: ignore[operator]
		if op is H.BinaryOp.EQ:
			return left == right
		if op is H.BinaryOp.NE:
			return left != right
		if op is H.BinaryOp.LT:
			return left < right  # type: ignore[operator]
		if op is H.BinaryOp.LE:
			return left <= right  # type: ignore[operator]
		if op is H.BinaryOp.GT:
			return left > right  # type: ignore[operator]
		if op is H.BinaryOp.GE:
			return left >= right  # type: ignore[operator]
		raise RuntimeError(f"Unsupported operator {op}")

	def _invoke(self, func: object, args: Sequence[object]) -> object:
		if isinstance(func, BuiltinFunction):
			return func.impl(self, args)
		if isinstance(func, UserFunction):
			return func(args)
		raise RuntimeError(f"Object {func} is not callable")


def run_function(program: H.HProgram, name: str, *args: object) -> tuple[object, List[object]]:
	"""Call `name(*args)` on a fresh interpreter; returns `(value, trace)`."""
	interp = Interpreter(program)
	value = interp.call(name, *args)
	return value, interp.trace


__all__ = ["BreakSignal", "Environment", "BuiltinFunction", "BUILTINS", "Interpreter", "run_function"]
