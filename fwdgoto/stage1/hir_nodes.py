# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
High-level Intermediate Representation (HIR).

Pipeline placement:
  source → parser → HIR (this file) → goto rewrite → printer / interpreter

The HIR is a statement tree in the Rust mould: `if`, `match`, blocks and
loops are expressions; a block is an ordered list of statements whose last
entry may be a value-producing `HTailExpr`.

Guiding rules:
- Nodes are purely syntactic; no type or symbol resolution is embedded here.
- Forward-goto markers (`HBranchMarker` / `HTargetMarker`) only exist before
  the goto rewrite; afterwards every marker is an `HBreak`.
- Loops and breaks created by the rewrite are tagged `synthetic=True`. A
  synthetic loop never iterates: its body always ends in an early exit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from fwdgoto.core.span import Span


# Base node kinds

class HNode:
	"""Base class for all HIR nodes."""
	pass


class HExpr(HNode):
	"""Base class for all HIR expressions."""
	pass


class HStmt(HNode):
	"""Base class for all HIR statements."""
	pass


# Operator enums

class UnaryOp(Enum):
	"""Unary operators preserved in HIR."""
	NEG = auto()  # numeric negation: -x
	NOT = auto()  # logical not: !x


class BinaryOp(Enum):
	"""Binary operators preserved in HIR (AND/OR short-circuit)."""
	ADD = auto()
	SUB = auto()
	MUL = auto()
	MOD = auto()

	EQ = auto()
	NE = auto()
	LT = auto()
	LE = auto()
	GT = auto()
	GE = auto()

	AND = auto()  # logical and (&&)
	OR = auto()   # logical or (||)


# Expressions

@dataclass
class HVar(HExpr):
	"""Reference to a local binding or parameter."""
	name: str
	loc: Span = field(default_factory=Span)


@dataclass
class HLiteralInt(HExpr):
	value: int
	loc: Span = field(default_factory=Span)


@dataclass
class HLiteralString(HExpr):
	value: str
	loc: Span = field(default_factory=Span)


@dataclass
class HLiteralBool(HExpr):
	value: bool
	loc: Span = field(default_factory=Span)


@dataclass
class HCall(HExpr):
	"""Plain function call: fn(args...)."""
	fn: HExpr
	args: List[HExpr]
	loc: Span = field(default_factory=Span)


@dataclass
class HUnary(HExpr):
	op: UnaryOp
	expr: HExpr
	loc: Span = field(default_factory=Span)


@dataclass
class HBinary(HExpr):
	op: BinaryOp
	left: HExpr
	right: HExpr
	loc: Span = field(default_factory=Span)


@dataclass
class HBlock(HNode):
	"""Ordered list of statements; used for bodies of control-flow constructs."""
	statements: List[HStmt]


@dataclass
class HBlockExpr(HExpr):
	"""Braced block used as an expression: `{ stmts; tail }`."""
	block: HBlock
	loc: Span = field(default_factory=Span)


@dataclass
class HIf(HExpr):
	"""
	Conditional with an explicit then block.

	`else_branch` is either `None`, an `HBlockExpr` (plain `else { ... }`) or
	another `HIf` (`else if ...`).
	"""
	cond: HExpr
	then_block: HBlock
	else_branch: Optional[HExpr] = None
	loc: Span = field(default_factory=Span)


@dataclass
class HMatchArm(HNode):
	"""
	Single arm in a `match` expression.

	`pattern` is a literal expression compared for equality with the
	scrutinee; `None` is the wildcard arm `_`.
	"""
	pattern: Optional[HExpr]
	block: HBlock
	loc: Span = field(default_factory=Span)


@dataclass
class HMatch(HExpr):
	"""Expression-form `match`; the first arm whose pattern equals the scrutinee runs."""
	scrutinee: HExpr
	arms: List[HMatchArm]
	loc: Span = field(default_factory=Span)


@dataclass
class HLoop(HExpr):
	"""
	Repeat block, optionally labeled (`'l: loop { ... }`).

	`synthetic` marks loops introduced by the goto rewrite.
	"""
	body: HBlock
	label: Optional[str] = None
	synthetic: bool = False
	loc: Span = field(default_factory=Span)


@dataclass
class HBreak(HExpr):
	"""
	Early exit from the innermost loop, or from the loop named by `label`.

	Breaks are expressions (they diverge) so a branch marker in any
	expression position can be replaced by one.
	"""
	label: Optional[str] = None
	synthetic: bool = False
	loc: Span = field(default_factory=Span)


@dataclass
class HBranchMarker(HExpr):
	"""`goto 'name`: forward-only transfer to the target marker `name`."""
	name: str
	loc: Span = field(default_factory=Span)


@dataclass
class HTargetMarker(HExpr):
	"""`label 'name`: the unique destination of every `goto 'name`."""
	name: str
	loc: Span = field(default_factory=Span)


# Statements

@dataclass
class HExprStmt(HStmt):
	"""Expression used as a statement (value discarded)."""
	expr: HExpr
	loc: Span = field(default_factory=Span)


@dataclass
class HTailExpr(HStmt):
	"""
	Value-producing final statement of a block (no terminating `;`).

	Only legal as the last statement of a block; the goto rewrite refuses to
	move it into a synthesized loop unless it only jumps (`label 'a`).
	"""
	expr: HExpr
	loc: Span = field(default_factory=Span)


@dataclass
class HLet(HStmt):
	"""Binding introduction: `let name = value;`."""
	name: str
	value: HExpr
	loc: Span = field(default_factory=Span)


@dataclass
class HAssign(HStmt):
	"""Assignment to an existing binding: `name = value;`."""
	target: HVar
	value: HExpr
	loc: Span = field(default_factory=Span)


# Top level

@dataclass
class HFunction(HNode):
	name: str
	params: List[str]
	body: HBlock
	loc: Span = field(default_factory=Span)


@dataclass
class HProgram(HNode):
	functions: List[HFunction]

	def function(self, name: str) -> HFunction:
		for fn in self.functions:
			if fn.name == name:
				return fn
		raise KeyError(name)


__all__ = [
	"HNode",
	"HExpr",
	"HStmt",
	"UnaryOp",
	"BinaryOp",
	"HVar",
	"HLiteralInt",
	"HLiteralString",
	"HLiteralBool",
	"HCall",
	"HUnary",
	"HBinary",
	"HBlock",
	"HBlockExpr",
	"HIf",
	"HMatchArm",
	"HMatch",
	"HLoop",
	"HBreak",
	"HBranchMarker",
	"HTargetMarker",
	"HExprStmt",
	"HTailExpr",
	"HLet",
	"HAssign",
	"HFunction",
	"HProgram",
]
