# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Stage 1 package: HIR and the forward-goto rewrite.

Public API:
  - HIR node classes (expressions, statements, operator enums)
  - `rewrite_function` / `rewrite_program` (goto elimination)
  - `format_function` / `format_program` (HIR → source text)
"""

from .hir_nodes import (
	HNode,
	HExpr,
	HStmt,
	UnaryOp,
	BinaryOp,
	HVar,
	HLiteralInt,
	HLiteralString,
	HLiteralBool,
	HCall,
	HUnary,
	HBinary,
	HBlock,
	HBlockExpr,
	HIf,
	HMatchArm,
	HMatch,
	HLoop,
	HBreak,
	HBranchMarker,
	HTargetMarker,
	HExprStmt,
	HTailExpr,
	HLet,
	HAssign,
	HFunction,
	HProgram,
)
from .goto_errors import (
	ForwardGotoError,
	UnmatchedTarget,
	UnmatchedBranch,
	DuplicateTarget,
	InvalidResultPosition,
)
from .goto_rewrite import RewriteConfig, ForwardGotoRewriter, rewrite_function, rewrite_program
from .hir_printer import format_function, format_program

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
	"ForwardGotoError",
	"UnmatchedTarget",
	"UnmatchedBranch",
	"DuplicateTarget",
	"InvalidResultPosition",
	"RewriteConfig",
	"ForwardGotoRewriter",
	"rewrite_function",
	"rewrite_program",
	"format_function",
	"format_program",
]
