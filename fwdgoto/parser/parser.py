# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Lark-based parser for fwdgoto sources.

Pipeline placement:
  source text → [this module] → HIR (`fwdgoto.stage1.hir_nodes`)

The grammar (grammar.lark, next to this file) is LALR with the basic lexer.
Parse trees are walked by hand (`_build_*`) rather than with a Transformer so
each builder can decide which children matter and attach spans from
`tree.meta`.
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from fwdgoto.core.span import Span
from fwdgoto.stage1 import hir_nodes as H

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="program",
	propagate_positions=True,
	maybe_placeholders=False,
)

_BINARY_OPS = {
	"||": H.BinaryOp.OR,
	"&&": H.BinaryOp.AND,
	"==": H.BinaryOp.EQ,
	"!=": H.BinaryOp.NE,
	"<": H.BinaryOp.LT,
	"<=": H.BinaryOp.LE,
	">": H.BinaryOp.GT,
	">=": H.BinaryOp.GE,
	"+": H.BinaryOp.ADD,
	"-": H.BinaryOp.SUB,
	"*": H.BinaryOp.MUL,
	"%": H.BinaryOp.MOD,
}

_UNARY_OPS = {
	"!": H.UnaryOp.NOT,
	"-": H.UnaryOp.NEG,
}


class ParseError(ValueError):
	"""Source that lexes and parses but is not a valid program (e.g. duplicate functions)."""

	def __init__(self, message: str, *, loc: Span | None = None) -> None:
		super().__init__(message)
		self.loc = loc or Span()


def parse_program(source: str, *, file: Optional[str] = None) -> H.HProgram:
	"""
	Parse `source` into an `HProgram`.

	Raises lark's `UnexpectedInput` for syntax errors and `ParseError` for
	structurally invalid programs.
	"""
	tree = _PARSER.parse(source)
	return _Builder(file).program(tree)


def _decode_string_token(tok: Token) -> str:
	"""Decode a double-quoted STRING token (Python-style escapes, UTF-8 source)."""
	content = tok.value[1:-1]
	unescaped = codecs.decode(content, "unicode_escape")
	return unescaped.encode("latin-1").decode("utf-8")


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _lifetime(tok: Token) -> str:
	"""`'name` → `name`."""
	return tok.value[1:]


class _Builder:
	"""Parse tree → HIR; carries the file name into every span."""

	def __init__(self, file: Optional[str]) -> None:
		self.file = file

	def _loc(self, node: Tree | Token) -> Span:
		if isinstance(node, Token):
			return Span(
				file=self.file,
				line=node.line,
				column=node.column,
				end_line=node.end_line,
				end_column=node.end_column,
			)
		return Span.from_meta(node.meta, file=self.file)

	# Top level ----------------------------------------------------------

	def program(self, tree: Tree) -> H.HProgram:
		functions: List[H.HFunction] = []
		seen = set()
		for child in tree.children:
			fn = self.function(child)
			if fn.name in seen:
				raise ParseError(f"duplicate function '{fn.name}'", loc=fn.loc)
			seen.add(fn.name)
			functions.append(fn)
		return H.HProgram(functions=functions)

	def function(self, tree: Tree) -> H.HFunction:
		name_tok = tree.children[0]
		params: List[str] = []
		body: Optional[H.HBlock] = None
		for child in tree.children[1:]:
			if _name(child) == "params":
				params = [str(tok) for tok in child.children]
			elif _name(child) == "block":
				body = self.block(child)
		if len(set(params)) != len(params):
			raise ParseError(f"duplicate parameter in function '{name_tok}'", loc=self._loc(name_tok))
		assert body is not None
		return H.HFunction(name=str(name_tok), params=params, body=body, loc=self._loc(tree))

	# Blocks and statements ----------------------------------------------

	def block(self, tree: Tree) -> H.HBlock:
		statements: List[H.HStmt] = []
		for child in tree.children:
			if _name(child) == "tail":
				statements.append(H.HTailExpr(expr=self.expr(child.children[0]), loc=self._loc(child)))
			else:
				statements.append(self.stmt(child))
		return H.HBlock(statements=statements)

	def stmt(self, tree: Tree) -> H.HStmt:
		kind = _name(tree)
		loc = self._loc(tree)
		if kind == "let_stmt":
			name_tok, value = tree.children
			return H.HLet(name=str(name_tok), value=self.expr(value), loc=loc)
		if kind == "assign_stmt":
			name_tok, value = tree.children
			target = H.HVar(name=str(name_tok), loc=self._loc(name_tok))
			return H.HAssign(target=target, value=self.expr(value), loc=loc)
		if kind in ("expr_stmt", "blocklike_stmt"):
			return H.HExprStmt(expr=self.expr(tree.children[0]), loc=loc)
		raise NotImplementedError(f"unsupported statement node: {kind}")

	# Expressions --------------------------------------------------------

	def expr(self, tree: Tree) -> H.HExpr:
		kind = _name(tree)
		loc = self._loc(tree)
		children = tree.children
		if kind == "int_lit":
			return H.HLiteralInt(value=int(children[0]), loc=loc)
		if kind == "string_lit":
			try:
				value = _decode_string_token(children[0])
			except UnicodeDecodeError as err:
				raise ParseError(f"invalid string literal {children[0].value}: {err.reason}", loc=loc) from err
			return H.HLiteralString(value=value, loc=loc)
		if kind == "true_lit":
			return H.HLiteralBool(value=True, loc=loc)
		if kind == "false_lit":
			return H.HLiteralBool(value=False, loc=loc)
		if kind == "var":
			return H.HVar(name=str(children[0]), loc=loc)
		if kind == "call":
			name_tok = children[0]
			args: List[H.HExpr] = []
			if len(children) > 1:
				args = [self.expr(arg) for arg in children[1].children]
			return H.HCall(fn=H.HVar(name=str(name_tok), loc=self._loc(name_tok)), args=args, loc=loc)
		if kind == "unary":
			op_tok, operand = children
			return H.HUnary(op=_UNARY_OPS[op_tok.value], expr=self.expr(operand), loc=loc)
		if kind == "binary":
			left, op_tok, right = children
			return H.HBinary(op=_BINARY_OPS[op_tok.value], left=self.expr(left), right=self.expr(right), loc=loc)
		if kind == "goto":
			return H.HBranchMarker(name=_lifetime(children[0]), loc=loc)
		if kind == "label":
			return H.HTargetMarker(name=_lifetime(children[0]), loc=loc)
		if kind == "break_expr":
			label = _lifetime(children[0]) if children else None
			return H.HBreak(label=label, loc=loc)
		if kind == "block_expr":
			return H.HBlockExpr(block=self.block(children[0]), loc=loc)
		if kind == "if_expr":
			return self._if(tree)
		if kind == "match_expr":
			return self._match(tree)
		if kind == "loop_expr":
			label: Optional[str] = None
			body_tree = children[-1]
			if isinstance(children[0], Token) and children[0].type == "LIFETIME":
				label = _lifetime(children[0])
			return H.HLoop(body=self.block(body_tree), label=label, loc=loc)
		raise NotImplementedError(f"unsupported expression node: {kind}")

	def _if(self, tree: Tree) -> H.HIf:
		cond = self.expr(tree.children[0])
		then_block = self.block(tree.children[1])
		else_branch: Optional[H.HExpr] = None
		if len(tree.children) > 2:
			clause = tree.children[2]
			inner = clause.children[0]
			if _name(inner) == "block":
				else_branch = H.HBlockExpr(block=self.block(inner), loc=self._loc(inner))
			else:
				else_branch = self._if(inner)
		return H.HIf(cond=cond, then_block=then_block, else_branch=else_branch, loc=self._loc(tree))

	def _match(self, tree: Tree) -> H.HMatch:
		scrutinee = self.expr(tree.children[0])
		arms: List[H.HMatchArm] = []
		for arm in tree.children[1:]:
			pattern_node, block_tree = arm.children
			pattern: Optional[H.HExpr] = None
			if not (isinstance(pattern_node, Token) and pattern_node.type == "WILDCARD"):
				pattern = self.expr(pattern_node)
			arms.append(H.HMatchArm(pattern=pattern, block=self.block(block_tree), loc=self._loc(arm)))
		return H.HMatch(scrutinee=scrutinee, arms=arms, loc=self._loc(tree))


__all__ = ["ParseError", "parse_program"]
