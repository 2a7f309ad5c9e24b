# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Parser tests: surface syntax → HIR shape, spans and syntax diagnostics.
"""

import pytest

from fwdgoto import stage1 as H
from fwdgoto.parser import ParseError, parse_program, parse_source


def _body(source: str) -> list:
	program = parse_program(source)
	return program.functions[0].body.statements


def test_function_params_and_statements():
	program = parse_program(
		"""
		// leading comment
		fn add(a, b) {
			let total = a + b;
			total = total * 2;
			emit(total);
			total
		}
		"""
	)
	fn = program.function("add")
	assert fn.params == ["a", "b"]
	let, assign, call, tail = fn.body.statements
	assert isinstance(let, H.HLet) and let.name == "total"
	assert isinstance(let.value, H.HBinary) and let.value.op is H.BinaryOp.ADD
	assert isinstance(assign, H.HAssign) and assign.target.name == "total"
	assert isinstance(call, H.HExprStmt) and isinstance(call.expr, H.HCall)
	assert call.expr.fn.name == "emit"
	assert isinstance(tail, H.HTailExpr) and isinstance(tail.expr, H.HVar)


def test_markers_and_labeled_loops():
	goto, label, loop = _body("fn f() { goto 'a; label 'a; 'outer: loop { break 'outer; } }")
	assert goto.expr == H.HBranchMarker(name="a", loc=goto.expr.loc)
	assert label.expr == H.HTargetMarker(name="a", loc=label.expr.loc)
	assert isinstance(loop.expr, H.HLoop)
	assert loop.expr.label == "outer"
	assert not loop.expr.synthetic
	(brk,) = loop.expr.body.statements
	assert brk.expr.label == "outer"


def test_unlabeled_loop_and_break():
	(loop,) = _body("fn f() { loop { break; } }")
	assert loop.expr.label is None
	assert loop.expr.body.statements[0].expr.label is None


def test_operator_precedence():
	(tail,) = _body("fn f() { 1 + 2 * 3 == 7 && !false || -1 < 0 }")
	expr = tail.expr
	assert expr.op is H.BinaryOp.OR
	conj = expr.left
	assert conj.op is H.BinaryOp.AND
	eq = conj.left
	assert eq.op is H.BinaryOp.EQ
	assert eq.left.op is H.BinaryOp.ADD
	assert eq.left.right.op is H.BinaryOp.MUL
	assert conj.right.op is H.UnaryOp.NOT
	lt = expr.right
	assert lt.op is H.BinaryOp.LT
	assert lt.left.op is H.UnaryOp.NEG


def test_if_else_if_chain():
	(stmt,) = _body("fn f(x) { if x == 1 { emit(1); } else if x == 2 { emit(2); } else { emit(3); } }")
	first = stmt.expr
	assert isinstance(first, H.HIf)
	second = first.else_branch
	assert isinstance(second, H.HIf)
	assert isinstance(second.else_branch, H.HBlockExpr)


def test_match_with_literal_and_wildcard_arms():
	(stmt,) = _body('fn f(x) { match x { "a" => { emit(1); }, 2 => {} _ => { emit(3); } } }')
	match = stmt.expr
	assert isinstance(match, H.HMatch)
	assert [type(arm.pattern) for arm in match.arms] == [H.HLiteralString, H.HLiteralInt, type(None)]
	assert match.arms[1].block.statements == []


def test_blocklike_value_needs_parentheses_as_tail():
	(tail,) = _body("fn f(c) { (if c { 1 } else { 2 }) }")
	assert isinstance(tail, H.HTailExpr)
	assert isinstance(tail.expr, H.HIf)
	# Without parentheses the `if` is a statement.
	(stmt,) = _body("fn f(c) { if c { 1 } else { 2 } }")
	assert isinstance(stmt, H.HExprStmt)


def test_string_escapes():
	(tail,) = _body(r'fn f() { "a\tb\"c\n" }')
	assert tail.expr.value == 'a\tb"c\n'


def test_spans_point_at_source():
	program = parse_program("fn f() {\n\temit(1);\n\tgoto 'x;\n}\n", file="demo.fg")
	goto = program.functions[0].body.statements[1].expr
	assert goto.loc.file == "demo.fg"
	assert (goto.loc.line, goto.loc.column) == (3, 2)


def test_keywords_are_not_identifiers_but_prefixes_are():
	(let,) = _body("fn f() { let gotox = 1; }")
	assert let.name == "gotox"


def test_duplicate_function_is_rejected():
	with pytest.raises(ParseError):
		parse_program("fn f() {} fn f() {}")


def test_syntax_error_becomes_diagnostic():
	program, diagnostics = parse_source("fn f() {\n\temit(1)\n\temit(2);\n}\n", file="bad.fg")
	assert program is None
	(diag,) = diagnostics
	assert diag.phase == "parser"
	assert diag.span.file == "bad.fg"
	assert diag.span.line == 3


def test_structural_error_becomes_diagnostic():
	program, diagnostics = parse_source("fn f() {}\nfn f() {}\n", file="dup.fg")
	assert program is None
	(diag,) = diagnostics
	assert "duplicate function" in diag.message
	assert (diag.span.file, diag.span.line) == ("dup.fg", 2)


def test_string_that_is_not_utf8_becomes_diagnostic():
	program, diagnostics = parse_source('fn f() {\n\temit("ok");\n\temit("\\xff");\n}\n', file="bytes.fg")
	assert program is None
	(diag,) = diagnostics
	assert diag.phase == "parser"
	assert "invalid string literal" in diag.message
	assert (diag.span.file, diag.span.line, diag.span.column) == ("bytes.fg", 3, 7)
