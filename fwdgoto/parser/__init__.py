# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Parser front door: source text → HIR program plus parser diagnostics.

Syntax errors are collected as diagnostics instead of raised, so the driver
reports them the same way it reports goto rewrite errors.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from fwdgoto.core.diagnostics import Diagnostic
from fwdgoto.core.span import Span
from fwdgoto.stage1 import hir_nodes as H
from . import parser as _parser
from .parser import ParseError, parse_program


def parse_source(source: str, *, file: Optional[str] = None) -> Tuple[Optional[H.HProgram], List[Diagnostic]]:
	"""Parse `source`; returns `(program, [])` or `(None, [diagnostic])`."""
	try:
		return _parser.parse_program(source, file=file), []
	except ParseError as err:
		return None, [Diagnostic(message=str(err), phase="parser", span=err.loc)]
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		if line is not None and line < 1:
			# UnexpectedEOF reports -1.
			line = column = None
		span = Span(file=file, line=line, column=column)
		# lark's message embeds the source context over several lines; the
		# first line is the summary.
		message = str(err).strip().splitlines()[0]
		return None, [Diagnostic(message=message, phase="parser", span=span)]


def parse_file(path: Path) -> Tuple[Optional[H.HProgram], List[Diagnostic]]:
	return parse_source(path.read_text(), file=str(path))


__all__ = ["ParseError", "parse_program", "parse_source", "parse_file"]
