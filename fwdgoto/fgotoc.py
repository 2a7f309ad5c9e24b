# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Command-line driver: parse a source file, eliminate forward gotos, then
print the rewritten program or run one of its functions.

Exit codes: 0 on success, 1 when any phase reports an error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fwdgoto.core.diagnostics import Diagnostic
from fwdgoto.interp import Interpreter
from fwdgoto.parser import parse_file
from fwdgoto.stage1 import HProgram, format_program, rewrite_program

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)


def _parse_run_arg(text: str) -> object:
	"""CLI argument → runtime value: integers, `true`/`false`, else the string itself."""
	if text in ("true", "false"):
		return text == "true"
	try:
		return int(text)
	except ValueError:
		return text


def _report(diagnostics: List[Diagnostic], source: Path, as_json: bool) -> int:
	if as_json:
		payload = {
			"exit_code": 1,
			"diagnostics": [d.to_json(str(source)) for d in diagnostics],
		}
		print(json.dumps(payload))
	else:
		for diag in diagnostics:
			print(diag.render(str(source)), file=sys.stderr)
	return 1


def _run(program: HProgram, fn_name: str, raw_args: List[str], source: Path, as_json: bool) -> int:
	try:
		program.function(fn_name)
	except KeyError:
		return _report([Diagnostic(message=f"no function named '{fn_name}'", phase="run")], source, as_json)
	interp = Interpreter(program)
	try:
		value = interp.call(fn_name, *[_parse_run_arg(a) for a in raw_args])
	except (RuntimeError, ArithmeticError, TypeError) as err:
		return _report([Diagnostic(message=str(err), phase="run")], source, as_json)
	if as_json:
		print(json.dumps({"exit_code": 0, "diagnostics": [], "trace": interp.trace, "value": value}, default=str))
		return 0
	for item in interp.trace:
		print(item)
	if value is not None:
		print(f"=> {value}")
	return 0


def main(argv: list[str] | None = None) -> int:
	"""
	Parse, rewrite, then either print the rewritten program (default), write
	it to `--output`, or run `--run FN [ARGS...]` on it.

	With --json, prints structured diagnostics (phase/code/message/severity/
	file/line/column) and an exit_code; otherwise prints human-readable
	messages to stderr.
	"""
	parser = argparse.ArgumentParser(description="forward-goto elimination driver")
	parser.add_argument("source", type=Path, help="Path to the source file")
	parser.add_argument("-o", "--output", type=Path, help="Write the rewritten program to this path")
	parser.add_argument(
		"--run",
		nargs="+",
		metavar=("FN", "ARGS"),
		help="Run function FN of the rewritten program with ARGS and print its emitted trace",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log pass internals at debug level")
	args = parser.parse_args(argv)
	_configure_logging(args.verbose)

	source: Path = args.source
	if not source.is_file():
		return _report([Diagnostic(message=f"no such file: {source}", phase="driver")], source, args.json)

	program, diagnostics = parse_file(source)
	if diagnostics:
		return _report(diagnostics, source, args.json)
	assert program is not None

	rewritten, diagnostics = rewrite_program(program)
	if diagnostics:
		return _report(diagnostics, source, args.json)
	logger.debug("rewrote %d function(s) from %s", len(rewritten.functions), source)

	if args.run:
		return _run(rewritten, args.run[0], args.run[1:], source, args.json)

	text = format_program(rewritten)
	if args.output is not None:
		args.output.write_text(text)
	elif not args.json:
		sys.stdout.write(text)
	if args.json:
		payload = {"exit_code": 0, "diagnostics": []}
		if args.output is None:
			payload["program"] = text
		print(json.dumps(payload))
	return 0


if __name__ == "__main__":
	sys.exit(main())
