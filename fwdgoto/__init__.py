# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
fwdgoto: forward-goto elimination for a small structured language.

Pipeline placement:
  source → parser (HIR) → stage1 goto rewrite → printer / interpreter

Packages:
  core:    spans and diagnostics shared by every stage
  parser:  lark grammar and HIR builder
  stage1:  HIR nodes, printer and the forward-goto rewrite pass

The CLI entrypoint is `fwdgoto.fgotoc:main`.
"""

__all__ = []
