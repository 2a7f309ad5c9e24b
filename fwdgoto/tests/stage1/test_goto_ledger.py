# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Tests for the branch/target ledger used by the forward-goto rewrite.

The ledger knows nothing about HIR; tests drive its cursor (`level`/`index`)
by hand the way the walker does.
"""

import pytest

from fwdgoto.core.span import Span
from fwdgoto.stage1.goto_errors import DuplicateTarget, UnmatchedBranch, UnmatchedTarget
from fwdgoto.stage1.goto_ledger import GotoLedger


def test_branch_inside_scope_hoists_to_enclosing_statement():
	ledger = GotoLedger()
	ledger.index = 2
	with ledger.scope():
		assert ledger.level == 1
		ledger.index = 0
		ledger.register_branch("a")
		assert (ledger.gotos["a"].level, ledger.gotos["a"].index) == (1, 0)
	assert ledger.level == 0
	assert ledger.index == 2
	assert (ledger.gotos["a"].level, ledger.gotos["a"].index) == (0, 2)


def test_leftmost_branch_site_wins():
	ledger = GotoLedger()
	ledger.index = 1
	ledger.register_branch("a")
	ledger.index = 3
	with ledger.scope():
		ledger.register_branch("a")
	site = ledger.gotos["a"]
	assert (site.level, site.index) == (0, 1)


def test_hoist_never_moves_shallower_sites():
	ledger = GotoLedger()
	ledger.index = 1
	ledger.register_branch("a")
	ledger.hoist(0, 5)
	assert ledger.gotos["a"].index == 1


def test_scope_merges_nested_incoming_in_front():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_branch("b")
	ledger.index = 1
	with ledger.scope():
		ledger.register_target("a")
		assert ledger.incoming == ["a"]
		assert ledger.continuation_level == 1
		assert ledger.should_split()
	ledger.index = 2
	with ledger.scope():
		ledger.register_target("b")
	assert ledger.incoming == ["b", "a"]
	assert ledger.continuation_level == 0
	assert ledger.should_split()


def test_scope_exit_runs_on_error():
	ledger = GotoLedger()
	ledger.index = 4
	with pytest.raises(RuntimeError):
		with ledger.scope():
			ledger.index = 0
			ledger.register_branch("a")
			raise RuntimeError("boom")
	assert ledger.level == 0
	assert ledger.index == 4
	assert ledger.gotos["a"].level == 0


def test_target_without_branch_is_unmatched():
	ledger = GotoLedger()
	with pytest.raises(UnmatchedTarget) as excinfo:
		ledger.register_target("missing", loc=Span(line=3, column=5))
	assert excinfo.value.loc.line == 3
	assert excinfo.value.code == "GOTO_UNMATCHED_TARGET"


def test_duplicate_target():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_target("a")
	ledger.resolve("a")
	with pytest.raises(DuplicateTarget):
		ledger.register_target("a")


def test_branch_after_its_target_is_rejected():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_target("a")
	with pytest.raises(UnmatchedBranch):
		ledger.register_branch("a")


def test_sealed_region_rejects_target_entered_from_outside():
	ledger = GotoLedger()
	ledger.register_branch("a")
	with pytest.raises(UnmatchedTarget):
		with ledger.sealed():
			ledger.register_target("a")
	# Outer bookkeeping is restored.
	assert ledger.labels == {}
	assert ledger.incoming == []


def test_sealed_region_lets_branches_leave():
	ledger = GotoLedger()
	ledger.index = 1
	with ledger.sealed():
		with ledger.scope():
			ledger.register_branch("out")
	assert (ledger.gotos["out"].level, ledger.gotos["out"].index) == (0, 1)


def test_sealed_region_resolves_its_own_targets():
	ledger = GotoLedger()
	with ledger.sealed():
		ledger.register_branch("a")
		ledger.register_target("a")
		ledger.resolve("a")
		ledger.incoming = []
	assert ledger.gotos == {}


def test_pull_into_span_moves_pending_branches_to_span_start():
	ledger = GotoLedger()
	ledger.index = 3
	ledger.register_branch("later")
	ledger.pull_into_span(0, 1)
	assert ledger.gotos["later"].index == 1


def test_finish_reports_leftover_branch():
	ledger = GotoLedger()
	ledger.register_branch("dangling", loc=Span(line=7, column=2))
	with pytest.raises(UnmatchedBranch) as excinfo:
		ledger.finish()
	assert "dangling" in str(excinfo.value)
	assert excinfo.value.loc.line == 7
