# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Tests for continuation push/retrieve on top of the ledger.
"""

from fwdgoto import stage1 as H
from fwdgoto.stage1.goto_continuations import ContinuationSynthesizer
from fwdgoto.stage1.goto_ledger import GotoLedger


def _emit(text: str) -> H.HExprStmt:
	return H.HExprStmt(expr=H.HCall(fn=H.HVar(name="emit"), args=[H.HLiteralString(value=text)]))


def test_single_incoming_with_empty_suffix_reuses_the_label():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_target("a")
	synth = ContinuationSynthesizer(ledger)

	assert synth.push_continuation([]) == "a"
	assert len(ledger.continuations) == 0
	assert ledger.incoming == ["a"]


def test_push_records_suffix_and_exits_to_previous_label():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_target("a")
	synth = ContinuationSynthesizer(ledger)

	exit_to = synth.push_continuation([_emit("after")])

	assert exit_to == "a"
	assert ledger.incoming == ["__cont0"]
	assert "__cont0" in ledger.continuations


def test_push_with_several_incoming_exits_to_last():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_branch("b")
	ledger.register_target("a")
	ledger.register_target("b")
	synth = ContinuationSynthesizer(ledger, label_prefix="k")

	exit_to = synth.push_continuation([_emit("after")])

	assert exit_to == "b"
	assert ledger.incoming == ["k0"]
	record = ledger.continuations.take("k0")
	assert record is not None
	assert record.predecessors == ["a", "b"]


def test_retrieve_waits_for_branches_at_the_current_level():
	ledger = GotoLedger()
	ledger.register_branch("a")
	synth = ContinuationSynthesizer(ledger)
	ledger.index = 1
	with ledger.scope():
		ledger.register_target("a")
		assert synth.retrieve_continuations() is None
		assert ledger.labels


def test_retrieve_orders_continuations_after_their_predecessors():
	ledger = GotoLedger()
	ledger.register_branch("a")
	ledger.register_branch("b")
	synth = ContinuationSynthesizer(ledger)
	ledger.index = 2
	with ledger.scope():
		ledger.register_target("a")
		assert synth.push_continuation([_emit("after a")]) == "a"
	with ledger.scope():
		ledger.register_target("b")
		assert synth.push_continuation([_emit("after b")]) == "b"

	plan = synth.retrieve_continuations()

	assert plan is not None
	assert (plan.lowest_index, plan.highest_index) == (0, 0)
	assert plan.end_label == "__cont2"
	assert [step.label for step in plan.steps] == ["__cont1", "__cont0", "__cont2"]
	assert plan.steps[-1].predecessors == ["__cont1", "__cont0"]
	assert plan.steps[-1].statements == []
	# The ledger is drained.
	assert ledger.labels == {}
	assert ledger.gotos == {}
	assert ledger.incoming == []
	assert len(ledger.continuations) == 0


def test_fresh_labels_skip_taken_names():
	ledger = GotoLedger()
	ledger.register_branch("__cont0")
	ledger.register_target("__cont0")
	taken = {"__cont0", "__cont2"}
	synth = ContinuationSynthesizer(ledger, taken=taken)

	assert synth.push_continuation([_emit("one")]) == "__cont0"
	assert synth.push_continuation([_emit("two")]) == "__cont1"
	assert synth.push_continuation([_emit("three")]) == "__cont3"
	assert ledger.incoming == ["__cont4"]
	assert {"__cont1", "__cont3", "__cont4"} <= taken
