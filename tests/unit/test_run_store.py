"""Unit tests for the in-memory step record store."""

from branch_rotator.telemetry import RunStore, StepRecord


def test_run_store_keeps_steps_in_order():
    store = RunStore()
    store.add(StepRecord(name="checkout", argv=["git", "checkout", "main"], cwd="/repo", exit_code=0))
    store.add(StepRecord(name="publish", argv=["/repo/publish.sh"], cwd="/repo", exit_code=2))

    assert len(store) == 2
    assert [step.name for step in store] == ["checkout", "publish"]
    assert store.get("checkout").ok is True
    assert store.get("publish").ok is False
    assert store.get("missing") is None
