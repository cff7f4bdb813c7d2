"""Tests for the update status store."""

import pytest

from hwsync.sync.models import ConditionReason, DeleteInterface, ReconcileOutcome, ReconcileState
from hwsync.sync.status import StatusStore


class TestStatusStore:
    @pytest.mark.asyncio
    async def test_record_success(self):
        store = StatusStore()
        outcome = ReconcileOutcome.success([DeleteInterface(interface_id=2, name="vmk0")])

        status = await store.record("update-a", outcome)

        assert status.state == ReconcileState.READY
        assert status.action_count == 1
        assert status.conditions[0].status is True
        assert status.conditions[0].reason == ConditionReason.UPDATE_SUCCEEDED
        assert status.conditions[0].message == "Update succeeded"

    @pytest.mark.asyncio
    async def test_latest_outcome_wins(self):
        store = StatusStore()
        await store.record("update-a", ReconcileOutcome.failure("unable to reconcile cluster: x"))

        await store.record("update-a", ReconcileOutcome.success())

        status = await store.get("update-a")
        assert status.state == ReconcileState.READY
        assert status.description == ""

    @pytest.mark.asyncio
    async def test_failure_condition(self):
        store = StatusStore()

        status = await store.record("update-a", ReconcileOutcome.failure("boom"))

        assert status.state == ReconcileState.ERROR
        assert status.conditions[0].status is False
        assert status.conditions[0].reason == ConditionReason.UPDATE_FAILED

    @pytest.mark.asyncio
    async def test_list_sorted_and_remove(self):
        store = StatusStore()
        await store.record("b", ReconcileOutcome.success())
        await store.record("a", ReconcileOutcome.success())

        assert [s.name for s in await store.list_all()] == ["a", "b"]

        await store.remove("a")
        await store.remove("missing")

        assert [s.name for s in await store.list_all()] == ["b"]
