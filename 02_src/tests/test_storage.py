"""Tests for Storage."""

from datetime import datetime, timedelta, timezone

import pytest

from datapipe.models import (
    FilterRole,
    TelemetryBatch,
    TelemetryEvent,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryScope,
)
from datapipe.storage import Storage

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def sealed_batch(
    pipeline_id: str,
    pipeline_name: str = "orders",
    outcome: TelemetryOutcome = TelemetryOutcome.SUCCESS,
    reason: str | None = None,
    offset_s: int = 0,
) -> TelemetryBatch:
    start = T0 + timedelta(seconds=offset_s)
    batch = TelemetryBatch(
        pipeline_id=pipeline_id, pipeline_name=pipeline_name, start_time=start
    )
    batch.append(
        TelemetryEvent(
            message_id=pipeline_id,
            component="SaveOrder",
            pipeline_name=pipeline_name,
            scope=TelemetryScope.FILTER,
            phase=TelemetryPhase.END,
            timestamp=start,
            role=FilterRole.BUSINESS,
            outcome=TelemetryOutcome.SUCCESS,
            duration_ms=4,
        )
    )
    batch.seal(start + timedelta(milliseconds=250), outcome, reason)
    return batch


class TestStorageInit:
    """Tests for Storage initialization."""

    async def test_init_creates_tables(self, storage):
        """Test that init creates the telemetry table."""
        async with storage._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "telemetry_batches" in tables

    async def test_not_initialized_raises(self):
        """Test that using storage before init raises."""
        st = Storage(":memory:")
        with pytest.raises(RuntimeError, match="Storage not initialized"):
            await st.get_batches()
        with pytest.raises(RuntimeError, match="Storage not initialized"):
            await st.save_batch(sealed_batch("m1"))

    async def test_close_is_idempotent(self):
        """Test closing twice."""
        st = Storage(":memory:")
        await st.init()
        await st.close()
        await st.close()


class TestStorageBatches:
    """Tests for telemetry batch storage."""

    async def test_save_and_get_batch(self, storage):
        """Test round trip of a batch in wire form."""
        batch = sealed_batch("m1", outcome=TelemetryOutcome.STOPPED, reason="guard")
        await storage.save_batch(batch)

        stored = await storage.get_batch("m1")

        assert stored == batch.to_dict()
        assert stored["outcome"] == "Stopped"
        assert stored["reason"] == "guard"
        assert stored["durationMs"] == 250

    async def test_get_nonexistent_batch(self, storage):
        """Test that an unknown id returns None."""
        assert await storage.get_batch("missing") is None

    async def test_save_same_id_replaces(self, storage):
        """Test that re-saving a pipeline id replaces the row."""
        await storage.save_batch(sealed_batch("m1"))
        await storage.save_batch(
            sealed_batch("m1", outcome=TelemetryOutcome.EXCEPTION, reason="boom")
        )

        batches = await storage.get_batches()
        assert len(batches) == 1
        assert batches[0]["outcome"] == "Exception"

    async def test_newest_first(self, storage):
        """Test ordering by start time, newest first."""
        await storage.save_batch(sealed_batch("old", offset_s=0))
        await storage.save_batch(sealed_batch("new", offset_s=10))
        await storage.save_batch(sealed_batch("mid", offset_s=5))

        batches = await storage.get_batches()

        assert [b["pipelineId"] for b in batches] == ["new", "mid", "old"]

    async def test_filter_by_pipeline_name(self, storage):
        """Test filtering by pipeline name."""
        await storage.save_batch(sealed_batch("a", pipeline_name="orders"))
        await storage.save_batch(sealed_batch("b", pipeline_name="billing"))

        batches = await storage.get_batches(pipeline_name="billing")

        assert [b["pipelineId"] for b in batches] == ["b"]

    async def test_filter_by_outcome(self, storage):
        """Test filtering by outcome."""
        await storage.save_batch(sealed_batch("ok"))
        await storage.save_batch(
            sealed_batch("bad", outcome=TelemetryOutcome.EXCEPTION, reason="boom")
        )

        batches = await storage.get_batches(outcome=TelemetryOutcome.EXCEPTION)

        assert [b["pipelineId"] for b in batches] == ["bad"]

    async def test_filter_after(self, storage):
        """Test filtering by start time."""
        await storage.save_batch(sealed_batch("old", offset_s=0))
        await storage.save_batch(sealed_batch("new", offset_s=10))

        batches = await storage.get_batches(after=T0 + timedelta(seconds=5))

        assert [b["pipelineId"] for b in batches] == ["new"]

    async def test_limit(self, storage):
        """Test the limit."""
        for i in range(5):
            await storage.save_batch(sealed_batch(f"m{i}", offset_s=i))

        batches = await storage.get_batches(limit=2)

        assert [b["pipelineId"] for b in batches] == ["m4", "m3"]

    async def test_clear(self, storage):
        """Test that clear removes all batches."""
        await storage.save_batch(sealed_batch("m1"))
        await storage.clear()
        assert await storage.get_batches() == []
