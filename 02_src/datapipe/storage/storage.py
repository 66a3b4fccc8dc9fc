"""SQLite storage for telemetry batches."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import TelemetryBatch, TelemetryOutcome


class IStorage(Protocol):
    """Persistent storage for recorded telemetry (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def save_batch(self, batch: TelemetryBatch) -> None:
        """Save a sealed telemetry batch."""
        ...

    async def get_batches(
        self,
        pipeline_name: str | None = None,
        outcome: TelemetryOutcome | None = None,
        after: datetime | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Get batches in wire form (newest first) with optional filters."""
        ...

    async def get_batch(self, pipeline_id: str) -> dict[str, Any] | None:
        """Get one batch in wire form by pipeline id."""
        ...

    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def save_batch(self, batch: TelemetryBatch) -> None:
        """Save a sealed telemetry batch.

        Saving the same pipeline id again replaces the earlier row.
        """
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO telemetry_batches
            (pipeline_id, pipeline_name, outcome, reason, start_time, end_time,
             duration_ms, event_count, data)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                batch.pipeline_id,
                batch.pipeline_name,
                batch.outcome.value if batch.outcome else None,
                batch.reason,
                batch.start_time.isoformat(),
                batch.end_time.isoformat() if batch.end_time else None,
                batch.duration_ms,
                len(batch.events),
                batch.to_json(),
            ),
        )
        await self._conn.commit()

    async def get_batches(
        self,
        pipeline_name: str | None = None,
        outcome: TelemetryOutcome | None = None,
        after: datetime | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Get batches in wire form (newest first) with optional filters."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        conditions = []
        params: list[Any] = []

        if pipeline_name:
            conditions.append("pipeline_name = ?")
            params.append(pipeline_name)
        if outcome:
            conditions.append("outcome = ?")
            params.append(TelemetryOutcome(outcome).value)
        if after:
            conditions.append("start_time > ?")
            params.append(after.isoformat())

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT data
            FROM telemetry_batches
            {where_clause}
            ORDER BY start_time DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()

        return [json.loads(row[0]) for row in rows]

    async def get_batch(self, pipeline_id: str) -> dict[str, Any] | None:
        """Get one batch in wire form by pipeline id."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT data
            FROM telemetry_batches
            WHERE pipeline_id = ?
            """,
            (pipeline_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return json.loads(row[0])

    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute("DELETE FROM telemetry_batches")
        await self._conn.commit()
