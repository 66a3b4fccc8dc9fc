"""Telemetry sinks receiving sealed batches."""

import logging
import sys
from typing import Protocol, TextIO

from ..logging_config import TELEMETRY_LOGGER, get_logger
from ..models import TelemetryBatch, TelemetryEvent, TelemetryPhase
from ..storage import IStorage


class ITelemetrySink(Protocol):
    """Destination for sealed telemetry batches (console, file, database, ...)."""

    async def export(self, batch: TelemetryBatch) -> None:
        """Ship one sealed batch."""
        ...


class MemoryTelemetrySink:
    """Keeps batches in memory. Handy for tests and local inspection."""

    def __init__(self):
        self.batches: list[TelemetryBatch] = []

    async def export(self, batch: TelemetryBatch) -> None:
        self.batches.append(batch)

    @property
    def last(self) -> TelemetryBatch | None:
        return self.batches[-1] if self.batches else None

    def clear(self) -> None:
        self.batches.clear()


class ConsoleTelemetrySink:
    """Writes one readable line per event."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream or sys.stdout

    @staticmethod
    def format_event(event: TelemetryEvent) -> str:
        line = (
            f"[{event.timestamp:%H:%M:%S.%f}] [{event.message_id}] - {event.component}"
            f" - {event.scope.value}/{event.phase.value} - Role: {event.role.value}"
        )
        if event.phase == TelemetryPhase.START:
            return line
        attributes = ", ".join(f"{k}: {v}" for k, v in event.attributes.items())
        return (
            f"{line} - Outcome: {event.outcome.value}"
            f" - Attributes: {attributes} - Duration: {event.duration_ms}ms"
        )

    async def export(self, batch: TelemetryBatch) -> None:
        for event in batch.events:
            print(self.format_event(event), file=self._stream)
        print("--- Telemetry Flush ---", file=self._stream)
        self._stream.flush()


class StructuredJsonTelemetrySink:
    """Writes each batch as one compact JSON line through a logger.

    Suited to log ingestion systems; the record carries
    `context={"is_telemetry": True}` so it can be routed separately.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO):
        self._logger = logger or get_logger(TELEMETRY_LOGGER)
        self._level = level

    async def export(self, batch: TelemetryBatch) -> None:
        if not batch.events:
            return
        self._logger.log(
            self._level,
            "%s",
            batch.to_json(),
            extra={"context": {"is_telemetry": True}},
        )


class StorageTelemetrySink:
    """Persists batches to Storage."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def export(self, batch: TelemetryBatch) -> None:
        await self._storage.save_batch(batch)
