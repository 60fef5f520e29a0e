"""History store — bounded, most-recent-first list of past analyses.

The in-memory list is the source of truth for the running process. Every
mutation rewrites the whole persisted snapshot; persistence errors are
logged and absorbed so the form keeps working with an in-memory history.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import Callable, Optional

import structlog
from pydantic import TypeAdapter

from repair_advisor.config import settings
from repair_advisor.history.storage import HistoryStorage
from repair_advisor.schemas.analysis import AnalysisRecord, DeviceType, HistoryEntry

logger = structlog.get_logger()

MAX_HISTORY_ITEMS = settings.max_history_items

_entries_adapter = TypeAdapter(list[HistoryEntry])


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    """Manages the persisted analysis history."""

    def __init__(
        self,
        storage: HistoryStorage,
        max_items: int = MAX_HISTORY_ITEMS,
        clock: Callable[[], int] = _now_ms,
    ):
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self.storage = storage
        self.max_items = max_items
        self.clock = clock
        self._entries: list[HistoryEntry] = []
        # serializes each mutate-and-persist step so snapshots land in call order
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> list[HistoryEntry]:
        """Copy of the history, most recent first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    async def load(self) -> list[HistoryEntry]:
        """Load the persisted snapshot into memory.

        Fails soft: an unreadable or corrupt snapshot is deleted and the
        history starts empty.
        """
        async with self._lock:
            try:
                blob = await self.storage.load()
                entries = _entries_adapter.validate_json(blob) if blob else []
            except Exception as e:
                logger.error("history_load_failed", error=str(e))
                self._entries = []
                await self._delete_snapshot("history_discard_failed")
                return []

            self._entries = entries[: self.max_items]
        logger.info("history_loaded", count=len(self._entries))
        return self.entries

    async def insert(
        self,
        record: AnalysisRecord,
        *,
        device_type: DeviceType | str,
        device_model: str = "",
        problem_description: str,
    ) -> HistoryEntry:
        """Prepend a new entry, evict past ``max_items``, persist, return it."""
        created_at = self.clock()
        entry = HistoryEntry(
            **record.model_dump(),
            id=f"{created_at}-{uuid.uuid4().hex[:8]}",
            created_at=created_at,
            device_type=DeviceType(device_type),
            device_model=device_model,
            problem_description=problem_description,
        )

        async with self._lock:
            self._entries = [entry, *self._entries][: self.max_items]
            try:
                await self.storage.save(_entries_adapter.dump_json(self._entries).decode("utf-8"))
            except Exception as e:
                logger.error("history_save_failed", error=str(e), count=len(self._entries))

        logger.debug("history_entry_added", entry_id=entry.id, count=len(self._entries))
        return entry

    async def clear(self) -> None:
        """Empty the history and delete the persisted snapshot."""
        async with self._lock:
            self._entries = []
            await self._delete_snapshot("history_clear_failed")
        logger.info("history_cleared")

    async def _delete_snapshot(self, failure_event: str) -> None:
        try:
            await self.storage.delete()
        except Exception as e:
            logger.error(failure_event, error=str(e))
