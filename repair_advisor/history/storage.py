"""Persistence backends for the history snapshot.

Each backend stores exactly one blob (the serialized history) and supports
load / save / delete of it as a whole.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Protocol

import redis.asyncio as redis

from repair_advisor.config import Settings


class HistoryStorage(Protocol):
    async def load(self) -> Optional[str]: ...

    async def save(self, blob: str) -> None: ...

    async def delete(self) -> None: ...


class InMemoryHistoryStorage:
    """Keeps the snapshot in process memory. Lost on restart."""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob

    async def load(self) -> Optional[str]:
        return self.blob

    async def save(self, blob: str) -> None:
        self.blob = blob

    async def delete(self) -> None:
        self.blob = None


class FileHistoryStorage:
    """Snapshot in a JSON file on local disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> Optional[str]:
        return await asyncio.to_thread(self._read)

    async def save(self, blob: str) -> None:
        await asyncio.to_thread(self._write, blob)

    async def delete(self) -> None:
        await asyncio.to_thread(self.path.unlink, missing_ok=True)

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write(self, blob: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # atomic replace: readers never see a partial snapshot
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(blob, encoding="utf-8")
        tmp.replace(self.path)


class RedisHistoryStorage:
    """Snapshot under a single Redis key, no TTL."""

    def __init__(self, redis_client: redis.Redis, key: str):
        self.redis = redis_client
        self.key = key

    async def load(self) -> Optional[str]:
        return await self.redis.get(self.key)

    async def save(self, blob: str) -> None:
        await self.redis.set(self.key, blob)

    async def delete(self) -> None:
        await self.redis.delete(self.key)


def build_history_storage(settings: Settings) -> HistoryStorage:
    """Pick the backend named by ``settings.history_backend``."""
    backend = settings.history_backend.lower()
    if backend == "file":
        return FileHistoryStorage(settings.history_file)
    if backend == "redis":
        from repair_advisor.redis_client import get_redis_client

        return RedisHistoryStorage(get_redis_client(), settings.history_key)
    if backend == "memory":
        return InMemoryHistoryStorage()
    raise ValueError(f"Unknown history backend: {settings.history_backend!r}")
