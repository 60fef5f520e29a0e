"""Analysis history: bounded store and its persistence backends."""

from repair_advisor.history.storage import (
    FileHistoryStorage,
    HistoryStorage,
    InMemoryHistoryStorage,
    RedisHistoryStorage,
    build_history_storage,
)
from repair_advisor.history.store import MAX_HISTORY_ITEMS, HistoryStore
