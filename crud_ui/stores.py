# crud_ui/stores.py
"""
In-memory token-keyed store shared by the flash manager and the session store.

Every public method is one critical section under the store's lock and never
calls back into user code, so two requests served on different threads can't
interleave inside a single put/pop/sweep.
"""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

V = TypeVar("V")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStore(Generic[V]):
    def __init__(self):
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            return token in self._entries

    def put(self, token: str, value: V):
        with self._lock:
            self._entries[token] = value

    def get(self, token: str) -> Optional[V]:
        with self._lock:
            return self._entries.get(token)

    def pop(self, token: str) -> Optional[V]:
        with self._lock:
            return self._entries.pop(token, None)

    def sweep(self, is_expired: Callable[[V], Any]) -> list[str]:
        """Delete every entry for which is_expired(entry) is true. Returns the removed tokens."""
        with self._lock:
            removed = [token for token, value in self._entries.items() if is_expired(value)]
            for token in removed:
                del self._entries[token]
        return removed
