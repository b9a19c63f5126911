# pizzeria/infrastructure/session_store.py
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional
from uuid import uuid4

from pizzeria.domain.entities import Account
from pizzeria.domain.filters import FilterCriteria
from pizzeria.domain.orders import Order


@dataclass
class SessionState:
    session_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    # None once logged out
    account: Optional[Account] = None
    active_order: Optional[Order] = None
    filters: FilterCriteria = field(default_factory=FilterCriteria)


class InMemorySessionStore:
    def __init__(self, ttl_seconds: int = 1800) -> None:
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def create(self) -> SessionState:
        st = SessionState()
        self.save(st)
        return st

    def get(self, session_id: str) -> Optional[SessionState]:
        with self._lock:
            self._gc()
            st = self._data.get(session_id)
            if st is not None:
                st.updated_at = time.time()
            return st

    def save(self, st: SessionState) -> None:
        with self._lock:
            st.updated_at = time.time()
            self._data[st.session_id] = st

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _gc(self) -> None:
        now = time.time()
        expired = [k for k, v in self._data.items() if now - v.updated_at > self.ttl_seconds]
        for k in expired:
            self._data.pop(k, None)
