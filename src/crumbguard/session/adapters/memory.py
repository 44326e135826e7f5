# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""In-memory session store with TTL-based expiry."""

from __future__ import annotations

import asyncio
import time
from typing import Any


class InMemorySessionStore:
    """In-memory session store with TTL support and asyncio.Lock for safety.

    Suitable for development, testing, and single-process applications.
    """

    def __init__(self) -> None:
        self._store: dict[str, tuple[dict[str, Any], float]] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Retrieve a copy of the session data. Returns ``None`` if missing or expired."""
        async with self._lock:
            data = self._live_data(session_id)
            return dict(data) if data is not None else None

    async def save(self, session_id: str, data: dict[str, Any], ttl: int) -> None:
        """Store session data with a TTL in seconds."""
        async with self._lock:
            self._store[session_id] = (dict(data), time.monotonic() + ttl)

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._store.pop(session_id, None)

    async def exists(self, session_id: str) -> bool:
        """Check if a session exists and is not expired."""
        async with self._lock:
            return self._live_data(session_id) is not None

    async def set_attribute_if_absent(self, session_id: str, name: str, value: Any, ttl: int) -> Any:
        """Atomically set *name* unless a live value exists; return the winning value."""
        async with self._lock:
            data = self._live_data(session_id)
            if data is None:
                data = {}
                self._store[session_id] = (data, time.monotonic() + ttl)
            current = data.get(name)
            if current is not None:
                return current
            data[name] = value
            return value

    def _live_data(self, session_id: str) -> dict[str, Any] | None:
        """Return the stored dict for *session_id*, evicting it if expired. Caller holds the lock."""
        entry = self._store.get(session_id)
        if entry is None:
            return None
        data, expires_at = entry
        if time.monotonic() > expires_at:
            del self._store[session_id]
            return None
        return data
