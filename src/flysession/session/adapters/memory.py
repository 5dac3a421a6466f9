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
import copy
import time
from typing import Any

from flysession.kernel.exceptions import SessionSaveError
from flysession.session.adapters.server_side import DEFAULT_TTL, ServerSideSessionStore
from flysession.session.options import Options


class InMemorySessionStore(ServerSideSessionStore):
    """In-memory session store with TTL support and asyncio.Lock for safety.

    Suitable for development, testing, and single-process applications.
    Values are deep-copied on the way in and out, so a request never
    shares mutable state with the store or with another request.
    """

    def __init__(self, ttl: int = DEFAULT_TTL, options: Options | None = None) -> None:
        super().__init__(ttl=ttl, options=options)
        self._store: dict[tuple[str, str], tuple[dict[str, Any], float]] = {}
        self._lock = asyncio.Lock()

    async def _read(self, name: str, session_id: str) -> dict[str, Any] | None:
        async with self._lock:
            entry = self._store.get((name, session_id))
            if entry is None:
                return None

            values, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[(name, session_id)]
                return None

            return copy.deepcopy(values)

    async def _write(self, name: str, session_id: str, values: dict[str, Any], ttl: int) -> None:
        try:
            snapshot = copy.deepcopy(values)
        except (TypeError, copy.Error) as exc:
            raise SessionSaveError(
                f"Cannot copy session '{name}': {exc}",
                context={"name": name},
            ) from exc

        async with self._lock:
            self._store[(name, session_id)] = (snapshot, time.monotonic() + ttl)

    async def _remove(self, name: str, session_id: str) -> None:
        async with self._lock:
            self._store.pop((name, session_id), None)

    async def exists(self, name: str, session_id: str) -> bool:
        """Check if a session exists and is not expired."""
        return await self._read(name, session_id) is not None

    def __len__(self) -> int:
        return len(self._store)
