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
"""Base class for stores that keep session values on the server side."""

from __future__ import annotations

import abc
import secrets
from typing import Any

from flysession.session.data import SessionData
from flysession.session.options import Options
from flysession.session.writer import ResponseCookieWriter

DEFAULT_TTL = 1800  # 30 minutes


class ServerSideSessionStore(abc.ABC):
    """Keeps values in a backend and only a random session id in the cookie.

    Subclasses implement ``_read``, ``_write`` and ``_remove``.  The backend
    TTL is ``options.max_age`` when positive, otherwise ``ttl``.

    Args:
        ttl: Backend lifetime in seconds for browser-session cookies.
        options: Default cookie options for new sessions.
    """

    def __init__(self, ttl: int = DEFAULT_TTL, options: Options | None = None) -> None:
        self._ttl = ttl
        self._options = options if options is not None else Options(http_only=True)

    @property
    def options(self) -> Options:
        return self._options

    def set_options(self, options: Options) -> None:
        """Set the default cookie options for sessions created from now on."""
        self._options = options

    async def new(self, request: Any, name: str) -> SessionData:
        return SessionData(
            name=name,
            id=secrets.token_urlsafe(32),
            options=self._options,
            is_new=True,
        )

    async def get(self, request: Any, name: str) -> SessionData:
        """Load the session referenced by the cookie, or start a new one.

        Unknown or expired ids start a new session.
        """
        session_id = getattr(request, "cookies", {}).get(name)
        if session_id:
            values = await self._read(name, session_id)
            if values is not None:
                return SessionData(
                    name=name,
                    id=session_id,
                    values=values,
                    options=self._options,
                    is_new=False,
                )
        return await self.new(request, name)

    async def save(self, request: Any, writer: ResponseCookieWriter, data: SessionData) -> None:
        """Persist the values and queue the id cookie, or delete both if expired."""
        if not data.id:
            data.id = secrets.token_urlsafe(32)

        if data.options.expired:
            await self._remove(data.name, data.id)
            writer.delete_cookie(data.name, data.options)
            return

        ttl = data.options.max_age if data.options.max_age > 0 else self._ttl
        await self._write(data.name, data.id, data.values, ttl)
        writer.set_cookie(data.name, data.id, data.options)

    @abc.abstractmethod
    async def _read(self, name: str, session_id: str) -> dict[str, Any] | None:
        """Return stored values, ``None`` if missing or expired.

        Raises:
            SessionFetchError: If stored data is corrupt or unreadable.
        """

    @abc.abstractmethod
    async def _write(self, name: str, session_id: str, values: dict[str, Any], ttl: int) -> None:
        """Store *values* for *ttl* seconds.

        Raises:
            SessionSaveError: If the values cannot be encoded or stored.
        """

    @abc.abstractmethod
    async def _remove(self, name: str, session_id: str) -> None:
        """Delete stored values if present."""
