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
"""Session — lazily initialized per-request session wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from flysession.kernel.exceptions import SessionFetchError, SessionSaveError
from flysession.session.data import DEFAULT_FLASH_KEY, SessionData
from flysession.session.options import Options
from flysession.session.ports.outbound import SessionStore
from flysession.session.writer import ResponseCookieWriter

logger = structlog.get_logger("flysession.session")


@dataclass(frozen=True)
class Uninitialized:
    """The store has not been asked for the session yet."""


@dataclass(frozen=True)
class Initialized:
    """The session data has been fetched (or freshly created)."""

    data: SessionData


@dataclass(frozen=True)
class Failed:
    """The fetch failed; the error is raised again on every access."""

    error: SessionFetchError


SessionState = Uninitialized | Initialized | Failed


class Session:
    """Per-request facade over one named session.

    The underlying :class:`SessionData` is fetched from the store on the
    first access of any kind and memoized for the rest of the request.
    A failed fetch is memoized too: later accesses raise the same error.
    Nothing is persisted until :meth:`save` is awaited.

    A session is owned by the single request flow that created it; do not
    mutate it from several concurrent tasks (``clear()`` is not atomic).
    """

    def __init__(
        self,
        name: str,
        request: Any,
        writer: ResponseCookieWriter,
        store: SessionStore,
        *,
        reset_on_error: bool = False,
    ) -> None:
        self._name = name
        self._request = request
        self._writer = writer
        self._store = store
        self._reset_on_error = reset_on_error
        self._state: SessionState = Uninitialized()

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def loaded(self) -> bool:
        return isinstance(self._state, Initialized)

    async def load(self) -> SessionData:
        """Return the session data, fetching it from the store on first use.

        Raises:
            SessionFetchError: If the store cannot read the existing session
                and ``reset_on_error`` is off.
        """
        if isinstance(self._state, Initialized):
            return self._state.data
        if isinstance(self._state, Failed):
            raise self._state.error

        try:
            data = await self._store.get(self._request, self._name)
        except SessionFetchError as exc:
            if not self._reset_on_error:
                logger.warning("session_fetch_failed", session=self._name, error=str(exc))
                self._state = Failed(exc)
                raise
            logger.warning("session_reset", session=self._name, error=str(exc))
            data = await self._store.new(self._request, self._name)

        self._state = Initialized(data)
        return data

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default* when unset."""
        data = await self.load()
        return data.values.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*.  Persisted on the next :meth:`save`."""
        data = await self.load()
        data.values[key] = value

    async def delete(self, key: str) -> None:
        """Remove *key* from the session if present."""
        data = await self.load()
        data.values.pop(key, None)

    async def keys(self) -> list[str]:
        """Return the keys currently present, flash categories included."""
        data = await self.load()
        return list(data.values)

    async def clear(self) -> None:
        """Delete every key currently present, one at a time."""
        for key in await self.keys():
            await self.delete(key)

    async def add_flash(self, value: Any, category: str = DEFAULT_FLASH_KEY) -> None:
        """Queue a flash message under *category*."""
        data = await self.load()
        data.add_flash(value, category)

    async def flashes(self, category: str = DEFAULT_FLASH_KEY) -> list[Any]:
        """Return and remove all flash messages queued under *category*."""
        data = await self.load()
        return data.flashes(category)

    async def set_options(self, options: Options) -> None:
        """Replace the cookie options used when this session is next saved."""
        data = await self.load()
        data.options = options

    async def save(self) -> None:
        """Persist the session through the store and queue its cookie.

        Raises:
            SessionSaveError: If the store fails to encode or persist the data.
        """
        data = await self.load()
        try:
            await self._store.save(self._request, self._writer, data)
        except SessionSaveError as exc:
            logger.error("session_save_failed", session=self._name, error=str(exc))
            raise
        logger.debug("session_saved", session=self._name, keys=len(data.values))
