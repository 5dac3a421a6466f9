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
"""Redis-backed session store."""

from __future__ import annotations

import json
from typing import Any, cast

import structlog

from flysession.kernel.exceptions import SessionFetchError, SessionSaveError
from flysession.session.adapters.server_side import DEFAULT_TTL, ServerSideSessionStore
from flysession.session.options import Options

logger = structlog.get_logger("flysession.session.redis")

_KEY_PREFIX = "flysession:session:"


class RedisSessionStore(ServerSideSessionStore):
    """Session store backed by ``redis.asyncio``.

    Values are JSON-serialized before storage.
    Keys are ``flysession:session:<name>:<id>`` for namespace isolation.
    """

    def __init__(self, client: Any, ttl: int = DEFAULT_TTL, options: Options | None = None) -> None:
        super().__init__(ttl=ttl, options=options)
        self._client = client

    def _key(self, name: str, session_id: str) -> str:
        return f"{_KEY_PREFIX}{name}:{session_id}"

    async def _read(self, name: str, session_id: str) -> dict[str, Any] | None:
        try:
            raw = await self._client.get(self._key(name, session_id))
        except Exception as exc:
            logger.warning("session_read_failed", session=name, error=str(exc))
            raise SessionFetchError(
                f"Cannot read session '{name}': {exc}",
                context={"name": name},
            ) from exc
        if raw is None:
            return None
        try:
            values = json.loads(raw)
        except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as exc:
            logger.warning("session_deserialize_failed", session=name)
            raise SessionFetchError(
                f"Failed to deserialize session '{name}'",
                context={"name": name},
            ) from exc
        if not isinstance(values, dict):
            raise SessionFetchError(
                f"Stored session '{name}' is not a mapping",
                context={"name": name},
            )
        return cast(dict[str, Any], values)

    async def _write(self, name: str, session_id: str, values: dict[str, Any], ttl: int) -> None:
        try:
            raw = json.dumps(values)
        except (TypeError, ValueError) as exc:
            raise SessionSaveError(
                f"Cannot encode session '{name}': {exc}",
                context={"name": name},
            ) from exc
        try:
            await self._client.set(self._key(name, session_id), raw.encode(), ex=ttl)
        except Exception as exc:
            raise SessionSaveError(
                f"Cannot store session '{name}': {exc}",
                context={"name": name},
            ) from exc

    async def _remove(self, name: str, session_id: str) -> None:
        try:
            await self._client.delete(self._key(name, session_id))
        except Exception as exc:
            raise SessionSaveError(
                f"Cannot delete session '{name}': {exc}",
                context={"name": name},
            ) from exc
