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
"""Request-scoped attribute table backed by a :class:`~contextvars.ContextVar`.

``RequestContextFilter`` opens one per HTTP request; ``SessionFilter`` opens
one itself when it runs without that filter.  Sessions are registered here
under ``"session"`` and ``"session:<name>"`` so code without access to the
request object can still reach them through ``current_session()``.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

_current: ContextVar[RequestContext | None] = ContextVar("flysession_request_context", default=None)


class RequestContext:
    """Request id plus arbitrary attributes for the request running in this task."""

    def __init__(self, request_id: str | None = None) -> None:
        self._request_id = request_id or uuid.uuid4().hex
        self._attributes: dict[str, Any] = {}

    @property
    def request_id(self) -> str:
        return self._request_id

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def remove(self, key: str) -> None:
        """Drop *key*; missing keys are ignored."""
        self._attributes.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._attributes)

    @classmethod
    def init(cls, request_id: str | None = None) -> RequestContext:
        """Start a new context in the current task and return it."""
        ctx = cls(request_id)
        _current.set(ctx)
        return ctx

    @classmethod
    def current(cls) -> RequestContext | None:
        return _current.get()

    @classmethod
    def clear(cls) -> None:
        _current.set(None)
