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
"""Session store protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from flysession.session.data import SessionData
from flysession.session.options import Options
from flysession.session.writer import ResponseCookieWriter


@runtime_checkable
class SessionStore(Protocol):
    """Abstract session persistence interface.

    All session backends (cookie, in-memory, Redis, etc.) must implement
    this protocol.  A store is shared by every request and is responsible
    for its own concurrency safety.
    """

    async def get(self, request: Any, name: str) -> SessionData:
        """Return the session named *name* for *request*, creating one if absent.

        Raises:
            SessionFetchError: If existing data cannot be decoded or verified.
        """
        ...

    async def new(self, request: Any, name: str) -> SessionData:
        """Return a fresh, empty session without reading the request."""
        ...

    async def save(self, request: Any, writer: ResponseCookieWriter, data: SessionData) -> None:
        """Persist *data* and queue the matching cookie on *writer*.

        Raises:
            SessionSaveError: If the data cannot be encoded or persisted.
        """
        ...

    def set_options(self, options: Options) -> None:
        """Set the default cookie options for sessions this store creates."""
        ...
