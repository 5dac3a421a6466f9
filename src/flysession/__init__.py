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
"""flysession — per-request sessions for Starlette applications.

Usage::

    from flysession import sessions, get_session
    from flysession.session.adapters.cookie import CookieSessionStore
    from flysession.web import create_app

    async def login(request):
        session = get_session(request)
        await session.set("user", "alice")
        await session.save()
        return PlainTextResponse("ok")

    store = CookieSessionStore(secret="change-me")
    app = create_app([Route("/login", login)], filters=[sessions("my_session", store)])
"""

from flysession.core.config import Config
from flysession.kernel.exceptions import (
    FlySessionException,
    SessionFetchError,
    SessionNotInstalledError,
    SessionSaveError,
)
from flysession.session import (
    Options,
    Session,
    SessionData,
    SessionFilter,
    SessionStore,
    current_session,
    get_session,
    session_middleware,
    sessions,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "FlySessionException",
    "Options",
    "Session",
    "SessionData",
    "SessionFetchError",
    "SessionFilter",
    "SessionNotInstalledError",
    "SessionSaveError",
    "SessionStore",
    "current_session",
    "get_session",
    "session_middleware",
    "sessions",
]
