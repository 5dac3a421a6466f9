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
"""flysession Session — lazily loaded per-request sessions with pluggable stores.

Import concrete store types from the adapter package::

    from flysession.session.adapters.cookie import CookieSessionStore
    from flysession.session.adapters.memory import InMemorySessionStore
    from flysession.session.adapters.redis import RedisSessionStore
"""

from flysession.session.auto_configuration import create_session_filter, create_session_store
from flysession.session.data import DEFAULT_FLASH_KEY, SessionData
from flysession.session.filter import (
    SessionFilter,
    current_session,
    get_session,
    session_middleware,
    sessions,
)
from flysession.session.options import Options
from flysession.session.ports.outbound import SessionStore
from flysession.session.properties import SessionProperties
from flysession.session.session import Session
from flysession.session.writer import ResponseCookieWriter

__all__ = [
    "DEFAULT_FLASH_KEY",
    "Options",
    "ResponseCookieWriter",
    "Session",
    "SessionData",
    "SessionFilter",
    "SessionProperties",
    "SessionStore",
    "create_session_filter",
    "create_session_store",
    "current_session",
    "get_session",
    "session_middleware",
    "sessions",
]
