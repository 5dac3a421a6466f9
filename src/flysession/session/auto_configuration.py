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
"""Session subsystem auto-configuration."""

from __future__ import annotations

import structlog

from flysession.core.config import Config
from flysession.kernel.exceptions import InvalidConfigurationError
from flysession.session.filter import SessionFilter
from flysession.session.ports.outbound import SessionStore
from flysession.session.properties import SessionProperties

logger = structlog.get_logger("flysession.session")

_STORE_TYPES = ("cookie", "memory", "redis")


def create_session_store(config: Config) -> SessionStore:
    """Build the session store selected by ``flysession.session.store``.

    Raises:
        InvalidConfigurationError: For an unknown store type, or a cookie
            store without ``flysession.session.secret``.
    """
    props = config.bind(SessionProperties)
    store_type = props.store.lower()

    if store_type == "cookie":
        if not props.secret:
            raise InvalidConfigurationError(
                "flysession.session.secret is required for the cookie store",
                context={"store": store_type},
            )
        from flysession.session.adapters.cookie import CookieSessionStore

        store: SessionStore = CookieSessionStore(
            secret=props.secret,
            algorithm=props.algorithm,
            options=props.options(),
        )
    elif store_type == "memory":
        from flysession.session.adapters.memory import InMemorySessionStore

        store = InMemorySessionStore(ttl=props.ttl, options=props.options())
    elif store_type == "redis":
        import redis.asyncio as aioredis

        from flysession.session.adapters.redis import RedisSessionStore

        client = aioredis.from_url(props.redis_url)  # type: ignore[no-untyped-call,unused-ignore]
        store = RedisSessionStore(client=client, ttl=props.ttl, options=props.options())
    else:
        raise InvalidConfigurationError(
            f"Unknown session store '{props.store}', expected one of {', '.join(_STORE_TYPES)}",
            context={"store": props.store},
        )

    logger.info("session_store_configured", store=store_type, session=props.name)
    return store


def create_session_filter(config: Config, store: SessionStore | None = None) -> SessionFilter:
    """Build the ``SessionFilter`` described by ``flysession.session.*``.

    When *store* is omitted it is created with :func:`create_session_store`.
    """
    props = config.bind(SessionProperties)
    if store is None:
        store = create_session_store(config)
    return SessionFilter(props.name, store, reset_on_error=props.reset_on_error)
