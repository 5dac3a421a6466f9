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
"""SessionFilter — installs a lazily loaded session on every request."""

from __future__ import annotations

from typing import Any

from starlette.middleware import Middleware

from flysession.container.ordering import HIGHEST_PRECEDENCE
from flysession.context.request_context import RequestContext
from flysession.kernel.exceptions import SessionNotInstalledError
from flysession.session.ports.outbound import SessionStore
from flysession.session.session import Session
from flysession.session.writer import ResponseCookieWriter
from flysession.web.filters import OncePerRequestFilter
from flysession.web.ports.filter import CallNext

SESSION_ATTRIBUTE = "session"


def _context_key(name: str) -> str:
    return f"{SESSION_ATTRIBUTE}:{name}"


class SessionFilter(OncePerRequestFilter):
    """Binds a :class:`Session` named *name* to each request.

    Attaches the session to ``request.state.session`` and
    ``request.state.sessions[name]`` and registers it in the current
    :class:`RequestContext`.  No store I/O happens here: the session is
    fetched on first access and persisted only by ``Session.save()``.
    Cookies queued by ``save()`` are written onto the response, and the
    request-scoped registrations are removed once the chain completes.
    """

    __flysession_order__ = HIGHEST_PRECEDENCE + 150

    def __init__(self, name: str, store: SessionStore, *, reset_on_error: bool = False) -> None:
        if not name:
            raise ValueError("Session name must be a non-empty string")
        self._name = name
        self._store = store
        self._reset_on_error = reset_on_error

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> SessionStore:
        return self._store

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        writer = ResponseCookieWriter()
        session = Session(
            self._name,
            request,
            writer,
            self._store,
            reset_on_error=self._reset_on_error,
        )

        ctx = RequestContext.current()
        owns_context = ctx is None
        if ctx is None:
            ctx = RequestContext.init()

        # An outer SessionFilter may already have installed a default session.
        previous = getattr(request.state, SESSION_ATTRIBUTE, None)
        registry: dict[str, Session] = getattr(request.state, "sessions", None) or {}
        registry[self._name] = session
        request.state.sessions = registry
        request.state.session = session
        ctx.set(SESSION_ATTRIBUTE, session)
        ctx.set(_context_key(self._name), session)

        try:
            response = await call_next(request)
            writer.apply(response)
            return response
        finally:
            registry.pop(self._name, None)
            request.state.session = previous
            ctx.remove(_context_key(self._name))
            if previous is None:
                ctx.remove(SESSION_ATTRIBUTE)
            else:
                ctx.set(SESSION_ATTRIBUTE, previous)
            if owns_context:
                RequestContext.clear()


def sessions(name: str, store: SessionStore, *, reset_on_error: bool = False) -> SessionFilter:
    """Return the filter that installs session *name*, backed by *store*.

    Usage::

        store = CookieSessionStore(secret="...")
        app = create_app(routes, filters=[sessions("my_session", store)])
    """
    return SessionFilter(name, store, reset_on_error=reset_on_error)


def session_middleware(
    name: str,
    store: SessionStore,
    *,
    reset_on_error: bool = False,
) -> Middleware:
    """Return a Starlette ``Middleware`` entry running only the session filter.

    Usage::

        app = Starlette(routes=routes, middleware=[session_middleware("my_session", store)])
    """
    from flysession.web.adapters.starlette.filter_chain import WebFilterChainMiddleware

    return Middleware(
        WebFilterChainMiddleware,
        filters=[sessions(name, store, reset_on_error=reset_on_error)],
    )


def get_session(request: Any, name: str | None = None) -> Session:
    """Return the session installed on *request*.

    Without *name*, returns the most recently installed session.

    Raises:
        SessionNotInstalledError: If no session (of that name) was installed.
    """
    if name is None:
        session = getattr(request.state, SESSION_ATTRIBUTE, None)
    else:
        registry = getattr(request.state, "sessions", None) or {}
        session = registry.get(name)

    if not isinstance(session, Session):
        raise SessionNotInstalledError(
            f"No session {name!r} installed for this request" if name else "No session installed for this request",
            context={"name": name} if name else None,
        )
    return session


def current_session(name: str | None = None) -> Session:
    """Return the session registered in the current :class:`RequestContext`.

    Raises:
        SessionNotInstalledError: Outside a request, or if no session (of
            that name) was installed.
    """
    ctx = RequestContext.current()
    key = SESSION_ATTRIBUTE if name is None else _context_key(name)
    session = ctx.get(key) if ctx is not None else None

    if not isinstance(session, Session):
        raise SessionNotInstalledError(
            f"No session {name!r} in the current request context" if name else "No session in the current request context",
            context={"name": name} if name else None,
        )
    return session
