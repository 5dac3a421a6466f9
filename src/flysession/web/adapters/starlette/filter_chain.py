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
"""Pure-ASGI middleware running the flysession filter chain."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flysession.container.ordering import get_order
from flysession.web.ports.filter import CallNext, WebFilter


class _ResponseRecorder:
    """ASGI ``send`` replacement that buffers the downstream response."""

    def __init__(self) -> None:
        self.status_code = 200
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
            self.headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body.extend(message.get("body", b""))

    def to_response(self) -> Response:
        response = Response(content=bytes(self.body), status_code=self.status_code)
        response.raw_headers[:] = self.headers
        return response


class WebFilterChainMiddleware:
    """Runs :class:`WebFilter` instances around the wrapped ASGI app.

    The filter with the lowest ``@order`` is outermost.  Unlike
    ``BaseHTTPMiddleware``, the downstream app is awaited in the current
    task, so a ``RequestContext`` (and the sessions registered in it) set
    by a filter is visible to the route handler.  Filters see a buffered
    response they may modify, e.g. to add ``Set-Cookie`` headers.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = sorted(filters, key=get_order)

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def endpoint(request: Any) -> Response:
            recorder = _ResponseRecorder()
            await self.app(scope, receive, recorder)
            return recorder.to_response()

        chain: CallNext = endpoint
        for web_filter in reversed(self._filters):
            chain = _link(web_filter, chain)

        response = cast(Response, await chain(Request(scope, receive, send)))
        await response(scope, receive, send)


def _link(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def call(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return call
