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
"""Access log filter: one structlog event per HTTP request."""

from __future__ import annotations

import time
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from flysession.container.ordering import HIGHEST_PRECEDENCE, order
from flysession.web.filters import OncePerRequestFilter
from flysession.web.ports.filter import CallNext

logger = structlog.get_logger("flysession.web")


@order(HIGHEST_PRECEDENCE + 200)
class RequestLoggingFilter(OncePerRequestFilter):
    """Logs ``http_request`` (or ``http_request_failed``) with method, path and timing.

    Also reports which installed sessions the handler actually loaded, which
    makes it easy to spot routes that hit the session store needlessly.
    """

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
        }
        loaded: list[str] = []

        async def tracked(req: Request) -> Response:
            try:
                return cast(Response, await call_next(req))
            finally:
                sessions = getattr(req.state, "sessions", None) or {}
                loaded.extend(name for name, session in sessions.items() if session.loaded)

        try:
            response = await tracked(request)
        except Exception as exc:
            logger.error(
                "http_request_failed",
                **fields,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        logger.info(
            "http_request",
            **fields,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            sessions_loaded=loaded,
        )
        return response
