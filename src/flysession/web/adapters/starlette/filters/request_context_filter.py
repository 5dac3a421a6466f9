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
"""Creates the per-request :class:`RequestContext` before any other filter runs."""

from __future__ import annotations

from typing import Any

from flysession.container.ordering import HIGHEST_PRECEDENCE
from flysession.context.request_context import RequestContext
from flysession.web.filters import OncePerRequestFilter
from flysession.web.ports.filter import CallNext

REQUEST_ID_HEADER = "x-request-id"


class RequestContextFilter(OncePerRequestFilter):
    """Opens a RequestContext for the request and drops it afterwards.

    The request id comes from the ``X-Request-Id`` header when the client
    sends one and is mirrored on ``request.state.request_id`` for error
    responses.  Sessions registered in the context never outlive the request.
    """

    __flysession_order__ = HIGHEST_PRECEDENCE

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        ctx = RequestContext.init(request_id=request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = ctx.request_id
        try:
            return await call_next(request)
        finally:
            RequestContext.clear()
