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
"""flysession web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from flysession.kernel.exceptions import FlySessionException
from flysession.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flysession.web.adapters.starlette.filters import RequestContextFilter, RequestLoggingFilter
from flysession.web.errors import global_exception_handler
from flysession.web.ports.filter import WebFilter


def create_app(
    routes: Sequence[BaseRoute] = (),
    filters: Sequence[WebFilter] = (),
    debug: bool = False,
    request_logging: bool = True,
    lifespan: Any = None,
) -> Starlette:
    """Create a Starlette application with the flysession filter chain.

    Includes:
    - WebFilter chain (request context, request logging, + caller filters
      such as ``SessionFilter``), sorted by ``@order``
    - Exception handler rendering ``FlySessionException`` as JSON
    """
    chain: list[WebFilter] = [RequestContextFilter()]
    if request_logging:
        chain.append(RequestLoggingFilter())
    chain.extend(filters)

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
        exception_handlers={FlySessionException: global_exception_handler},
        lifespan=lifespan,
    )
