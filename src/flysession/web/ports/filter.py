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
"""WebFilter port: the hook session installation (and anything else) plugs into.

Requests and responses are typed as ``Any`` here; only the Starlette
adapter knows the concrete types.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """Wraps the rest of the chain for one request.

    ``WebFilterChainMiddleware`` sorts filters by ``@order`` and calls
    ``do_filter`` on each one whose ``should_not_filter`` returns ``False``.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Run around ``await call_next(request)`` and return the response."""
        ...

    def should_not_filter(self, request: Any) -> bool: ...
