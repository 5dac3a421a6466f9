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
"""Base class for path-scoped web filters."""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any

from flysession.web.ports.filter import CallNext


def _matches(path: str, patterns: list[str]) -> bool:
    return any(fnmatch(path, pattern) for pattern in patterns)


class OncePerRequestFilter(abc.ABC):
    """:class:`WebFilter` base that limits itself to matching paths.

    ``url_patterns`` and ``exclude_patterns`` are glob patterns tested
    against ``request.url.path``.  An empty ``url_patterns`` means every
    path; an exclusion always wins.  For example, a session filter with
    ``exclude_patterns = ["/static/*"]`` never touches asset requests.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.url_patterns and not _matches(path, self.url_patterns):
            return True
        return _matches(path, self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...
