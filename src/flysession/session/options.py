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
"""Cookie-writing options for a session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Options:
    """Attributes written with the session cookie.

    ``max_age`` semantics:

    - ``> 0``: cookie lifetime in seconds.
    - ``0``: browser-session cookie, no ``Max-Age`` attribute is sent.
    - ``< 0``: the cookie (and any server-side record) is deleted on save.
    """

    path: str = "/"
    domain: str | None = None
    max_age: int = 0
    secure: bool = False
    http_only: bool = False
    same_site: str = "lax"

    @property
    def expired(self) -> bool:
        return self.max_age < 0

    def cookie_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``starlette.responses.Response.set_cookie``."""
        kwargs: dict[str, Any] = {
            "path": self.path,
            "domain": self.domain or None,
            "secure": self.secure,
            "httponly": self.http_only,
            "samesite": self.same_site,
        }
        if self.max_age > 0:
            kwargs["max_age"] = self.max_age
        return kwargs
