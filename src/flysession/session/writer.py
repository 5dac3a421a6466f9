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
"""ResponseCookieWriter — collects cookie writes until the response exists.

Handlers call ``Session.save()`` before they return a response, so stores
write their cookies here and the session filter applies them afterwards.
"""

from __future__ import annotations

from typing import Any

from flysession.session.options import Options


class ResponseCookieWriter:
    """Pending ``Set-Cookie`` writes for one response.

    The latest write for a given cookie name replaces earlier ones.
    """

    def __init__(self) -> None:
        self._pending: dict[str, tuple[str | None, Options]] = {}

    def set_cookie(self, name: str, value: str, options: Options) -> None:
        self._pending[name] = (value, options)

    def delete_cookie(self, name: str, options: Options) -> None:
        self._pending[name] = (None, options)

    @property
    def pending(self) -> dict[str, tuple[str | None, Options]]:
        return dict(self._pending)

    def apply(self, response: Any) -> None:
        """Write all pending cookies onto a Starlette response."""
        for name, (value, options) in self._pending.items():
            if value is None:
                response.delete_cookie(
                    key=name,
                    path=options.path,
                    domain=options.domain or None,
                    secure=options.secure,
                    httponly=options.http_only,
                    samesite=options.same_site,
                )
            else:
                response.set_cookie(key=name, value=value, **options.cookie_kwargs())
        self._pending.clear()
