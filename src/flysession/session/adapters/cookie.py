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
"""Cookie-backed session store — the whole payload travels in a signed JWT."""

from __future__ import annotations

import time
from typing import Any

import jwt
import structlog

from flysession.kernel.exceptions import SessionFetchError, SessionSaveError
from flysession.session.data import SessionData
from flysession.session.options import Options
from flysession.session.writer import ResponseCookieWriter

logger = structlog.get_logger("flysession.session.cookie")

DEFAULT_MAX_AGE = 86400 * 30
MAX_COOKIE_LENGTH = 4096


class CookieSessionStore:
    """Session store that keeps session values in an HMAC-signed cookie.

    The cookie value is a JWT whose claims are ``{"values": {...}, "iat": ...}``
    plus ``exp`` when the options carry a positive ``max_age``.  Values must
    be JSON-serializable.

    Args:
        secret: Secret key for HMAC-based signing.
        algorithm: JWT algorithm (default: HS256).
        options: Default cookie options for new sessions.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        options: Options | None = None,
    ) -> None:
        if not secret:
            raise ValueError("CookieSessionStore requires a non-empty secret")
        self._secret = secret
        self._algorithm = algorithm
        self._options = options if options is not None else Options(max_age=DEFAULT_MAX_AGE)

    @property
    def options(self) -> Options:
        return self._options

    def set_options(self, options: Options) -> None:
        """Set the default cookie options for sessions created from now on."""
        self._options = options

    async def new(self, request: Any, name: str) -> SessionData:
        return SessionData(name=name, options=self._options, is_new=True)

    async def get(self, request: Any, name: str) -> SessionData:
        """Decode the session cookie, or start a new session when there is none.

        A correctly signed cookie whose ``exp`` has passed also starts a new
        session.

        Raises:
            SessionFetchError: If the cookie is tampered or malformed.
        """
        token = getattr(request, "cookies", {}).get(name)
        if not token:
            return await self.new(request, name)

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            logger.debug("session_cookie_expired", session=name)
            return await self.new(request, name)
        except jwt.PyJWTError as exc:
            raise SessionFetchError(
                f"Invalid session cookie '{name}': {exc}",
                context={"name": name},
            ) from exc

        values = claims.get("values")
        if not isinstance(values, dict):
            raise SessionFetchError(
                f"Session cookie '{name}' carries no values",
                context={"name": name},
            )

        return SessionData(name=name, values=values, options=self._options, is_new=False)

    async def save(self, request: Any, writer: ResponseCookieWriter, data: SessionData) -> None:
        """Encode *data* into a signed cookie, or delete it if expired.

        Raises:
            SessionSaveError: If the values are not JSON-serializable or the
                encoded cookie is too large.
        """
        if data.options.expired:
            writer.delete_cookie(data.name, data.options)
            return

        now = int(time.time())
        claims: dict[str, Any] = {"values": data.values, "iat": now}
        if data.options.max_age > 0:
            claims["exp"] = now + data.options.max_age

        try:
            token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        except (TypeError, ValueError) as exc:
            raise SessionSaveError(
                f"Cannot encode session '{data.name}': {exc}",
                context={"name": data.name},
            ) from exc

        # name=value pair, the part browsers count against the limit
        length = len(data.name) + 1 + len(token)
        if length > MAX_COOKIE_LENGTH:
            raise SessionSaveError(
                f"Session cookie '{data.name}' is {length} bytes, above the {MAX_COOKIE_LENGTH} byte limit",
                context={"name": data.name, "length": length},
            )

        writer.set_cookie(data.name, token, data.options)
        logger.debug("session_cookie_encoded", session=data.name, length=len(token))
