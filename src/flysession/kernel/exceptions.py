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
"""Unified exception hierarchy for flysession.

All library exceptions inherit from FlySessionException, so callers can
catch one base type or target a specific failure.

Categories:
- SecurityException: session data that cannot be verified or decoded
- InfrastructureException: store failures while persisting session data
- ConfigurationException: invalid or incomplete configuration
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class FlySessionException(Exception):
    """Base exception for all flysession errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_FETCH_FAILED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class SecurityException(FlySessionException):
    """Data presented by the client failed verification."""


class InfrastructureException(FlySessionException):
    """Store, cache or network failures."""


class ConfigurationException(FlySessionException):
    """Configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Session errors
# ---------------------------------------------------------------------------


class SessionFetchError(SecurityException):
    """The store could not load existing session data for a request.

    Raised on the first access of a session when the cookie is tampered,
    expired or otherwise undecodable, or when server-side data is corrupt.
    """

    def __init__(
        self,
        message: str,
        code: str | None = "SESSION_FETCH_FAILED",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)


class SessionSaveError(InfrastructureException):
    """The store could not encode or persist session data."""

    def __init__(
        self,
        message: str,
        code: str | None = "SESSION_SAVE_FAILED",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)


class SessionNotInstalledError(FlySessionException):
    """No session was installed for the current request under the given name."""

    def __init__(
        self,
        message: str,
        code: str | None = "SESSION_NOT_INSTALLED",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)


class InvalidConfigurationError(ConfigurationException):
    """A configuration value is missing or has an unsupported value."""

    def __init__(
        self,
        message: str,
        code: str | None = "INVALID_CONFIGURATION",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)
