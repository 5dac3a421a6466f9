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
"""JSON error responses for flysession exceptions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse

from flysession.kernel.exceptions import (
    ConfigurationException,
    FlySessionException,
    InfrastructureException,
    SecurityException,
    SessionFetchError,
    SessionNotInstalledError,
    SessionSaveError,
)

logger = structlog.get_logger("flysession.web")

# Checked in order; the first matching base class decides the status.
_STATUS_MAP: tuple[tuple[type[Exception], int], ...] = (
    (SessionFetchError, 400),
    (SessionSaveError, 500),
    (SessionNotInstalledError, 500),
    (SecurityException, 400),
    (ConfigurationException, 500),
    (InfrastructureException, 502),
)


def status_for(exc: Exception) -> int:
    """HTTP status used when *exc* reaches :func:`global_exception_handler`."""
    return next((status for exc_type, status in _STATUS_MAP if isinstance(exc, exc_type)), 500)


def _error_body(request: Request, status: int, message: str, code: str) -> dict[str, Any]:
    return {
        "message": message,
        "code": code,
        "request_id": getattr(request.state, "request_id", None) or uuid.uuid4().hex,
        "timestamp": datetime.now(UTC).isoformat(),
        "status": status,
        "path": request.url.path,
    }


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render *exc* as ``{"error": {...}}``.

    ``FlySessionException`` messages, codes and context are exposed; any
    other exception is logged and reported as a generic 500.
    """
    if not isinstance(exc, FlySessionException):
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            {"error": _error_body(request, 500, "Internal server error", "INTERNAL_ERROR")},
            status_code=500,
        )

    status = status_for(exc)
    error = _error_body(request, status, str(exc), exc.code or type(exc).__name__)
    if exc.context:
        error["context"] = exc.context
    return JSONResponse({"error": error}, status_code=status)
