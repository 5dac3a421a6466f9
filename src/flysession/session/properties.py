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
"""Session subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from flysession.core.config import config_properties
from flysession.session.options import Options


@config_properties(prefix="flysession.session")
@dataclass
class SessionProperties:
    """Configuration for the session subsystem (flysession.session.*)."""

    name: str = "flysession"
    store: str = "cookie"
    secret: str = ""
    algorithm: str = "HS256"
    path: str = "/"
    domain: str = ""
    max_age: int = 86400 * 30
    secure: bool = False
    http_only: bool = True
    same_site: str = "lax"
    ttl: int = 1800
    reset_on_error: bool = False
    redis_url: str = "redis://localhost:6379/0"

    def options(self) -> Options:
        """Default cookie options described by these properties."""
        return Options(
            path=self.path,
            domain=self.domain or None,
            max_age=self.max_age,
            secure=self.secure,
            http_only=self.http_only,
            same_site=self.same_site,
        )
