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
"""SessionData — the payload of one named session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flysession.session.options import Options

DEFAULT_FLASH_KEY = "_flash"


@dataclass
class SessionData:
    """Values, options and identity of one session as seen by a store.

    Flash messages are kept inside ``values`` as ordered lists under their
    category key, so they are persisted like any other value and vanish
    once read.

    Attributes:
        name: The session name (cookie name / store namespace).
        id: Store-assigned identifier; empty for stores that keep the whole
            payload in the cookie.
        values: JSON-serializable session payload.
        options: Cookie options used on the next save.
        is_new: ``True`` if no existing session was found for the request.
    """

    name: str
    id: str = ""
    values: dict[str, Any] = field(default_factory=dict)
    options: Options = field(default_factory=Options)
    is_new: bool = True

    def add_flash(self, value: Any, category: str = DEFAULT_FLASH_KEY) -> None:
        """Append *value* to the flash messages of *category*."""
        queue = self.values.get(category)
        if isinstance(queue, list):
            queue.append(value)
        else:
            self.values[category] = [value]

    def flashes(self, category: str = DEFAULT_FLASH_KEY) -> list[Any]:
        """Return and remove all flash messages of *category*."""
        queue = self.values.pop(category, None)
        if isinstance(queue, list):
            return queue
        return []
