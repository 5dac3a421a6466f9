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
"""Filter ordering — @order decorator and precedence constants."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T", bound=type)

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1


def order(value: int) -> Callable[[T], T]:
    """Set the execution order for a filter class.

    Lower value = higher priority (runs first, wraps everything after it).
    Default order for undecorated classes is 0.
    """

    def decorator(cls: T) -> T:
        cls.__flysession_order__ = value  # type: ignore[attr-defined]
        return cls

    return decorator


def get_order(obj: object) -> int:
    """Get the order value for a class or instance, defaulting to 0."""
    return getattr(obj, "__flysession_order__", 0)
