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
"""Tests for WebFilter Protocol and OncePerRequestFilter base class."""

from __future__ import annotations

from unittest.mock import MagicMock

from flysession.session.adapters.memory import InMemorySessionStore
from flysession.session.filter import sessions
from flysession.web.filters import OncePerRequestFilter
from flysession.web.ports.filter import WebFilter


class _DuckFilter:
    async def do_filter(self, request, call_next):
        return await call_next(request)

    def should_not_filter(self, request) -> bool:
        return False


class _Concrete(OncePerRequestFilter):
    async def do_filter(self, request, call_next):
        return await call_next(request)


def _request(path: str) -> MagicMock:
    request = MagicMock()
    request.url.path = path
    return request


class TestWebFilterProtocol:
    def test_duck_typed_class_is_webfilter(self):
        assert isinstance(_DuckFilter(), WebFilter)

    def test_once_per_request_filter_is_webfilter(self):
        assert isinstance(_Concrete(), WebFilter)

    def test_session_filter_is_webfilter(self):
        assert isinstance(sessions("s", InMemorySessionStore()), WebFilter)

    def test_non_filter_is_not_webfilter(self):
        class _NotAFilter:
            pass

        assert not isinstance(_NotAFilter(), WebFilter)


class TestShouldNotFilter:
    def test_no_patterns_matches_everything(self):
        assert _Concrete().should_not_filter(_request("/anything")) is False

    def test_url_patterns_limit_scope(self):
        f = _Concrete()
        f.url_patterns = ["/app/*"]
        assert f.should_not_filter(_request("/app/page")) is False
        assert f.should_not_filter(_request("/static/logo.png")) is True

    def test_exclude_patterns_win(self):
        f = _Concrete()
        f.url_patterns = ["/app/*"]
        f.exclude_patterns = ["/app/health"]
        assert f.should_not_filter(_request("/app/health")) is True
        assert f.should_not_filter(_request("/app/page")) is False

    def test_session_filter_can_skip_static_paths(self):
        f = sessions("s", InMemorySessionStore())
        f.exclude_patterns = ["/static/*"]
        assert f.should_not_filter(_request("/static/app.js")) is True
        assert f.should_not_filter(_request("/login")) is False
