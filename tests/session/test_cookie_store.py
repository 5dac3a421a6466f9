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
"""Tests for CookieSessionStore — signed JWT cookies via PyJWT."""

from __future__ import annotations

import time
from types import SimpleNamespace

import jwt
import pytest

from flysession.kernel.exceptions import SessionFetchError, SessionSaveError
from flysession.session.adapters.cookie import DEFAULT_MAX_AGE, MAX_COOKIE_LENGTH, CookieSessionStore
from flysession.session.data import SessionData
from flysession.session.options import Options
from flysession.session.ports.outbound import SessionStore
from flysession.session.writer import ResponseCookieWriter

SECRET = "cookie-store-secret-cookie-store-secret"


def _request(**cookies: str) -> SimpleNamespace:
    return SimpleNamespace(cookies=cookies)


async def _saved_token(store: CookieSessionStore, data: SessionData) -> str:
    writer = ResponseCookieWriter()
    await store.save(_request(), writer, data)
    value, _ = writer.pending[data.name]
    assert value is not None
    return value


class TestCookieSessionStore:
    def test_protocol_compliance(self):
        assert isinstance(CookieSessionStore(secret=SECRET), SessionStore)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            CookieSessionStore(secret="")

    def test_default_options(self):
        store = CookieSessionStore(secret=SECRET)
        assert store.options.max_age == DEFAULT_MAX_AGE
        assert store.options.path == "/"

    @pytest.mark.asyncio
    async def test_missing_cookie_gives_new_session(self):
        store = CookieSessionStore(secret=SECRET)
        data = await store.get(_request(), "s")
        assert data.is_new is True
        assert data.values == {}

    @pytest.mark.asyncio
    async def test_save_then_get(self):
        store = CookieSessionStore(secret=SECRET)
        token = await _saved_token(store, SessionData(name="s", values={"hello": "world", "n": 3}))

        data = await store.get(_request(s=token), "s")
        assert data.is_new is False
        assert data.values == {"hello": "world", "n": 3}

    @pytest.mark.asyncio
    async def test_token_claims(self):
        store = CookieSessionStore(secret=SECRET)
        token = await _saved_token(store, SessionData(name="s", values={"a": 1}, options=Options(max_age=60)))
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert claims["values"] == {"a": 1}
        assert claims["exp"] - claims["iat"] == 60

    @pytest.mark.asyncio
    async def test_browser_session_token_has_no_exp(self):
        store = CookieSessionStore(secret=SECRET)
        token = await _saved_token(store, SessionData(name="s", options=Options(max_age=0)))
        assert "exp" not in jwt.decode(token, SECRET, algorithms=["HS256"])

    @pytest.mark.asyncio
    async def test_tampered_cookie_raises(self):
        store = CookieSessionStore(secret=SECRET)
        token = await _saved_token(store, SessionData(name="s", values={"role": "user"}))
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(SessionFetchError) as exc_info:
            await store.get(_request(s=tampered), "s")
        assert exc_info.value.code == "SESSION_FETCH_FAILED"

    @pytest.mark.asyncio
    async def test_expired_cookie_starts_new_session(self):
        store = CookieSessionStore(secret=SECRET)
        past = int(time.time()) - 120
        token = jwt.encode({"values": {"user": "alice"}, "iat": past, "exp": past + 60}, SECRET, algorithm="HS256")
        data = await store.get(_request(s=token), "s")
        assert data.is_new is True
        assert data.values == {}

    @pytest.mark.asyncio
    async def test_expired_cookie_with_foreign_signature_raises(self):
        store = CookieSessionStore(secret=SECRET)
        past = int(time.time()) - 120
        token = jwt.encode({"values": {}, "iat": past, "exp": past + 60}, "other-" + SECRET, algorithm="HS256")
        with pytest.raises(SessionFetchError):
            await store.get(_request(s=token), "s")

    @pytest.mark.asyncio
    async def test_token_without_values_raises(self):
        store = CookieSessionStore(secret=SECRET)
        token = jwt.encode({"sub": "someone"}, SECRET, algorithm="HS256")
        with pytest.raises(SessionFetchError):
            await store.get(_request(s=token), "s")

    @pytest.mark.asyncio
    async def test_unserializable_value_raises_save_error(self):
        store = CookieSessionStore(secret=SECRET)
        writer = ResponseCookieWriter()
        with pytest.raises(SessionSaveError) as exc_info:
            await store.save(_request(), writer, SessionData(name="s", values={"obj": object()}))
        assert exc_info.value.code == "SESSION_SAVE_FAILED"
        assert writer.pending == {}

    @pytest.mark.asyncio
    async def test_oversized_cookie_raises_save_error(self):
        store = CookieSessionStore(secret=SECRET)
        with pytest.raises(SessionSaveError):
            await store.save(_request(), ResponseCookieWriter(), SessionData(name="s", values={"blob": "x" * 5000}))

    @pytest.mark.asyncio
    async def test_cookie_name_counts_towards_size_limit(self):
        store = CookieSessionStore(secret=SECRET)
        data = SessionData(name="s", values={"blob": ""})
        token = await _saved_token(store, data)
        # pad the payload until the token alone sits just under the limit
        data.values["blob"] = "x" * ((MAX_COOKIE_LENGTH - len(token)) * 3 // 4 - 4)
        token = await _saved_token(store, data)
        assert len(token) <= MAX_COOKIE_LENGTH

        long_name = SessionData(name="n" * (MAX_COOKIE_LENGTH - len(token)), values=data.values)
        with pytest.raises(SessionSaveError) as exc_info:
            await store.save(_request(), ResponseCookieWriter(), long_name)
        assert exc_info.value.context["length"] > MAX_COOKIE_LENGTH

    @pytest.mark.asyncio
    async def test_expired_options_delete_cookie(self):
        store = CookieSessionStore(secret=SECRET)
        writer = ResponseCookieWriter()
        await store.save(_request(), writer, SessionData(name="s", options=Options(max_age=-1)))
        value, _ = writer.pending["s"]
        assert value is None

    @pytest.mark.asyncio
    async def test_set_options_applies_to_new_sessions(self):
        store = CookieSessionStore(secret=SECRET)
        store.set_options(Options(domain="maji.moe"))
        data = await store.get(_request(), "s")
        assert data.options.domain == "maji.moe"
