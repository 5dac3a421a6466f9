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
"""End-to-end tests for SessionFilter + CookieSessionStore through Starlette."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flysession.session import Options, Session, current_session, get_session, sessions
from flysession.session.adapters.cookie import CookieSessionStore
from flysession.web import create_app

SECRET = "secret123-secret123-secret123-secret123"
SESSION_NAME = "my_session"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _route(path: str, fn: Callable[[Session], Awaitable[object]]) -> Route:
    """Route whose handler receives the request's session and returns JSON."""

    async def endpoint(request: Request) -> JSONResponse:
        result = await fn(get_session(request))
        return JSONResponse({"result": result})

    return Route(path, endpoint)


def _make_app(routes: list[Route], store: CookieSessionStore | None = None, **kwargs):
    store = store or CookieSessionStore(secret=SECRET)
    return create_app(routes, filters=[sessions(SESSION_NAME, store, **kwargs)])


def _cookie_header(response) -> dict[str, str]:
    """Present the session cookie set by *response* on a follow-up request."""
    return {"Cookie": f"{SESSION_NAME}={response.cookies[SESSION_NAME]}"}


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestSessionRoundTrip:
    def test_set_then_show_on_next_request(self):
        async def set_session(session: Session):
            await session.set("hello", "world")
            await session.save()

        async def show(session: Session):
            return await session.get("hello")

        app = _make_app([_route("/set-session", set_session), _route("/show", show)])

        r1 = TestClient(app).get("/set-session")
        assert r1.status_code == 200
        assert SESSION_NAME in r1.cookies

        r2 = TestClient(app).get("/show", headers=_cookie_header(r1))
        assert r2.json() == {"result": "world"}

    def test_without_cookie_value_is_absent(self):
        async def show(session: Session):
            return await session.get("hello")

        client = TestClient(_make_app([_route("/show", show)]))
        assert client.get("/show").json() == {"result": None}

    def test_unsaved_changes_are_not_persisted(self):
        async def set_only(session: Session):
            await session.set("hello", "world")

        client = TestClient(_make_app([_route("/set", set_only)]))
        resp = client.get("/set")
        assert "set-cookie" not in resp.headers

    def test_values_survive_several_requests(self):
        async def incr(session: Session):
            count = await session.get("count", 0) + 1
            await session.set("count", count)
            await session.save()
            return count

        client = TestClient(_make_app([_route("/incr", incr)]))
        assert client.get("/incr").json() == {"result": 1}
        assert client.get("/incr").json() == {"result": 2}
        assert client.get("/incr").json() == {"result": 3}


class TestSessionDelete:
    def test_deleted_key_is_absent_next_request(self):
        async def set_and_delete(session: Session):
            await session.set("hello", "world")
            await session.delete("hello")
            await session.save()

        async def show(session: Session):
            return await session.get("hello")

        app = _make_app([_route("/set", set_and_delete), _route("/show", show)])
        r1 = TestClient(app).get("/set")
        r2 = TestClient(app).get("/show", headers=_cookie_header(r1))
        assert r2.json() == {"result": None}


class TestSessionClear:
    def test_clear_removes_all_keys(self):
        data = {"hello": "world", "foo": "bar", "apples": "oranges"}

        async def set_and_clear(session: Session):
            for key, value in data.items():
                await session.set(key, value)
            await session.clear()
            await session.save()

        async def show(session: Session):
            return {key: await session.get(key) for key in data}

        app = _make_app([_route("/set", set_and_clear), _route("/show", show)])
        r1 = TestClient(app).get("/set")
        r2 = TestClient(app).get("/show", headers=_cookie_header(r1))
        assert r2.json() == {"result": {"hello": None, "foo": None, "apples": None}}


class TestFlashes:
    def test_flashes_are_consumed_exactly_once(self):
        async def add(session: Session):
            await session.add_flash("hello world")
            await session.save()

        async def show(session: Session):
            flashes = await session.flashes()
            await session.save()
            return flashes

        app = _make_app([_route("/set", add), _route("/show", show), _route("/showagain", show)])

        r1 = TestClient(app).get("/set")
        r2 = TestClient(app).get("/show", headers=_cookie_header(r1))
        assert r2.json() == {"result": ["hello world"]}

        r3 = TestClient(app).get("/showagain", headers=_cookie_header(r2))
        assert r3.json() == {"result": []}

    def test_categories_are_independent(self):
        async def add(session: Session):
            await session.add_flash("saved", "info")
            await session.add_flash("careful", "warning")
            await session.add_flash("also saved", "info")
            await session.save()

        async def show_info(session: Session):
            info = await session.flashes("info")
            await session.save()
            return info

        async def show_warning(session: Session):
            return await session.flashes("warning")

        client = TestClient(
            _make_app(
                [_route("/add", add), _route("/info", show_info), _route("/warning", show_warning)]
            )
        )
        client.get("/add")
        assert client.get("/info").json() == {"result": ["saved", "also saved"]}
        assert client.get("/warning").json() == {"result": ["careful"]}


class TestOptions:
    def test_options_are_scoped_to_one_response(self):
        store = CookieSessionStore(secret=SECRET)
        store.set_options(Options(domain="maji.moe"))

        async def with_path(session: Session):
            await session.set("hello", "world")
            await session.set_options(Options(path="/foo/bar/bat"))
            await session.save()

        async def plain(session: Session):
            await session.set("hello", "world")
            await session.save()

        app = _make_app([_route("/", with_path), _route("/foo", plain)], store=store)

        r1 = TestClient(app).get("/")
        r2 = TestClient(app).get("/foo")

        header1 = r1.headers["set-cookie"]
        assert "Path=/foo/bar/bat" in header1
        assert "Domain=" not in header1

        header2 = r2.headers["set-cookie"]
        assert "Domain=maji.moe" in header2
        assert "Path=/;" in header2 or header2.endswith("Path=/")
        assert "/foo/bar/bat" not in header2

    def test_negative_max_age_deletes_cookie(self):
        async def logout(session: Session):
            await session.set_options(Options(max_age=-1))
            await session.save()

        client = TestClient(_make_app([_route("/logout", logout)]))
        resp = client.get("/logout")
        assert "Max-Age=0" in resp.headers["set-cookie"]

    def test_positive_max_age_is_sent(self):
        async def remember(session: Session):
            await session.set_options(Options(max_age=3600, http_only=True))
            await session.set("user", "alice")
            await session.save()

        client = TestClient(_make_app([_route("/remember", remember)]))
        header = client.get("/remember").headers["set-cookie"]
        assert "Max-Age=3600" in header
        assert "HttpOnly" in header


class TestLazyFetch:
    def test_store_fetched_once_per_request(self):
        class CountingStore(CookieSessionStore):
            def __init__(self) -> None:
                super().__init__(secret=SECRET)
                self.fetches = 0

            async def get(self, request, name):
                self.fetches += 1
                return await super().get(request, name)

        store = CountingStore()

        async def busy(session: Session):
            await session.set("a", 1)
            await session.get("a")
            await session.set("b", 2)
            await session.delete("a")
            await session.flashes()
            await session.save()

        async def untouched(session: Session):
            return session.loaded

        client = TestClient(_make_app([_route("/busy", busy), _route("/untouched", untouched)], store=store))

        client.get("/busy")
        assert store.fetches == 1

        resp = client.get("/untouched")
        assert resp.json() == {"result": False}
        assert store.fetches == 1
        assert "set-cookie" not in resp.headers


class TestFetchErrors:
    def test_tampered_cookie_returns_400(self):
        async def show(session: Session):
            return await session.get("hello")

        client = TestClient(_make_app([_route("/show", show)]))
        resp = client.get("/show", headers={"Cookie": f"{SESSION_NAME}=not-a-token"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "SESSION_FETCH_FAILED"

    def test_cookie_signed_with_other_secret_is_rejected(self):
        async def set_session(session: Session):
            await session.set("user", "mallory")
            await session.save()

        async def show(session: Session):
            return await session.get("user")

        forger = _make_app([_route("/set", set_session)], store=CookieSessionStore(secret="x" * 40))
        victim = _make_app([_route("/show", show)])

        r1 = TestClient(forger).get("/set")
        r2 = TestClient(victim).get("/show", headers=_cookie_header(r1))
        assert r2.status_code == 400

    def test_reset_on_error_starts_fresh_session(self):
        async def show(session: Session):
            value = await session.get("hello", "fresh")
            await session.save()
            return value

        client = TestClient(_make_app([_route("/show", show)], reset_on_error=True))
        resp = client.get("/show", headers={"Cookie": f"{SESSION_NAME}=not-a-token"})
        assert resp.status_code == 200
        assert resp.json() == {"result": "fresh"}
        assert SESSION_NAME in resp.cookies


class TestSessionLookup:
    def test_current_session_matches_request_session(self):
        async def endpoint(request: Request) -> PlainTextResponse:
            same = current_session() is get_session(request)
            named = current_session(SESSION_NAME) is get_session(request, SESSION_NAME)
            return PlainTextResponse(f"{same}:{named}")

        client = TestClient(_make_app([Route("/lookup", endpoint)]))
        assert client.get("/lookup").text == "True:True"

    def test_missing_session_is_reported(self):
        async def endpoint(request: Request) -> PlainTextResponse:
            get_session(request, "other")
            return PlainTextResponse("unreachable")

        client = TestClient(_make_app([Route("/other", endpoint)]))
        resp = client.get("/other")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "SESSION_NOT_INSTALLED"

    def test_two_named_sessions_are_independent(self):
        store = CookieSessionStore(secret=SECRET)

        async def endpoint(request: Request) -> JSONResponse:
            cart = get_session(request, "cart")
            prefs = get_session(request, "prefs")
            await cart.set("items", [1, 2])
            await prefs.set("theme", "dark")
            await cart.save()
            await prefs.save()
            return JSONResponse({"default": get_session(request).name})

        app = create_app(
            [Route("/both", endpoint)],
            filters=[sessions("cart", store), sessions("prefs", store)],
        )
        resp = TestClient(app).get("/both")
        assert "cart" in resp.cookies
        assert "prefs" in resp.cookies
        # Both filters share an order, the last registered one wraps innermost.
        assert resp.json() == {"default": "prefs"}
