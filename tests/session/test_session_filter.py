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
from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from crumbguard.session.adapters.memory import InMemorySessionStore
from crumbguard.session.filter import DEFAULT_COOKIE_NAME, SessionFilter
from crumbguard.web.adapters.starlette.filter_chain import WebFilterChainMiddleware


async def _visit(request: Request) -> PlainTextResponse:
    session = request.state.session
    count = (session.get_attribute("visits") or 0) + 1
    session.set_attribute("visits", count)
    return PlainTextResponse(str(count))


async def _logout(request: Request) -> PlainTextResponse:
    request.state.session.reset()
    return PlainTextResponse("bye")


def _client(store: InMemorySessionStore) -> TestClient:
    app = Starlette(
        routes=[Route("/visit", _visit), Route("/logout", _logout)],
        middleware=[Middleware(WebFilterChainMiddleware, filters=[SessionFilter(store, ttl=60)])],
    )
    return TestClient(app)


class TestSessionFilter:
    def test_new_session_sets_cookie(self):
        resp = _client(InMemorySessionStore()).get("/visit")
        cookie = resp.headers["set-cookie"]
        assert cookie.startswith(f"{DEFAULT_COOKIE_NAME}=")
        assert "httponly" in cookie.lower()
        assert "max-age=60" in cookie.lower()

    def test_session_survives_between_requests(self):
        client = _client(InMemorySessionStore())
        assert client.get("/visit").text == "1"
        assert client.get("/visit").text == "2"

    def test_existing_session_does_not_reissue_cookie(self):
        client = _client(InMemorySessionStore())
        client.get("/visit")
        assert "set-cookie" not in client.get("/visit").headers

    def test_reset_deletes_store_entry_and_cookie(self):
        store = InMemorySessionStore()
        client = _client(store)
        client.get("/visit")
        session_id = client.cookies[DEFAULT_COOKIE_NAME]
        resp = client.get("/logout")
        assert session_id not in store._store
        assert resp.headers["set-cookie"].startswith(f'{DEFAULT_COOKIE_NAME}=""')

    def test_unknown_cookie_starts_fresh_session(self):
        client = _client(InMemorySessionStore())
        client.cookies.set(DEFAULT_COOKIE_NAME, "stale")
        resp = client.get("/visit")
        assert resp.text == "1"
        assert "set-cookie" in resp.headers
