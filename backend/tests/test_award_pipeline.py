"""
AwardBoard Backend - Award Pipeline Endpoint Tests
====================================================

What:  End-to-end requests through the full middleware chain and routes.
How:   HTTPX AsyncClient over ASGITransport against a SQLite database.

What we test:
    ✅ Signup / login / logout / change-password flows
    ✅ Every award code the board hands out, and its page
    ✅ Awards are recorded for signed-in users only, once per code
    ✅ Failures inside the pipeline answer the 500 page
"""

from unittest.mock import AsyncMock, patch

import pytest

from awardboard.exceptions import DatabaseError
from awardboard.services.comment_service import comment_service
from awardboard.services.credential_store import credential_store

from conftest import ALICE, BOB


async def awards_of(client):
    response = await client.get("/me")
    assert response.status_code == 200
    return response.json()["awards"]


class TestAccountFlow:

    @pytest.mark.asyncio
    async def test_signup_success_and_duplicate(self, test_client):
        body = {"username": "carol", "password": "pw"}
        assert (await test_client.post("/signup", json=body)).json() == {"status": "success"}
        assert (await test_client.post("/signup", json=body)).json() == {"status": "failed"}

    @pytest.mark.asyncio
    async def test_login_sets_cookie(self, test_client, sign_in):
        await sign_in(test_client, *ALICE)
        assert "awardboard_session" in test_client.cookies
        me = await test_client.get("/me")
        assert me.json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, test_client):
        response = await test_client.post("/login", json={"username": "nobody", "password": "pw"})
        assert response.status_code == 401
        assert response.json() == {"status": "Incorrect username or password!"}
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, test_client):
        await test_client.post("/signup", json={"username": "carol", "password": "pw"})
        response = await test_client.post("/login", json={"username": "carol", "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"status": "Incorrect username or password"}

    @pytest.mark.asyncio
    async def test_login_page_redirects_when_signed_in(self, test_client, sign_in):
        assert (await test_client.get("/")).status_code == 200
        await sign_in(test_client, *ALICE)
        response = await test_client.get("/")
        assert response.status_code == 302
        assert response.headers["location"] == "/home"

    @pytest.mark.asyncio
    async def test_protected_routes_redirect_anonymous(self, test_client):
        for path in ("/home", "/me", "/comments"):
            response = await test_client.get(path)
            assert response.status_code == 302
            assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_logout(self, alice_client):
        response = await alice_client.get("/logout")
        assert response.status_code == 302
        assert (await alice_client.get("/home")).status_code == 302

    @pytest.mark.asyncio
    async def test_stale_cookie_is_cleared(self, test_client):
        test_client.cookies.set("awardboard_session", "stale-token")
        response = await test_client.get("/brewCoffee")
        assert response.status_code == 418
        assert "awardboard_session" in response.headers.get("set-cookie", "")

    @pytest.mark.asyncio
    async def test_change_password(self, alice_client):
        response = await alice_client.post(
            "/change_password",
            json={"old_password": ALICE[1], "new_password": "looking-glass"},
        )
        assert response.json() == {"status": "success"}

        await alice_client.get("/logout")
        response = await alice_client.post(
            "/login", json={"username": "alice", "password": "looking-glass"}
        )
        assert response.json() == {"status": 200}


class TestAwardCodes:

    @pytest.mark.asyncio
    async def test_teapot(self, test_client):
        response = await test_client.get("/brewCoffee")
        assert response.status_code == 418
        assert "teapot" in response.text

    @pytest.mark.asyncio
    async def test_area51(self, test_client):
        assert (await test_client.get("/area51")).status_code == 451

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, test_client):
        response = await test_client.get("/" + "a" * 41)
        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")

    @pytest.mark.asyncio
    async def test_target_over_42_chars_is_414(self, test_client):
        assert (await test_client.get("/" + "a" * 42)).status_code == 414

    @pytest.mark.asyncio
    async def test_large_headers_are_431(self, test_client):
        response = await test_client.get("/brewCoffee", headers={"x-padding": "a" * 2100})
        assert response.status_code == 431

    @pytest.mark.asyncio
    async def test_delete_remove_comment_is_405(self, alice_client):
        response = await alice_client.delete("/remove_comment")
        assert response.status_code == 405
        assert response.headers["allowed"] == "POST"

    @pytest.mark.asyncio
    async def test_put_is_501(self, test_client):
        assert (await test_client.put("/home", json={})).status_code == 501

    @pytest.mark.asyncio
    async def test_home_rate_limit(self, alice_client):
        for _ in range(5):
            response = await alice_client.get("/home")
            assert response.status_code == 200
        response = await alice_client.get("/home")
        assert response.status_code == 429
        assert int(response.headers["retry-after"]) >= 1
        assert 429 in await awards_of(alice_client)

    @pytest.mark.asyncio
    async def test_exponential(self, alice_client):
        response = await alice_client.get("/exponential/12345/2")
        assert response.status_code == 200
        assert response.json() == {"result": "1.23e+4"}

    @pytest.mark.asyncio
    async def test_exponential_bad_digits_is_500(self, alice_client):
        assert (await alice_client.get("/exponential/1/101")).status_code == 500
        assert 500 in await awards_of(alice_client)

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/area51", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"


class TestComments:

    @pytest.mark.asyncio
    async def test_add_comment(self, alice_client):
        response = await alice_client.post("/add_comment", json={"message": "hello"})
        assert response.status_code == 201

        board = (await alice_client.get("/comments")).json()
        assert board["username"] == "alice"
        assert [m["message"] for m in board["messages"]] == ["hello"]

    @pytest.mark.asyncio
    async def test_double_byte_comment_is_422(self, alice_client):
        response = await alice_client.post("/add_comment", json={"message": "日本語"})
        assert response.status_code == 422
        assert (await alice_client.get("/comments")).json()["messages"] == []

    @pytest.mark.asyncio
    async def test_oversized_body_is_413(self, alice_client):
        response = await alice_client.post("/add_comment", json={"message": "x" * 1100})
        assert response.status_code == 413
        assert (await alice_client.get("/comments")).json()["messages"] == []

    @pytest.mark.asyncio
    async def test_remove_comment_rules(self, alice_client, client_factory, sign_in):
        bob = client_factory()
        await sign_in(bob, *BOB)
        await bob.post("/add_comment", json={"message": "bob was here"})
        comment_id = (await alice_client.get("/comments")).json()["messages"][0]["id"]

        response = await alice_client.post("/remove_comment", json={"message_id": comment_id})
        assert response.status_code == 403
        assert len((await bob.get("/comments")).json()["messages"]) == 1

        response = await bob.post("/remove_comment", json={"message_id": comment_id})
        assert response.status_code == 200
        assert (await bob.get("/comments")).json()["messages"] == []

        response = await bob.post("/remove_comment", json={"message_id": comment_id})
        assert response.status_code == 404


class TestAwardRecording:

    @pytest.mark.asyncio
    async def test_anonymous_requests_earn_nothing(self, test_client, sign_in):
        await test_client.get("/brewCoffee")
        await sign_in(test_client, *ALICE)
        assert await awards_of(test_client) == [200]

    @pytest.mark.asyncio
    async def test_awards_accumulate_once_per_code(self, alice_client):
        await alice_client.get("/brewCoffee")
        await alice_client.get("/brewCoffee")
        await alice_client.get("/area51")
        await alice_client.put("/anything")
        await alice_client.delete("/remove_comment")

        awards = await awards_of(alice_client)
        assert awards == sorted(set(awards))
        assert {200, 405, 418, 451, 501} <= set(awards)

    @pytest.mark.asyncio
    async def test_recorder_failure_is_500(self, alice_client):
        failure = AsyncMock(side_effect=DatabaseError(message="down"))
        with patch.object(credential_store, "add_award", failure):
            response = await alice_client.get("/brewCoffee")
        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_handler_crash_is_500(self, alice_client):
        with patch.object(comment_service, "list_recent", AsyncMock(side_effect=RuntimeError("boom"))):
            response = await alice_client.get("/comments")
        assert response.status_code == 500
        assert 500 in await awards_of(alice_client)


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
