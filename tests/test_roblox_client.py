"""Unit tests for core/roblox.py -- RobloxClient over a mocked requests.Session.

No network. The session is a MagicMock whose request() returns canned
response objects, so tests can check URLs, payloads, headers, and the
CSRF replay without reaching Roblox.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
import requests

from core.errors import RobloxAPIError
from core.roblox import GROUPS_API, USERS_API, RobloxClient

# ---------------------------------------------------------------------------
# Inline helpers
# ---------------------------------------------------------------------------


def _resp(status=200, body=None, headers=None):
    """Build a stand-in for requests.Response with the attributes the client reads."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.headers = headers or {}
    resp.content = json.dumps(body).encode() if body is not None else b""
    resp.json.side_effect = lambda: body if body is not None else json.loads("")
    return resp


def _client(*responses):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return RobloxClient(session=session), session


ROLES = {
    "groupId": 4242,
    "roles": [
        {"id": 1, "name": "Guest", "rank": 0, "memberCount": 0},
        {"id": 20, "name": "Member", "rank": 10, "memberCount": 40},
        {"id": 30, "name": "Officer", "rank": 50, "memberCount": 3},
    ],
}


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


class TestLogin:
    def test_sets_cookie_and_returns_user(self):
        client, session = _client(_resp(body={"id": 1, "name": "RankBot", "displayName": "RankBot"}))
        user = client.login("cookie-value")
        assert user["id"] == 1
        session.cookies.set.assert_called_once_with(".ROBLOSECURITY", "cookie-value", domain=".roblox.com")
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", f"{USERS_API}/v1/users/authenticated")

    def test_unauthorized_cookie(self):
        denied = {"errors": [{"code": 0, "message": "Authorization has been denied for this request."}]}
        client, _ = _client(_resp(status=401, body=denied))
        with pytest.raises(RobloxAPIError, match="You are not logged in.") as exc_info:
            client.login("expired")
        assert exc_info.value.status_code == 401

    def test_network_error(self):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("dns failure")
        client = RobloxClient(session=session)
        with pytest.raises(RobloxAPIError, match="Network error"):
            client.login("cookie")


# ---------------------------------------------------------------------------
# get_id_from_username
# ---------------------------------------------------------------------------


class TestGetIdFromUsername:
    def test_resolves_id(self):
        match = {"requestedUsername": "builderman", "id": 156, "name": "builderman"}
        client, session = _client(_resp(body={"data": [match]}))
        assert client.get_id_from_username("builderman") == 156
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", f"{USERS_API}/v1/usernames/users")
        assert session.request.call_args.kwargs["json"] == {"usernames": ["builderman"], "excludeBannedUsers": False}

    def test_unknown_user(self):
        client, _ = _client(_resp(body={"data": []}))
        with pytest.raises(RobloxAPIError, match="User not found"):
            client.get_id_from_username("nobody")

    def test_csrf_handshake_replays_once(self):
        client, session = _client(
            _resp(
                status=403,
                body={"errors": [{"code": 0, "message": "Token Validation Failed"}]},
                headers={"x-csrf-token": "tok"},
            ),
            _resp(body={"data": [{"id": 156}]}),
        )
        assert client.get_id_from_username("builderman") == 156
        assert session.request.call_count == 2
        assert session.request.call_args_list[1].kwargs["headers"]["x-csrf-token"] == "tok"

    def test_cached_csrf_token_sent_on_next_call(self):
        client, session = _client(
            _resp(status=403, headers={"x-csrf-token": "tok"}),
            _resp(body={"data": [{"id": 1}]}),
            _resp(body={"data": [{"id": 2}]}),
        )
        client.get_id_from_username("a")
        client.get_id_from_username("b")
        assert session.request.call_count == 3
        assert session.request.call_args_list[2].kwargs["headers"]["x-csrf-token"] == "tok"

    def test_first_attempt_is_sent_without_token(self):
        client, session = _client(
            _resp(status=403, headers={"x-csrf-token": "tok"}),
            _resp(body={"data": [{"id": 1}]}),
        )
        client.get_id_from_username("a")
        first, replay = session.request.call_args_list
        assert "x-csrf-token" not in first.kwargs["headers"]
        assert replay.kwargs["headers"]["x-csrf-token"] == "tok"

    def test_concurrent_callers_share_refreshed_token(self):
        """Worker threads racing on a stale token all end up authorised with the fresh one."""
        session = MagicMock()

        def respond(method, url, headers=None, **kwargs):
            if headers.get("x-csrf-token") != "fresh":
                return _resp(status=403, headers={"x-csrf-token": "fresh"})
            return _resp(body={"data": [{"id": 7}]})

        session.request.side_effect = respond
        client = RobloxClient(session=session)

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(client.get_id_from_username, [f"user{i}" for i in range(32)]))

        assert ids == [7] * 32
        assert client._csrf_token == "fresh"
        for call in session.request.call_args_list:
            assert call.kwargs["headers"].get("x-csrf-token") in (None, "fresh")

    def test_plain_403_is_not_replayed(self):
        client, session = _client(_resp(status=403, body={"errors": [{"message": "Forbidden"}]}))
        with pytest.raises(RobloxAPIError, match="Forbidden") as exc_info:
            client.get_id_from_username("builderman")
        assert exc_info.value.status_code == 403
        assert session.request.call_count == 1


# ---------------------------------------------------------------------------
# set_rank
# ---------------------------------------------------------------------------


class TestSetRank:
    def test_patches_member_with_matching_role(self):
        client, session = _client(_resp(body=ROLES), _resp(body={}))
        role = client.set_rank(4242, 156, 50)
        assert role == {"id": 30, "name": "Officer", "rank": 50, "memberCount": 3}

        get_call, patch_call = session.request.call_args_list
        assert get_call.args == ("GET", f"{GROUPS_API}/v1/groups/4242/roles")
        assert patch_call.args == ("PATCH", f"{GROUPS_API}/v1/groups/4242/users/156")
        assert patch_call.kwargs["json"] == {"roleId": 30}

    def test_rank_without_role(self):
        client, session = _client(_resp(body=ROLES))
        with pytest.raises(RobloxAPIError, match="Invalid rank provided: 77"):
            client.set_rank(4242, 156, 77)
        assert session.request.call_count == 1

    def test_upstream_error_message_is_surfaced(self):
        client, _ = _client(
            _resp(body=ROLES),
            _resp(status=400, body={"errors": [{"code": 3, "message": "The user is invalid or does not exist."}]}),
        )
        with pytest.raises(RobloxAPIError, match="The user is invalid or does not exist.") as exc_info:
            client.set_rank(4242, 156, 10)
        assert exc_info.value.status_code == 400

    def test_error_without_body(self):
        client, _ = _client(_resp(status=503))
        with pytest.raises(RobloxAPIError, match="HTTP 503"):
            client.get_roles(4242)
