"""
roblox.py -- Thin client for the Roblox web API endpoints the ranking service needs.

Three capabilities are consumed: authenticate a session from a .ROBLOSECURITY
cookie, resolve a username to a numeric user id, and set a member's role in
a group by rank value.

Every failure -- HTTP error, network error, unexpected payload -- is raised as
RobloxAPIError. Nothing is retried. The one exception is the CSRF handshake:
Roblox rejects the first mutating request with 403 and an x-csrf-token header,
and the request is replayed once with that token attached.
"""

import logging
import threading
from typing import Any, Optional

import requests

from core.errors import RobloxAPIError

logger = logging.getLogger("rankbridge.roblox")

USERS_API = "https://users.roblox.com"
GROUPS_API = "https://groups.roblox.com"

_AUTH_COOKIE = ".ROBLOSECURITY"
_CSRF_HEADER = "x-csrf-token"
_TIMEOUT = 10


def _error_message(resp: requests.Response) -> str:
    """Pull the first errors[].message out of a Roblox error body, if any."""
    try:
        errors = resp.json().get("errors") or []
        message = errors[0].get("message")
    except (ValueError, AttributeError, IndexError):
        message = None
    return message or f"Roblox API returned HTTP {resp.status_code}"


class RobloxClient:
    """requests.Session wrapper holding the login cookie and CSRF token.

    One instance lives on app.state for the process lifetime. Route handlers
    run on FastAPI's thread pool, so worker threads share one Session.

    Known limitation: requests does not document Session as thread-safe. The
    client only sends independent requests through it and never changes its
    cookies or headers after login, but concurrent use still relies on
    urllib3's pooled connections being safe across threads. The CSRF token is
    the one value threads update, and it is read and written under _csrf_lock.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()
        self._session.max_redirects = 3
        self._csrf_token: Optional[str] = None
        self._csrf_lock = threading.Lock()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        headers = dict(kwargs.pop("headers", {}))
        with self._csrf_lock:
            token = self._csrf_token
        if method != "GET" and token:
            headers[_CSRF_HEADER] = token

        try:
            resp = self._session.request(method, url, headers=headers, timeout=_TIMEOUT, **kwargs)
            if resp.status_code == 403 and _CSRF_HEADER in resp.headers and method != "GET":
                token = resp.headers[_CSRF_HEADER]
                with self._csrf_lock:
                    self._csrf_token = token
                logger.info("CSRF token refreshed, replaying %s %s", method, url)
                headers = {**headers, _CSRF_HEADER: token}
                resp = self._session.request(method, url, headers=headers, timeout=_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise RobloxAPIError(f"Network error calling Roblox: {e}") from e

        if not resp.ok:
            raise RobloxAPIError(_error_message(resp), status_code=resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RobloxAPIError("Roblox API returned a non-JSON response.", status_code=resp.status_code) from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def login(self, cookie: str) -> dict[str, Any]:
        """Attach the auth cookie and confirm it by fetching the current user.

        Returns the authenticated user record ({"id", "name", "displayName"}).
        """
        self._session.cookies.set(_AUTH_COOKIE, cookie, domain=".roblox.com")
        with self._csrf_lock:
            self._csrf_token = None
        try:
            user = self._request("GET", f"{USERS_API}/v1/users/authenticated")
        except RobloxAPIError as e:
            if e.status_code == 401:
                raise RobloxAPIError("You are not logged in.", status_code=401) from e
            raise
        if not user or not user.get("id"):
            raise RobloxAPIError("You are not logged in.")
        return user

    def get_id_from_username(self, username: str) -> int:
        payload = {"usernames": [username], "excludeBannedUsers": False}
        body = self._request("POST", f"{USERS_API}/v1/usernames/users", json=payload)
        matches = (body or {}).get("data") or []
        if not matches:
            raise RobloxAPIError("User not found")
        return int(matches[0]["id"])

    def get_roles(self, group_id: int) -> list[dict[str, Any]]:
        """Return the group's roles as {"id", "name", "rank", "memberCount"} dicts."""
        body = self._request("GET", f"{GROUPS_API}/v1/groups/{group_id}/roles")
        return (body or {}).get("roles") or []

    def set_rank(self, group_id: int, user_id: int, rank: int) -> dict[str, Any]:
        """Move user_id into the group role whose rank equals `rank`.

        Returns the role the user now holds. The rank value is absolute; there
        is no relative promote/demote here.
        """
        role = next((r for r in self.get_roles(group_id) if r.get("rank") == rank), None)
        if role is None:
            raise RobloxAPIError(f"Invalid rank provided: {rank}")
        self._request(
            "PATCH",
            f"{GROUPS_API}/v1/groups/{group_id}/users/{user_id}",
            json={"roleId": role["id"]},
        )
        return role
