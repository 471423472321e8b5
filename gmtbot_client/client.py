"""
Thin HTTP client for the chat API, used by scripts and integration tooling.

Sessions and groups are mirrored in EntityCache instances; every write goes
to the server first and then invalidates and re-fetches what it touched.
"""
import logging
from typing import Any, Optional

import requests

from gmtbot_client.cache import EntityCache

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 90


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    def __init__(self, base_url: str, token: Optional[str] = None, timeout_s: float = DEFAULT_TIMEOUT_S,
                 http=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_s = timeout_s
        self.http = http or requests.Session()
        self.user = None
        self.session_cache = EntityCache(self._fetch_session, self._fetch_sessions)
        self.group_cache = EntityCache(self._fetch_group, self._fetch_groups)

    # ---------------- transport ----------------

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self.http.request(
            method, f"{self.base_url}{path}", json=json, headers=headers, timeout=self.timeout_s
        )
        try:
            body = resp.json()
        except ValueError:
            body = None
        if resp.status_code >= 400:
            message = body.get("error") if isinstance(body, dict) else resp.text
            logger.info("%s %s -> %s %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message or "")
        return body

    # ---------------- auth ----------------

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login/", {"email": email, "password": password})
        self.token = data["token"]
        self.user = data["user"]
        self.session_cache.invalidate()
        self.group_cache.invalidate()
        return data

    # ---------------- sessions ----------------

    def _fetch_sessions(self):
        return self._request("GET", "/api/sessions/")

    def _fetch_session(self, session_id):
        return self._request("GET", f"/api/sessions/{session_id}/")

    def sessions(self) -> list:
        return self.session_cache.all()

    def session(self, session_id) -> dict:
        return self.session_cache.get(session_id)

    def create_session(self, name: Optional[str] = None) -> dict:
        created = self._request("POST", "/api/sessions/", {"name": name} if name else {})
        self.session_cache.after_mutation(created["id"])
        return self.session_cache.get(created["id"])

    def send_turn(self, content: str, session_id=None) -> dict:
        """Returns the server response; when nothing was sent, a new session was created."""
        payload = {"content": content}
        if session_id is not None:
            payload["session_id"] = session_id
        result = self._request("POST", "/api/chat/turn/", payload)
        sid = result["session"]["id"]
        self.session_cache.after_mutation(sid)
        self.session_cache.get(sid)
        return result

    def rename_session(self, session_id, name: str) -> dict:
        self._request("PUT", f"/api/sessions/{session_id}/", {"name": name})
        return self.session_cache.refetch(session_id)

    def delete_session(self, session_id) -> None:
        self._request("DELETE", f"/api/sessions/{session_id}/")
        self.session_cache.after_mutation(session_id)

    # ---------------- groups ----------------

    def _fetch_groups(self):
        return self._request("GET", "/api/groups/")

    def _fetch_group(self, group_id):
        for group in self._fetch_groups():
            if group["id"] == group_id:
                return group
        raise ApiError(404, "Group not found")

    def groups(self) -> list:
        return self.group_cache.all()

    def group_sessions(self, group_id) -> list:
        return self._request("GET", f"/api/groups/{group_id}/sessions/")

    def send_group_turn(self, group_id, session_id, content: str, ask_bot: bool = False) -> dict:
        result = self._request(
            "POST",
            f"/api/groups/{group_id}/sessions/{session_id}/turn/",
            {"content": content, "ask_bot": ask_bot},
        )
        # the roster carries last_session
        self.group_cache.after_mutation(group_id)
        return result
