"""HTTP client for the tracker API with an explicit session object.

The session (token + account id) is created by :meth:`TrackerClient.signup`
or :meth:`TrackerClient.login`, attached as a bearer token to every module
call, and dropped on :meth:`TrackerClient.sign_out` or as soon as the server
answers 401. Nothing is refreshed or retried automatically.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from tracker.schemas.progress import ModuleKey

logger = logging.getLogger("tracker.client")

DEFAULT_BASE_URL = "http://localhost:5000"


class ApiError(Exception):
    """Error response from the tracker API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(ApiError):
    """No session, or the server rejected the session's token. Log in again."""


@dataclass(frozen=True)
class Session:
    token: str
    user_id: int

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("error") or response.reason_phrase)
    except ValueError:
        return response.text or response.reason_phrase


class TrackerClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)
        self.session: Session | None = None

    def __enter__(self) -> TrackerClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def authenticated(self) -> bool:
        return self.session is not None

    # ── Identity ─────────────────────────────────────────────

    def signup(self, username: str, email: str, password: str) -> Session:
        data = self._request("POST", "/signup", json={"username": username, "email": email, "password": password})
        return self._start_session(data["token"])

    def login(self, username_or_email: str, password: str) -> Session:
        data = self._request("POST", "/login", json={"username": username_or_email, "password": password})
        return self._start_session(data["token"])

    def sign_out(self) -> None:
        self.session = None

    def profile(self) -> dict[str, Any]:
        return self._request("GET", "/profile", authenticated=True)

    def _start_session(self, token: str) -> Session:
        response = self._http.get("/profile", headers={"Authorization": f"Bearer {token}"})
        if response.status_code == 401:
            raise AuthenticationRequired(_error_message(response), status_code=401)
        if response.is_error:
            raise ApiError(_error_message(response), status_code=response.status_code)
        self.session = Session(token=token, user_id=int(response.json()["id"]))
        logger.debug("Session started for user %s", self.session.user_id)
        return self.session

    # ── Module progress ──────────────────────────────────────

    def get_progress(self, module: ModuleKey | str) -> dict[str, Any]:
        module = ModuleKey(module)
        return self._request("GET", f"/{module.value}/{self._user_id()}", authenticated=True)

    def save_progress(self, module: ModuleKey | str, document: dict[str, Any]) -> dict[str, Any]:
        """Send the full document; returns what the server stored."""
        module = ModuleKey(module)
        data = self._request(
            "PUT",
            f"/{module.value}/update/{self._user_id()}",
            json=document,
            authenticated=True,
        )
        return data[module.value]

    def _user_id(self) -> int:
        if self.session is None:
            raise AuthenticationRequired("Not signed in")
        return self.session.user_id

    def _request(self, method: str, path: str, *, authenticated: bool = False, **kwargs: Any) -> Any:
        headers = {}
        if authenticated:
            if self.session is None:
                raise AuthenticationRequired("Not signed in")
            headers.update(self.session.headers)

        response = self._http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401 and authenticated:
            self.session = None
            raise AuthenticationRequired(_error_message(response), status_code=401)
        if response.is_error:
            raise ApiError(_error_message(response), status_code=response.status_code)
        return response.json()
