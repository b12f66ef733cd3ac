# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional, TypeAlias

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# PostgREST filter: (column, operator, value), e.g. ("user_id", "eq", uid)
Filter: TypeAlias = tuple[str, str, str]


class RemoteError(Exception):
    """Raised for any failed call to the remote service."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteNotConfiguredError(Exception):
    pass


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class RemoteClient:
    """
    Client for a Supabase-compatible service: table rows over the REST
    endpoint (/rest/v1) and accounts over the auth endpoint (/auth/v1).

    Row calls are authorized with the signed-in user's access token when
    one is set, otherwise with the anonymous key. Access to rows of other
    users is refused by the service's row-level policies.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self._anon_key = anon_key
        self._access_token: Optional[str] = None
        self._http = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)

    def close(self) -> None:
        self._http.close()

    def set_access_token(self, access_token: Optional[str]) -> None:
        self._access_token = access_token

    def __headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._access_token or self._anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def __request(
        self,
        method: str,
        path: str,
        params: Optional[list[tuple[str, str]]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            response = self._http.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=self.__headers(headers),
            )
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise RemoteError(_error_message(response), status=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"{method} {path}: invalid JSON response") from e

    # Table rows

    def select(
        self,
        table: str,
        filters: Optional[list[Filter]] = None,
        order: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        params = [("select", "*")]
        params += [(column, f"{op}.{value}") for column, op, value in filters or []]
        if order is not None:
            params.append(("order", order))
        rows = self.__request("GET", f"/rest/v1/{table}", params=params)
        return list(rows or [])

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        inserted = self.__request(
            "POST",
            f"/rest/v1/{table}",
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        return list(inserted or [])

    def update(
        self, table: str, values: dict[str, Any], filters: list[Filter]
    ) -> list[dict[str, Any]]:
        params = [(column, f"{op}.{value}") for column, op, value in filters]
        updated = self.__request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return list(updated or [])

    def delete(self, table: str, filters: list[Filter]) -> list[dict[str, Any]]:
        params = [(column, f"{op}.{value}") for column, op, value in filters]
        deleted = self.__request(
            "DELETE",
            f"/rest/v1/{table}",
            params=params,
            headers={"Prefer": "return=representation"},
        )
        return list(deleted or [])

    # Auth

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        return self.__request(
            "POST", "/auth/v1/signup", json={"email": email, "password": password}
        )

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        return self.__request(
            "POST",
            "/auth/v1/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
        )

    def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = [("redirect_to", redirect_to)] if redirect_to else None
        self.__request(
            "POST",
            "/auth/v1/otp",
            params=params,
            json={"email": email, "create_user": True},
        )

    def verify_otp(self, email: str, token: str) -> dict[str, Any]:
        return self.__request(
            "POST",
            "/auth/v1/verify",
            json={"type": "email", "email": email, "token": token},
        )

    def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        return self.__request(
            "POST",
            "/auth/v1/token",
            params=[("grant_type", "refresh_token")],
            json={"refresh_token": refresh_token},
        )

    def get_user(self) -> dict[str, Any]:
        return self.__request("GET", "/auth/v1/user")

    def sign_out(self) -> None:
        self.__request("POST", "/auth/v1/logout")
