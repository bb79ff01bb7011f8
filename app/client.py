"""
Async HTTP client for the News Feed API.

Keeps the current access/refresh token pair, retries an authenticated request
once after a 401 by refreshing, and coalesces concurrent refreshes into a
single in-flight call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Client-facing messages by HTTP status, used when the server sent none.
STATUS_MESSAGES: dict[int, str] = {
    400: "The request was invalid.",
    401: "Your session has expired. Please log in again.",
    403: "You do not have permission to do that.",
    404: "The requested resource was not found.",
    409: "That conflicts with existing data.",
    422: "The request was invalid.",
    429: "Too many requests. Please try again later.",
    500: "Something went wrong on the server.",
    502: "The server is temporarily unavailable.",
    503: "The server is temporarily unavailable.",
}

KIND_BY_STATUS: dict[int, str] = {
    400: "validation",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "validation",
    429: "rate_limited",
}


class ApiError(Exception):
    """Raised for any non-2xx response or transport failure."""

    def __init__(self, kind: str, message: str, status_code: int | None = None) -> None:
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        status = response.status_code
        server_message = None
        try:
            body = response.json()
            if isinstance(body, dict) and isinstance(body.get("error"), str):
                server_message = body["error"]
        except ValueError:
            pass
        kind = KIND_BY_STATUS.get(status, "server" if status >= 500 else "unknown")
        message = server_message or STATUS_MESSAGES.get(status, f"Request failed with status {status}")
        return cls(kind, message, status)


class FeedClient:
    """
    Thin async wrapper over the REST API.

    Use as an async context manager, or pass an existing httpx.AsyncClient
    (for example one built on httpx.MockTransport in tests).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.access_token: str | None = None
        self.refresh_token: str | None = None
        self._refresh_future: asyncio.Future[str] | None = None

    async def __aenter__(self) -> FeedClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError("network", f"Could not reach the server: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if response.is_success:
            return response.json()
        raise ApiError.from_response(response)

    def _auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _authed(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send with the access token; on 401 refresh once and retry."""
        sent_with = self.access_token
        response = await self._send(method, path, headers=self._auth_headers(), **kwargs)
        if response.status_code == 401 and self.refresh_token:
            # Another caller may have refreshed while this request was in flight.
            if self.access_token == sent_with:
                await self.refresh()
            response = await self._send(method, path, headers=self._auth_headers(), **kwargs)
        return self._json(response)

    async def register(self, username: str, password: str) -> dict[str, Any]:
        response = await self._send("POST", "/register", json={"username": username, "password": password})
        return self._json(response)

    async def login(self, username: str, password: str) -> dict[str, Any]:
        response = await self._send("POST", "/login", json={"username": username, "password": password})
        data = self._json(response)
        self.access_token = data["token"]
        self.refresh_token = data["refreshToken"]
        return data

    async def refresh(self) -> str:
        """
        Obtain a new access token, sharing one request among concurrent callers.

        Every caller that arrives while a refresh is in flight awaits the same
        future and gets the same token (or the same ApiError).
        """
        if self._refresh_future is not None:
            return await asyncio.shield(self._refresh_future)

        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()
        self._refresh_future = future
        try:
            token = await self._do_refresh()
        except asyncio.CancelledError:
            # Waiters were not cancelled themselves; give them an ApiError.
            future.set_exception(ApiError("network", "Token refresh was cancelled"))
            future.exception()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unawaited failure is not reported by asyncio.
            future.exception()
            raise
        else:
            future.set_result(token)
            return token
        finally:
            self._refresh_future = None

    async def _do_refresh(self) -> str:
        if not self.refresh_token:
            raise ApiError("unauthorized", STATUS_MESSAGES[401], 401)
        response = await self._send("POST", "/refresh-token", json={"refreshToken": self.refresh_token})
        if not response.is_success:
            self.access_token = None
            self.refresh_token = None
            raise ApiError.from_response(response)
        data = response.json()
        self.access_token = data["token"]
        # Servers that do not rotate in the response keep the old token.
        self.refresh_token = data.get("refreshToken", self.refresh_token)
        logger.debug("Access token refreshed")
        return self.access_token

    async def logout(self) -> dict[str, Any]:
        try:
            return await self._authed("POST", "/logout")
        finally:
            self.access_token = None
            self.refresh_token = None

    async def create_post(self, content: str) -> dict[str, Any]:
        return await self._authed("POST", "/posts", json={"content": content})

    async def follow(self, user_id: int) -> dict[str, Any]:
        return await self._authed("POST", f"/follow/{user_id}")

    async def unfollow(self, user_id: int) -> dict[str, Any]:
        return await self._authed("DELETE", f"/follow/{user_id}")

    async def feed(self, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return await self._authed("GET", "/feed", params={"page": page, "limit": limit})

    async def users(self) -> dict[str, Any]:
        return await self._authed("GET", "/users")

    async def following(self) -> dict[str, Any]:
        return await self._authed("GET", "/users/following")
