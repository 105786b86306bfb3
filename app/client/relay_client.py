"""
HTTP client for the relay endpoints, used by the login flow.
"""
from typing import Any, Dict, Optional

import httpx

from ..middleware.logging_config import LoggerMixin
from .errors import LoginError

TOKEN_PATH = "/api/zalo/token"
PROFILE_PATH = "/api/zalo/me"


class RelayClient(LoggerMixin):
    """Calls the token exchange and profile relays.

    Any failure, whether reported by the relay or a transport error,
    becomes a ``LoginError`` whose message is fit to display.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 15.0
    ):
        self.base_url = base_url
        self.transport = transport
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self.transport,
            timeout=self.timeout,
        )

    async def exchange_code(self, code: str, code_verifier: str) -> Dict[str, Any]:
        response = await self._send(
            "POST", TOKEN_PATH, json={"code": code, "codeVerifier": code_verifier}
        )
        token_data = self._parse(response, "Token exchange failed")
        if not token_data.get("access_token"):
            raise LoginError("Token exchange failed")
        return token_data

    async def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        response = await self._send(
            "GET", PROFILE_PATH, headers={"Authorization": f"Bearer {access_token}"}
        )
        return self._parse(response, "Failed to fetch profile")

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"Relay {path} unreachable: {type(e).__name__}")
            raise LoginError("Could not reach the authentication server") from e

    def _parse(self, response: httpx.Response, fallback: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise LoginError(fallback)

        if not isinstance(data, dict):
            raise LoginError(fallback)

        if not response.is_success or data.get("error"):
            raise LoginError(str(data.get("error") or fallback))

        return data
