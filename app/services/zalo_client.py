"""
Zalo API client for token and profile operations.
"""
import asyncio
from typing import Optional, Dict, Any, List
import httpx

from ..config.settings import Settings, settings as default_settings
from ..models.auth import ZaloTokenRequest
from ..exceptions.auth_exceptions import EgressExhaustedException
from ..middleware.logging_config import LoggerMixin
from ..utils.crypto import compute_appsecret_proof


def proxy_label(proxy: str) -> str:
    """Proxy URL without credentials, safe to log or return."""
    url = httpx.URL(proxy)
    if url.port:
        return f"{url.scheme}://{url.host}:{url.port}"
    return f"{url.scheme}://{url.host}"


class ZaloClient(LoggerMixin):
    """Client for interacting with the Zalo OAuth and Graph APIs.

    Every call opens a short-lived ``httpx.AsyncClient``. Passing a
    ``transport`` replaces the network (and any proxy) entirely, which is
    what the tests rely on.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or default_settings
        self.transport = transport
        self.timeout = self.settings.zalo_timeout_seconds

    def _client(self, proxy: Optional[str] = None, timeout: Optional[float] = None) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"timeout": timeout or self.timeout}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        elif proxy:
            kwargs["proxy"] = proxy
        return httpx.AsyncClient(**kwargs)

    async def exchange_code(self, code: str, code_verifier: str) -> Any:
        """Exchange an authorization code for tokens.

        Returns the decoded JSON body whatever the status code, since Zalo
        reports failures inside the body. Raises ``httpx.HTTPError`` on
        transport failure and ``ValueError`` when the body is not JSON.
        """
        form = ZaloTokenRequest(
            app_id=self.settings.zalo_app_id,
            code=code,
            code_verifier=code_verifier,
        )
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "secret_key": self.settings.zalo_secret_key,
        }

        self.logger.info("Exchanging authorization code with Zalo")
        async with self._client() as client:
            response = await client.post(
                self.settings.zalo_token_url,
                data=form.model_dump(),
                headers=headers,
            )

        self.logger.debug(f"Zalo token endpoint answered {response.status_code}")
        return response.json()

    async def fetch_profile(self, access_token: str) -> str:
        """Fetch the raw profile body for an access token.

        The appsecret_proof is derived from the token passed in, on every
        call. Returns the response text undecoded so the caller can report
        a non-JSON body.
        """
        headers = {
            "access_token": access_token,
            "appsecret_proof": compute_appsecret_proof(
                access_token, self.settings.zalo_secret_key
            ),
        }
        params = {"fields": self.settings.zalo_profile_fields}

        if not self.settings.zalo_egress_proxies:
            async with self._client() as client:
                response = await client.get(
                    self.settings.zalo_profile_url, params=params, headers=headers
                )
            return response.text

        response = await self._get_via_proxies(headers, params)
        return response.text

    async def _get_via_proxies(self, headers: Dict[str, str], params: Dict[str, str]) -> httpx.Response:
        """Try each egress proxy in order until one answers in time."""
        timeout = self.settings.proxy_timeout_seconds
        attempts: List[Dict[str, str]] = []

        for index, proxy in enumerate(self.settings.zalo_egress_proxies):
            label = f"proxy #{index + 1}"
            try:
                label = proxy_label(proxy)
                async with self._client(proxy=proxy, timeout=timeout) as client:
                    response = await asyncio.wait_for(
                        client.get(self.settings.zalo_profile_url, params=params, headers=headers),
                        timeout=timeout,
                    )
                self.logger.info(f"Profile fetched through egress proxy {label}")
                return response
            except (httpx.HTTPError, httpx.InvalidURL, ValueError, asyncio.TimeoutError) as e:
                self.logger.warning(f"Egress proxy {label} failed: {type(e).__name__}")
                attempts.append({"proxy": label, "error": type(e).__name__})

        self.logger.error(f"All {len(attempts)} egress proxies failed")
        raise EgressExhaustedException(details={"attempts": attempts})
