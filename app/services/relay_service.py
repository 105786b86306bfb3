"""
Relay service for the Zalo token exchange and profile fetch.

The browser never sees the app secret: both operations run here and
attach it (or an HMAC derived from it) before calling Zalo.
"""
import json
from typing import Optional, Dict, Any

import httpx

from ..config.settings import Settings, settings as default_settings
from ..models.auth import TokenExchangeRequest
from ..exceptions.auth_exceptions import (
    ConfigurationException, MissingInputException, MissingTokenException,
    ProviderException, UpstreamResponseException, TokenExchangeException,
    ProfileFetchException,
)
from ..middleware.logging_config import LoggerMixin
from .zalo_client import ZaloClient

NON_JSON_EXCERPT_LENGTH = 200


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer`` header value."""
    if not authorization:
        return None
    if not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


class RelayService(LoggerMixin):
    """Service for the two server-side relay operations."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        zalo_client: Optional[ZaloClient] = None
    ):
        self.settings = settings or default_settings
        self.zalo_client = zalo_client or ZaloClient(self.settings)

    async def exchange_token(self, request: TokenExchangeRequest) -> Dict[str, Any]:
        """Exchange an authorization code and verifier for Zalo tokens."""
        if not request.is_complete:
            self.logger.warning("Token exchange requested without code or verifier")
            raise MissingInputException()

        if not self.settings.is_configured:
            self.logger.error("Zalo app id or secret key is not configured")
            raise ConfigurationException()

        try:
            token_data = await self.zalo_client.exchange_code(
                request.code, request.code_verifier
            )
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Token exchange failed: {type(e).__name__}")
            raise TokenExchangeException() from e

        if not isinstance(token_data, dict):
            self.logger.error("Token endpoint returned an unexpected JSON shape")
            raise TokenExchangeException()

        if token_data.get("error"):
            self.logger.warning(f"Token exchange error from Zalo: {token_data.get('error')}")
            message = token_data.get("error_description") or token_data.get("error")
            raise ProviderException(str(message))

        self.logger.info("Token exchange succeeded")
        return token_data

    async def fetch_profile(self, authorization: Optional[str]) -> Any:
        """Fetch the Zalo profile for the bearer token in ``authorization``."""
        access_token = extract_bearer_token(authorization)
        if not access_token:
            raise MissingTokenException("access token")

        if not self.settings.zalo_secret_key:
            self.logger.error("Zalo secret key is not configured")
            raise ConfigurationException()

        try:
            body = await self.zalo_client.fetch_profile(access_token)
        except httpx.HTTPError as e:
            self.logger.error(f"Profile fetch failed: {type(e).__name__}")
            raise ProfileFetchException() from e

        try:
            profile = json.loads(body)
        except ValueError:
            self.logger.error("Zalo profile endpoint returned non-JSON")
            raise UpstreamResponseException(
                f"Zalo returned non-JSON: {body[:NON_JSON_EXCERPT_LENGTH]}"
            )

        if isinstance(profile, dict) and profile.get("error"):
            message = profile.get("message") or json.dumps(profile)
            self.logger.warning(f"Profile error from Zalo: {profile['error']}")
            raise ProviderException(f"Zalo error {profile['error']}: {message}")

        return profile
