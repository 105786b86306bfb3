"""
Configuration settings for the Zalo SSO relay service.
Uses Pydantic for validation and type safety.
"""
from typing import Annotated, Optional, List
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # Zalo application credentials. Both are optional so that a missing
    # value is reported per request instead of failing at import.
    zalo_app_id: Optional[str] = None
    zalo_secret_key: Optional[str] = None

    # Redirect URI registered with Zalo (public)
    redirect_uri: str = "http://localhost:3000"

    # Provider endpoints
    zalo_auth_url: str = "https://oauth.zaloapp.com/v4/permission"
    zalo_token_url: str = "https://oauth.zaloapp.com/v4/access_token"
    zalo_profile_url: str = "https://graph.zalo.me/v2.0/me"
    zalo_profile_fields: str = "id,name,birthday,gender,picture"

    # Ordered list of outbound proxies for the profile call
    zalo_egress_proxies: Annotated[List[str], NoDecode] = []
    proxy_timeout_seconds: float = 10.0

    # External API timeouts
    zalo_timeout_seconds: float = 10.0

    # CORS Configuration
    cors_origins: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Client flow
    profile_path: str = "/profile"
    home_path: str = "/"
    login_poll_interval_seconds: float = 0.5

    # Application
    app_name: str = "Zalo SSO Relay"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator('cors_origins', 'zalo_egress_proxies', mode='before')
    @classmethod
    def split_comma_separated(cls, v):
        """Parse a list from a comma separated string or a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @property
    def is_configured(self) -> bool:
        """Whether both application credentials are present."""
        return bool(self.zalo_app_id and self.zalo_secret_key)


# Global settings instance
settings = Settings()
