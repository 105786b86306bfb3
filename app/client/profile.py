"""
Profile view over the stored identity record.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..config.settings import Settings, settings as default_settings
from ..middleware.logging_config import LoggerMixin
from .context import BrowserContext
from .session import AuthSession


@dataclass
class IdentitySummary:
    """What the profile page shows for a stored Zalo identity."""
    name: str
    subtitle: str
    avatar_url: Optional[str] = None
    provider: str = "Zalo"
    raw: Dict[str, Any] = field(default_factory=dict)


def summarize_identity(profile: Dict[str, Any]) -> IdentitySummary:
    picture = profile.get("picture")
    avatar_url = None
    if isinstance(picture, dict) and isinstance(picture.get("data"), dict):
        avatar_url = picture["data"].get("url")
    return IdentitySummary(
        name=profile.get("name") or "Unknown",
        subtitle=f"Zalo ID: {profile.get('id')}",
        avatar_url=avatar_url,
        raw=profile,
    )


class ProfileView(LoggerMixin):
    """Reads the identity record and handles logout."""

    def __init__(self, context: BrowserContext, settings: Optional[Settings] = None):
        self.context = context
        self.settings = settings or default_settings
        self.session = AuthSession(context.storage)

    def load(self) -> Optional[IdentitySummary]:
        """Summary of the stored identity, or ``None`` after sending the user home."""
        profile = self.session.load_identity()
        if not isinstance(profile, dict):
            self.context.navigate(self.settings.home_path)
            return None
        return summarize_identity(profile)

    def logout(self) -> None:
        self.session.clear_identity()
        self.logger.info("User logged out")
        self.context.navigate(self.settings.home_path)
