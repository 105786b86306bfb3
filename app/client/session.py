"""
Auth session: the single owner of the PKCE verifier, state and identity.
"""
import json
import secrets
from typing import Any, Dict, Optional, Tuple

from ..middleware.logging_config import LoggerMixin
from ..models.auth import PKCEPair
from .errors import StateMismatchError
from .storage import StorageArea


class AuthSession(LoggerMixin):
    """Load/save/clear operations over one context's storage."""

    IDENTITY_KEY = "zalo_user"
    VERIFIER_KEY = "zalo_code_verifier"
    STATE_KEY = "zalo_state"

    # Identity records other login providers may have left behind
    RESIDUAL_KEYS: Tuple[str, ...] = ("google_user",)

    def __init__(self, storage: StorageArea):
        self.storage = storage

    def begin_attempt(self, pair: PKCEPair) -> None:
        """Persist a new verifier and state, replacing any previous attempt."""
        self.storage.set_item(self.VERIFIER_KEY, pair.verifier)
        self.storage.set_item(self.STATE_KEY, pair.state)
        self.logger.debug(f"Started login attempt with state {pair.state[:8]}...")

    def load_verifier(self) -> Optional[str]:
        return self.storage.get_item(self.VERIFIER_KEY)

    def load_state(self) -> Optional[str]:
        return self.storage.get_item(self.STATE_KEY)

    def load_identity(self) -> Optional[Dict[str, Any]]:
        raw = self.storage.get_item(self.IDENTITY_KEY)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning("Stored identity record is not valid JSON")
            return None

    def has_identity(self) -> bool:
        return self.storage.get_item(self.IDENTITY_KEY) is not None

    def validate_state(self, returned_state: Optional[str]) -> None:
        """Raise ``StateMismatchError`` unless both states are present and equal."""
        stored_state = self.load_state()
        if not stored_state or not returned_state:
            raise StateMismatchError()
        if not secrets.compare_digest(stored_state.encode("utf-8"), returned_state.encode("utf-8")):
            raise StateMismatchError()

    def complete(self, profile: Dict[str, Any]) -> None:
        """Store the identity record once PKCE material is gone."""
        self.clear_attempt()
        self.storage.set_item(self.IDENTITY_KEY, json.dumps(profile))
        self.logger.info("Stored identity record")

    def clear_attempt(self) -> None:
        self.storage.remove_item(self.VERIFIER_KEY)
        self.storage.remove_item(self.STATE_KEY)

    def clear_identity(self) -> None:
        self.storage.remove_item(self.IDENTITY_KEY)
        for key in self.RESIDUAL_KEYS:
            self.storage.remove_item(key)

    def clear(self) -> None:
        self.clear_identity()
        self.clear_attempt()
