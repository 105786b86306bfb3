"""Client side of the Zalo login flow.

Models the two browsing contexts involved in a popup login (the main tab
and the popup), the storage they share, and the state machine that runs
in each of them. Re-exports the pieces callers normally need.
"""

from .context import BrowserContext
from .errors import LoginError, StateMismatchError
from .orchestrator import AuthOrchestrator, AuthStatus, build_authorization_url
from .profile import IdentitySummary, ProfileView
from .relay_client import RelayClient
from .session import AuthSession
from .storage import SharedStorage, StorageEvent

__all__ = [
    "AuthOrchestrator",
    "AuthSession",
    "AuthStatus",
    "BrowserContext",
    "IdentitySummary",
    "LoginError",
    "ProfileView",
    "RelayClient",
    "SharedStorage",
    "StateMismatchError",
    "StorageEvent",
    "build_authorization_url",
]
