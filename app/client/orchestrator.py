"""
Login flow state machine for one browsing context.

The same class runs in both contexts. In the main tab it prepares the
authorization URL, opens the popup and waits for the identity record to
appear in shared storage. In the popup, after Zalo redirects back with
``code`` and ``state``, it validates the state, calls the relays, stores
the identity and closes itself.
"""
import asyncio
from enum import Enum
from typing import Optional
from urllib.parse import parse_qsl, quote, urlparse

from ..config.settings import Settings, settings as default_settings
from ..middleware.logging_config import LoggerMixin
from ..utils.crypto import make_pkce_pair
from .context import BrowserContext
from .errors import LoginError, StateMismatchError
from .relay_client import RelayClient
from .session import AuthSession
from .storage import StorageEvent

POPUP_NAME = "zalo_login"

EXPIRED_CODE_MESSAGE = "Authorization code is missing or has expired. Please try again."
FALLBACK_NOT_IMPLEMENTED = "Email/password sign-in is not implemented yet."


class AuthStatus(str, Enum):
    IDLE = "idle"
    AWAITING_CALLBACK = "awaiting-callback"
    LOADING = "loading"
    ERROR = "error"
    DONE = "done"


def build_authorization_url(settings: Settings, challenge: str, state: str) -> str:
    """Zalo permission URL for one login attempt."""
    return (
        f"{settings.zalo_auth_url}"
        f"?app_id={settings.zalo_app_id or ''}"
        f"&redirect_uri={quote(settings.redirect_uri, safe='')}"
        f"&code_challenge={challenge}"
        f"&state={state}"
    )


class AuthOrchestrator(LoggerMixin):
    """Drives one context through idle, awaiting-callback, loading and error."""

    def __init__(
        self,
        context: BrowserContext,
        relay_client: RelayClient,
        settings: Optional[Settings] = None,
        poll_interval: Optional[float] = None
    ):
        self.context = context
        self.relay_client = relay_client
        self.settings = settings or default_settings
        self.poll_interval = (
            poll_interval if poll_interval is not None
            else self.settings.login_poll_interval_seconds
        )
        self.session = AuthSession(context.storage)

        self.status = AuthStatus.IDLE
        self.error: Optional[str] = None
        self.login_url: Optional[str] = None
        self.is_generating = True
        self.show_fallback_form = False
        self.notice: Optional[str] = None
        self.popup: Optional[BrowserContext] = None

        self._poll_task: Optional[asyncio.Task] = None
        self._listening = False
        self._redirected = False

    @property
    def poll_task(self) -> Optional[asyncio.Task]:
        return self._poll_task

    async def mount(self) -> None:
        """Decide what this context does based on its URL and storage."""
        params = self.context.query_params
        code = params.get("code")
        returned_state = params.get("state")
        provider_error = params.get("error")
        verifier = self.session.load_verifier()

        # Zalo redirected this (popup) context back with a code
        if code and verifier:
            try:
                self.session.validate_state(returned_state)
            except StateMismatchError as e:
                self.logger.warning("State mismatch on callback, aborting login attempt")
                self.session.clear_attempt()
                self._fail(e.message)
                return
            await self._complete_login(code, verifier)
            return

        if provider_error:
            self.session.clear_attempt()
            self._fail(params.get("error_description") or provider_error)
            return

        if code:
            self.logger.warning("Callback carried a code but no verifier is stored")
            self._fail(EXPIRED_CODE_MESSAGE)
            return

        if self.session.has_identity():
            self._redirect_to_profile()
            return

        self.context.storage.add_listener(self._on_storage)
        self._listening = True
        self.session.clear_attempt()
        self.prepare_login()

    def prepare_login(self) -> str:
        """Generate a fresh verifier, challenge and state, and the login URL."""
        pair = make_pkce_pair()
        self.session.begin_attempt(pair)
        self.login_url = build_authorization_url(self.settings, pair.challenge, pair.state)
        self.status = AuthStatus.IDLE
        self.is_generating = False
        return self.login_url

    def open_login(self) -> Optional[BrowserContext]:
        """Open the login popup and start watching for it to close.

        Must be called from a running event loop.
        """
        if not self.login_url:
            self.logger.warning("Login requested before the URL was ready")
            return None

        if not self._login_url_is_current():
            self.prepare_login()

        self._cancel_poll()
        self.popup = self.context.open(self.login_url, POPUP_NAME)
        self.status = AuthStatus.AWAITING_CALLBACK
        self.show_fallback_form = False
        self._poll_task = asyncio.get_running_loop().create_task(self._watch_popup(self.popup))
        return self.popup

    async def _watch_popup(self, popup: BrowserContext) -> None:
        while not popup.closed:
            await asyncio.sleep(self.poll_interval)

        if self.session.has_identity():
            # Covers a missed storage event
            self._redirect_to_profile()
            return

        self.logger.info("Login popup closed before completing")
        self.show_fallback_form = True
        if self.status == AuthStatus.AWAITING_CALLBACK:
            self.status = AuthStatus.IDLE

        # A failed callback in the popup consumes the stored attempt
        if not self._login_url_is_current():
            self.logger.info("Stored login attempt is gone, preparing a new one")
            self.prepare_login()

    def _login_url_is_current(self) -> bool:
        if not self.login_url or not self.session.load_verifier():
            return False
        state = dict(parse_qsl(urlparse(self.login_url).query)).get("state")
        return bool(state) and state == self.session.load_state()

    async def _complete_login(self, code: str, verifier: str) -> None:
        self.status = AuthStatus.LOADING
        try:
            token_data = await self.relay_client.exchange_code(code, verifier)
            profile = await self.relay_client.fetch_profile(token_data["access_token"])
        except LoginError as e:
            self.logger.error(f"Zalo auth error: {e.message}")
            self.session.clear_attempt()
            self._fail(e.message)
            return

        self.session.complete(profile)
        self.status = AuthStatus.DONE
        self.context.close()

    def _on_storage(self, event: StorageEvent) -> None:
        if event.key == AuthSession.IDENTITY_KEY and event.new_value:
            self._redirect_to_profile()

    def _redirect_to_profile(self) -> None:
        if self._redirected:
            return
        self._redirected = True
        self.status = AuthStatus.DONE
        self._stop_listening()
        self.context.navigate(self.settings.profile_path)

    def _fail(self, message: str) -> None:
        self.error = message
        self.status = AuthStatus.ERROR
        self.is_generating = False

    def retry(self) -> str:
        """Discard the failed attempt and any stored identity, then prepare a new login URL."""
        self._cancel_poll()
        self.session.clear()
        self.error = None
        self.notice = None
        self.show_fallback_form = False
        self.is_generating = True
        return self.prepare_login()

    def submit_fallback_credentials(self, email: str, password: str) -> str:
        """Password sign-in placeholder; always answers with a notice."""
        self.logger.info("Fallback credential form submitted")
        self.notice = FALLBACK_NOT_IMPLEMENTED
        return self.notice

    def unmount(self) -> None:
        self._stop_listening()
        self._cancel_poll()

    def _stop_listening(self) -> None:
        if self._listening:
            self.context.storage.remove_listener(self._on_storage)
            self._listening = False

    def _cancel_poll(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
