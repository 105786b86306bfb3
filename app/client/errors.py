"""
Errors raised inside the client login flow.
"""


class LoginError(Exception):
    """A login attempt failed; ``message`` is shown to the user as-is."""

    def __init__(self, message: str = "Failed to authenticate"):
        self.message = message
        super().__init__(self.message)


class StateMismatchError(LoginError):
    """Returned state does not match the stored one (possible CSRF)."""

    def __init__(self, message: str = "Invalid state parameter, the login request may have been forged"):
        super().__init__(message)
