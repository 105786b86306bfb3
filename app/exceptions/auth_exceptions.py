"""
Custom exceptions for the Zalo relay endpoints.
"""
from typing import Optional, Dict, Any


class AuthException(Exception):
    """Base exception for authentication errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationException(AuthException):
    """Raised when required server configuration is missing."""

    def __init__(self, message: str = "Server configuration error"):
        super().__init__(message, status_code=500)


class MissingInputException(AuthException):
    """Raised when a relay request lacks a required field."""

    def __init__(self, message: str = "Missing code or codeVerifier"):
        super().__init__(message, status_code=400)


class MissingTokenException(AuthException):
    """Raised when required token is missing."""

    def __init__(self, token_type: str = "access token"):
        message = f"Missing {token_type}"
        super().__init__(message, status_code=401)


class ProviderException(AuthException):
    """Raised when Zalo reports an application level error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class UpstreamResponseException(AuthException):
    """Raised when Zalo answers with a body that is not JSON."""

    def __init__(self, message: str = "Zalo returned non-JSON"):
        super().__init__(message, status_code=502)


class EgressExhaustedException(AuthException):
    """Raised when every configured egress proxy failed."""

    def __init__(
        self,
        message: str = "All upstream egress paths failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code=500, details=details)


class TokenExchangeException(AuthException):
    """Raised when token exchange with Zalo fails."""

    def __init__(self, message: str = "Token exchange failed"):
        super().__init__(message, status_code=500)


class ProfileFetchException(AuthException):
    """Raised when the profile call fails for an unexpected reason."""

    def __init__(self, message: str = "Profile fetch failed"):
        super().__init__(message, status_code=500)
