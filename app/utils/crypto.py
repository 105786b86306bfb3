"""Cryptographic utilities for PKCE and the Zalo appsecret_proof.

Verifier and state are drawn from a secure random source; the proof is an
HMAC computed fresh for every profile request.
"""
import base64
import hashlib
import hmac
import secrets
import string

from ..models.auth import PKCEPair

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

VERIFIER_LENGTH = 43
STATE_LENGTH = 16


def b64url(data: bytes) -> str:
    """Encode bytes as base64url (RFC 4648 Section 5)."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def generate_random_string(length: int) -> str:
    """Map `length` random bytes onto the 62 symbol alphabet."""
    return "".join(ALPHABET[b % len(ALPHABET)] for b in secrets.token_bytes(length))


def generate_verifier(length: int = VERIFIER_LENGTH) -> str:
    """Generate a PKCE code verifier."""
    return generate_random_string(length)


def generate_state(length: int = STATE_LENGTH) -> str:
    """Generate a secure random state parameter."""
    return generate_random_string(length)


def derive_challenge(verifier: str) -> str:
    """S256 code challenge for a verifier."""
    return b64url(hashlib.sha256(verifier.encode("utf-8")).digest())


def make_pkce_pair() -> PKCEPair:
    """Generate PKCE verifier and challenge pair with a fresh state."""
    verifier = generate_verifier()
    return PKCEPair(
        verifier=verifier,
        challenge=derive_challenge(verifier),
        state=generate_state(),
    )


def compute_appsecret_proof(access_token: str, secret_key: str) -> str:
    """Hex HMAC-SHA256 of the access token keyed by the app secret."""
    return hmac.new(
        secret_key.encode("utf-8"),
        access_token.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
