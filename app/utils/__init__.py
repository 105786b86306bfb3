"""Utility package for the relay service.

This file makes `app.utils` a proper Python package so relative
imports within the application resolve correctly. It also re-exports
commonly used helpers from the `crypto` module for convenience.
"""

from .crypto import (  # re-export helpers
    compute_appsecret_proof,
    derive_challenge,
    generate_state,
    generate_verifier,
    make_pkce_pair,
)

__all__ = [
    "compute_appsecret_proof",
    "derive_challenge",
    "generate_state",
    "generate_verifier",
    "make_pkce_pair",
]
