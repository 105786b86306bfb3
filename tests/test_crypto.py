import hashlib
import hmac

import pytest

from app.utils.crypto import (
    ALPHABET,
    compute_appsecret_proof,
    derive_challenge,
    generate_random_string,
    generate_state,
    generate_verifier,
    make_pkce_pair,
)


class TestRandomStrings:
    @pytest.mark.parametrize("length", [0, 1, 16, 43, 64, 128])
    def test_exact_length_from_alphabet(self, length: int) -> None:
        value = generate_random_string(length)

        assert len(value) == length
        assert set(value) <= set(ALPHABET)

    def test_alphabet_is_62_alphanumerics(self) -> None:
        assert len(ALPHABET) == 62
        assert ALPHABET.isalnum()

    def test_default_lengths(self) -> None:
        assert len(generate_verifier()) == 43
        assert len(generate_state()) == 16

    def test_values_do_not_repeat(self) -> None:
        verifiers = {generate_verifier() for _ in range(50)}
        states = {generate_state() for _ in range(50)}

        assert len(verifiers) == 50
        assert len(states) == 50


class TestDeriveChallenge:
    def test_rfc7636_appendix_b_vector(self) -> None:
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"

        assert derive_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_deterministic(self) -> None:
        verifier = generate_verifier()

        assert derive_challenge(verifier) == derive_challenge(verifier)

    def test_one_character_change_changes_challenge(self) -> None:
        verifier = "a" * 43
        changed = "b" + verifier[1:]

        assert derive_challenge(verifier) != derive_challenge(changed)

    def test_unpadded_base64url(self) -> None:
        challenge = derive_challenge(generate_verifier())

        # SHA-256 digest is 32 bytes -> 43 unpadded base64 characters
        assert len(challenge) == 43
        assert "=" not in challenge
        assert "+" not in challenge and "/" not in challenge


class TestPKCEPair:
    def test_pair_is_consistent(self) -> None:
        pair = make_pkce_pair()

        assert len(pair.verifier) == 43
        assert len(pair.state) == 16
        assert pair.challenge == derive_challenge(pair.verifier)

    def test_pairs_are_fresh(self) -> None:
        first = make_pkce_pair()
        second = make_pkce_pair()

        assert first.verifier != second.verifier
        assert first.state != second.state


class TestAppsecretProof:
    def test_hex_hmac_sha256(self) -> None:
        expected = hmac.new(b"secret", b"token-123", hashlib.sha256).hexdigest()

        assert compute_appsecret_proof("token-123", "secret") == expected

    def test_depends_on_token_and_key(self) -> None:
        base = compute_appsecret_proof("token-1", "secret")

        assert compute_appsecret_proof("token-2", "secret") != base
        assert compute_appsecret_proof("token-1", "other") != base
        assert len(base) == 64
