"""Create tokens for testing."""

from __future__ import annotations

from typing import Any

from sigil.claims import Claims
from sigil.keys import KeyPair
from sigil.methods import RS256, SigningMethod
from sigil.token import Token

from .constants import TEST_EC_KEYPAIRS, TEST_HMAC_SECRET, TEST_RSA_KEYPAIR

__all__ = [
    "create_test_token",
    "signing_key",
    "verification_key",
]


def signing_key(method: SigningMethod) -> Any:
    """Return the test key with which to sign tokens for a method."""
    if method.alg.startswith("HS"):
        return TEST_HMAC_SECRET
    return _keypair(method).private_key


def verification_key(method: SigningMethod) -> Any:
    """Return the test key with which to verify tokens for a method."""
    if method.alg.startswith("HS"):
        return TEST_HMAC_SECRET
    return _keypair(method).public_key


def create_test_token(
    claims: Claims,
    method: SigningMethod = RS256,
    *,
    headers: dict[str, Any] | None = None,
) -> str:
    """Create a signed token using the test keys.

    Parameters
    ----------
    claims
        Claims of the token.
    method
        Signing method. Defaults to RS256.
    headers
        Additional header fields.

    Returns
    -------
    str
        The encoded token.
    """
    token = Token.new(method, claims, headers=headers)
    return token.signed_string(signing_key(method))


def _keypair(method: SigningMethod) -> KeyPair:
    if method.alg.startswith("ES"):
        return TEST_EC_KEYPAIRS[method.alg]
    return TEST_RSA_KEYPAIR
