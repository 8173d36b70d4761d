"""Constants used in test fixtures and setup."""

from datetime import UTC, datetime

from cryptography.hazmat.primitives.asymmetric import ec

from sigil.keys import KeyPair

__all__ = [
    "TEST_EC_KEYPAIRS",
    "TEST_HMAC_SECRET",
    "TEST_NOW",
    "TEST_RSA_KEYPAIR",
]

TEST_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)
"""Fixed current time used by parsers in tests."""

TEST_HMAC_SECRET = b"sigil-test-secret-that-is-long-enough-for-hs512!!"
"""Shared secret for the HMAC signing methods."""

TEST_RSA_KEYPAIR = KeyPair.generate_rsa()
"""RSA key pair for the RSA and RSA-PSS signing methods.

Generating this takes a surprisingly long time when summed across every test,
so generate one statically at import time for each test run and use it for
every RSA test.
"""

TEST_EC_KEYPAIRS = {
    "ES256": KeyPair.generate_ec(ec.SECP256R1()),
    "ES384": KeyPair.generate_ec(ec.SECP384R1()),
    "ES512": KeyPair.generate_ec(ec.SECP521R1()),
}
"""EC key pairs for each ECDSA signing method, keyed by algorithm."""
