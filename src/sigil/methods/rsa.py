"""RSA signing methods with PKCS #1 v1.5 and PSS padding."""

from __future__ import annotations

from typing import Any, override

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.padding import AsymmetricPadding

from ..exceptions import InvalidKeyTypeError, SignatureMismatchError
from .base import SigningMethod, register_signing_method

__all__ = [
    "PS256",
    "PS384",
    "PS512",
    "RS256",
    "RS384",
    "RS512",
    "RSAPSSSigningMethod",
    "RSASigningMethod",
]


class RSASigningMethod(SigningMethod):
    """RSA signatures with PKCS #1 v1.5 padding.

    Tokens are signed with an RSA private key and verified with the
    corresponding public key, both as ``cryptography`` key objects.

    Parameters
    ----------
    alg
        Algorithm name.
    hash_algorithm
        Hash applied to the signing input.
    """

    def __init__(
        self, alg: str, hash_algorithm: type[hashes.HashAlgorithm]
    ) -> None:
        self._alg = alg
        self._hash_algorithm = hash_algorithm

    @property
    @override
    def alg(self) -> str:
        return self._alg

    @override
    def sign(self, signing_string: str, key: Any) -> bytes:
        if not isinstance(key, rsa.RSAPrivateKey):
            raise self._wrong_key("private", key)
        return key.sign(
            signing_string.encode(),
            self._signing_padding(),
            self._hash_algorithm(),
        )

    @override
    def verify(self, signing_string: str, signature: bytes, key: Any) -> None:
        if not isinstance(key, rsa.RSAPublicKey):
            raise self._wrong_key("public", key)
        try:
            key.verify(
                signature,
                signing_string.encode(),
                self._verification_padding(),
                self._hash_algorithm(),
            )
        except InvalidSignature:
            raise SignatureMismatchError(f"{self._alg} verification failed")

    def _signing_padding(self) -> AsymmetricPadding:
        return padding.PKCS1v15()

    def _verification_padding(self) -> AsymmetricPadding:
        return padding.PKCS1v15()

    def _wrong_key(self, kind: str, key: Any) -> InvalidKeyTypeError:
        name = type(key).__name__
        msg = f"{self._alg} requires an RSA {kind} key, not {name}"
        return InvalidKeyTypeError(msg)


class RSAPSSSigningMethod(RSASigningMethod):
    """RSA signatures with PSS padding.

    Signatures use a salt as long as the hash output. Verification accepts
    any salt length, so tokens from issuers that choose a different salt
    length still verify.
    """

    @override
    def _signing_padding(self) -> AsymmetricPadding:
        return padding.PSS(
            mgf=padding.MGF1(self._hash_algorithm()),
            salt_length=padding.PSS.DIGEST_LENGTH,
        )

    @override
    def _verification_padding(self) -> AsymmetricPadding:
        return padding.PSS(
            mgf=padding.MGF1(self._hash_algorithm()),
            salt_length=padding.PSS.AUTO,
        )


RS256 = RSASigningMethod("RS256", hashes.SHA256)
"""RSA PKCS #1 v1.5 using SHA-256."""

RS384 = RSASigningMethod("RS384", hashes.SHA384)
"""RSA PKCS #1 v1.5 using SHA-384."""

RS512 = RSASigningMethod("RS512", hashes.SHA512)
"""RSA PKCS #1 v1.5 using SHA-512."""

PS256 = RSAPSSSigningMethod("PS256", hashes.SHA256)
"""RSA PSS using SHA-256."""

PS384 = RSAPSSSigningMethod("PS384", hashes.SHA384)
"""RSA PSS using SHA-384."""

PS512 = RSAPSSSigningMethod("PS512", hashes.SHA512)
"""RSA PSS using SHA-512."""

register_signing_method("RS256", lambda: RS256)
register_signing_method("RS384", lambda: RS384)
register_signing_method("RS512", lambda: RS512)
register_signing_method("PS256", lambda: PS256)
register_signing_method("PS384", lambda: PS384)
register_signing_method("PS512", lambda: PS512)
