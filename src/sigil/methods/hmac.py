"""HMAC signing methods."""

from __future__ import annotations

from typing import Any, override

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.hmac import HMAC

from ..exceptions import InvalidKeyTypeError, SignatureMismatchError
from .base import SigningMethod, register_signing_method

__all__ = [
    "HS256",
    "HS384",
    "HS512",
    "HMACSigningMethod",
]


class HMACSigningMethod(SigningMethod):
    """Shared-secret signing with an HMAC.

    The key for both signing and verification is the secret as `bytes`.

    Parameters
    ----------
    alg
        Algorithm name.
    hash_algorithm
        Hash used by the HMAC.
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
        return self._mac(signing_string, key).finalize()

    @override
    def verify(self, signing_string: str, signature: bytes, key: Any) -> None:
        try:
            self._mac(signing_string, key).verify(signature)
        except InvalidSignature:
            raise SignatureMismatchError("HMAC signature does not match")

    def _mac(self, signing_string: str, key: Any) -> HMAC:
        if not isinstance(key, bytes):
            msg = f"{self._alg} key must be bytes, not {type(key).__name__}"
            raise InvalidKeyTypeError(msg)
        mac = HMAC(key, self._hash_algorithm())
        mac.update(signing_string.encode())
        return mac


HS256 = HMACSigningMethod("HS256", hashes.SHA256)
"""HMAC using SHA-256."""

HS384 = HMACSigningMethod("HS384", hashes.SHA384)
"""HMAC using SHA-384."""

HS512 = HMACSigningMethod("HS512", hashes.SHA512)
"""HMAC using SHA-512."""

register_signing_method("HS256", lambda: HS256)
register_signing_method("HS384", lambda: HS384)
register_signing_method("HS512", lambda: HS512)
