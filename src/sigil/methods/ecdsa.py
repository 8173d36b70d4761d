"""ECDSA signing methods."""

from __future__ import annotations

from typing import Any, override

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..exceptions import (
    InvalidKeyError,
    InvalidKeyTypeError,
    MalformedSignatureError,
    SignatureMismatchError,
)
from .base import SigningMethod, register_signing_method

__all__ = [
    "ES256",
    "ES384",
    "ES512",
    "ECDSASigningMethod",
]


class ECDSASigningMethod(SigningMethod):
    """ECDSA signatures over a fixed curve.

    The signature on the wire is the big-endian ``r`` value followed by the
    big-endian ``s`` value, each padded to the byte length of the curve
    order, rather than the DER structure ``cryptography`` produces.

    Parameters
    ----------
    alg
        Algorithm name.
    hash_algorithm
        Hash applied to the signing input.
    curve
        The only curve whose keys are accepted.
    """

    def __init__(
        self,
        alg: str,
        hash_algorithm: type[hashes.HashAlgorithm],
        curve: type[ec.EllipticCurve],
    ) -> None:
        self._alg = alg
        self._hash_algorithm = hash_algorithm
        self._curve = curve
        self._key_size = (curve.key_size + 7) // 8

    @property
    @override
    def alg(self) -> str:
        return self._alg

    @property
    def key_size(self) -> int:
        """Byte length of each of ``r`` and ``s`` in a signature."""
        return self._key_size

    @override
    def sign(self, signing_string: str, key: Any) -> bytes:
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise self._wrong_key("private", key)
        self._check_curve(key.curve)
        der = key.sign(
            signing_string.encode(), ec.ECDSA(self._hash_algorithm())
        )
        r, s = decode_dss_signature(der)
        return r.to_bytes(self._key_size, "big") + s.to_bytes(
            self._key_size, "big"
        )

    @override
    def verify(self, signing_string: str, signature: bytes, key: Any) -> None:
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise self._wrong_key("public", key)
        self._check_curve(key.curve)
        if len(signature) != 2 * self._key_size:
            msg = (
                f"{self._alg} signature must be {2 * self._key_size} bytes,"
                f" not {len(signature)}"
            )
            raise MalformedSignatureError(msg)
        r = int.from_bytes(signature[: self._key_size], "big")
        s = int.from_bytes(signature[self._key_size :], "big")
        try:
            key.verify(
                encode_dss_signature(r, s),
                signing_string.encode(),
                ec.ECDSA(self._hash_algorithm()),
            )
        except InvalidSignature:
            raise SignatureMismatchError(f"{self._alg} verification failed")

    def _check_curve(self, curve: ec.EllipticCurve) -> None:
        if curve.name != self._curve.name:
            msg = f"{self._alg} requires a {self._curve.name} key"
            raise InvalidKeyError(f"{msg}, not {curve.name}")

    def _wrong_key(self, kind: str, key: Any) -> InvalidKeyTypeError:
        name = type(key).__name__
        msg = f"{self._alg} requires an EC {kind} key, not {name}"
        return InvalidKeyTypeError(msg)


ES256 = ECDSASigningMethod("ES256", hashes.SHA256, ec.SECP256R1)
"""ECDSA using P-256 and SHA-256."""

ES384 = ECDSASigningMethod("ES384", hashes.SHA384, ec.SECP384R1)
"""ECDSA using P-384 and SHA-384."""

ES512 = ECDSASigningMethod("ES512", hashes.SHA512, ec.SECP521R1)
"""ECDSA using P-521 and SHA-512."""

register_signing_method("ES256", lambda: ES256)
register_signing_method("ES384", lambda: ES384)
register_signing_method("ES512", lambda: ES512)
