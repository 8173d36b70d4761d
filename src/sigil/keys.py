"""Key pair handling for the asymmetric signing methods."""

from __future__ import annotations

from typing import Self

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_pem_private_key,
    load_pem_public_key,
)

__all__ = [
    "KeyPair",
    "PrivateKey",
    "PublicKey",
    "load_public_key_from_pem",
]

type PrivateKey = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
"""Private key types usable for signing tokens."""

type PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey
"""Public key types usable for verifying tokens."""


def load_public_key_from_pem(pem: bytes) -> PublicKey:
    """Import an RSA or EC public key.

    Parameters
    ----------
    pem
        The PEM-encoded public key in SubjectPublicKeyInfo format.

    Returns
    -------
    PublicKey
        The public key.

    Raises
    ------
    cryptography.exceptions.UnsupportedAlgorithm
        Raised if the provided key is not an RSA or EC public key.
    """
    public_key = load_pem_public_key(pem)
    if not isinstance(
        public_key, rsa.RSAPublicKey | ec.EllipticCurvePublicKey
    ):
        raise UnsupportedAlgorithm("Key is not an RSA or EC public key")
    return public_key


class KeyPair:
    """An RSA or EC key pair with some simple helper functions.

    Notes
    -----
    Created by calling :py:meth:`~KeyPair.generate_rsa`,
    :py:meth:`~KeyPair.generate_ec`, or :py:meth:`~KeyPair.from_pem` rather
    than the constructor.
    """

    @classmethod
    def from_pem(cls, pem: bytes) -> Self:
        """Import a key pair from a PEM-encoded private key.

        Parameters
        ----------
        pem
            The PEM-encoded key (must not be password-protected).

        Returns
        -------
        KeyPair
            The corresponding key pair.

        Raises
        ------
        cryptography.exceptions.UnsupportedAlgorithm
            Raised if the provided key is not an RSA or EC private key.
        """
        private_key = load_pem_private_key(pem, password=None)
        if not isinstance(
            private_key, rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
        ):
            raise UnsupportedAlgorithm("Key is not an RSA or EC private key")
        return cls(private_key)

    @classmethod
    def generate_rsa(cls, key_size: int = 2048) -> Self:
        """Generate a new RSA key pair.

        Parameters
        ----------
        key_size
            Size of the modulus in bits.

        Returns
        -------
        KeyPair
            Newly-generated key pair.
        """
        private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=key_size
        )
        return cls(private_key)

    @classmethod
    def generate_ec(cls, curve: ec.EllipticCurve | None = None) -> Self:
        """Generate a new EC key pair.

        Parameters
        ----------
        curve
            Curve of the key. Defaults to P-256.

        Returns
        -------
        KeyPair
            Newly-generated key pair.
        """
        private_key = ec.generate_private_key(curve or ec.SECP256R1())
        return cls(private_key)

    def __init__(self, private_key: PrivateKey) -> None:
        self.private_key = private_key
        self._private_key_as_pem: bytes | None = None
        self._public_key_as_pem: bytes | None = None

    @property
    def public_key(self) -> PublicKey:
        """The public half of the key pair."""
        return self.private_key.public_key()

    def private_key_as_pem(self) -> bytes:
        """Return the serialized private key.

        Returns
        -------
        bytes
            Private key encoded using PKCS#8 with no encryption.
        """
        if not self._private_key_as_pem:
            self._private_key_as_pem = self.private_key.private_bytes(
                Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
            )
        return self._private_key_as_pem

    def public_key_as_pem(self) -> bytes:
        """Return the PEM-encoded public key.

        Returns
        -------
        bytes
            The public key in PEM encoding and SubjectPublicKeyInfo format.
        """
        if not self._public_key_as_pem:
            self._public_key_as_pem = self.public_key.public_bytes(
                Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
            )
        return self._public_key_as_pem
