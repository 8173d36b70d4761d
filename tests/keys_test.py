"""Test key pair handling."""

from __future__ import annotations

import pytest
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from sigil.keys import KeyPair, load_public_key_from_pem


def test_import() -> None:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    serialized_key = key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    )
    keypair = KeyPair.from_pem(serialized_key)
    assert isinstance(keypair.public_key, rsa.RSAPublicKey)
    assert (
        keypair.public_key.public_numbers()
        == key.public_key().public_numbers()
    )
    assert keypair.private_key_as_pem() == serialized_key


def test_import_ec() -> None:
    key = ec.generate_private_key(ec.SECP384R1())
    serialized_key = key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    )
    keypair = KeyPair.from_pem(serialized_key)
    assert isinstance(keypair.private_key, ec.EllipticCurvePrivateKey)
    assert keypair.private_key.curve.name == "secp384r1"


def test_generate() -> None:
    keypair = KeyPair.generate_ec()
    assert isinstance(keypair.private_key, ec.EllipticCurvePrivateKey)
    assert keypair.private_key.curve.name == "secp256r1"

    keypair = KeyPair.generate_ec(ec.SECP521R1())
    assert isinstance(keypair.private_key, ec.EllipticCurvePrivateKey)
    assert keypair.private_key.curve.name == "secp521r1"


def test_public_key_pem() -> None:
    keypair = KeyPair.generate_ec()
    pem = keypair.public_key_as_pem()
    assert pem.startswith(b"-----BEGIN PUBLIC KEY-----")
    assert keypair.public_key_as_pem() is pem

    public_key = load_public_key_from_pem(pem)
    assert isinstance(public_key, ec.EllipticCurvePublicKey)
    assert public_key.public_numbers() == keypair.public_key.public_numbers()


def test_unsupported_key_type() -> None:
    key = Ed25519PrivateKey.generate()
    serialized_key = key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    )
    with pytest.raises(UnsupportedAlgorithm):
        KeyPair.from_pem(serialized_key)

    serialized_key = key.public_key().public_bytes(
        Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
    )
    with pytest.raises(UnsupportedAlgorithm):
        load_public_key_from_pem(serialized_key)
