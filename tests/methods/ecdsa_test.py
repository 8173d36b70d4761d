"""Tests for the ECDSA signing methods."""

from __future__ import annotations

import pytest

from sigil.exceptions import (
    InvalidKeyError,
    InvalidKeyTypeError,
    MalformedSignatureError,
    SignatureMismatchError,
)
from sigil.methods import ES256, ES384, ES512, ECDSASigningMethod

from ..support.constants import (
    TEST_EC_KEYPAIRS,
    TEST_HMAC_SECRET,
    TEST_RSA_KEYPAIR,
)


@pytest.mark.parametrize(
    ("method", "key_size"), [(ES256, 32), (ES384, 48), (ES512, 66)]
)
def test_sign_verify(method: ECDSASigningMethod, key_size: int) -> None:
    keypair = TEST_EC_KEYPAIRS[method.alg]
    assert method.key_size == key_size

    signature = method.sign("header.payload", keypair.private_key)
    assert len(signature) == 2 * key_size
    method.verify("header.payload", signature, keypair.public_key)

    with pytest.raises(SignatureMismatchError):
        method.verify("header.other", signature, keypair.public_key)
    tampered = signature[:-1] + bytes([signature[-1] ^ 1])
    with pytest.raises(SignatureMismatchError):
        method.verify("header.payload", tampered, keypair.public_key)


def test_signature_length() -> None:
    keypair = TEST_EC_KEYPAIRS["ES256"]
    signature = ES256.sign("header.payload", keypair.private_key)

    with pytest.raises(MalformedSignatureError):
        ES256.verify("header.payload", signature[:-1], keypair.public_key)
    with pytest.raises(MalformedSignatureError):
        ES256.verify("header.payload", signature + b"\0", keypair.public_key)
    with pytest.raises(MalformedSignatureError):
        ES256.verify("header.payload", b"", keypair.public_key)


def test_wrong_curve() -> None:
    with pytest.raises(InvalidKeyError):
        ES256.sign("header.payload", TEST_EC_KEYPAIRS["ES384"].private_key)
    signature = ES384.sign(
        "header.payload", TEST_EC_KEYPAIRS["ES384"].private_key
    )
    with pytest.raises(InvalidKeyError):
        ES512.verify(
            "header.payload", signature, TEST_EC_KEYPAIRS["ES384"].public_key
        )


def test_invalid_key_type() -> None:
    keypair = TEST_EC_KEYPAIRS["ES256"]
    with pytest.raises(InvalidKeyTypeError):
        ES256.sign("header.payload", TEST_HMAC_SECRET)
    with pytest.raises(InvalidKeyTypeError):
        ES256.sign("header.payload", TEST_RSA_KEYPAIR.private_key)
    with pytest.raises(InvalidKeyTypeError):
        ES256.verify("header.payload", b"\0" * 64, keypair.private_key)
