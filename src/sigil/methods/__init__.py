"""Signing methods.

Importing this package registers every built-in algorithm.
"""

from .base import (
    SigningMethod,
    SigningMethodFactory,
    get_signing_method,
    register_signing_method,
    registered_algorithms,
)
from .ecdsa import ES256, ES384, ES512, ECDSASigningMethod
from .hmac import HS256, HS384, HS512, HMACSigningMethod
from .rsa import (
    PS256,
    PS384,
    PS512,
    RS256,
    RS384,
    RS512,
    RSAPSSSigningMethod,
    RSASigningMethod,
)

__all__ = [
    "ES256",
    "ES384",
    "ES512",
    "HS256",
    "HS384",
    "HS512",
    "PS256",
    "PS384",
    "PS512",
    "RS256",
    "RS384",
    "RS512",
    "ECDSASigningMethod",
    "HMACSigningMethod",
    "RSAPSSSigningMethod",
    "RSASigningMethod",
    "SigningMethod",
    "SigningMethodFactory",
    "get_signing_method",
    "register_signing_method",
    "registered_algorithms",
]
