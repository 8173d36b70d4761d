"""Signed, self-describing authorization tokens."""

from .claims import Claims, MapClaims, StandardClaims
from .exceptions import ValidationError, ValidationFlag
from .methods import get_signing_method, register_signing_method
from .parser import KeyFunc, Parser, parse, parse_with_claims
from .token import Token

__all__ = [
    "Claims",
    "KeyFunc",
    "MapClaims",
    "Parser",
    "StandardClaims",
    "Token",
    "ValidationError",
    "ValidationFlag",
    "get_signing_method",
    "parse",
    "parse_with_claims",
    "register_signing_method",
]
