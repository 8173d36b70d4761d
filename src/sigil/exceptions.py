"""Exceptions for Sigil."""

from __future__ import annotations

from enum import IntFlag
from typing import TYPE_CHECKING, ClassVar, Self

if TYPE_CHECKING:
    from .token import Token

__all__ = [
    "InvalidKeyError",
    "InvalidKeyTypeError",
    "MalformedSignatureError",
    "MalformedTokenError",
    "SigilError",
    "SignatureMismatchError",
    "SigningMethodError",
    "UnknownSigningMethodError",
    "ValidationError",
    "ValidationFlag",
]


class ValidationFlag(IntFlag):
    """Reasons a token failed validation.

    Flags are independent and may be combined, since a single token can
    fail for several reasons at once (expired and not yet valid, for
    example).
    """

    MALFORMED = 1 << 0
    """The token could not be decoded."""

    UNVERIFIABLE = 1 << 1
    """No usable key was available to verify the signature."""

    SIGNATURE_INVALID = 1 << 2
    """The signature did not verify or the algorithm was rejected."""

    AUDIENCE = 1 << 3
    """The ``aud`` claim did not match the expected audience."""

    EXPIRED = 1 << 4
    """The ``exp`` claim is in the past."""

    ISSUED_AT = 1 << 5
    """The ``iat`` claim is in the future."""

    ISSUER = 1 << 6
    """The ``iss`` claim did not match the expected issuer."""

    NOT_VALID_YET = 1 << 7
    """The ``nbf`` claim is in the future."""

    CLAIMS_INVALID = 1 << 8
    """Some other claims check failed."""


_FLAG_MESSAGES = {
    ValidationFlag.MALFORMED: "token is malformed",
    ValidationFlag.UNVERIFIABLE: "token could not be verified",
    ValidationFlag.SIGNATURE_INVALID: "signature is invalid",
    ValidationFlag.AUDIENCE: "token has an invalid audience",
    ValidationFlag.EXPIRED: "token is expired",
    ValidationFlag.ISSUED_AT: "token used before issued",
    ValidationFlag.ISSUER: "token has an invalid issuer",
    ValidationFlag.NOT_VALID_YET: "token is not valid yet",
    ValidationFlag.CLAIMS_INVALID: "token claims are invalid",
}


class SigilError(Exception):
    """Base class for all Sigil exceptions."""


class MalformedTokenError(SigilError):
    """The token, or one of its segments, could not be decoded."""

    flag: ClassVar[ValidationFlag] = ValidationFlag.MALFORMED
    """Validation flag this error contributes during verification."""


class UnknownSigningMethodError(SigilError):
    """No signing method is available for the token."""


class SigningMethodError(SigilError):
    """A signing method could not sign or verify.

    Subclasses set ``flag`` to the validation flag that the failure
    contributes, in addition to
    `~sigil.exceptions.ValidationFlag.SIGNATURE_INVALID`, when it happens
    while parsing a token.
    """

    flag: ClassVar[ValidationFlag] = ValidationFlag.SIGNATURE_INVALID
    """Validation flag this error contributes during verification."""


class InvalidKeyError(SigningMethodError):
    """The key is not usable with this signing method."""

    flag = ValidationFlag.UNVERIFIABLE


class InvalidKeyTypeError(InvalidKeyError):
    """The key is of the wrong type for this signing method."""


class SignatureMismatchError(SigningMethodError):
    """The signature does not match the signing input."""

    flag = ValidationFlag.SIGNATURE_INVALID


class MalformedSignatureError(SigningMethodError):
    """The signature does not have the structure the algorithm requires."""

    flag = ValidationFlag.MALFORMED


class ValidationError(SigilError):
    """A token failed parsing or verification.

    Parameters
    ----------
    message
        Human-readable summary of the failure.
    errors
        Every reason the token failed, combined.
    inner
        Lower-level exception that caused the failure, if any.
    token
        The token as far as it could be constructed.

    Notes
    -----
    The token is always attached when the error comes from
    `~sigil.parser.Parser`, so callers may inspect the partially-decoded
    header and claims. Any token carried here must not be trusted.
    """

    def __init__(
        self,
        message: str,
        errors: ValidationFlag,
        *,
        inner: Exception | None = None,
        token: Token | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors
        self.inner = inner
        self.token = token

    @classmethod
    def from_flags(
        cls,
        errors: ValidationFlag,
        *,
        inner: Exception | None = None,
        token: Token | None = None,
    ) -> Self:
        """Construct an exception with a summary built from its flags.

        Parameters
        ----------
        errors
            Every reason the token failed.
        inner
            Lower-level exception that caused the failure, if any.
        token
            The token as far as it could be constructed.

        Returns
        -------
        ValidationError
            The new exception.
        """
        reasons = [m for f, m in _FLAG_MESSAGES.items() if f in errors]
        message = ", ".join(reasons) if reasons else "token is invalid"
        if inner:
            message += f": {inner!s}"
        return cls(message, errors, inner=inner, token=token)
