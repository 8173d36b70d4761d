"""Parse and verify encoded tokens."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, Self

import structlog
from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from .claims import Claims, MapClaims
from .config import Config
from .constants import LOGGER_NAME
from .exceptions import (
    MalformedTokenError,
    SigningMethodError,
    ValidationError,
    ValidationFlag,
)
from .methods import get_signing_method
from .token import Token
from .util import decode_json, decode_segment, redact_token, split_token

__all__ = [
    "KeyFunc",
    "Parser",
    "parse",
    "parse_with_claims",
]

type KeyFunc = Callable[[Token], Any]
"""Callable returning the verification key for an unverified token.

The token has its header and claims decoded, so the callable may choose a
key based on, for example, the ``kid`` header. It may raise an exception
or return `None` if no key is available.
"""


class Parser:
    """Parses encoded tokens and verifies their signatures and claims.

    A parser holds only its configuration and may be shared between
    threads.

    Parameters
    ----------
    valid_methods
        Algorithms to accept. If `None`, any registered algorithm is
        accepted.
    use_decimal
        Decode non-integral numbers in claims as `~decimal.Decimal`.
    skip_claims_validation
        Do not check time-based claims, audience, or issuer.
    audience
        If set, the ``aud`` claim must contain this value.
    issuer
        If set, the ``iss`` claim must equal this value.
    clock
        Source of the current time. Override to make verification
        reproducible.
    logger
        Logger to use to report verification failures.
    """

    def __init__(
        self,
        *,
        valid_methods: Iterable[str] | None = None,
        use_decimal: bool = False,
        skip_claims_validation: bool = False,
        audience: str | None = None,
        issuer: str | None = None,
        clock: Callable[[], datetime] = current_datetime,
        logger: BoundLogger | None = None,
    ) -> None:
        self._valid_methods = (
            frozenset(valid_methods) if valid_methods is not None else None
        )
        self._use_decimal = use_decimal
        self._skip_claims_validation = skip_claims_validation
        self._audience = audience
        self._issuer = issuer
        self._clock = clock
        self._logger = logger or structlog.get_logger(LOGGER_NAME)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> Self:
        """Create a parser from the Sigil configuration.

        Parameters
        ----------
        config
            Sigil configuration.
        **kwargs
            Additional arguments to the constructor, such as ``clock`` or
            ``logger``.

        Returns
        -------
        Parser
            The new parser.
        """
        return cls(
            valid_methods=config.valid_methods,
            use_decimal=config.use_decimal,
            skip_claims_validation=config.skip_claims_validation,
            audience=config.audience,
            issuer=config.issuer,
            **kwargs,
        )

    def parse(self, token_string: str, key_func: KeyFunc | None) -> Token:
        """Parse and verify a token whose claims are an open mapping.

        See `parse_with_claims` for details.
        """
        return self.parse_with_claims(token_string, MapClaims, key_func)

    def parse_with_claims(
        self,
        token_string: str,
        claims_type: type[Claims],
        key_func: KeyFunc | None,
    ) -> Token:
        """Parse a token and verify its signature and claims.

        Parameters
        ----------
        token_string
            Encoded token.
        claims_type
            Class into which to decode the claims.
        key_func
            Callable returning the key with which to verify the signature.

        Returns
        -------
        Token
            The verified token, with ``valid`` set.

        Raises
        ------
        sigil.exceptions.ValidationError
            Raised if the token is malformed, its signature cannot be
            verified or does not match, or its claims are invalid. The
            exception carries every applicable flag and the token as far
            as it could be decoded.
        """
        token, parts = self._decode(token_string, claims_type)
        signing_string = ".".join(parts[:2])

        # Check the algorithm. An unknown algorithm is treated the same as
        # one excluded by valid_methods.
        alg = token.alg
        method = get_signing_method(alg) if alg else None
        if not method or (
            self._valid_methods is not None and alg not in self._valid_methods
        ):
            msg = f"signing method {alg} is invalid"
            error = ValidationError(
                msg, ValidationFlag.SIGNATURE_INVALID, token=token
            )
            raise self._failure(token, error)
        token.method = method

        key = self._resolve_key(token, key_func)

        errors = ValidationFlag(0)
        inner: Exception | None = None
        try:
            method.verify(signing_string, decode_segment(parts[2]), key)
        except (MalformedTokenError, SigningMethodError) as e:
            # Classified through its flag, but always kept as the cause.
            errors |= ValidationFlag.SIGNATURE_INVALID | e.flag
            inner = e
        token.signature = parts[2]

        if not self._skip_claims_validation:
            assert token.claims is not None
            try:
                errors |= self._validate_claims(token.claims)
            except ValidationError as e:
                errors |= e.errors
                inner = inner or e.inner

        if errors:
            error = ValidationError.from_flags(
                errors, inner=inner, token=token
            )
            raise self._failure(token, error)
        token.valid = True
        return token

    def parse_unverified(
        self, token_string: str, claims_type: type[Claims] = MapClaims
    ) -> tuple[Token, str]:
        """Decode a token without verifying it.

        Neither the signature, the algorithm, nor the claims are checked,
        and the signing method is not resolved. Use this only to inspect a
        token, such as to find the ``kid`` header before choosing a key,
        and never trust the result.

        Parameters
        ----------
        token_string
            Encoded token.
        claims_type
            Class into which to decode the claims.

        Returns
        -------
        tuple of (Token, str)
            The decoded token and its signing input.

        Raises
        ------
        sigil.exceptions.ValidationError
            Raised with `~sigil.exceptions.ValidationFlag.MALFORMED` if the
            token cannot be decoded.
        """
        token, parts = self._decode(token_string, claims_type)
        return token, ".".join(parts[:2])

    def _decode(
        self, token_string: str, claims_type: type[Claims]
    ) -> tuple[Token, list[str]]:
        """Split the token and decode its header and claims."""
        token = Token(raw=token_string)
        try:
            parts = split_token(token_string)
            token.header = decode_json(decode_segment(parts[0]))
            data = decode_json(
                decode_segment(parts[1]), use_decimal=self._use_decimal
            )
            token.claims = claims_type.from_json(data)
        except MalformedTokenError as e:
            error = ValidationError(
                str(e), ValidationFlag.MALFORMED, inner=e, token=token
            )
            raise self._failure(token, error) from e
        return token, parts

    def _resolve_key(self, token: Token, key_func: KeyFunc | None) -> Any:
        """Call the key function and classify its failures."""
        if not key_func:
            msg = "no key function was provided"
            error = ValidationError(
                msg, ValidationFlag.UNVERIFIABLE, token=token
            )
            raise self._failure(token, error)
        try:
            key = key_func(token)
        except ValidationError as e:
            error = ValidationError(
                str(e), e.errors, inner=e.inner, token=token
            )
            raise self._failure(token, error) from e
        except Exception as e:
            error = ValidationError.from_flags(
                ValidationFlag.UNVERIFIABLE, inner=e, token=token
            )
            raise self._failure(token, error) from e
        if key is None:
            msg = "key function returned no key"
            error = ValidationError(
                msg, ValidationFlag.UNVERIFIABLE, token=token
            )
            raise self._failure(token, error)
        return key

    def _validate_claims(self, claims: Claims) -> ValidationFlag:
        """Check time-based claims and the configured audience and issuer."""
        now = int(self._clock().timestamp())
        errors = claims.validate(now)
        if self._audience is not None:
            if not claims.verify_audience(self._audience, required=True):
                errors |= ValidationFlag.AUDIENCE
        if self._issuer is not None:
            if not claims.verify_issuer(self._issuer, required=True):
                errors |= ValidationFlag.ISSUER
        return errors

    def _failure(
        self, token: Token, error: ValidationError
    ) -> ValidationError:
        """Log a verification failure and return the error to raise."""
        self._logger.debug(
            "Token verification failed",
            alg=token.alg,
            errors=[f.name for f in ValidationFlag if f in error.errors],
            error=str(error),
            token=redact_token(token.raw),
        )
        return error


_default_parser = Parser()
"""Parser used by the module-level functions."""


def parse(token_string: str, key_func: KeyFunc | None) -> Token:
    """Parse and verify a token with open claims using default settings.

    See `Parser.parse_with_claims` for details.
    """
    return _default_parser.parse(token_string, key_func)


def parse_with_claims(
    token_string: str, claims_type: type[Claims], key_func: KeyFunc | None
) -> Token:
    """Parse and verify a token using default settings.

    See `Parser.parse_with_claims` for details.
    """
    return _default_parser.parse_with_claims(
        token_string, claims_type, key_func
    )
