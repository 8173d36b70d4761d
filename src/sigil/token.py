"""Representation of a token."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self

from .claims import Claims
from .constants import TOKEN_TYPE
from .exceptions import UnknownSigningMethodError
from .methods import SigningMethod
from .util import encode_json, encode_segment

__all__ = ["Token"]


@dataclass(slots=True)
class Token:
    """A token, either being built for signing or parsed from a string.

    Create new tokens with `new`. Tokens returned by
    `~sigil.parser.Parser` are only trustworthy if ``valid`` is set.
    """

    header: dict[str, Any] = field(default_factory=dict)
    """Token header, including at least ``typ`` and ``alg``."""

    claims: Claims | None = None
    """Token claims. `None` only if parsing failed before decoding them."""

    method: SigningMethod | None = None
    """Signing method, set before signing or after the algorithm is
    accepted during verification."""

    raw: str = ""
    """Encoded token, set after signing or when parsing."""

    signature: str = ""
    """Encoded signature segment, set after signing or verification."""

    valid: bool = False
    """Whether the token passed every verification check."""

    @classmethod
    def new(
        cls,
        method: SigningMethod,
        claims: Claims,
        *,
        headers: dict[str, Any] | None = None,
    ) -> Self:
        """Create a new unsigned token.

        Parameters
        ----------
        method
            Algorithm with which the token will be signed.
        claims
            Token claims.
        headers
            Additional header fields, such as ``kid``. These cannot
            override ``typ`` or ``alg``.

        Returns
        -------
        Token
            The new token.
        """
        header: dict[str, Any] = {"typ": TOKEN_TYPE, "alg": method.alg}
        if headers:
            extra = {k: v for k, v in headers.items() if k not in header}
            header.update(extra)
        return cls(header=header, claims=claims, method=method)

    @property
    def alg(self) -> str | None:
        """Algorithm named in the header, if it is a string."""
        alg = self.header.get("alg")
        return alg if isinstance(alg, str) else None

    def signing_string(self) -> str:
        """Return the input to the signature algorithm.

        Returns
        -------
        str
            The base64url-encoded header and claims, joined by a period.
        """
        claims = self.claims.to_json() if self.claims is not None else {}
        header = encode_segment(encode_json(self.header))
        payload = encode_segment(encode_json(claims))
        return f"{header}.{payload}"

    def signed_string(self, key: Any) -> str:
        """Sign the token and return its encoded form.

        Parameters
        ----------
        key
            Signing key of the type required by the signing method.

        Returns
        -------
        str
            The complete encoded token.

        Raises
        ------
        sigil.exceptions.SigningMethodError
            Raised if the signing method rejects the key.
        sigil.exceptions.UnknownSigningMethodError
            Raised if the token has no signing method.
        """
        if not self.method:
            raise UnknownSigningMethodError("Token has no signing method")
        signing_string = self.signing_string()
        signature = encode_segment(self.method.sign(signing_string, key))
        self.signature = signature
        self.raw = f"{signing_string}.{signature}"
        return self.raw
