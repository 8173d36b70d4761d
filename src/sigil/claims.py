"""Token claims and their time-based validation."""

from __future__ import annotations

import hmac
import math
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Self, override

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import MalformedTokenError, ValidationFlag

__all__ = [
    "Claims",
    "MapClaims",
    "StandardClaims",
]

type Timestamp = int | float | Decimal
"""A Unix timestamp as found in decoded claims."""


def _verify_audience(aud: Any, cmp: str, *, required: bool) -> bool:
    if aud is None:
        return not required
    if isinstance(aud, str):
        audiences = [aud]
    elif isinstance(aud, list):
        audiences = [a for a in aud if isinstance(a, str)]
    else:
        return False
    if not audiences:
        return not required
    cmp_bytes = cmp.encode()
    return any(hmac.compare_digest(a.encode(), cmp_bytes) for a in audiences)


def _verify_issuer(iss: Any, cmp: str, *, required: bool) -> bool:
    if iss is None or iss == "":
        return not required
    if not isinstance(iss, str):
        return False
    return hmac.compare_digest(iss.encode(), cmp.encode())


def _to_timestamp(name: str, value: Any) -> Timestamp:
    """Convert a claim value to a comparable timestamp.

    Numbers are used as-is. Strings, the form exact decimal numbers take
    when they are carried as text, are parsed as `~decimal.Decimal`.

    Raises
    ------
    sigil.exceptions.MalformedTokenError
        Raised if the value is not a number or numeric text, or is outside
        the range of a float.
    """
    if isinstance(value, bool):
        raise MalformedTokenError(f"Claim {name} is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedTokenError(f"Claim {name} is not finite")
        return value
    if isinstance(value, str):
        try:
            value = Decimal(value)
        except InvalidOperation:
            raise MalformedTokenError(f"Claim {name} is not a number")
    if isinstance(value, Decimal):
        if not value.is_finite() or not math.isfinite(float(value)):
            raise MalformedTokenError(f"Claim {name} is not finite")
        return value
    raise MalformedTokenError(f"Claim {name} is not a number")


class Claims(ABC):
    """The payload of a token.

    Subclasses decide how claims are represented in Python and how they
    are checked for temporal consistency. The audience and issuer helpers
    work on the serialized form, so they apply to any subclass.
    """

    @classmethod
    @abstractmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        """Build claims from a decoded JSON object.

        Raises
        ------
        sigil.exceptions.MalformedTokenError
            Raised if the data does not have the shape of these claims.
        """

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Return the claims as a JSON-serializable mapping."""

    @abstractmethod
    def validate(self, now: int) -> ValidationFlag:
        """Check the time-based claims.

        Parameters
        ----------
        now
            Current time in seconds since epoch.

        Returns
        -------
        ValidationFlag
            Every violation found, or an empty flag if there are none.
        """

    def verify_audience(self, cmp: str, required: bool = False) -> bool:
        """Check whether ``cmp`` is one of the audiences of the token."""
        aud = self.to_json().get("aud")
        return _verify_audience(aud, cmp, required=required)

    def verify_issuer(self, cmp: str, required: bool = False) -> bool:
        """Check whether ``cmp`` is the issuer of the token."""
        iss = self.to_json().get("iss")
        return _verify_issuer(iss, cmp, required=required)


class MapClaims(dict[str, Any], Claims):
    """Claims held as an arbitrary mapping.

    The ``exp``, ``nbf``, and ``iat`` keys, if present, must hold a number
    or text that parses as a number. Any other key may hold any
    JSON-compatible value.
    """

    @override
    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        return cls(data)

    @override
    def to_json(self) -> dict[str, Any]:
        return dict(self)

    @override
    def validate(self, now: int) -> ValidationFlag:
        errors = ValidationFlag(0)
        checks = (
            (self.verify_expires_at, ValidationFlag.EXPIRED),
            (self.verify_issued_at, ValidationFlag.ISSUED_AT),
            (self.verify_not_before, ValidationFlag.NOT_VALID_YET),
        )
        for check, flag in checks:
            try:
                if not check(now):
                    errors |= flag
            except MalformedTokenError:
                errors |= ValidationFlag.MALFORMED
        return errors

    def verify_expires_at(self, now: int, required: bool = False) -> bool:
        """Check that the token has not expired at ``now``."""
        exp = self._get_timestamp("exp")
        if exp is None:
            return not required
        return now < exp

    def verify_issued_at(self, now: int, required: bool = False) -> bool:
        """Check that the token was not issued after ``now``."""
        iat = self._get_timestamp("iat")
        if iat is None:
            return not required
        return now >= iat

    def verify_not_before(self, now: int, required: bool = False) -> bool:
        """Check that the token is valid at ``now``."""
        nbf = self._get_timestamp("nbf")
        if nbf is None:
            return not required
        return now >= nbf

    def _get_timestamp(self, name: str) -> Timestamp | None:
        if name not in self:
            return None
        return _to_timestamp(name, self[name])


class StandardClaims(BaseModel, Claims):
    """The registered claims with fixed types.

    Timestamps that are unset or zero impose no constraint.
    """

    model_config = ConfigDict(populate_by_name=True)

    audience: str | None = Field(None, alias="aud")
    """Intended recipient of the token."""

    expires_at: int | None = Field(None, alias="exp")
    """Time after which the token must be rejected."""

    id: str | None = Field(None, alias="jti")
    """Unique identifier of the token."""

    issued_at: int | None = Field(None, alias="iat")
    """Time at which the token was issued."""

    issuer: str | None = Field(None, alias="iss")
    """Issuer of the token."""

    not_before: int | None = Field(None, alias="nbf")
    """Time before which the token must be rejected."""

    subject: str | None = Field(None, alias="sub")
    """Principal that is the subject of the token."""

    @override
    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedTokenError(f"Invalid standard claims: {e}")

    @override
    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @override
    def validate(self, now: int) -> ValidationFlag:
        errors = ValidationFlag(0)
        if not self.verify_expires_at(now):
            errors |= ValidationFlag.EXPIRED
        if not self.verify_issued_at(now):
            errors |= ValidationFlag.ISSUED_AT
        if not self.verify_not_before(now):
            errors |= ValidationFlag.NOT_VALID_YET
        return errors

    def verify_expires_at(self, now: int, required: bool = False) -> bool:
        """Check that the token has not expired at ``now``."""
        if not self.expires_at:
            return not required
        return now < self.expires_at

    def verify_issued_at(self, now: int, required: bool = False) -> bool:
        """Check that the token was not issued after ``now``."""
        if not self.issued_at:
            return not required
        return now >= self.issued_at

    def verify_not_before(self, now: int, required: bool = False) -> bool:
        """Check that the token is valid at ``now``."""
        if not self.not_before:
            return not required
        return now >= self.not_before
