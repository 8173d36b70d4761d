"""Encoding and decoding of token segments."""

from __future__ import annotations

import base64
import binascii
import json
import re
from decimal import Decimal
from typing import Any, NoReturn

import simplejson

from .constants import REDACTED
from .exceptions import MalformedTokenError

_SEGMENT_REGEX = re.compile(r"^[A-Za-z0-9_-]*$")
"""Characters permitted in an unpadded base64url segment."""

__all__ = [
    "add_padding",
    "decode_json",
    "decode_segment",
    "encode_json",
    "encode_segment",
    "redact_token",
    "split_token",
]


def add_padding(encoded: str) -> str:
    """Add padding to base64 encoded bytes.

    Parameters
    ----------
    encoded
        A base64-encoded string, possibly with the padding removed.

    Returns
    -------
    str
        A correctly-padded version of the encoded string.
    """
    underflow = len(encoded) % 4
    if underflow:
        return encoded + ("=" * (4 - underflow))
    else:
        return encoded


def encode_segment(data: bytes) -> str:
    """Encode bytes as an unpadded base64url token segment."""
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def decode_segment(segment: str) -> bytes:
    """Decode an unpadded base64url token segment.

    Parameters
    ----------
    segment
        Segment of a token, without padding.

    Returns
    -------
    bytes
        The decoded contents.

    Raises
    ------
    sigil.exceptions.MalformedTokenError
        Raised if the segment contains characters outside the base64url
        alphabet (padding included) or has an impossible length.
    """
    if not _SEGMENT_REGEX.match(segment) or len(segment) % 4 == 1:
        raise MalformedTokenError("Segment is not valid base64url")
    try:
        return base64.urlsafe_b64decode(add_padding(segment))
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"Segment is not valid base64url: {e}")


def split_token(token: str) -> list[str]:
    """Split a token into its header, claims, and signature segments.

    Parameters
    ----------
    token
        Encoded token.

    Returns
    -------
    list of str
        Exactly three non-empty segments.

    Raises
    ------
    sigil.exceptions.MalformedTokenError
        Raised if the token does not have exactly three non-empty segments.
    """
    parts = token.split(".")
    if len(parts) != 3:
        msg = f"Token contains {len(parts)} segments, expected 3"
        raise MalformedTokenError(msg)
    if not all(parts):
        raise MalformedTokenError("Token contains an empty segment")
    return parts


def _check_finite(obj: Any) -> None:
    """Reject `~decimal.Decimal` values that have no JSON representation."""
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Out of range decimal value {obj}")
    elif isinstance(obj, dict):
        for value in obj.values():
            _check_finite(value)
    elif isinstance(obj, list | tuple):
        for value in obj:
            _check_finite(value)


def _reject_constant(constant: str) -> NoReturn:
    raise ValueError(f"Invalid JSON number {constant}")


def encode_json(data: dict[str, Any]) -> bytes:
    """Serialize a header or claims mapping to compact JSON.

    `~decimal.Decimal` values, produced by decoding with ``use_decimal``,
    are written back as JSON numbers with their exact digits.

    Raises
    ------
    ValueError
        Raised if the data contains an infinite or NaN number.
    """
    _check_finite(data)
    encoded = simplejson.dumps(
        data, separators=(",", ":"), use_decimal=True, allow_nan=False
    )
    return encoded.encode()


def decode_json(data: bytes, *, use_decimal: bool = False) -> dict[str, Any]:
    """Parse a header or claims segment as a JSON object.

    Parameters
    ----------
    data
        Decoded segment contents.
    use_decimal
        If `True`, non-integral numbers are parsed as `~decimal.Decimal`
        to preserve their exact value. Integers are always exact.

    Returns
    -------
    dict
        The parsed object.

    Raises
    ------
    sigil.exceptions.MalformedTokenError
        Raised if the data is not a JSON object.
    """
    parse_float = Decimal if use_decimal else float
    try:
        result = json.loads(
            data, parse_float=parse_float, parse_constant=_reject_constant
        )
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedTokenError(f"Segment is not valid JSON: {e}")
    if not isinstance(result, dict):
        raise MalformedTokenError("Segment is not a JSON object")
    return result


def redact_token(token: str) -> str:
    """Replace the signature of an encoded token for logging.

    The header and claims are kept so that log messages still identify the
    token, but the result can no longer be presented as a credential.

    Parameters
    ----------
    token
        Encoded token, which need not be well-formed.

    Returns
    -------
    str
        The token with everything after the second period replaced.
    """
    parts = token.split(".", 2)
    if len(parts) < 3:
        return REDACTED
    return f"{parts[0]}.{parts[1]}.{REDACTED}"
