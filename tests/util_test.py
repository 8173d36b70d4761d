"""Tests for the sigil.util package."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sigil.exceptions import MalformedTokenError
from sigil.util import (
    add_padding,
    decode_json,
    decode_segment,
    encode_json,
    encode_segment,
    redact_token,
    split_token,
)


def test_add_padding() -> None:
    assert add_padding("") == ""
    assert add_padding("Zg") == "Zg=="
    assert add_padding("Zgo") == "Zgo="
    assert add_padding("Zm8K") == "Zm8K"
    assert add_padding("Zm9vCg") == "Zm9vCg=="


def test_encode_segment() -> None:
    assert encode_segment(b"") == ""
    assert encode_segment(b"f") == "Zg"
    assert encode_segment(b"fo") == "Zm8"
    assert encode_segment(b"foo") == "Zm9v"
    assert encode_segment(b"\xfb\xff") == "-_8"


def test_decode_segment() -> None:
    assert decode_segment("") == b""
    assert decode_segment("Zg") == b"f"
    assert decode_segment("Zm8") == b"fo"
    assert decode_segment("Zm9v") == b"foo"
    assert decode_segment("-_8") == b"\xfb\xff"


@pytest.mark.parametrize(
    "segment",
    [
        "Zg==",
        "Zm8=",
        "+/8",
        "Zm9v!",
        "Z m9v",
        "Zm9vY",
    ],
)
def test_decode_segment_invalid(segment: str) -> None:
    with pytest.raises(MalformedTokenError):
        decode_segment(segment)


def test_split_token() -> None:
    assert split_token("a.b.c") == ["a", "b", "c"]

    with pytest.raises(MalformedTokenError, match="2 segments"):
        split_token("a.b")
    with pytest.raises(MalformedTokenError, match="4 segments"):
        split_token("a.b.c.d")
    with pytest.raises(MalformedTokenError, match="1 segments"):
        split_token("abc")
    with pytest.raises(MalformedTokenError, match="empty segment"):
        split_token("a..c")
    with pytest.raises(MalformedTokenError, match="empty segment"):
        split_token("a.b.")


def test_encode_json() -> None:
    assert encode_json({"typ": "JWT", "alg": "HS256"}) == (
        b'{"typ":"JWT","alg":"HS256"}'
    )
    assert encode_json({"exp": Decimal("1700000000")}) == b'{"exp":1700000000}'
    assert encode_json({"foo": Decimal("123.4")}) == b'{"foo":123.4}'

    precise = Decimal("123.40000000000000000001")
    assert encode_json({"foo": precise}) == (
        b'{"foo":123.40000000000000000001}'
    )
    assert decode_json(encode_json({"foo": precise}), use_decimal=True) == {
        "foo": precise
    }


@pytest.mark.parametrize(
    "value",
    [
        Decimal("NaN"),
        Decimal("Infinity"),
        [Decimal("-Infinity")],
        {"nested": Decimal("sNaN")},
        float("nan"),
        float("inf"),
    ],
)
def test_encode_json_non_finite(value: object) -> None:
    with pytest.raises(ValueError, match="Out of range"):
        encode_json({"foo": value})


def test_decode_json() -> None:
    assert decode_json(b'{"foo":"bar"}') == {"foo": "bar"}

    result = decode_json(b'{"a":123.4,"b":7}')
    assert isinstance(result["a"], float)
    assert isinstance(result["b"], int)

    precise = b'{"a":0.1000000000000000000001,"b":12345678901234567890}'
    result = decode_json(precise, use_decimal=True)
    assert result["a"] == Decimal("0.1000000000000000000001")
    assert result["b"] == 12345678901234567890


@pytest.mark.parametrize(
    "data",
    [b"not json", b"[1, 2]", b'"string"', b'{"a": NaN}', b"\xff\xfe"],
)
def test_decode_json_invalid(data: bytes) -> None:
    with pytest.raises(MalformedTokenError):
        decode_json(data)


def test_redact_token() -> None:
    assert redact_token("aaa.bbb.ccc") == "aaa.bbb.<redacted>"
    assert redact_token("aaa.bbb.ccc.ddd") == "aaa.bbb.<redacted>"
    assert redact_token("aaa.bbb") == "<redacted>"
    assert redact_token("") == "<redacted>"
