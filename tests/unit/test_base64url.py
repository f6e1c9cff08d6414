"""Tests for the unpadded base64url codec."""

import pytest

from jot import base64url
from jot.errors import Base64DecodingFailed


def test_encode_uses_url_safe_alphabet_without_padding():
    assert base64url.encode(b"foo+bar/baz") == "Zm9vK2Jhci9iYXo"
    assert base64url.encode(b"\xfb\xff") == "-_8"


def test_decode_restores_padding():
    assert base64url.decode("YWJj") == b"abc"
    assert base64url.decode("YWI") == b"ab"
    assert base64url.decode("YQ") == b"a"


def test_decode_url_safe_characters():
    assert base64url.decode("-_8") == b"\xfb\xff"
    assert base64url.decode(b"Zm9vK2Jhci9iYXo") == b"foo+bar/baz"


def test_empty_input_round_trips():
    assert base64url.encode(b"") == ""
    assert base64url.decode("") == b""


def test_round_trip_every_length():
    data = bytes(range(256))
    for size in range(0, 40):
        assert base64url.decode(base64url.encode(data[:size])) == data[:size]


def test_decode_rejects_remainder_of_one():
    with pytest.raises(Base64DecodingFailed):
        base64url.decode("YWJjY")


@pytest.mark.parametrize("value", ["YW=J", "YQ==", "ab+c", "ab/c", "a b", "é", "YWJ\n", "YWJj\n"])
def test_decode_rejects_characters_outside_alphabet(value):
    with pytest.raises(Base64DecodingFailed):
        base64url.decode(value)


def test_trailing_newline_fails_the_alphabet_check():
    with pytest.raises(Base64DecodingFailed, match="outside the URL-safe alphabet"):
        base64url.decode("YWJj\n")
