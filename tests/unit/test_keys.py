"""Tests for key descriptions."""

import pytest

from jot.errors import SchemaDecodingFailed
from jot.keys import (
    EllipticCurve,
    EllipticCurveKeyType,
    KeyDescription,
    KeyUse,
    RSAKeyType,
)


def _ec_key() -> KeyDescription:
    return KeyDescription.elliptic_curve(
        x=b"abc", y=b"def", use=KeyUse.SIGNATURE, id="keyid"
    )


def test_ec_key_coding():
    key = _ec_key()
    decoded = KeyDescription.from_json(key.to_json())
    assert decoded == key
    assert hash(decoded) == hash(key)


def test_ec_key_plain_layout():
    assert _ec_key().to_json() == (
        '{"kty":"EC","crv":"P-256","x":"YWJj","y":"ZGVm","use":"sig","kid":"keyid"}'
    )


def test_ec_key_canonical_layout():
    assert _ec_key().to_json(canonical_form=True) == (
        '{"crv":"P-256","kid":"keyid","kty":"EC","use":"sig","x":"YWJj","y":"ZGVm"}'
    )


def test_ec_key_coordinates_use_each_modes_alphabet():
    key = KeyDescription.elliptic_curve(x=b"\xfb\xff", y=b"ab")
    assert key.to_json() == '{"kty":"EC","crv":"P-256","x":"+/8=","y":"YWI="}'
    assert key.to_json(canonical_form=True) == (
        '{"crv":"P-256","kty":"EC","x":"-_8","y":"YWI"}'
    )
    assert KeyDescription.from_json(key.to_json(canonical_form=True), canonical_form=True) == key


def test_rsa_key_omits_absent_fields():
    key = KeyDescription.rsa()
    assert key.to_json() == '{"kty":"RSA"}'
    assert not key.is_elliptic_curve


@pytest.mark.parametrize("tag", ["RSA", "rsa", "Rsa"])
def test_rsa_tag_is_case_insensitive(tag):
    key = KeyDescription.from_json(f'{{"kty":"{tag}","kid":"r1"}}')
    assert key.key_type == RSAKeyType()
    assert key.id == "r1"
    assert key.to_json() == '{"kty":"RSA","kid":"r1"}'


def test_ec_tag_is_case_insensitive():
    key = KeyDescription.from_json('{"kty":"ec","crv":"P-256","x":"YWJj","y":"ZGVm"}')
    assert isinstance(key.key_type, EllipticCurveKeyType)
    assert key.key_type.curve is EllipticCurve.P256
    assert key.key_type.x == b"abc"
    assert key.to_json().startswith('{"kty":"EC"')


@pytest.mark.parametrize(
    "document",
    [
        '{"kty":"oct","k":"c2VjcmV0"}',
        '{"kid":"no-type"}',
        '{"kty":7}',
        '{"kty":"EC","x":"YWJj","y":"ZGVm"}',
        '{"kty":"EC","crv":"P-256","y":"ZGVm"}',
        '{"kty":"EC","crv":"P-256","x":"YWJj"}',
        '{"kty":"EC","crv":"P-384","x":"YWJj","y":"ZGVm"}',
        '{"key_type":{"kty":"EC","crv":"P-256","x":"YWJj","y":"ZGVm"}}',
        '{"key_type":{"kty":"RSA"},"kid":"k1"}',
    ],
)
def test_undecodable_keys(document):
    with pytest.raises(SchemaDecodingFailed):
        KeyDescription.from_json(document)


def test_registered_uses():
    assert KeyDescription.from_json('{"kty":"RSA","use":"sig"}').use is KeyUse.SIGNATURE
    assert KeyDescription.from_json('{"kty":"RSA","use":"enc"}').use is KeyUse.ENCRYPTION


def test_custom_use_is_kept_verbatim():
    key = KeyDescription.from_json('{"kty":"RSA","use":"wrap"}')
    assert key.use == "wrap"
    assert not isinstance(key.use, KeyUse)
    assert key.to_json() == '{"kty":"RSA","use":"wrap"}'
