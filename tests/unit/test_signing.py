"""Tests for the algorithm-checked signer/validator adapters."""

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm

from jot import signing
from jot.errors import AlgorithmMismatch, AlgorithmUnsupported
from jot.header import Algorithm
from jot.keys import EllipticCurve, KeyUse

MESSAGE = b"header.payload"


@pytest.fixture(scope="module")
def p256_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.mark.parametrize(
    "algorithm, size",
    [(Algorithm.HS256, 32), (Algorithm.HS384, 48), (Algorithm.HS512, 64)],
)
def test_hmac_family(algorithm, size):
    signature = signing.hmac_signer(b"thekey")(algorithm, MESSAGE)
    assert len(signature) == size
    validate = signing.hmac_validator("thekey")
    assert validate(algorithm, MESSAGE, signature)
    assert not validate(algorithm, MESSAGE + b"x", signature)


@pytest.mark.parametrize("algorithm", [Algorithm.ES256, Algorithm.RS256, Algorithm.NONE])
def test_hmac_rejects_other_algorithms(algorithm):
    with pytest.raises(AlgorithmUnsupported) as info:
        signing.hmac_signer(b"thekey")(algorithm, MESSAGE)
    assert info.value.algorithm is algorithm
    with pytest.raises(AlgorithmUnsupported):
        signing.hmac_validator(b"thekey")(algorithm, MESSAGE, b"")


def test_pinned_hmac_refuses_other_hmac_algorithms():
    signature = signing.hmac_signer(b"thekey")(Algorithm.HS512, MESSAGE)
    validate = signing.hmac_validator(b"thekey", algorithm=Algorithm.HS256)
    with pytest.raises(AlgorithmMismatch):
        validate(Algorithm.HS512, MESSAGE, signature)


def test_es256_round_trip(p256_key):
    signature = signing.es256_signer(p256_key)(Algorithm.ES256, MESSAGE)
    assert len(signature) == 64
    validate = signing.es256_validator(p256_key.public_key())
    assert validate(Algorithm.ES256, MESSAGE, signature)
    assert not validate(Algorithm.ES256, b"tampered", signature)
    assert not validate(Algorithm.ES256, MESSAGE, signature[:10])


@pytest.mark.parametrize("declared", [Algorithm.HS256, Algorithm.NONE])
def test_es256_checks_algorithm_before_verifying(p256_key, monkeypatch, declared):
    calls = []
    monkeypatch.setattr(ECAlgorithm, "verify", lambda *args: calls.append(args) or True)
    monkeypatch.setattr(ECAlgorithm, "sign", lambda *args: calls.append(args) or b"")

    validate = signing.es256_validator(p256_key.public_key())
    with pytest.raises(AlgorithmMismatch):
        validate(declared, MESSAGE, b"")
    with pytest.raises(AlgorithmMismatch):
        signing.es256_signer(p256_key)(declared, MESSAGE)
    assert calls == []


def test_unsecured_adapters():
    assert signing.unsecured_signer()(Algorithm.NONE, MESSAGE) == b""
    validate = signing.unsecured_validator()
    assert validate(Algorithm.NONE, MESSAGE, b"")
    assert not validate(Algorithm.NONE, MESSAGE, b"sig")
    with pytest.raises(AlgorithmMismatch):
        validate(Algorithm.HS256, MESSAGE, b"")


def test_p256_key_description_round_trip(p256_key):
    description = signing.p256_key_description(p256_key, use=KeyUse.SIGNATURE, id="k1")
    assert description.key_type.curve is EllipticCurve.P256
    assert len(description.key_type.x) == 32
    assert len(description.key_type.y) == 32
    assert description.id == "k1"

    rebuilt = signing.p256_public_key(description)
    assert rebuilt.public_numbers() == p256_key.public_key().public_numbers()


def test_p256_key_description_rejects_other_curves():
    with pytest.raises(ValueError):
        signing.p256_key_description(ec.generate_private_key(ec.SECP384R1()).public_key())
