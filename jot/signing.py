"""Signer and validator adapters for concrete algorithms.

Every adapter checks the algorithm declared in the token header before
touching any key material.  Adapters bound to a single algorithm (ES256,
RS256, ``none``) raise :class:`~jot.errors.AlgorithmMismatch` for anything
else; the HMAC adapters serve the whole HS family and raise
:class:`~jot.errors.AlgorithmUnsupported` outside of it, unless pinned to one
algorithm.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any, Callable, Dict, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm, RSAAlgorithm

from .errors import AlgorithmMismatch, AlgorithmUnsupported
from .header import Algorithm
from .keys import EllipticCurve, EllipticCurveKeyType, KeyDescription, KeyUse
from .token import Signer, Validator

logger = logging.getLogger(__name__)

_HMAC_DIGESTS: Dict[Algorithm, Callable[..., Any]] = {
    Algorithm.HS256: hashlib.sha256,
    Algorithm.HS384: hashlib.sha384,
    Algorithm.HS512: hashlib.sha512,
}

_P256_COORDINATE_SIZE = 32


def _require(declared: Algorithm, expected: Algorithm) -> None:
    try:
        declared.check(expected)
    except AlgorithmMismatch:
        logger.warning(
            f"Refusing token declaring {declared.value}; adapter implements {expected.value}"
        )
        raise


def _secret_bytes(key: Union[str, bytes]) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else bytes(key)


def _hmac(
    secret: bytes, algorithm: Algorithm, message: bytes, pinned: Optional[Algorithm]
) -> bytes:
    if pinned is not None:
        _require(algorithm, pinned)
    digest = _HMAC_DIGESTS.get(algorithm)
    if digest is None:
        raise AlgorithmUnsupported(algorithm)
    return hmac.new(secret, message, digest).digest()


def hmac_signer(key: Union[str, bytes], algorithm: Optional[Algorithm] = None) -> Signer:
    """Sign with HMAC-SHA2 (HS256, HS384 or HS512, as the header declares).

    Args:
        key: Shared secret; text is UTF-8 encoded.
        algorithm: Restrict the signer to this one algorithm.
    """
    secret = _secret_bytes(key)
    pinned = Algorithm(algorithm) if algorithm is not None else None

    def sign(declared: Algorithm, message: bytes) -> bytes:
        return _hmac(secret, declared, message, pinned)

    return sign


def hmac_validator(key: Union[str, bytes], algorithm: Optional[Algorithm] = None) -> Validator:
    """Verify HMAC-SHA2 signatures with a constant-time comparison."""
    secret = _secret_bytes(key)
    pinned = Algorithm(algorithm) if algorithm is not None else None

    def validate(declared: Algorithm, message: bytes, signature: bytes) -> bool:
        return hmac.compare_digest(_hmac(secret, declared, message, pinned), signature)

    return validate


def es256_signer(private_key: Any) -> Signer:
    """Sign with ECDSA over P-256 and SHA-256.

    ``private_key`` is a ``cryptography`` EC private key or its PEM text. The
    signature is the raw 64-byte ``r || s`` concatenation.
    """
    backend = ECAlgorithm(ECAlgorithm.SHA256)
    prepared = backend.prepare_key(private_key)

    def sign(declared: Algorithm, message: bytes) -> bytes:
        _require(declared, Algorithm.ES256)
        return backend.sign(message, prepared)

    return sign


def es256_validator(public_key: Any) -> Validator:
    """Verify raw ``r || s`` ECDSA P-256/SHA-256 signatures."""
    backend = ECAlgorithm(ECAlgorithm.SHA256)
    prepared = backend.prepare_key(public_key)

    def validate(declared: Algorithm, message: bytes, signature: bytes) -> bool:
        _require(declared, Algorithm.ES256)
        return backend.verify(message, prepared, signature)

    return validate


def rs256_signer(private_key: Any) -> Signer:
    """Sign with RSASSA-PKCS1-v1_5 and SHA-256."""
    backend = RSAAlgorithm(RSAAlgorithm.SHA256)
    prepared = backend.prepare_key(private_key)

    def sign(declared: Algorithm, message: bytes) -> bytes:
        _require(declared, Algorithm.RS256)
        return backend.sign(message, prepared)

    return sign


def rs256_validator(public_key: Any) -> Validator:
    """Verify RSASSA-PKCS1-v1_5 / SHA-256 signatures."""
    backend = RSAAlgorithm(RSAAlgorithm.SHA256)
    prepared = backend.prepare_key(public_key)

    def validate(declared: Algorithm, message: bytes, signature: bytes) -> bool:
        _require(declared, Algorithm.RS256)
        return backend.verify(message, prepared, signature)

    return validate


def unsecured_signer() -> Signer:
    """Produce the empty signature of an unsecured (``alg: none``) token."""

    def sign(declared: Algorithm, message: bytes) -> bytes:
        _require(declared, Algorithm.NONE)
        return b""

    return sign


def unsecured_validator() -> Validator:
    """Accept unsecured tokens, which must carry an empty signature."""

    def validate(declared: Algorithm, message: bytes, signature: bytes) -> bool:
        _require(declared, Algorithm.NONE)
        return signature == b""

    return validate


def p256_key_description(
    key: Union[ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey],
    use: Optional[Union[KeyUse, str]] = None,
    id: Optional[str] = None,
) -> KeyDescription:
    """Describe a P-256 public key; x and y are its 32-byte big-endian coordinates."""
    if isinstance(key, ec.EllipticCurvePrivateKey):
        key = key.public_key()
    if not isinstance(key.curve, ec.SECP256R1):
        raise ValueError(f"Expected a P-256 key, got curve {key.curve.name}")

    numbers = key.public_numbers()
    return KeyDescription.elliptic_curve(
        x=numbers.x.to_bytes(_P256_COORDINATE_SIZE, "big"),
        y=numbers.y.to_bytes(_P256_COORDINATE_SIZE, "big"),
        curve=EllipticCurve.P256,
        use=use,
        id=id,
    )


def p256_public_key(description: KeyDescription) -> ec.EllipticCurvePublicKey:
    """Rebuild the ``cryptography`` public key from a P-256 key description."""
    key_type = description.key_type
    if not isinstance(key_type, EllipticCurveKeyType) or key_type.curve is not EllipticCurve.P256:
        raise ValueError("Key description does not describe a P-256 key")

    numbers = ec.EllipticCurvePublicNumbers(
        x=int.from_bytes(key_type.x, "big"),
        y=int.from_bytes(key_type.y, "big"),
        curve=ec.SECP256R1(),
    )
    return numbers.public_key()


__all__ = [
    "es256_signer",
    "es256_validator",
    "hmac_signer",
    "hmac_validator",
    "p256_key_description",
    "p256_public_key",
    "rs256_signer",
    "rs256_validator",
    "unsecured_signer",
    "unsecured_validator",
]
