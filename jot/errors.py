"""Exception types raised while encoding and decoding tokens."""

from __future__ import annotations

from typing import Any, Dict, Optional


class JotError(Exception):
    """Base exception for token codec failures.

    Each subclass stands for one failure kind so callers can tell malformed
    input apart from a rejected signature.
    """

    code = "JOT_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class StructureInvalid(JotError):
    """The token does not consist of exactly three dot-separated segments."""

    code = "STRUCTURE_INVALID"

    def __init__(self, segments: int):
        super().__init__(
            f"Expected 3 token segments (header.payload.signature), got {segments}",
            details={"segments": segments},
        )


class Base64DecodingFailed(JotError):
    """A value is not valid unpadded base64url."""

    code = "BASE64_DECODING_FAILED"

    def __init__(self, message: str = "Invalid base64url data", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class SchemaDecodingFailed(JotError):
    """Decoded JSON does not match the expected header, claims or key schema."""

    code = "SCHEMA_DECODING_FAILED"

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message, details={"errors": errors or []})

    @property
    def errors(self) -> list:
        return self.details["errors"]


class AlgorithmMismatch(JotError):
    """The header declares a different algorithm than the signer/validator implements."""

    code = "ALGORITHM_MISMATCH"

    def __init__(self, declared: Any, expected: Any):
        self.declared = declared
        self.expected = expected
        super().__init__(
            f"Token declares algorithm {_name(declared)!r} but {_name(expected)!r} is required",
            details={"declared": _name(declared), "expected": _name(expected)},
        )


class AlgorithmUnsupported(JotError):
    """A signer/validator was invoked with an algorithm it has no case for."""

    code = "ALGORITHM_UNSUPPORTED"

    def __init__(self, algorithm: Any):
        self.algorithm = algorithm
        super().__init__(
            f"Algorithm {_name(algorithm)!r} is not supported here",
            details={"algorithm": _name(algorithm)},
        )


class SignatureInvalid(JotError):
    """The validator rejected the token signature."""

    code = "SIGNATURE_INVALID"

    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__(message)


def _name(algorithm: Any) -> str:
    return getattr(algorithm, "value", algorithm)


__all__ = [
    "JotError",
    "StructureInvalid",
    "Base64DecodingFailed",
    "SchemaDecodingFailed",
    "AlgorithmMismatch",
    "AlgorithmUnsupported",
    "SignatureInvalid",
]
