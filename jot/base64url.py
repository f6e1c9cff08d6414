"""Unpadded URL-safe base64 as used by every token segment."""

from __future__ import annotations

import base64
import binascii
import re

from .errors import Base64DecodingFailed

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode(data: bytes) -> str:
    """Return ``data`` as base64url text with the ``=`` padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def decode(value: str | bytes) -> bytes:
    """Decode unpadded base64url text.

    Padding is restored so the length is a multiple of four. A length that
    leaves a remainder of one can never come from an encoder and is rejected,
    as is any character outside the URL-safe alphabet (including ``=``).

    Raises:
        Base64DecodingFailed: If ``value`` is not valid base64url.
    """
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise Base64DecodingFailed("Base64url data must be ASCII") from exc

    if not _ALPHABET.fullmatch(value):
        raise Base64DecodingFailed(
            "Base64url data contains characters outside the URL-safe alphabet"
        )

    remainder = len(value) % 4
    if remainder == 1:
        raise Base64DecodingFailed(
            f"Base64url data has an impossible length of {len(value)}",
            details={"length": len(value)},
        )

    padded = value + "=" * ((4 - remainder) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodingFailed(f"Could not decode base64url data: {exc}") from exc


__all__ = ["encode", "decode"]
