"""Compact signed token container.

A token is written as three base64url segments joined by ``.``::

    base64url(header) "." base64url(payload) "." base64url(signature)

Signing and verification are delegated to caller supplied functions so the
container never depends on a particular cryptography backend.  See
:mod:`jot.signing` for ready-made HMAC, ECDSA and RSA adapters.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from . import base64url, canonical
from .claims import Claims
from .errors import Base64DecodingFailed, SignatureInvalid, StructureInvalid
from .header import Algorithm, Header

logger = logging.getLogger(__name__)

SEPARATOR = "."

Signer = Callable[[Algorithm, bytes], bytes]
"""``(algorithm, signing_input) -> signature``; may raise."""

Validator = Callable[[Algorithm, bytes, bytes], bool]
"""``(algorithm, signing_input, signature) -> valid``; may raise."""

HeaderT = TypeVar("HeaderT", bound=Header)
ClaimsT = TypeVar("ClaimsT", bound=Claims)


def split(encoded: str) -> Tuple[str, str, str]:
    """Split a compact token into its header, payload and signature segments.

    Raises:
        StructureInvalid: If there are not exactly three segments.
    """
    segments = encoded.split(SEPARATOR)
    if len(segments) != 3:
        raise StructureInvalid(len(segments))
    return segments[0], segments[1], segments[2]


def decode_segment(segment: str, label: str) -> bytes:
    """Base64url-decode one segment; ``label`` names it in the error."""
    try:
        return base64url.decode(segment)
    except Base64DecodingFailed as exc:
        raise Base64DecodingFailed(
            f"Could not decode token {label}: {exc.message}",
            details={"segment": label},
        ) from exc


class Token(BaseModel, Generic[HeaderT, ClaimsT]):
    """A header and a claim-set that can be signed into the compact form.

    Parametrize the class to pick the header and claims types used when
    decoding::

        SessionToken = Token[Header, SessionClaims]
        token = SessionToken.decode(encoded, validator)

    Without parameters, :class:`Header` and :class:`Claims` are used.
    """

    model_config = ConfigDict(frozen=True)

    header: HeaderT
    payload: ClaimsT

    def signing_input(self) -> bytes:
        """Return the bytes the signature is computed over."""
        header_segment = base64url.encode(canonical.encode(self.header))
        payload_segment = base64url.encode(canonical.encode(self.payload))
        return f"{header_segment}{SEPARATOR}{payload_segment}".encode("ascii")

    def encode(self, signer: Signer) -> str:
        """Sign the token and return its compact serialization.

        ``signer`` receives the algorithm declared in the header and the
        signing input; anything it raises propagates unchanged.
        """
        message = self.signing_input()
        signature = signer(self.header.algorithm, message)
        logger.debug(
            f"Encoded token with algorithm {self.header.algorithm.value} "
            f"({len(signature)} signature bytes)"
        )
        return f"{message.decode('ascii')}{SEPARATOR}{base64url.encode(signature)}"

    @classmethod
    def decode(cls, encoded: str, validator: Validator) -> "Token[HeaderT, ClaimsT]":
        """Parse and verify a compact token.

        The signature is checked against the segments exactly as transmitted,
        not against a re-serialization of the decoded values.

        Raises:
            StructureInvalid: If ``encoded`` does not have three segments.
            Base64DecodingFailed: If a segment is not valid base64url.
            SchemaDecodingFailed: If the header or payload does not fit its model.
            SignatureInvalid: If ``validator`` returns ``False``.
        """
        header_segment, payload_segment, signature_segment = split(encoded)
        header_bytes = decode_segment(header_segment, "header")
        payload_bytes = decode_segment(payload_segment, "payload")
        signature = decode_segment(signature_segment, "signature")

        header = canonical.decode(cls._part_type("header", Header), header_bytes)
        payload = canonical.decode(cls._part_type("payload", Claims), payload_bytes)

        message = f"{header_segment}{SEPARATOR}{payload_segment}".encode("ascii")
        if not validator(header.algorithm, message, signature):
            logger.warning(
                f"Rejected token signature for algorithm {header.algorithm.value}"
            )
            raise SignatureInvalid()

        logger.debug(f"Decoded token with algorithm {header.algorithm.value}")
        return cls(header=header, payload=payload)

    @classmethod
    def _part_type(cls, name: str, default: Type[BaseModel]) -> Type[BaseModel]:
        annotation = cls.model_fields[name].annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return annotation
        return default


__all__ = ["SEPARATOR", "Signer", "Token", "Validator", "decode_segment", "split"]
