"""Canonical JSON encoding for token headers and claim-sets.

Signatures cover the exact serialized bytes, so headers and payloads are
written deterministically: object keys sorted, no insignificant whitespace,
binary values as unpadded base64url and timestamps as integer seconds since
the Unix epoch.

The rules are carried by a pydantic serialization/validation context.  Field
types that need special treatment (:data:`Base64URLBytes`,
:data:`EpochDateTime`) look the context up, so the same model can also be
written in the plain form (standard base64, ISO 8601, declaration order) when
it is used outside a token, e.g. a standalone key description.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    PlainSerializer,
    PlainValidator,
    SerializationInfo,
    ValidationError,
    ValidationInfo,
)

from . import base64url
from .errors import Base64DecodingFailed, SchemaDecodingFailed

CANONICAL = "jot_canonical"

ModelT = TypeVar("ModelT", bound=BaseModel)


def context(canonical: bool = True) -> Dict[str, Any]:
    """Return the pydantic context selecting canonical or plain encoding."""
    return {CANONICAL: canonical}


def is_canonical(info: Union[SerializationInfo, ValidationInfo, None]) -> bool:
    ctx: Optional[Dict[str, Any]] = getattr(info, "context", None)
    return bool(ctx and ctx.get(CANONICAL))


def _serialize_bytes(value: bytes, info: SerializationInfo) -> str:
    if is_canonical(info):
        return base64url.encode(value)
    return base64.b64encode(value).decode("ascii")


def _validate_bytes(value: Any, info: ValidationInfo) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise ValueError("expected a base64 encoded string")
    if is_canonical(info):
        try:
            return base64url.decode(value)
        except Base64DecodingFailed as exc:
            raise ValueError(exc.message) from exc
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc


def _serialize_datetime(value: datetime, info: SerializationInfo) -> Union[int, str]:
    if is_canonical(info):
        return int(value.timestamp())
    return value.isoformat()


def _validate_datetime(value: Any, info: ValidationInfo) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if is_canonical(info):
        # bool is an int subclass but never a timestamp
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("expected integer seconds since the Unix epoch")
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"timestamp {value} is out of range") from exc

    if not isinstance(value, str):
        raise ValueError("expected an ISO 8601 timestamp string")
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


Base64URLBytes = Annotated[
    bytes,
    PlainValidator(_validate_bytes),
    PlainSerializer(_serialize_bytes, return_type=str),
]
"""Binary value; base64url on the token wire, standard base64 otherwise."""

EpochDateTime = Annotated[
    datetime,
    PlainValidator(_validate_datetime),
    PlainSerializer(_serialize_datetime, return_type=Union[int, str]),
]
"""Timestamp; integer epoch seconds on the token wire, ISO 8601 otherwise."""


def dump(model: BaseModel, canonical: bool = True) -> Any:
    """Return the JSON-compatible data for ``model``; absent values are omitted."""
    return model.model_dump(
        mode="json", by_alias=True, exclude_none=True, context=context(canonical)
    )


def encode(model: BaseModel, canonical: bool = True) -> bytes:
    """Serialize ``model`` to UTF-8 JSON bytes.

    In canonical mode keys are sorted at every nesting level so that equal
    models always produce identical bytes.
    """
    return json.dumps(
        dump(model, canonical),
        sort_keys=canonical,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def decode(model_cls: Type[ModelT], data: Union[str, bytes], canonical: bool = True) -> ModelT:
    """Parse JSON ``data`` into ``model_cls``.

    Raises:
        SchemaDecodingFailed: If ``data`` is not JSON or does not fit the schema.
    """
    try:
        return model_cls.model_validate_json(data, context=context(canonical))
    except ValidationError as exc:
        locations = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "<root>"
            for error in exc.errors()
        )
        raise SchemaDecodingFailed(
            f"Could not decode {model_cls.__name__} (at {locations}): {exc.error_count()} error(s)",
            errors=exc.errors(include_url=False),
        ) from exc


__all__ = [
    "CANONICAL",
    "Base64URLBytes",
    "EpochDateTime",
    "context",
    "is_canonical",
    "dump",
    "encode",
    "decode",
]
