"""Public key descriptions (JSON Web Keys, RFC 7517)."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    model_serializer,
    model_validator,
)

from . import canonical
from .canonical import Base64URLBytes


class EllipticCurve(str, Enum):
    """Named curves an elliptic-curve key description may use."""

    P256 = "P-256"


class KeyUse(str, Enum):
    """Registered ``use`` values; any other string is kept as a custom use."""

    SIGNATURE = "sig"
    ENCRYPTION = "enc"


class RSAKeyType(BaseModel):
    """RSA key type marker."""

    model_config = ConfigDict(frozen=True)

    kty: Literal["RSA"] = "RSA"


class EllipticCurveKeyType(BaseModel):
    """Elliptic-curve key parameters: the curve and the raw point coordinates."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kty: Literal["EC"] = "EC"
    curve: EllipticCurve = Field(alias="crv")
    x: Base64URLBytes
    y: Base64URLBytes


KeyType = Annotated[Union[RSAKeyType, EllipticCurveKeyType], Field(discriminator="kty")]

KeyUseValue = Annotated[Union[KeyUse, str], Field(union_mode="left_to_right")]

_KEY_TYPE_FIELDS = {"RSA": (), "EC": ("crv", "x", "y")}


class KeyDescription(BaseModel):
    """Description of a public key's type and parameters.

    On the wire the key type is a flat ``kty`` tag next to its parameters::

        {"kty": "EC", "crv": "P-256", "x": "...", "y": "...", "use": "sig", "kid": "k1"}

    ``kty`` is matched case-insensitively when decoding and always written in
    canonical case.  ``use`` and ``kid`` are omitted when absent.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key_type: KeyType
    use: Optional[KeyUseValue] = None
    id: Optional[str] = Field(default=None, alias="kid")

    @classmethod
    def rsa(cls, use: Optional[Union[KeyUse, str]] = None, id: Optional[str] = None) -> "KeyDescription":
        return cls(key_type=RSAKeyType(), use=use, id=id)

    @classmethod
    def elliptic_curve(
        cls,
        x: bytes,
        y: bytes,
        curve: EllipticCurve = EllipticCurve.P256,
        use: Optional[Union[KeyUse, str]] = None,
        id: Optional[str] = None,
    ) -> "KeyDescription":
        return cls(
            key_type=EllipticCurveKeyType(curve=curve, x=x, y=y), use=use, id=id
        )

    @property
    def is_elliptic_curve(self) -> bool:
        return isinstance(self.key_type, EllipticCurveKeyType)

    @model_validator(mode="before")
    @classmethod
    def _dispatch_key_type(cls, data: Any) -> Any:
        """Fold the flat wire layout into ``key_type`` based on the ``kty`` tag."""
        if not isinstance(data, dict):
            return data
        # constructed from key type models rather than decoded from the wire
        if isinstance(data.get("key_type"), (RSAKeyType, EllipticCurveKeyType)):
            return data

        tag = data.get("kty")
        if not isinstance(tag, str):
            raise ValueError("key type ('kty') is missing or not a string")

        normalized = tag.upper()
        if normalized not in _KEY_TYPE_FIELDS:
            raise ValueError(f"key type {tag!r} is not decodable")

        key_type: Dict[str, Any] = {"kty": normalized}
        for name in _KEY_TYPE_FIELDS[normalized]:
            if name in data:
                key_type[name] = data[name]

        return {"key_type": key_type, "use": data.get("use"), "kid": data.get("kid")}

    @model_serializer
    def _flatten(self, info: SerializationInfo) -> Dict[str, Any]:
        data = self.key_type.model_dump(
            mode=info.mode, by_alias=True, context=info.context
        )
        if self.use is not None:
            data["use"] = self.use.value if isinstance(self.use, KeyUse) else self.use
        if self.id is not None:
            data["kid"] = self.id
        return data

    def to_json(self, canonical_form: bool = False) -> str:
        """Serialize the key description.

        The plain form (the default) is used for standalone key documents;
        the canonical form is the one embedded in token headers.
        """
        return canonical.encode(self, canonical=canonical_form).decode("utf-8")

    @classmethod
    def from_json(cls, data: Union[str, bytes], canonical_form: bool = False) -> "KeyDescription":
        """Parse a key description written by :meth:`to_json`.

        Raises:
            SchemaDecodingFailed: For unknown key types or missing EC parameters.
        """
        return canonical.decode(cls, data, canonical=canonical_form)


__all__ = [
    "EllipticCurve",
    "EllipticCurveKeyType",
    "KeyDescription",
    "KeyType",
    "KeyUse",
    "RSAKeyType",
]
