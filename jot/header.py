"""Token header and the recognized signing algorithms."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import AlgorithmMismatch
from .keys import KeyDescription


class Algorithm(str, Enum):
    """Signing algorithms a header may declare.

    The set is closed: a header naming any other algorithm fails to decode.
    """

    NONE = "none"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    ES256 = "ES256"
    RS256 = "RS256"

    def check(self, expected: "Algorithm") -> None:
        """Raise :class:`AlgorithmMismatch` unless this is ``expected``."""
        expected = Algorithm(expected)
        if self is not expected:
            raise AlgorithmMismatch(self, expected)


class Header(BaseModel):
    """JOSE header of a token.

    Subclass to carry additional header parameters; unknown parameters in a
    decoded header are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    algorithm: Algorithm = Field(alias="alg")
    type: Optional[str] = Field(default=None, alias="typ")
    key_id: Optional[str] = Field(default=None, alias="kid")
    key: Optional[KeyDescription] = Field(default=None, alias="jwk")


__all__ = ["Algorithm", "Header"]
