"""Registered claims and the polymorphic audience value."""

from __future__ import annotations

from typing import Annotated, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel

from .canonical import EpochDateTime


class Audience(RootModel[Union[str, Tuple[str, ...]]]):
    """The ``aud`` claim: either a single string or a list of strings.

    The value keeps the shape it was created with; ``Audience("a")`` and
    ``Audience(["a"])`` are different values and encode differently.
    Decoding tries a single string first, then a list of strings.
    """

    model_config = ConfigDict(frozen=True)

    root: Annotated[Union[str, Tuple[str, ...]], Field(union_mode="left_to_right")]

    @property
    def is_single(self) -> bool:
        return isinstance(self.root, str)

    @property
    def values(self) -> Tuple[str, ...]:
        """All audiences as a tuple, regardless of shape."""
        return (self.root,) if isinstance(self.root, str) else self.root

    def __contains__(self, audience: object) -> bool:
        return audience in self.values


class Claims(BaseModel):
    """Claim-set with the seven registered claims, all absent by default.

    Subclass it and declare application claims as regular fields; they are
    written into the same JSON object as the registered ones::

        class SessionClaims(Claims):
            tenant: str
            scopes: Tuple[str, ...] = ()

    Absent claims are omitted from the encoded payload, never written as
    ``null``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    issuer: Optional[str] = Field(default=None, alias="iss")
    subject: Optional[str] = Field(default=None, alias="sub")
    audience: Optional[Audience] = Field(default=None, alias="aud")
    jwt_id: Optional[str] = Field(default=None, alias="jti")
    not_before: Optional[EpochDateTime] = Field(default=None, alias="nbf")
    issued_at: Optional[EpochDateTime] = Field(default=None, alias="iat")
    expires_at: Optional[EpochDateTime] = Field(default=None, alias="exp")


__all__ = ["Audience", "Claims"]
