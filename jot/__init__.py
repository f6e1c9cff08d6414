"""Jot: compact signed token (JWS/JWT) codec."""

from .claims import Audience, Claims
from .config import JotConfig, load_config
from .errors import (
    AlgorithmMismatch,
    AlgorithmUnsupported,
    Base64DecodingFailed,
    JotError,
    SchemaDecodingFailed,
    SignatureInvalid,
    StructureInvalid,
)
from .header import Algorithm, Header
from .keys import EllipticCurve, EllipticCurveKeyType, KeyDescription, KeyUse, RSAKeyType
from .token import Signer, Token, Validator

__version__ = "0.1.0"
__all__ = [
    "Algorithm",
    "AlgorithmMismatch",
    "AlgorithmUnsupported",
    "Audience",
    "Base64DecodingFailed",
    "Claims",
    "EllipticCurve",
    "EllipticCurveKeyType",
    "Header",
    "JotConfig",
    "JotError",
    "KeyDescription",
    "KeyUse",
    "RSAKeyType",
    "SchemaDecodingFailed",
    "SignatureInvalid",
    "Signer",
    "StructureInvalid",
    "Token",
    "Validator",
    "load_config",
]
