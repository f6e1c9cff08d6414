from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel

from .header import Algorithm
from .token import Signer, Validator


class JotConfig(BaseModel):
    """Defaults and key material used when issuing or verifying tokens."""

    algorithm: Algorithm = Algorithm.HS256
    type: Optional[str] = "JWT"
    key_id: Optional[str] = None
    secret: Optional[str] = None
    private_key_path: Optional[str] = None
    public_key_path: Optional[str] = None

    def signer(self, algorithm: Optional[Algorithm] = None) -> Signer:
        """Build the signer for ``algorithm`` (default: the configured one)."""
        from . import signing

        algorithm = Algorithm(algorithm or self.algorithm)
        if algorithm is Algorithm.NONE:
            return signing.unsecured_signer()
        if algorithm in (Algorithm.HS256, Algorithm.HS384, Algorithm.HS512):
            return signing.hmac_signer(self._require_secret(), algorithm)
        if algorithm is Algorithm.ES256:
            return signing.es256_signer(self._read_key(self.private_key_path, "private_key_path"))
        if algorithm is Algorithm.RS256:
            return signing.rs256_signer(self._read_key(self.private_key_path, "private_key_path"))
        raise ValueError(f"Unsupported signing algorithm: {algorithm.value}")

    def validator(self, algorithm: Optional[Algorithm] = None) -> Validator:
        """Build the validator for ``algorithm`` (default: the configured one).

        Asymmetric algorithms use ``public_key_path`` and fall back to the
        private key when no public key is configured.
        """
        from . import signing

        algorithm = Algorithm(algorithm or self.algorithm)
        if algorithm is Algorithm.NONE:
            return signing.unsecured_validator()
        if algorithm in (Algorithm.HS256, Algorithm.HS384, Algorithm.HS512):
            return signing.hmac_validator(self._require_secret(), algorithm)

        path = self.public_key_path or self.private_key_path
        if algorithm is Algorithm.ES256:
            return signing.es256_validator(self._read_key(path, "public_key_path"))
        if algorithm is Algorithm.RS256:
            return signing.rs256_validator(self._read_key(path, "public_key_path"))
        raise ValueError(f"Unsupported signing algorithm: {algorithm.value}")

    def _require_secret(self) -> str:
        if not self.secret:
            raise ValueError("No HMAC secret configured (set 'secret' or JOT_SECRET)")
        return self.secret

    @staticmethod
    def _read_key(path: Optional[str], setting: str) -> bytes:
        if not path:
            raise ValueError(f"No key file configured (set '{setting}')")
        return Path(path).expanduser().read_bytes()


def load_config(path: Optional[str] = None) -> JotConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JOT_CONFIG env
            variable or 'jot.yaml' in the current directory.
    """

    config_path = path or os.getenv("JOT_CONFIG", "jot.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = JotConfig(**data)
    else:
        config = JotConfig()

    env_secret = os.getenv("JOT_SECRET")
    if env_secret:
        config.secret = env_secret
    env_algorithm = os.getenv("JOT_ALGORITHM")
    if env_algorithm:
        config.algorithm = Algorithm(env_algorithm)
    return config
