"""Command line interface for issuing and checking tokens."""

from __future__ import annotations

import json
from typing import Any, List, NoReturn, Optional

import typer
import yaml
from pydantic import ConfigDict, ValidationError

from jot import canonical
from jot.claims import Claims
from jot.config import load_config
from jot.errors import JotError, SchemaDecodingFailed
from jot.header import Algorithm, Header
from jot.token import Token, decode_segment, split

app = typer.Typer(help="Issue, verify and inspect compact signed tokens")


class OpenClaims(Claims):
    """Claims that keep every member of the payload, registered or not."""

    model_config = ConfigDict(extra="allow")

    def null_claims(self) -> List[str]:
        """Wire names of the members given as JSON null."""
        names = [
            type(self).model_fields[name].alias or name
            for name in self.model_fields_set
            if name in type(self).model_fields and getattr(self, name) is None
        ]
        names.extend(name for name, value in (self.model_extra or {}).items() if value is None)
        return sorted(names)


CliToken = Token[Header, OpenClaims]


def _fail(exc: Exception) -> NoReturn:
    code = getattr(exc, "code", type(exc).__name__)
    typer.secho(f"Error [{code}]: {exc}", fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _print_json(label: str, data: Any) -> None:
    typer.echo(f"{label}:")
    typer.echo(json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False))


@app.callback()
def main() -> None:
    """Jot CLI entry point."""
    pass


@app.command("encode")
def encode_command(
    claims: str = typer.Argument(..., help="Claims as a JSON object"),
    algorithm: Optional[Algorithm] = typer.Option(
        None, help="Signing algorithm (default: configured algorithm)"
    ),
    key_id: Optional[str] = typer.Option(None, help="Value of the 'kid' header"),
    token_type: Optional[str] = typer.Option(
        None, "--type", help="Value of the 'typ' header"
    ),
) -> None:
    """
    Sign a claim-set and print the compact token.

    Timestamps (iat, nbf, exp) are given as integer seconds since the epoch.
    Key material comes from the configuration file or JOT_SECRET. Claims given
    as null are refused rather than silently left out of the token.

    Example:
        jot encode '{"sub": "1234567890", "iat": 1516239022}'
        jot encode '{"sub": "alice"}' --algorithm ES256 --key-id signing-1
    """
    try:
        config = load_config()
        payload = canonical.decode(OpenClaims, claims)
        nulls = payload.null_claims()
        if nulls:
            raise SchemaDecodingFailed(f"Claims must not be null: {', '.join(nulls)}")
        header = Header(
            algorithm=algorithm or config.algorithm,
            type=token_type or config.type,
            key_id=key_id or config.key_id,
        )
        token = CliToken(header=header, payload=payload)
        encoded = token.encode(config.signer(header.algorithm))
    except (JotError, ValidationError, ValueError, OSError, yaml.YAMLError) as exc:
        _fail(exc)
    typer.echo(encoded)


@app.command("decode")
def decode_command(token: str) -> None:
    """
    Verify a token with the configured key and print its header and payload.

    Exits with code 1 and the error kind (e.g. SIGNATURE_INVALID,
    ALGORITHM_MISMATCH) when the token is rejected.
    """
    try:
        config = load_config()
        decoded = CliToken.decode(token.strip(), config.validator())
    except (JotError, ValidationError, ValueError, OSError, yaml.YAMLError) as exc:
        _fail(exc)
    _print_json("Header", canonical.dump(decoded.header))
    _print_json("Payload", canonical.dump(decoded.payload))


@app.command("inspect")
def inspect_command(token: str) -> None:
    """Print header and payload WITHOUT verifying the signature."""
    try:
        header_segment, payload_segment, signature_segment = split(token.strip())
        header = canonical.decode(Header, decode_segment(header_segment, "header"))
        payload = canonical.decode(OpenClaims, decode_segment(payload_segment, "payload"))
    except JotError as exc:
        _fail(exc)
    _print_json("Header", canonical.dump(header))
    _print_json("Payload", canonical.dump(payload))
    typer.echo(f"Signature (base64url encoded):\n{signature_segment}")
    typer.secho("Signature NOT verified", fg=typer.colors.YELLOW)
