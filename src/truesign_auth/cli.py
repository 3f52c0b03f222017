# src/truesign_auth/cli.py

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from enum import Enum
from typing import Any, Sequence

import structlog

from .adapters.aes.decryptor import AesTokenDecryptor, encrypt_token
from .domain.constants import SchemaVersion
from .domain.entities import DecryptedToken

_KEY_HELP = "Encryption key (default: env TRUESIGN_ENCRYPTION_KEY)"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="truesign-token",
        description="Inspect or mint Truesign tokens (AES-256-CBC)",
    )
    parser.add_argument("--key", "-k", help=_KEY_HELP)

    # accepted after the subcommand too; SUPPRESS keeps an earlier --key
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--key", "-k", default=argparse.SUPPRESS, help=_KEY_HELP)

    sub = parser.add_subparsers(dest="command", required=True)

    decrypt = sub.add_parser(
        "decrypt", parents=[common], help="Decrypt a token and print its claims"
    )
    decrypt.add_argument("token", help="Raw token as received in ts-token / x-ts-token")
    decrypt.add_argument(
        "--schema",
        choices=[s.value for s in SchemaVersion],
        help="Issuer schema to read risk fields with (default: detect)",
    )

    mint = sub.add_parser(
        "mint", parents=[common], help="Encrypt a JSON payload into a token (testing only)"
    )
    mint.add_argument("payload", help="JSON object, or '-' to read it from stdin")
    mint.add_argument("--iv", help="16-character IV (default: random)")

    return parser.parse_args(args=argv)


def _resolve_key(args: argparse.Namespace) -> str:
    key = args.key or os.getenv("TRUESIGN_ENCRYPTION_KEY")
    if not key:
        raise ValueError("No key given: pass --key or set TRUESIGN_ENCRYPTION_KEY")
    return key


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


def token_to_dict(token: DecryptedToken) -> dict[str, Any]:
    data = {
        f.name: getattr(token, f.name)
        for f in dataclasses.fields(token)
        if f.name != "raw"
    }
    for name in ("email", "ip", "error"):
        if data[name] is not None:
            data[name] = dataclasses.asdict(data[name])
    return _jsonable(data)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    key = _resolve_key(args)

    if args.command == "decrypt":
        schema = SchemaVersion(args.schema) if args.schema else None
        token = AesTokenDecryptor(schema)(key, args.token)
        if token is None:
            raise ValueError("Token could not be decrypted")
        return {"token": token_to_dict(token)}

    raw = sys.stdin.read() if args.payload == "-" else args.payload
    claims = json.loads(raw)
    if not isinstance(claims, dict):
        raise ValueError("Payload must be a JSON object")
    return {"token": encrypt_token(key, claims, iv=args.iv)}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    # stdout is reserved for the JSON result; stdlib logging goes to stderr
    structlog.configure(logger_factory=structlog.stdlib.LoggerFactory())

    try:
        summary = _run(args)
    except ValueError as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 1

    json.dump({"ok": True, **summary}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
