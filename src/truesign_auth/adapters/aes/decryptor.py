"""
AES-256-CBC token codec.

Wire format:

    token = IV || base64(AES-256-CBC(PKCS#7(payload_json)))

IV is the first 16 characters of the token taken as raw UTF-8 bytes; the
key is the UTF-8 encoding of the configured encryption key (32 bytes).
"""

from __future__ import annotations

import base64
import binascii
import json
import secrets
import string
from typing import Any, Dict, Mapping, Optional

import structlog
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ...domain.constants import IV_LENGTH, KEY_LENGTH, SchemaVersion
from ...domain.entities import DecryptedToken
from ...domain.exceptions import TokenDecryptionError
from ...domain.ports import TokenDecryptor

logger = structlog.get_logger(__name__)

_BLOCK_BITS = algorithms.AES.block_size
_IV_ALPHABET = string.ascii_letters + string.digits


def is_valid_key(key: str) -> bool:
    """True when `key` encodes to exactly 32 bytes, as AES-256 needs."""
    return len(key.encode("utf-8")) == KEY_LENGTH


def _key_bytes(key: str) -> bytes:
    raw = key.encode("utf-8")
    if len(raw) != KEY_LENGTH:
        raise TokenDecryptionError(
            f"Invalid key length: expected {KEY_LENGTH} bytes, got {len(raw)}"
        )
    return raw


def _decrypt_claims(key: str, raw_token: str) -> Dict[str, Any]:
    """
    Decrypt `raw_token` into its JSON claims.

    Raises:
        TokenDecryptionError for every way the token can be bad.
    """
    iv = raw_token[:IV_LENGTH].encode("utf-8")
    if len(iv) != IV_LENGTH:
        raise TokenDecryptionError(f"Invalid IV: expected {IV_LENGTH} bytes, got {len(iv)}")

    try:
        ciphertext = base64.b64decode(raw_token[IV_LENGTH:], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TokenDecryptionError("Invalid base64 ciphertext") from exc

    if not ciphertext or len(ciphertext) % (_BLOCK_BITS // 8):
        raise TokenDecryptionError("Ciphertext is not a whole number of AES blocks")

    decryptor = Cipher(algorithms.AES(_key_bytes(key)), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    try:
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise TokenDecryptionError("Invalid padding (wrong key or corrupted token)") from exc

    try:
        claims = json.loads(plaintext.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise TokenDecryptionError("Decrypted payload is not UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise TokenDecryptionError(f"Decrypted payload is not JSON: {exc.msg}") from exc

    if not isinstance(claims, dict):
        raise TokenDecryptionError(
            f"Decrypted payload is not a JSON object: {type(claims).__name__}"
        )
    return claims


class AesTokenDecryptor(TokenDecryptor):
    """
    Adapter implementing the TokenDecryptor port with AES-256-CBC.

    Never raises. Anything that goes wrong is logged at warning level and
    reported as None: tokens come straight from the client, so a bad one is
    an ordinary outcome.
    """

    def __init__(self, schema: SchemaVersion | None = None) -> None:
        self._schema = schema

    @property
    def schema(self) -> SchemaVersion | None:
        return self._schema

    def __call__(self, key: str, raw_token: str) -> Optional[DecryptedToken]:
        if not isinstance(raw_token, str):
            logger.warning(
                "token_decryption_failed",
                reason="token is not a string",
                token_type=type(raw_token).__name__,
            )
            return None
        if len(raw_token) < IV_LENGTH:
            logger.warning(
                "token_decryption_failed",
                reason="token shorter than IV",
                length=len(raw_token),
            )
            return None

        try:
            claims = _decrypt_claims(key, raw_token)
            return DecryptedToken.from_claims(claims, self._schema)
        except TokenDecryptionError as exc:
            logger.warning("token_decryption_failed", reason=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "token_decryption_failed",
                reason="unexpected decryption error",
                error_type=type(exc).__name__,
            )
        return None

    def __repr__(self) -> str:
        schema = self._schema.value if self._schema else "auto"
        return f"AesTokenDecryptor(schema={schema})"


# Schema detected per token.
decrypt_token = AesTokenDecryptor()


# --------------------------------------------------------------------- #
# Issuer side: used by the CLI and by tests to mint tokens
# --------------------------------------------------------------------- #

def encrypt_token(
        key: str,
        claims: Mapping[str, Any],
        iv: str | None = None,
) -> str:
    """
    Encrypt `claims` into a token in the issuer's wire format.

    Raises:
        ValueError if the key is not 32 bytes or the IV not 16 bytes.
    """
    if iv is None:
        iv = "".join(secrets.choice(_IV_ALPHABET) for _ in range(IV_LENGTH))

    iv_bytes = iv.encode("utf-8")
    if len(iv_bytes) != IV_LENGTH:
        raise ValueError(f"IV must be {IV_LENGTH} bytes, got {len(iv_bytes)}")

    key_bytes = key.encode("utf-8")
    if len(key_bytes) != KEY_LENGTH:
        raise ValueError(f"Key must be {KEY_LENGTH} bytes, got {len(key_bytes)}")

    padder = padding.PKCS7(_BLOCK_BITS).padder()
    payload = json.dumps(dict(claims), separators=(",", ":")).encode("utf-8")
    padded = padder.update(payload) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key_bytes), modes.CBC(iv_bytes)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return iv + base64.b64encode(ciphertext).decode("ascii")
