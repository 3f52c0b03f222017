from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .adapters.aes.decryptor import AesTokenDecryptor
from .adapters.extractors import default_extractor, first_of, header_extractor, query_param_extractor
from .domain.constants import DEFAULT_HEADER, DEFAULT_INJECT_KEY, DEFAULT_QUERY_PARAM, SchemaVersion
from .domain.exceptions import ConfigurationError
from .domain.policies import accept_all
from .domain.ports import AcceptancePolicy, TokenDecryptor, TokenExtractor


@dataclass(frozen=True, slots=True)
class VerificationConfig:
    """
    Settings for one Truesign verification pipeline.

    Host code decides how to construct this (env, config file, etc.).
    Policies get the whole config, so anything they need beyond the
    built-in options (staleness windows, allow-lists, ...) goes in `extra`.
    """
    encryption_key: Optional[str] = None
    bypass: bool = False

    accept_policy: AcceptancePolicy = accept_all
    extract_token: TokenExtractor = default_extractor
    inject_key: str = DEFAULT_INJECT_KEY

    # None -> built-in AES decryptor reading tokens with `schema`
    decrypt_fn: Optional[TokenDecryptor] = None
    schema: Optional[SchemaVersion] = None

    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def decryptor(self) -> TokenDecryptor:
        if self.decrypt_fn is not None:
            return self.decrypt_fn
        return AesTokenDecryptor(self.schema)

    @property
    def uses_builtin_decryptor(self) -> bool:
        return self.decrypt_fn is None


def _parse_schema(raw: str | None) -> SchemaVersion | None:
    if not raw or not raw.strip():
        return None
    try:
        return SchemaVersion(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(s.value for s in SchemaVersion)
        raise ConfigurationError(
            f"Invalid TRUESIGN_SCHEMA {raw!r}: expected one of {choices}"
        ) from exc


def settings_from_env(
        *,
        accept_policy: AcceptancePolicy = accept_all,
        extra: Mapping[str, Any] | None = None,
) -> VerificationConfig:
    """
    Build a VerificationConfig from TRUESIGN_* environment variables.

    Policies are code, so they are passed in rather than read from env.
    """
    def _bool(key: str, default: bool = False) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    bypass = _bool("TRUESIGN_BYPASS", False)
    key = os.getenv("TRUESIGN_ENCRYPTION_KEY") or None
    if not key and not bypass:
        raise ConfigurationError(
            "Missing Truesign settings: TRUESIGN_ENCRYPTION_KEY "
            "(or set TRUESIGN_BYPASS=1)"
        )

    query_param = os.getenv("TRUESIGN_QUERY_PARAM") or DEFAULT_QUERY_PARAM
    header = os.getenv("TRUESIGN_HEADER") or DEFAULT_HEADER
    if query_param == DEFAULT_QUERY_PARAM and header == DEFAULT_HEADER:
        extractor = default_extractor
    else:
        extractor = first_of(query_param_extractor(query_param), header_extractor(header))

    return VerificationConfig(
        encryption_key=key,
        bypass=bypass,
        accept_policy=accept_policy,
        extract_token=extractor,
        inject_key=os.getenv("TRUESIGN_INJECT_KEY") or DEFAULT_INJECT_KEY,
        schema=_parse_schema(os.getenv("TRUESIGN_SCHEMA")),
        extra=dict(extra or {}),
    )
