from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .constants import DEFAULT_RISK_THRESHOLD, SchemaVersion
from .value_objects import EmailInfo, IpAddress, RiskScore, TokenError, is_likely

# Keys that only the first issuer schema carries.
LEGACY_KEYS = frozenset({"proxy", "vpn", "tor", "script", "noMx", "fake"})


def detect_schema(claims: Mapping[str, Any]) -> SchemaVersion:
    """
    Guess the issuer schema from the payload shape.

    - any legacy key present      -> LEGACY
    - `bot` / `anonymizer` bools  -> BOOLEAN
    - otherwise                   -> ORDINAL
    """
    if LEGACY_KEYS.intersection(claims):
        return SchemaVersion.LEGACY
    if isinstance(claims.get("bot"), bool) or isinstance(claims.get("anonymizer"), bool):
        return SchemaVersion.BOOLEAN
    return SchemaVersion.ORDINAL


@dataclass(frozen=True, slots=True)
class DecryptedToken:
    """
    Risk assessment carried by a Truesign token.

    Built once per request from the decrypted claims. Field values are
    taken as the issuer sent them: shape checks belong to the acceptance
    policy, not to this record.
    """
    bot: Optional[RiskScore] = None
    anonymizer: Optional[RiskScore] = None
    cluster_id: Union[str, int, None] = None

    unique_key: Optional[int] = None
    timestamp: Optional[int] = None  # epoch milliseconds
    country: Optional[str] = None
    meta: Optional[str] = None

    email: Optional[EmailInfo] = None
    ip: Optional[IpAddress] = None

    visitor_id: Optional[str] = None
    block: Optional[str] = None
    error: Optional[TokenError] = None

    schema: SchemaVersion = SchemaVersion.ORDINAL
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    # ---- construction -----------------------------------------------------

    @classmethod
    def from_claims(
            cls,
            claims: Mapping[str, Any],
            schema: SchemaVersion | None = None,
    ) -> "DecryptedToken":
        """
        Map decrypted JSON claims onto a DecryptedToken.

        `schema` selects how the risk fields are read; None means detect
        it from the payload.
        """
        schema = schema or detect_schema(claims)

        if schema is SchemaVersion.LEGACY:
            bot: Optional[RiskScore] = bool(claims.get("script"))
            anonymizer: Optional[RiskScore] = any(
                bool(claims.get(k)) for k in ("proxy", "vpn", "tor")
            )
            not_deliverable = bool(claims.get("noMx"))
            fake = bool(claims.get("fake"))
        else:
            bot = claims.get("bot")
            anonymizer = claims.get("anonymizer")
            not_deliverable = bool(claims.get("notDeliverable"))
            fake = False

        address = claims.get("email")
        email = None
        if address:
            email = EmailInfo(
                address=address,
                disposable=bool(claims.get("disposable")),
                not_deliverable=not_deliverable,
                typo=claims.get("typo") or None,
                fake=fake,
            )

        ipv4 = claims.get("ipv4") or None
        ipv6 = claims.get("ipv6") or None
        ip = IpAddress(ipv4=ipv4, ipv6=ipv6) if (ipv4 or ipv6) else None

        error_raw = claims.get("error")
        error = None
        if isinstance(error_raw, Mapping):
            error = TokenError(
                correlation_id=error_raw.get("correlationId"),
                ip=error_raw.get("ip"),
                email=error_raw.get("email"),
            )

        return cls(
            bot=bot,
            anonymizer=anonymizer,
            cluster_id=claims.get("clusterId"),
            unique_key=claims.get("uniqueKey"),
            timestamp=claims.get("timestamp"),
            country=claims.get("country"),
            meta=claims.get("meta"),
            email=email,
            ip=ip,
            visitor_id=claims.get("visitorId"),
            block=claims.get("block"),
            error=error,
            schema=schema,
            raw=MappingProxyType(dict(claims)),
        )

    # ---- read-only helpers -------------------------------------------------

    @property
    def minted_at(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def age_ms(self, now_ms: Optional[int] = None) -> Optional[int]:
        if self.timestamp is None:
            return None
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return now_ms - self.timestamp

    @property
    def in_cluster(self) -> bool:
        return bool(self.cluster_id)

    def is_bot(self, threshold: int = DEFAULT_RISK_THRESHOLD) -> bool:
        return is_likely(self.bot, threshold)

    def is_anonymized(self, threshold: int = DEFAULT_RISK_THRESHOLD) -> bool:
        return is_likely(self.anonymizer, threshold)
