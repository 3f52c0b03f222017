# src/truesign_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .constants import DEFAULT_RISK_THRESHOLD


# Booleans on newer issuer versions, 0..9 scores on ordinal ones.
RiskScore = Union[bool, int]


def is_likely(score: RiskScore | None, threshold: int = DEFAULT_RISK_THRESHOLD) -> bool:
    """
    Collapse a versioned risk score into a yes/no answer.

    Booleans are taken as-is; ordinal scores count as "likely" at or above
    `threshold`. Missing scores are never "likely".
    """
    if score is None:
        return False
    if isinstance(score, bool):
        return score
    return score >= threshold


# --- Sub-records -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EmailInfo:
    """
    Email assessment group. Present on a token as a whole or not at all.
    """
    address: str
    disposable: bool = False
    not_deliverable: bool = False
    typo: Optional[str] = None
    fake: bool = False  # legacy schema only

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True, slots=True)
class IpAddress:
    """
    Visitor IP as reported by the issuer. IPv6 comes in expanded form.

    The issuer sends exactly one of the two; nothing here enforces it.
    """
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None

    @property
    def value(self) -> Optional[str]:
        return self.ipv4 or self.ipv6

    @property
    def version(self) -> Optional[int]:
        if self.ipv4:
            return 4
        if self.ipv6:
            return 6
        return None

    def __str__(self) -> str:
        return self.value or ""


@dataclass(frozen=True, slots=True)
class TokenError:
    """Issuer-side failure details ("something went wrong on our side")."""
    correlation_id: Optional[int] = None
    ip: Optional[str] = None
    email: Optional[str] = None
