"""
Acceptance policies.

A policy is any callable `(token, config) -> bool`. The verification
pipeline only ever calls the one it is configured with; `accept_all` is the
default. The builders below are optional, stateless building blocks that
callers can combine into their own policy.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Iterable

from .constants import DEFAULT_RISK_THRESHOLD
from .entities import DecryptedToken
from .ports import AcceptancePolicy

if TYPE_CHECKING:
    from ..config import VerificationConfig


def accept_all(token: DecryptedToken, config: "VerificationConfig") -> bool:
    return True


def all_of(*policies: AcceptancePolicy) -> AcceptancePolicy:
    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        return all(p(token, config) for p in policies)

    return _policy


def any_of(*policies: AcceptancePolicy) -> AcceptancePolicy:
    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        return any(p(token, config) for p in policies)

    return _policy


def max_age(
        seconds: float,
        clock: Callable[[], float] = time.time,
) -> AcceptancePolicy:
    """
    Reject tokens minted more than `seconds` ago, or without a timestamp.

    Tokens stamped in the future are let through: clock skew between us and
    the issuer is not this policy's business.
    """
    window_ms = seconds * 1000

    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        age = token.age_ms(int(clock() * 1000))
        return age is not None and age <= window_ms

    return _policy


def reject_bots(threshold: int = DEFAULT_RISK_THRESHOLD) -> AcceptancePolicy:
    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        return not token.is_bot(threshold)

    return _policy


def reject_anonymizers(threshold: int = DEFAULT_RISK_THRESHOLD) -> AcceptancePolicy:
    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        return not token.is_anonymized(threshold)

    return _policy


def reject_clusters(token: DecryptedToken, config: "VerificationConfig") -> bool:
    return not token.in_cluster


def allow_countries(countries: Iterable[str]) -> AcceptancePolicy:
    allowed = frozenset(c.upper() for c in countries)

    def _policy(token: DecryptedToken, config: "VerificationConfig") -> bool:
        return bool(token.country) and token.country.upper() in allowed

    return _policy
