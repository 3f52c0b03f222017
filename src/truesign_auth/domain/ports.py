from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

from .entities import DecryptedToken

if TYPE_CHECKING:
    from ..config import VerificationConfig


class HttpRequest(Protocol):
    """
    The slice of an inbound request the verification pipeline needs.

    Framework integrations (FastAPI, Strawberry, ...) adapt their own
    request objects to this shape.
    """

    # key/value mapping of query parameters; anything else counts as "no params"
    query: Any
    # lower-cased header names -> str, or a list of str for repeated headers
    headers: Any

    def attach(self, key: str, value: Any) -> None:
        """Make `value` available to later handlers under `key`."""
        ...


class HttpReply(Protocol):
    """Port for terminating a request with a bare status code."""

    def reject(self, status_code: int) -> None:
        ...


class TokenExtractor(Protocol):
    """Pull the raw token out of a request, or return None."""

    def __call__(self, request: HttpRequest) -> Optional[str]:
        ...


class TokenDecryptor(Protocol):
    """
    Port for turning a raw token into a DecryptedToken.

    Should:
      - return None for anything that does not decrypt and parse
      - never raise: the input is attacker-controlled
    """

    def __call__(self, key: str, raw_token: str) -> Optional[DecryptedToken]:
        ...


class AcceptancePolicy(Protocol):
    """Caller-supplied predicate deciding whether a decrypted token is good enough."""

    def __call__(self, token: DecryptedToken, config: "VerificationConfig") -> bool:
        ...
