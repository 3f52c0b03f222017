"""
Pytest fixtures for truesign_auth tests.
"""

from typing import Any, Optional

import pytest

from truesign_auth import DecryptedToken

# 32 bytes, as AES-256 wants
KEY = "0123456789abcdef0123456789abcdef"
IV = "abcdefghijklmnop"


class FakeRequest:
    """Minimal HttpRequest: query + headers + attach()."""

    def __init__(self, query: Any = None, headers: Any = None) -> None:
        self.query = {} if query is None else query
        self.headers = {} if headers is None else headers
        self.attached: dict[str, Any] = {}

    def attach(self, key: str, value: Any) -> None:
        self.attached[key] = value


class FakeReply:
    def __init__(self) -> None:
        self.status_code: Optional[int] = None

    def reject(self, status_code: int) -> None:
        self.status_code = status_code


@pytest.fixture
def key() -> str:
    return KEY


@pytest.fixture
def claims() -> dict[str, Any]:
    return {
        "bot": 1,
        "anonymizer": 0,
        "clusterId": 0,
        "uniqueKey": 4503599627370495,
        "timestamp": 1_700_000_000_000,
        "country": "ES",
        "meta": "signup-form",
        "email": "jane@example.com",
        "disposable": False,
        "notDeliverable": False,
        "ipv4": "203.0.113.7",
    }


@pytest.fixture
def record(claims: dict[str, Any]) -> DecryptedToken:
    return DecryptedToken.from_claims(claims)
