from enum import Enum


DEFAULT_QUERY_PARAM = "ts-token"
DEFAULT_HEADER = "x-ts-token"
DEFAULT_INJECT_KEY = "ts_token"

# Raw characters at the head of the token, used as the AES IV.
IV_LENGTH = 16
KEY_LENGTH = 32

# Ordinal risk scores run 0..9; at or above this a score counts as "likely".
DEFAULT_RISK_THRESHOLD = 5

UNAUTHORIZED_STATUS = 401


class SchemaVersion(Enum):
    ORDINAL = "ordinal"
    BOOLEAN = "boolean"
    LEGACY = "legacy"


class VerificationOutcome(Enum):
    BYPASSED = "bypassed"
    NO_TOKEN = "no_token"
    DECRYPT_FAILED = "decrypt_failed"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    INTERNAL_ERROR = "internal_error"

    @property
    def allowed(self) -> bool:
        return self is VerificationOutcome.BYPASSED or self is VerificationOutcome.ACCEPTED
