from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import structlog

from ...adapters.aes.decryptor import is_valid_key
from ...config import VerificationConfig
from ...domain.constants import UNAUTHORIZED_STATUS, VerificationOutcome
from ...domain.entities import DecryptedToken
from ...domain.exceptions import ConfigurationError
from ...domain.ports import HttpRequest, TokenDecryptor

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    outcome: VerificationOutcome
    token: Optional[DecryptedToken] = None

    @property
    def allowed(self) -> bool:
        return self.outcome.allowed

    @property
    def status_code(self) -> Optional[int]:
        """None when the request may proceed, 401 for every kind of denial."""
        return None if self.allowed else UNAUTHORIZED_STATUS


@dataclass(slots=True)
class VerifyTokenUseCase:
    """
    Application use case:
    - Extract the Truesign token from a request
    - Decrypt it via the TokenDecryptor port
    - Run the caller's acceptance policy
    - On acceptance, attach the DecryptedToken to the request

    Framework-agnostic. Denials are reported as results, never raised:
    whatever goes wrong per request ends up as a 401 for the caller.

    Raises ConfigurationError at construction when verification is on and
    no encryption key is configured.
    """

    config: VerificationConfig
    _decryptor: TokenDecryptor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        config = self.config
        if not config.bypass:
            if not config.encryption_key:
                logger.error("truesign_config_invalid", reason="missing encryption key")
                raise ConfigurationError(
                    "`encryption_key` is required when `bypass` is false"
                )
            if config.uses_builtin_decryptor and not is_valid_key(config.encryption_key):
                logger.warning(
                    "truesign_config_suspicious",
                    reason="encryption key is not 32 bytes, every token will fail to decrypt",
                )
        self._decryptor = config.decryptor

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def evaluate(self, request: HttpRequest) -> VerificationResult:
        """Decide on `request` without touching it."""
        if self.config.bypass:
            return self._done(VerificationOutcome.BYPASSED)

        try:
            raw_token = self.config.extract_token(request)
            if raw_token is None:
                return self._done(VerificationOutcome.NO_TOKEN)

            token = self._decryptor(self.config.encryption_key, raw_token)
            if token is None:
                return self._done(VerificationOutcome.DECRYPT_FAILED)

            if not self.config.accept_policy(token, self.config):
                return self._done(VerificationOutcome.REJECTED)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "token_verification_internal_error",
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )
            return VerificationResult(VerificationOutcome.INTERNAL_ERROR)

        return self._done(VerificationOutcome.ACCEPTED, token)

    def execute(self, request: HttpRequest) -> VerificationResult:
        """
        Evaluate `request` and, if accepted, attach the token to it under
        `config.inject_key`.
        """
        result = self.evaluate(request)
        if result.outcome is VerificationOutcome.ACCEPTED:
            try:
                request.attach(self.config.inject_key, result.token)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "token_verification_internal_error",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    stage="attach",
                    exc_info=True,
                )
                return VerificationResult(VerificationOutcome.INTERNAL_ERROR)
        return result

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _done(
            outcome: VerificationOutcome,
            token: Optional[DecryptedToken] = None,
    ) -> VerificationResult:
        if outcome.allowed:
            logger.debug("token_verification_finished", outcome=outcome.value)
        else:
            logger.info("token_verification_denied", outcome=outcome.value)
        return VerificationResult(outcome, token)
