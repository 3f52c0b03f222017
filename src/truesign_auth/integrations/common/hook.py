from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ...application.use_cases.verify import VerificationResult, VerifyTokenUseCase
from ...config import VerificationConfig
from ...domain.constants import UNAUTHORIZED_STATUS
from ...domain.ports import HttpReply, HttpRequest


@dataclass(slots=True)
class TruesignHook:
    """
    Framework-agnostic request hook in the `(request, reply, proceed)` style
    used by most server frameworks' pre-handler chains.

    - allowed  -> `proceed()` is called (after the token is attached)
    - denied   -> `reply.reject(401)`; `proceed` is not called

    Integrations (FastAPI, Strawberry, etc.) use `verify` directly instead
    and translate the result into their own response types.
    """

    use_case: VerifyTokenUseCase

    def verify(self, request: HttpRequest) -> VerificationResult:
        return self.use_case.execute(request)

    def __call__(
            self,
            request: HttpRequest,
            reply: HttpReply,
            proceed: Callable[[], Any],
    ) -> Any:
        result = self.verify(request)
        if result.allowed:
            return proceed()
        reply.reject(UNAUTHORIZED_STATUS)
        return None


def create_hook(config: VerificationConfig | None = None, **options: Any) -> TruesignHook:
    """
    High-level factory: VerificationConfig (or its fields as kwargs) -> hook.

    Raises ConfigurationError straight away when the key is missing and
    bypass is off, before any request is served.
    """
    if config is None:
        config = VerificationConfig(**options)
    elif options:
        raise TypeError("Pass either a VerificationConfig or keyword options, not both")
    return TruesignHook(use_case=VerifyTokenUseCase(config))
