from __future__ import annotations

from typing import Any

from .deps import FastAPITruesign
from .middleware import TruesignMiddleware
from .security import StarletteRequestView, TruesignUnauthorized, install_exception_handler
from ...application.use_cases.verify import VerifyTokenUseCase
from ...config import VerificationConfig


def create_fastapi_truesign(
    config: VerificationConfig | None = None,
    **options: Any,
) -> FastAPITruesign:
    """
    High-level helper for FastAPI apps:

    - Builds a VerificationConfig (or takes yours) and the verification use case
    - Wraps it in FastAPITruesign, exposing:

        fastapi_truesign.install(app)            # middleware + 401 handler
        fastapi_truesign.get_token               # dependency
        fastapi_truesign.require_token           # dependency, 401 on denial
        fastapi_truesign.optional_token          # dependency, None on denial

    Raises ConfigurationError if the key is missing and bypass is off.
    """
    if config is None:
        config = VerificationConfig(**options)
    elif options:
        raise TypeError("Pass either a VerificationConfig or keyword options, not both")
    return FastAPITruesign(use_case=VerifyTokenUseCase(config))


__all__ = [
    "FastAPITruesign",
    "StarletteRequestView",
    "TruesignMiddleware",
    "TruesignUnauthorized",
    "create_fastapi_truesign",
    "install_exception_handler",
]
