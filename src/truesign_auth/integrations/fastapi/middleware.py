from __future__ import annotations

from typing import Callable, Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ...application.use_cases.verify import VerifyTokenUseCase
from ...config import VerificationConfig
from ...domain.constants import UNAUTHORIZED_STATUS
from .security import StarletteRequestView


class TruesignMiddleware(BaseHTTPMiddleware):
    """
    Verify the Truesign token on every request before it reaches a route.

    - allowed -> request continues; on acceptance the DecryptedToken is
      available as `request.state.<inject_key>`
    - denied  -> bare 401 with an empty body, whatever the reason

    Starlette builds middleware lazily, on the first request. Pass a
    `use_case` built up front (see `FastAPITruesign.install`) so a missing
    key is reported at startup rather than on first traffic.
    """

    def __init__(
        self,
        app: ASGIApp,
        use_case: Optional[VerifyTokenUseCase] = None,
        config: Optional[VerificationConfig] = None,
        exempt_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        if use_case is None:
            if config is None:
                raise TypeError("TruesignMiddleware needs a `use_case` or a `config`")
            use_case = VerifyTokenUseCase(config)
        self.use_case = use_case
        # Paths that skip verification (health checks, etc.)
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        result = self.use_case.execute(StarletteRequestView(request))
        if not result.allowed:
            return Response(status_code=UNAUTHORIZED_STATUS)

        return await call_next(request)
