from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import FastAPI, Request

from ...application.use_cases.verify import VerifyTokenUseCase
from ...domain.entities import DecryptedToken
from .middleware import TruesignMiddleware
from .security import StarletteRequestView, TruesignUnauthorized, install_exception_handler


@dataclass(slots=True)
class FastAPITruesign:
    """
    FastAPI integration for truesign_auth.

    Two ways to use it:

      - app-wide: `fastapi_truesign.install(app)` adds TruesignMiddleware,
        routes then read the token with `Depends(fastapi_truesign.get_token)`
      - per-route: `Depends(fastapi_truesign.require_token)` runs the
        pipeline for that route only

    Both take the same `VerifyTokenUseCase`, so a bad config fails when
    this object is built.
    """

    use_case: VerifyTokenUseCase

    @property
    def inject_key(self) -> str:
        return self.use_case.config.inject_key

    def install(self, app: FastAPI, *, exempt_paths: Iterable[str] = ()) -> None:
        """Add TruesignMiddleware and the empty-body 401 handler to `app`."""
        install_exception_handler(app)
        app.add_middleware(
            TruesignMiddleware,
            use_case=self.use_case,
            exempt_paths=tuple(exempt_paths),
        )

    # ------------------------------------------------------------------ #
    # Dependencies
    # ------------------------------------------------------------------ #

    def get_token(self, request: Request) -> Optional[DecryptedToken]:
        """Dependency: token attached earlier (by the middleware), if any."""
        token = getattr(request.state, self.inject_key, None)
        return token if isinstance(token, DecryptedToken) else None

    def require_token(self, request: Request) -> Optional[DecryptedToken]:
        """
        Dependency: run the pipeline for this route; 401 on any denial.

        Denials raise TruesignUnauthorized. Apps set up with `install` (or
        `install_exception_handler`) answer it with an empty body, others
        with FastAPI's default `{"detail": "Unauthorized"}`.

        Returns None only in bypass mode.
        """
        attached = self.get_token(request)
        if attached is not None:
            return attached

        result = self.use_case.execute(StarletteRequestView(request))
        if not result.allowed:
            raise TruesignUnauthorized()
        return result.token

    def optional_token(self, request: Request) -> Optional[DecryptedToken]:
        """Dependency: like `require_token`, but denials give None instead of 401."""
        attached = self.get_token(request)
        if attached is not None:
            return attached

        return self.use_case.execute(StarletteRequestView(request)).token


"""

from truesign_auth import policies
from truesign_auth.integrations.fastapi import create_fastapi_truesign
from app.config import settings  # your own settings

fastapi_truesign = create_fastapi_truesign(
    encryption_key=settings.TRUESIGN_ENCRYPTION_KEY,
    accept_policy=policies.all_of(policies.max_age(60), policies.reject_bots()),
)

app = FastAPI()
fastapi_truesign.install(app, exempt_paths=["/health"])

@app.post("/signup")
def signup(token: DecryptedToken | None = Depends(fastapi_truesign.get_token)):
    ...

"""
