from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from starlette.requests import Request
from strawberry.fastapi import BaseContext
from strawberry.permission import BasePermission
from strawberry.types import Info

from ...application.use_cases.verify import VerifyTokenUseCase
from ...config import VerificationConfig
from ...domain.entities import DecryptedToken
from ..fastapi.security import StarletteRequestView, TruesignUnauthorized


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

class StrawberryTruesignContext(BaseContext):
    """
    Default context type for Strawberry GraphQL.

    `token` is None when verification is bypassed or (with an optional
    context getter) when the request was denied.
    """

    def __init__(
        self,
        request: Request,
        token: Optional[DecryptedToken] = None,
        extra: Any = None,  # host app can put UoW, services, etc. here if desired
    ) -> None:
        super().__init__()
        self.request = request
        self.token = token
        self.extra = extra


# --------------------------------------------------------------------- #
# Main integration: StrawberryTruesign
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryTruesign:
    """
    Strawberry GraphQL integration for truesign_auth.

    Responsibilities:
      - provide a `context_getter` for Strawberry's GraphQLRouter
      - provide a permission class for fields that need a verified token
    """

    use_case: VerifyTokenUseCase

    # ----------------------------------------------------------------- #
    # Context getter
    # ----------------------------------------------------------------- #

    def make_context_getter(
        self,
        *,
        optional: bool = True,
        extra_factory: Optional[Callable[[Request, Optional[DecryptedToken]], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            optional:
                - True:   denials become `token=None` in context
                - False:  denials end the request with TruesignUnauthorized (401);
                          register `install_exception_handler` on the app for
                          the empty-body response
            extra_factory:
                - Optional callable: (request, token) -> Any, stored on context.extra
        """

        async def _context_getter(request: Request) -> StrawberryTruesignContext:
            result = self.use_case.execute(StarletteRequestView(request))

            if not result.allowed and not optional:
                raise TruesignUnauthorized()

            token = result.token
            extra = extra_factory(request, token) if extra_factory else None
            return StrawberryTruesignContext(request=request, token=token, extra=extra)

        return _context_getter

    # ----------------------------------------------------------------- #
    # Permission helpers
    # ----------------------------------------------------------------- #

    def require_verified_token(self) -> Type[BasePermission]:
        """
        Permission: the request carried an accepted token.

        In bypass mode every request passes, like the rest of the pipeline.
        """
        bypass = self.use_case.config.bypass

        class _RequireVerifiedToken(BasePermission):
            message = "Unauthorized"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryTruesignContext = info.context
                return bypass or ctx.token is not None

        return _RequireVerifiedToken


# --------------------------------------------------------------------- #
# High-level helper
# --------------------------------------------------------------------- #

def create_strawberry_truesign(
    config: VerificationConfig | None = None,
    **options: Any,
) -> StrawberryTruesign:
    """
    Convenience helper:

        strawberry_truesign = create_strawberry_truesign(
            encryption_key=settings.TRUESIGN_ENCRYPTION_KEY,
        )
        router = GraphQLRouter(
            schema,
            context_getter=strawberry_truesign.make_context_getter(),
        )
    """
    if config is None:
        config = VerificationConfig(**options)
    elif options:
        raise TypeError("Pass either a VerificationConfig or keyword options, not both")
    return StrawberryTruesign(use_case=VerifyTokenUseCase(config))
