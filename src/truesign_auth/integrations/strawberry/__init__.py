from .auth import (
    StrawberryTruesign,
    StrawberryTruesignContext,
    create_strawberry_truesign,
)

__all__ = [
    "StrawberryTruesign",
    "StrawberryTruesignContext",
    "create_strawberry_truesign",
]
