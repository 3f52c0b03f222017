from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import HTTPConnection, Request
from starlette.responses import Response


def _group(items: Iterable[Tuple[str, str]]) -> dict[str, Any]:
    """
    Collapse multi-dict items into a plain dict.

    Keys seen once map to their str value; repeated keys map to a list of
    every value, in order.
    """
    grouped: dict[str, Any] = {}
    for key, value in items:
        if key not in grouped:
            grouped[key] = value
        elif isinstance(grouped[key], list):
            grouped[key].append(value)
        else:
            grouped[key] = [grouped[key], value]
    return grouped


@dataclass(slots=True)
class StarletteRequestView:
    """
    Adapts a Starlette/FastAPI request (or websocket) to the HttpRequest port.

    - query:   query params as a dict, repeated params become lists
    - headers: lower-cased header names, repeated headers become lists
    - attach:  stores the value on `request.state`
    """

    request: HTTPConnection
    query: dict[str, Any] = field(init=False)
    headers: dict[str, Any] = field(init=False)

    def __post_init__(self) -> None:
        self.query = _group(self.request.query_params.multi_items())
        # Starlette already lower-cases header names
        self.headers = _group(self.request.headers.items())

    def attach(self, key: str, value: Any) -> None:
        setattr(self.request.state, key, value)


class TruesignUnauthorized(HTTPException):
    """
    Denial raised from dependencies and GraphQL context getters.

    Any app renders it as a 401. With `install_exception_handler` it gets
    the same empty body the middleware sends.
    """

    def __init__(self) -> None:
        super().__init__(status_code=401)


async def unauthorized_handler(request: Request, exc: TruesignUnauthorized) -> Response:
    return Response(status_code=exc.status_code)


def install_exception_handler(app: Starlette) -> None:
    app.add_exception_handler(TruesignUnauthorized, unauthorized_handler)
