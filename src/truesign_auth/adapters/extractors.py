from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..domain.constants import DEFAULT_HEADER, DEFAULT_QUERY_PARAM
from ..domain.ports import HttpRequest, TokenExtractor


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def query_param_extractor(name: str = DEFAULT_QUERY_PARAM) -> TokenExtractor:
    """
    Extractor reading the token from the query parameter `name`.

    Only a real key/value mapping counts as query parameters; lists, None
    or anything else yield None. Repeated parameters (lists) are ignored.
    """

    def _extract(request: HttpRequest) -> Optional[str]:
        query = getattr(request, "query", None)
        if not isinstance(query, Mapping):
            return None
        return _non_empty_str(query.get(name))

    return _extract


def header_extractor(name: str = DEFAULT_HEADER) -> TokenExtractor:
    """
    Extractor reading the token from header `name` (case-insensitive).

    A header sent more than once arrives as a list and is rejected: there
    is no telling which instance is authoritative.
    """
    header = name.lower()

    def _extract(request: HttpRequest) -> Optional[str]:
        headers = getattr(request, "headers", None)
        if not isinstance(headers, Mapping):
            return None
        return _non_empty_str(headers.get(header))

    return _extract


def first_of(*extractors: TokenExtractor) -> TokenExtractor:
    """Try `extractors` in order; the first token found wins."""

    def _extract(request: HttpRequest) -> Optional[str]:
        for extractor in extractors:
            token = extractor(request)
            if token is not None:
                return token
        return None

    return _extract


# Query parameter first, header second. Callers behind proxies that inject
# the header rely on the client's query value taking precedence.
default_extractor: TokenExtractor = first_of(
    query_param_extractor(DEFAULT_QUERY_PARAM),
    header_extractor(DEFAULT_HEADER),
)
