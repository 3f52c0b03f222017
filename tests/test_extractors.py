import pytest

from truesign_auth import default_extractor, first_of, header_extractor, query_param_extractor

from conftest import FakeRequest


def test_query_param_extractor():
    extract = query_param_extractor("ts-token")
    assert extract(FakeRequest(query={"ts-token": "abc"})) == "abc"
    assert extract(FakeRequest(query={"other": "abc"})) is None
    assert extract(FakeRequest(query={"ts-token": ""})) is None


@pytest.mark.parametrize("query", [None, ["ts-token", "abc"], "ts-token=abc", 42])
def test_query_param_extractor_ignores_malformed_containers(query):
    request = FakeRequest()
    request.query = query
    assert query_param_extractor("ts-token")(request) is None


def test_query_param_extractor_ignores_repeated_params():
    request = FakeRequest(query={"ts-token": ["a", "b"]})
    assert query_param_extractor("ts-token")(request) is None


def test_header_extractor_is_case_insensitive():
    extract = header_extractor("X-TS-Token")
    assert extract(FakeRequest(headers={"x-ts-token": "abc"})) == "abc"


def test_header_extractor_rejects_multi_valued_headers():
    request = FakeRequest(headers={"x-ts-token": ["abc", "def"]})
    assert header_extractor("x-ts-token")(request) is None


def test_header_extractor_without_headers():
    request = FakeRequest()
    request.headers = None
    assert header_extractor("x-ts-token")(request) is None


def test_custom_names():
    request = FakeRequest(
        query={"ts-token-test-param": "FROM_QUERY"},
        headers={"x-ts-token-test-header": "FROM_HEADER"},
    )
    assert query_param_extractor("ts-token-test-param")(request) == "FROM_QUERY"
    assert header_extractor("x-ts-token-test-header")(request) == "FROM_HEADER"


def test_default_extractor_prefers_query_over_header():
    request = FakeRequest(query={"ts-token": "Q"}, headers={"x-ts-token": "H"})
    assert default_extractor(request) == "Q"


def test_default_extractor_falls_back_to_header():
    assert default_extractor(FakeRequest(headers={"x-ts-token": "H"})) == "H"
    assert default_extractor(FakeRequest()) is None


def test_first_of_order():
    extract = first_of(header_extractor("a"), header_extractor("b"))
    assert extract(FakeRequest(headers={"a": "1", "b": "2"})) == "1"
    assert extract(FakeRequest(headers={"b": "2"})) == "2"
