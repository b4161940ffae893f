import pytest

from conftest import make_response
from merakidash.domain.exceptions import APIError, DecodeError
from merakidash.infrastructure.http.normalizer import ResponseNormalizer


@pytest.fixture
def normalizer():
    return ResponseNormalizer()


def test_object_body(normalizer):
    result = normalizer.normalize(make_response(200, {"id": "1"}), "/organizations/1")
    assert result.data == {"id": "1"}
    assert result.value == {"id": "1"}
    assert result.ok


def test_empty_body_yields_status(normalizer):
    result = normalizer.normalize(make_response(204), "/networks/N_1")
    assert result.data is None
    assert result.value == 204
    assert result.has_status(204)


def test_whitespace_body_is_empty(normalizer):
    assert normalizer.decode(make_response(202, b"  \n"), "/p") is None


def test_malformed_json_raises_decode_error(normalizer):
    with pytest.raises(DecodeError) as exc_info:
        normalizer.decode(make_response(200, b"<html>"), "/p")
    assert exc_info.value.status_code == 200
    assert exc_info.value.raw == b"<html>"


def test_scalar_json_raises_decode_error(normalizer):
    with pytest.raises(DecodeError):
        normalizer.decode(make_response(200, b'"just a string"'), "/p")


def test_error_status_keeps_server_message(normalizer):
    response = make_response(400, {"errors": ["Name is required", "Type is invalid"]})
    with pytest.raises(APIError) as exc_info:
        normalizer.normalize(response, "/organizations/1/networks", attempts=1)
    error = exc_info.value
    assert error.status_code == 400
    assert error.message == "Name is required, Type is invalid"
    assert error.body == {"errors": ["Name is required", "Type is invalid"]}
    assert error.path == "/organizations/1/networks"


def test_error_with_text_body(normalizer):
    with pytest.raises(APIError) as exc_info:
        normalizer.raise_for_status(make_response(502, "Bad Gateway"), "/p", attempts=3)
    assert exc_info.value.body == "Bad Gateway"
    assert exc_info.value.message == "Bad Gateway"
    assert exc_info.value.attempts == 3
    assert "502" in str(exc_info.value)


def test_error_without_body(normalizer):
    with pytest.raises(APIError) as exc_info:
        normalizer.raise_for_status(make_response(404), "/p")
    assert exc_info.value.body is None
    assert exc_info.value.message == ""
