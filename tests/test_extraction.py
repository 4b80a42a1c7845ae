"""Tests for affinity token extraction."""

import httpx
import pytest

from prizmdoc.affinity.extraction import extract_affinity_token, is_json_media_type


def make_response(
    body: str,
    content_type: str | None = "application/json",
    status_code: int = 200,
) -> httpx.Response:
    headers = {"Content-Type": content_type} if content_type is not None else {}
    return httpx.Response(status_code, headers=headers, content=body.encode("utf-8"))


class TestIsJsonMediaType:
    """Tests for Content-Type sniffing."""

    @pytest.mark.parametrize(
        "content_type",
        [
            "application/json",
            "application/json; charset=utf-8",
            "application/json;charset=UTF-8",
            "Application/JSON",
            "  application/json  ",
        ],
    )
    def test_json_media_types(self, content_type):
        """Test that application/json is recognized with or without parameters."""
        assert is_json_media_type(content_type)

    @pytest.mark.parametrize(
        "content_type",
        [
            None,
            "",
            "text/plain",
            "text/json",
            "application/problem+json",
            "application/jsonp",
            "application/octet-stream",
        ],
    )
    def test_other_media_types(self, content_type):
        """Test that anything other than application/json is rejected."""
        assert not is_json_media_type(content_type)


class TestExtractAffinityToken:
    """Tests for extract_affinity_token."""

    def test_extracts_token(self):
        """Test extraction from a JSON body."""
        response = make_response('{ "id": 123, "affinityToken": "example-affinity-token" }')
        assert extract_affinity_token(response) == "example-affinity-token"

    def test_extracts_token_with_charset(self):
        """Test that a charset parameter does not prevent extraction."""
        response = make_response(
            '{"affinityToken": "T1"}',
            content_type="application/json; charset=utf-8",
        )
        assert extract_affinity_token(response) == "T1"

    def test_non_json_content_type_is_ignored(self):
        """Test that a text/plain body is never parsed."""
        response = make_response('{"affinityToken": "T1"}', content_type="text/plain")
        assert extract_affinity_token(response) is None

    def test_missing_content_type_is_ignored(self):
        """Test that a response without Content-Type is never parsed."""
        response = make_response('{"affinityToken": "T1"}', content_type=None)
        assert extract_affinity_token(response) is None

    def test_malformed_json(self):
        """Test that an invalid JSON body yields no token and no error."""
        response = make_response("This is not JSON")
        assert extract_affinity_token(response) is None

    def test_empty_body(self):
        """Test that an empty JSON response yields no token."""
        response = make_response("")
        assert extract_affinity_token(response) is None

    def test_undecodable_bytes(self):
        """Test that a body that is not valid UTF-8 yields no token."""
        response = httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            content=b"\xff\xfe\xfa",
        )
        assert extract_affinity_token(response) is None

    def test_missing_field(self):
        """Test that a JSON object without affinityToken yields no token."""
        response = make_response('{"id": 123}')
        assert extract_affinity_token(response) is None

    def test_top_level_array(self):
        """Test that a top-level JSON array yields no token."""
        response = make_response('[{"affinityToken": "T1"}]')
        assert extract_affinity_token(response) is None

    def test_nested_field_is_not_used(self):
        """Test that only the top-level field counts."""
        response = make_response('{"output": {"affinityToken": "T1"}}')
        assert extract_affinity_token(response) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("42", "42"),
            ("1.5", "1.5"),
            ("true", "true"),
            ("false", "false"),
        ],
    )
    def test_scalar_values_are_coerced(self, raw, expected):
        """Test that scalar values are converted to strings."""
        response = make_response('{"affinityToken": %s}' % raw)
        assert extract_affinity_token(response) == expected

    @pytest.mark.parametrize("raw", ["null", "[1, 2]", '{"a": 1}', '""'])
    def test_unusable_values_are_ignored(self, raw):
        """Test that null, empty strings, arrays and objects are not treated as tokens."""
        response = make_response('{"affinityToken": %s}' % raw)
        assert extract_affinity_token(response) is None

    @pytest.mark.parametrize("status_code", [200, 201, 404, 480, 500])
    def test_status_code_does_not_matter(self, status_code):
        """Test that extraction runs for any status code."""
        response = make_response('{"affinityToken": "T1"}', status_code=status_code)
        assert extract_affinity_token(response) == "T1"

    def test_body_remains_readable(self):
        """Test that extraction leaves the body intact."""
        body = '{ "id": 123, "affinityToken": "T1" }'
        response = make_response(body)

        extract_affinity_token(response)

        assert response.text == body
        assert response.json()["id"] == 123

    def test_unread_streaming_body(self):
        """Test that an unread streaming response yields no token."""
        response = httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            stream=httpx.ByteStream(b'{"affinityToken": "T1"}'),
        )
        assert extract_affinity_token(response) is None
