"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timezone

from diceroller.http.response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    ok,
    error_response,
    bad_request,
    not_found,
    internal_error,
)
from diceroller.http.status_codes import HTTPStatus


def split_response(raw: bytes):
    """Split serialized bytes into (status line, headers dict, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_default_response(self):
        """Test default response values."""
        response = HTTPResponse()

        assert response.status == HTTPStatus.OK
        assert response.headers == {}
        assert response.body == b""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"
        assert HTTPResponse(status=400).status_line == "HTTP/1.1 400 Bad Request"

    def test_to_bytes_adds_standard_headers(self):
        """Test that Content-Length, Date and Server are filled in."""
        response = HTTPResponse(body=b"hello")
        status_line, headers, body = split_response(response.to_bytes("Test/1.0"))

        assert status_line == "HTTP/1.1 200 OK"
        assert headers["Content-Length"] == "5"
        assert headers["Server"] == "Test/1.0"
        assert headers["Date"].endswith(" GMT")
        assert body == b"hello"

    def test_to_bytes_keeps_explicit_headers(self):
        """Test that handler-set headers win over the defaults."""
        response = HTTPResponse(headers={"Server": "Custom"})
        _, headers, _ = split_response(response.to_bytes())

        assert headers["Server"] == "Custom"

    def test_to_bytes_empty_body(self):
        """Test serialization with an empty body."""
        raw = HTTPResponse().to_bytes()

        assert raw.endswith(b"\r\n\r\n")
        assert b"Content-Length: 0" in raw


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_json_response(self):
        """Test JSON body and content type."""
        response = ResponseBuilder().json({"sides": 6, "result": 4}).build()

        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert response.json == {"sides": 6, "result": 4}

    def test_html_response(self):
        """Test HTML body and content type."""
        response = ResponseBuilder().html("<h1>Hi</h1>").build()

        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.body == b"<h1>Hi</h1>"

    def test_status_accepts_int(self):
        """Test that integer statuses are coerced to HTTPStatus."""
        response = ResponseBuilder().status(503).build()

        assert response.status is HTTPStatus.SERVICE_UNAVAILABLE

    def test_no_cache_and_close(self):
        """Test the no_cache and close_connection helpers."""
        response = ResponseBuilder().no_cache().close_connection().build()

        assert response.headers["Cache-Control"] == "no-store"
        assert response.headers["Connection"] == "close"

    def test_build_copies_headers(self):
        """Test that builds do not share header dicts."""
        builder = ResponseBuilder().no_cache()
        first = builder.build()
        first.headers["X-Other"] = "2"

        assert "X-Other" not in builder.build().headers


class TestShortcuts:
    """Tests for the response shortcut functions."""

    def test_ok(self):
        """Test ok() builds a 200 JSON response."""
        response = ok({"random": 0.5})

        assert response.status == 200
        assert response.json == {"random": 0.5}

    def test_error_shapes(self):
        """Test every error shortcut uses the {"error": message} body."""
        assert bad_request("Invalid number of sides").json == {"error": "Invalid number of sides"}
        assert not_found().json == {"error": "Not found"}
        assert internal_error().json == {"error": "Internal Server Error"}
        assert error_response(503, "Server overloaded").status == 503

    def test_error_statuses(self):
        """Test shortcut status codes."""
        assert bad_request().status == 400
        assert not_found().status == 404
        assert internal_error().status == 500


class TestFormatHttpDate:
    """Tests for HTTP-date formatting."""

    def test_rfc7231_format(self):
        """Test the IMF-fixdate layout."""
        dt = datetime(2026, 10, 16, 9, 5, 3, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Fri, 16 Oct 2026 09:05:03 GMT"
