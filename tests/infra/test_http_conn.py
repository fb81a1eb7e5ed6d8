"""Tests for the requests-backed connection."""

import io
from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import ProtocolError as Urllib3ProtocolError

from objstore.domain.errors import BodyReadError, UnsupportedSchemeError
from objstore.infra.http.conn import (
    FORM_CONTENT_TYPE,
    HttpConnection,
    Request,
    Response,
    encode_parameters,
    escape_path,
    new_connection,
)


class TestEncodeParameters:
    def test_no_parameters(self):
        assert encode_parameters({}) == ""

    def test_one_parameter(self):
        assert encode_parameters({"taco": "burrito"}) == "taco=burrito"

    def test_multiple_parameters_keep_insertion_order(self):
        params = {"taco": "burrito", "enchilada": "queso", "nachos": "carnitas"}
        assert (
            encode_parameters(params)
            == "taco=burrito&enchilada=queso&nachos=carnitas"
        )

    def test_parameters_need_escaping(self):
        params = {"타코": "burrito", "b&az=": "qu ?x"}
        assert (
            encode_parameters(params)
            == "%ED%83%80%EC%BD%94=burrito&b%26az%3D=qu%20%3Fx"
        )


class TestNewConnection:
    def test_invalid_scheme(self):
        with pytest.raises(UnsupportedSchemeError, match="scheme") as excinfo:
            new_connection("taco://localhost")
        assert "taco" in str(excinfo.value)

    def test_http_allowed(self):
        conn = new_connection("http://localhost:9000")
        assert conn.endpoint == "http://localhost:9000"

    def test_https_allowed(self):
        conn = new_connection("https://s3.amazonaws.com")
        assert conn.endpoint == "https://s3.amazonaws.com"


class TestEscapePath:
    def test_keeps_slashes(self):
        assert escape_path("/some-bucket/a/b") == "/some-bucket/a/b"

    def test_escapes_reserved_characters(self):
        assert escape_path("/b/타코 ?#") == "/b/%ED%83%80%EC%BD%94%20%3F%23"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/bk/photos/../secret", "/bk/photos/%2E%2E/secret"),
            ("/bk/./a", "/bk/%2E/a"),
            ("/bk/..", "/bk/%2E%2E"),
            ("/bk/a/.", "/bk/a/%2E"),
        ],
    )
    def test_escapes_dot_segments(self, path, expected):
        assert escape_path(path) == expected

    def test_leaves_dots_inside_segments(self):
        assert escape_path("/bk/.hidden/a..b/...") == "/bk/.hidden/a..b/..."


class TestHttpConnection:
    @pytest.fixture
    def session(self):
        session = requests.Session()
        sys_resp = MagicMock()
        sys_resp.status_code = 200
        sys_resp.headers = {"x-amz-request-id": "abc"}
        sys_resp.raw.read.return_value = b"\xde\xad\x00\xbe\xef"
        sys_resp.content = b"<Result/>"
        session.send = MagicMock(return_value=sys_resp)
        return session

    @pytest.fixture
    def conn(self, session):
        return HttpConnection(
            scheme="http", host="localhost:9000", session=session, timeout=5.0
        )

    def test_build_url_escapes_path(self, conn):
        request = Request(verb="GET", path="/some-bucket/taco burrito?#")
        assert (
            conn.build_url(request)
            == "http://localhost:9000/some-bucket/taco%20burrito%3F%23"
        )

    def test_build_url_encodes_parameters(self, conn):
        request = Request(
            verb="GET", path="/some-bucket", parameters={"marker": "taco burrito"}
        )
        assert (
            conn.build_url(request)
            == "http://localhost:9000/some-bucket?marker=taco%20burrito"
        )

    def test_build_url_for_empty_path(self, conn):
        assert conn.build_url(Request(verb="GET", path="")) == "http://localhost:9000/"

    def test_send_passes_request_through(self, conn, session):
        body = io.BytesIO(b"taco")
        request = Request(
            verb="PUT",
            path="/some-bucket/key",
            headers={"Date": "today", "Content-MD5": "abc"},
            body=body,
        )

        conn.send(request)

        session.send.assert_called_once()
        prepared = session.send.call_args[0][0]
        kwargs = session.send.call_args[1]
        assert prepared.method == "PUT"
        assert prepared.url == "http://localhost:9000/some-bucket/key"
        assert prepared.headers["Date"] == "today"
        assert prepared.headers["Content-MD5"] == "abc"
        assert prepared.body is body
        assert kwargs["stream"] is True
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"] == 5.0

    def test_send_keeps_dot_segments_in_url(self, conn, session):
        conn.send(Request(verb="GET", path="/some-bucket/photos/../secret"))

        prepared = session.send.call_args[0][0]
        assert prepared.url == "http://localhost:9000/some-bucket/photos/%2E%2E/secret"
        assert prepared.path_url == "/some-bucket/photos/%2E%2E/secret"

    def test_send_returns_status_headers_and_body(self, conn, session):
        session.send.return_value.status_code = 123

        response = conn.send(Request(verb="GET", path="/some-bucket/key"))

        assert response.status_code == 123
        assert response.headers == {"x-amz-request-id": "abc"}
        assert response.read_body() == b"\xde\xad\x00\xbe\xef"

    def test_transport_failure_propagates(self, conn, session):
        session.send.side_effect = requests.ConnectionError(
            "Failed to resolve 'foo.sidofhdksjhf'"
        )

        with pytest.raises(requests.ConnectionError, match="foo.sidofhdksjhf"):
            conn.send(Request(verb="GET", path="/"))

    def test_send_form(self, conn, session):
        response = conn.send_form({"taco": "burrito", "b&az=": "qu ?x"})

        prepared = session.send.call_args[0][0]
        kwargs = session.send.call_args[1]
        assert prepared.method == "PUT"
        assert prepared.url == "http://localhost:9000/"
        assert prepared.headers["Content-Type"] == FORM_CONTENT_TYPE
        assert prepared.body == b"taco=burrito&b%26az%3D=qu%20%3Fx"
        assert kwargs["stream"] is False
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"] == 5.0
        assert response.read_body() == b"<Result/>"

    def test_send_form_without_parameters(self, conn, session):
        conn.send_form({})

        assert not session.send.call_args[0][0].body


class TestResponse:
    def test_read_body(self):
        response = Response(status_code=200, headers={}, body=io.BytesIO(b""))
        assert response.read_body() == b""

    @pytest.mark.parametrize(
        "error",
        [
            OSError("connection reset"),
            Urllib3ProtocolError("Connection broken"),
            requests.exceptions.ChunkedEncodingError("bad chunk"),
        ],
    )
    def test_read_failure_is_body_read_error(self, error):
        body = MagicMock()
        body.read.side_effect = error
        response = Response(status_code=500, headers={}, body=body)

        with pytest.raises(BodyReadError, match="Failed to read response body"):
            response.read_body()
