"""HTTP request/response types and the connection to a storage endpoint.

Dependencies:
    - requests
    - urllib3
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Mapping, Protocol
from urllib.parse import quote, urlencode, urlsplit

import requests
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from objstore.common.config import SUPPORTED_SCHEMES
from objstore.domain.errors import BodyReadError, UnsupportedSchemeError

logger = logging.getLogger("objstore.http")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


@dataclass
class Request:
    """A protocol-level request, built per operation and signed in place."""

    verb: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    parameters: dict[str, str] = field(default_factory=dict)
    body: BinaryIO | None = None


@dataclass
class Response:
    """A response from the server; the body may be read only once."""

    status_code: int
    headers: Mapping[str, str]
    body: BinaryIO

    def read_body(self) -> bytes:
        try:
            return self.body.read()
        except (OSError, Urllib3HTTPError, requests.RequestException) as exc:
            raise BodyReadError(f"Failed to read response body: {exc}") from exc

    def close(self) -> None:
        self.body.close()


class Connection(Protocol):
    """A connection to a particular server over HTTP or HTTPS."""

    def send(self, request: Request) -> Response:
        """Send ``request`` and return the server's response.

        A response is returned if and only if one was received, so a 500 from
        the server comes back as a ``Response`` rather than an exception.

        Raises:
            Exception: Any transport failure.
        """
        ...


def encode_parameters(parameters: Mapping[str, str]) -> str:
    """Form-encode ``parameters`` in insertion order.

    Unlike HTML form encoding, spaces become ``%20`` and every reserved
    character is escaped.
    """
    return urlencode(parameters, quote_via=quote)


# Segments that URL parsers would otherwise resolve away.
_DOT_SEGMENTS = {".": "%2E", "..": "%2E%2E"}


def escape_path(path: str) -> str:
    """Percent-encode ``path``, keeping ``/`` and escaping dot segments.

    Keys are never normalized, so ``a/../b`` must reach the server as three
    segments rather than as ``b``.
    """
    segments = quote(path, safe="/").split("/")
    return "/".join(_DOT_SEGMENTS.get(segment, segment) for segment in segments)


class HttpConnection:
    """Connection backed by a ``requests`` session."""

    def __init__(
        self,
        *,
        scheme: str,
        host: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self._scheme = scheme
        self._host = host
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self._scheme}://{self._host}"

    def build_url(self, request: Request) -> str:
        url = f"{self.endpoint}{escape_path(request.path or '/')}"
        if request.parameters:
            url = f"{url}?{encode_parameters(request.parameters)}"
        return url

    def _dispatch(
        self,
        verb: str,
        url: str,
        *,
        headers: dict[str, str],
        data,
        stream: bool,
    ) -> requests.Response:
        prepared = self._session.prepare_request(
            requests.Request(verb, url, headers=headers, data=data)
        )
        # requests resolves dot segments and unescapes %2E; send the URL that
        # was signed.
        prepared.url = url
        settings = self._session.merge_environment_settings(
            url, {}, stream, None, None
        )
        return self._session.send(
            prepared, allow_redirects=False, timeout=self._timeout, **settings
        )

    def send(self, request: Request) -> Response:
        url = self.build_url(request)
        logger.debug("send verb=%s url=%s", request.verb, url)
        sys_resp = self._dispatch(
            request.verb,
            url,
            headers=dict(request.headers),
            data=request.body,
            stream=True,
        )
        sys_resp.raw.decode_content = True
        return Response(
            status_code=sys_resp.status_code,
            headers=sys_resp.headers,
            body=sys_resp.raw,
        )

    def send_form(
        self,
        parameters: Mapping[str, str],
        *,
        verb: str = "PUT",
        path: str = "/",
    ) -> Response:
        """Send ``parameters`` as a form-encoded request body."""
        body = encode_parameters(parameters).encode("ascii")
        sys_resp = self._dispatch(
            verb,
            f"{self.endpoint}{escape_path(path)}",
            headers={"Content-Type": FORM_CONTENT_TYPE},
            data=body,
            stream=False,
        )
        return Response(
            status_code=sys_resp.status_code,
            headers=sys_resp.headers,
            body=io.BytesIO(sys_resp.content),
        )


def new_connection(
    endpoint: str,
    *,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> HttpConnection:
    """Return a connection to ``endpoint`` based on its scheme and host.

    Raises:
        UnsupportedSchemeError: If the scheme is neither http nor https.
    """
    parts = urlsplit(endpoint)
    if parts.scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(parts.scheme)
    return HttpConnection(
        scheme=parts.scheme,
        host=parts.netloc,
        session=session,
        timeout=timeout,
    )
