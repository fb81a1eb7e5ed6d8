"""Mapping of server responses onto results and errors."""

from __future__ import annotations

import logging

from objstore.domain.errors import ServerError
from objstore.infra.http.conn import Response

logger = logging.getLogger("objstore.storage")


def server_error(response: Response) -> ServerError:
    """Build a ``ServerError`` carrying the status code and the full body.

    Raises:
        BodyReadError: If the body cannot be read.
    """
    body = response.read_body()
    return ServerError(response.status_code, body)


def expect_status(response: Response, expected: int) -> None:
    if response.status_code == expected:
        return
    error = server_error(response)
    logger.warning(
        "unexpected status expected=%s status=%s",
        expected,
        response.status_code,
        extra={"extra": {"expected": expected, "status": response.status_code}},
    )
    raise error
