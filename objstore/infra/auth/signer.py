"""Request signing for the S3 REST protocol.

Dependencies:
    - botocore
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from botocore.auth import HmacV1Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from objstore.domain.errors import SigningError
from objstore.infra.http.conn import Request, escape_path

# Only the canonical resource (the path) matters to the signature, not the host.
_SIGNING_HOST = "https://s3.amazonaws.com"


@dataclass(frozen=True)
class AccessKey:
    id: str
    secret: str = field(repr=False)


class Signer(Protocol):
    def sign(self, request: Request) -> None:
        """Add authentication headers to ``request`` in place.

        Raises:
            Exception: If the request cannot be signed.
        """
        ...


class HmacV1Signer:
    """Signs requests with the S3 ``Authorization: AWS id:signature`` scheme.

    botocore recomputes the ``Date`` header at signing time; the new value is
    copied back onto the request so that what is sent matches what was signed.
    """

    def __init__(self, access_key: AccessKey) -> None:
        self._auth = HmacV1Auth(Credentials(access_key.id, access_key.secret))

    def sign(self, request: Request) -> None:
        aws_request = AWSRequest(
            method=request.verb,
            url=f"{_SIGNING_HOST}{escape_path(request.path)}",
            headers=dict(request.headers),
        )
        self._auth.add_auth(aws_request)
        for name, value in aws_request.headers.items():
            request.headers[name] = value


def new_signer(access_key: AccessKey) -> HmacV1Signer:
    if not access_key.id:
        raise SigningError("Access key id must be non-empty.")
    if not access_key.secret:
        raise SigningError("Access key secret must be non-empty.")
    return HmacV1Signer(access_key)
