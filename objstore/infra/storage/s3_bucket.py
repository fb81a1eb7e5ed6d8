"""S3 bucket client over the REST protocol.

Each operation validates its key, builds a request, signs it, sends it exactly
once and interprets the response. Nothing is retried.

Reference:
    https://docs.aws.amazon.com/AmazonS3/latest/API/API_Operations_Amazon_Simple_Storage_Service.html
"""

from __future__ import annotations

import io
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Final, Iterator, Mapping

from objstore.common.clock import Clock, UTCClock, http_date
from objstore.domain.errors import SigningError, TransportError
from objstore.domain.keys import validate_key, validate_marker
from objstore.infra.auth.signer import AccessKey, Signer, new_signer
from objstore.infra.http.conn import Connection, Request, Response, new_connection
from objstore.infra.observability.metrics import LATENCY, REQUESTS
from objstore.infra.storage.client import ObjectHead
from objstore.infra.storage.integrity import content_md5, digest_base64
from objstore.infra.storage.interpret import expect_status
from objstore.infra.storage.listing import decode_list_page

if TYPE_CHECKING:
    from objstore.common.config import Settings

logger = logging.getLogger("objstore.storage")

# Endpoint hosts of the classic S3 regions; any other host is accepted too.
REGION_US_STANDARD: Final[str] = "s3.amazonaws.com"
REGION_US_WEST_1: Final[str] = "s3-us-west-1.amazonaws.com"
REGION_US_WEST_2: Final[str] = "s3-us-west-2.amazonaws.com"
REGION_EU_IRELAND: Final[str] = "s3-eu-west-1.amazonaws.com"
REGION_AP_SINGAPORE: Final[str] = "s3-ap-southeast-1.amazonaws.com"
REGION_AP_TOKYO: Final[str] = "s3-ap-northeast-1.amazonaws.com"
REGION_SA_SAO_PAULO: Final[str] = "s3-sa-east-1.amazonaws.com"


@dataclass(frozen=True)
class S3Bucket:
    """A bucket tied to a connection, a signer and a clock.

    Instances are immutable, so they may be shared between threads as long as
    the injected connection and signer allow concurrent use.

    The clock supplies the ``Date`` header, but ``HmacV1Signer`` replaces it
    with the signing time; an injected clock only reaches the wire through a
    custom signer.
    """

    name: str
    connection: Connection
    signer: Signer
    clock: Clock
    record_metrics: bool = True

    def _object_path(self, key: str) -> str:
        return f"/{self.name}/{key}"

    def _new_request(self, verb: str, path: str) -> Request:
        return Request(
            verb=verb,
            path=path,
            headers={"Date": http_date(self.clock.now())},
        )

    def _observe(self, operation: str, status: str, started: float) -> None:
        if not self.record_metrics:
            return
        REQUESTS.labels(operation, status).inc()
        LATENCY.labels(operation).observe(time.perf_counter() - started)

    @contextmanager
    def _exchange(self, operation: str, request: Request) -> Iterator[Response]:
        started = time.perf_counter()
        try:
            self.signer.sign(request)
        except Exception as exc:
            self._observe(operation, "error", started)
            logger.warning(
                "sign failed operation=%s error=%s",
                operation,
                exc,
                extra={"extra": {"operation": operation, "bucket": self.name}},
            )
            raise SigningError(f"Sign: {exc}") from exc

        try:
            response = self.connection.send(request)
        except Exception as exc:
            self._observe(operation, "error", started)
            logger.warning(
                "send failed operation=%s error=%s",
                operation,
                exc,
                extra={"extra": {"operation": operation, "bucket": self.name}},
            )
            raise TransportError(f"SendRequest: {exc}") from exc

        self._observe(operation, str(response.status_code), started)
        logger.debug(
            "exchange operation=%s verb=%s path=%s status=%s",
            operation,
            request.verb,
            request.path,
            response.status_code,
            extra={
                "extra": {
                    "operation": operation,
                    "bucket": self.name,
                    "status": response.status_code,
                }
            },
        )
        try:
            yield response
        finally:
            response.close()

    def get_object(self, key: str) -> bytes:
        key = validate_key(key)
        request = self._new_request("GET", self._object_path(key))
        with self._exchange("get_object", request) as response:
            expect_status(response, 200)
            return response.read_body()

    def get_header(self, key: str) -> Mapping[str, str]:
        key = validate_key(key)
        request = self._new_request("HEAD", self._object_path(key))
        with self._exchange("get_header", request) as response:
            expect_status(response, 200)
            return response.headers

    def head_object(self, key: str) -> ObjectHead:
        return ObjectHead.from_headers(self.get_header(key))

    def store_object(self, key: str, data: bytes) -> None:
        key = validate_key(key)
        request = self._new_request("PUT", self._object_path(key))
        request.headers["Content-MD5"] = content_md5(data)
        request.body = io.BytesIO(data)
        with self._exchange("store_object", request) as response:
            expect_status(response, 200)

    def put(self, key: str, data: BinaryIO) -> None:
        key = validate_key(key)
        # Hashing leaves the stream rewound for the transport.
        md5 = digest_base64(data)
        request = self._new_request("PUT", self._object_path(key))
        request.headers["Content-MD5"] = md5
        request.body = data
        with self._exchange("put", request) as response:
            expect_status(response, 200)

    def delete_object(self, key: str) -> None:
        key = validate_key(key)
        request = self._new_request("DELETE", self._object_path(key))
        request.headers["Content-MD5"] = content_md5(b"")
        with self._exchange("delete_object", request) as response:
            expect_status(response, 204)

    def list_keys(self, prev_key: str) -> list[str]:
        prev_key = validate_marker(prev_key)
        request = self._new_request("GET", f"/{self.name}")
        if prev_key:
            request.parameters["marker"] = prev_key
        with self._exchange("list_keys", request) as response:
            expect_status(response, 200)
            body = response.read_body()
        return decode_list_page(body)


def open_bucket(
    name: str,
    region: str,
    access_key: AccessKey,
    *,
    scheme: str = "https",
    timeout: float | None = None,
    record_metrics: bool = True,
) -> S3Bucket:
    """Return a bucket with the given name in the given region.

    The bucket must already exist and ``access_key`` must have access to it.

    Raises:
        UnsupportedSchemeError: If ``scheme`` is neither http nor https.
        SigningError: If the access key is incomplete.
    """
    connection = new_connection(f"{scheme}://{region}", timeout=timeout)
    signer = new_signer(access_key)
    return S3Bucket(
        name=name,
        connection=connection,
        signer=signer,
        clock=UTCClock(),
        record_metrics=record_metrics,
    )


def open_bucket_from_settings(settings: "Settings") -> S3Bucket:
    if not settings.S3_BUCKET:
        raise ValueError("S3_BUCKET is required to open a bucket.")
    access_key = AccessKey(
        id=settings.S3_ACCESS_KEY_ID or "",
        secret=settings.S3_SECRET_ACCESS_KEY or "",
    )
    return open_bucket(
        settings.S3_BUCKET,
        settings.S3_REGION,
        access_key,
        scheme=settings.S3_SCHEME,
        timeout=settings.request_timeout,
        record_metrics=settings.ENABLE_METRICS,
    )
