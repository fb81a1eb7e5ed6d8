"""Client for S3-compatible object storage over the signed REST protocol."""

from objstore.domain.errors import (
    BodyReadError,
    ContentDigestError,
    EmptyKeyError,
    IllegalCodepointError,
    InvalidKeyError,
    KeyNotUtf8Error,
    KeyTooLongError,
    ProtocolError,
    ServerError,
    SigningError,
    StorageError,
    TransportError,
    UnsupportedSchemeError,
)
from objstore.infra.auth.signer import AccessKey
from objstore.infra.storage import (
    Bucket,
    ObjectHead,
    S3Bucket,
    iter_keys,
    open_bucket,
    open_bucket_from_settings,
)

__all__ = [
    "AccessKey",
    "BodyReadError",
    "Bucket",
    "ContentDigestError",
    "EmptyKeyError",
    "IllegalCodepointError",
    "InvalidKeyError",
    "KeyNotUtf8Error",
    "KeyTooLongError",
    "ObjectHead",
    "ProtocolError",
    "S3Bucket",
    "ServerError",
    "SigningError",
    "StorageError",
    "TransportError",
    "UnsupportedSchemeError",
    "iter_keys",
    "open_bucket",
    "open_bucket_from_settings",
]
