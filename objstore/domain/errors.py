"""Error taxonomy for object storage operations.

Every failure raised by this package derives from ``StorageError`` so callers
can catch the whole family, while the subclasses identify which step of an
operation failed: validation, signing, transport, the server, or the shape of
the server's response.
"""

from __future__ import annotations


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""


class InvalidKeyError(StorageError, ValueError):
    """Raised when an object key (or listing marker) is not a legal key."""


class KeyTooLongError(InvalidKeyError):
    pass


class KeyNotUtf8Error(InvalidKeyError):
    pass


class EmptyKeyError(InvalidKeyError):
    pass


class IllegalCodepointError(InvalidKeyError):
    def __init__(self, codepoint: int) -> None:
        super().__init__(f"Key contains invalid codepoint: U+{codepoint:04X}")
        self.codepoint = codepoint


class SigningError(StorageError):
    """Raised when a request could not be signed."""


class TransportError(StorageError):
    """Raised when no response could be obtained from the server."""


class UnsupportedSchemeError(StorageError, ValueError):
    def __init__(self, scheme: str) -> None:
        super().__init__(f"Unsupported scheme: {scheme}")
        self.scheme = scheme


class ServerError(StorageError):
    """Raised when the server answers with an unexpected status code."""

    def __init__(self, status_code: int, body: bytes) -> None:
        text = body.decode("utf-8", errors="replace")
        super().__init__(f"Error from server: {status_code} {text}")
        self.status_code = status_code
        self.body = body


class ProtocolError(StorageError):
    """Raised when a response body does not have the expected shape."""

    def __init__(self, message: str, body: bytes) -> None:
        super().__init__(message)
        self.body = body


class BodyReadError(StorageError):
    """Raised when a response body cannot be read."""


class ContentDigestError(StorageError):
    """Raised when a request body cannot be hashed or rewound."""
