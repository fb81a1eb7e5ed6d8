"""Bucket protocol and data types.

A bucket is a collection of objects keyed on Unicode strings. Keys must be
non-empty, at most 1024 bytes of UTF-8, and contain only characters that are
legal in XML 1.0 documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import BinaryIO, Mapping, Protocol


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Metadata from a HEAD object request."""

    size_bytes: int
    etag: str | None
    content_type: str | None
    last_modified: datetime | None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ObjectHead":
        size = headers.get("Content-Length")
        last_modified = headers.get("Last-Modified")
        return cls(
            size_bytes=int(size) if size else 0,
            etag=headers.get("ETag"),
            content_type=headers.get("Content-Type"),
            last_modified=(
                parsedate_to_datetime(last_modified) if last_modified else None
            ),
        )


class Bucket(Protocol):
    """Protocol defining the operations on a single bucket.

    Every method validates its key before touching the network and raises a
    ``StorageError`` subclass on failure.
    """

    def get_object(self, key: str) -> bytes:
        """Retrieve data for the object with the given key.

        Raises:
            InvalidKeyError: If the key is not legal.
            ServerError: If the server does not answer 200.
        """
        ...

    def get_header(self, key: str) -> Mapping[str, str]:
        """Retrieve the response headers for the object with the given key.

        Raises:
            InvalidKeyError: If the key is not legal.
            ServerError: If the server does not answer 200.
        """
        ...

    def head_object(self, key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        ...

    def store_object(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, overwriting any previous version.

        The object is created with the default ACL of "private".
        """
        ...

    def put(self, key: str, data: BinaryIO) -> None:
        """Stream the seekable ``data`` to ``key``, overwriting any previous version."""
        ...

    def delete_object(self, key: str) -> None:
        """Delete the object with the supplied key."""
        ...

    def list_keys(self, prev_key: str) -> list[str]:
        """Return contiguous keys strictly greater than ``prev_key``.

        At some time during the request there were no keys between
        ``prev_key`` and the first key returned. There may be more keys beyond
        the last one returned; an empty result means that at some time during
        the request the bucket held no keys greater than ``prev_key``.

        ``prev_key`` must be a legal key or the empty string, which starts
        the listing at the beginning of the bucket.
        """
        ...
