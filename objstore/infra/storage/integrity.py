"""Content-MD5 computation for request bodies."""

from __future__ import annotations

import base64
import hashlib
import io
from typing import BinaryIO

from objstore.domain.errors import ContentDigestError

_CHUNK_SIZE = 64 * 1024


def digest_base64(body: BinaryIO) -> str:
    """Return the base64 MD5 of the whole of ``body``.

    The stream is read from its start and is left rewound to position 0 on
    every exit path, so it can be handed to the transport afterwards.

    Raises:
        ContentDigestError: If the stream cannot be read or rewound.
    """
    try:
        body.seek(0)
    except (OSError, ValueError) as exc:
        raise ContentDigestError(f"Failed to rewind request body: {exc}") from exc

    md5 = hashlib.md5(usedforsecurity=False)
    try:
        for chunk in iter(lambda: body.read(_CHUNK_SIZE), b""):
            md5.update(chunk)
    except (OSError, ValueError) as exc:
        raise ContentDigestError(f"Failed to hash request body: {exc}") from exc
    finally:
        try:
            body.seek(0)
        except (OSError, ValueError) as exc:
            raise ContentDigestError(
                f"Failed to rewind request body: {exc}"
            ) from exc

    return base64.b64encode(md5.digest()).decode("ascii")


def content_md5(data: bytes) -> str:
    return digest_base64(io.BytesIO(data))
