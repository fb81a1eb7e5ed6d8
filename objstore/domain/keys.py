"""Object key validation.

Keys must be non-empty sequences of Unicode characters whose UTF-8 encoding is
no more than 1024 bytes long. Because "list bucket" responses are XML 1.0
documents, keys must also contain only characters that are legal under
Section 2.2 of the XML 1.0 specification.
"""

from __future__ import annotations

from objstore.domain import MAX_KEY_BYTES
from objstore.domain.errors import (
    EmptyKeyError,
    IllegalCodepointError,
    KeyNotUtf8Error,
    KeyTooLongError,
)


def is_legal_xml_character(codepoint: int) -> bool:
    # The first range stops right before the UTF-16 surrogate block.
    return (
        codepoint in (0x09, 0x0A, 0x0D)
        or 0x20 <= codepoint <= 0xD7FF
        or 0xE000 <= codepoint <= 0xFFFD
        or 0x10000 <= codepoint <= 0x10FFFF
    )


def _as_utf8_bytes(key: str | bytes) -> bytes:
    if isinstance(key, bytes):
        return key
    # Lone surrogates survive as (invalid) UTF-8 bytes so they fail decoding below.
    return key.encode("utf-8", errors="surrogatepass")


def validate_key(key: str | bytes) -> str:
    """Validate ``key`` and return it as a ``str``.

    Raises:
        KeyTooLongError: If the UTF-8 encoding is longer than 1024 bytes.
        KeyNotUtf8Error: If the key is not valid UTF-8.
        EmptyKeyError: If the key is empty.
        IllegalCodepointError: If the key contains a character XML 1.0 forbids.
    """
    raw = _as_utf8_bytes(key)
    if len(raw) > MAX_KEY_BYTES:
        raise KeyTooLongError(f"Keys may be no longer than {MAX_KEY_BYTES} bytes.")

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise KeyNotUtf8Error("Keys must be valid UTF-8.") from exc

    # An empty key could never be listed: the empty marker means "from the start".
    if not text:
        raise EmptyKeyError("Keys must be non-empty.")

    for char in text:
        codepoint = ord(char)
        if not is_legal_xml_character(codepoint):
            raise IllegalCodepointError(codepoint)

    return text


def validate_marker(marker: str | bytes) -> str:
    """Validate a listing marker; the empty marker means the start of the range."""
    if marker in ("", b""):
        return ""
    return validate_key(marker)
