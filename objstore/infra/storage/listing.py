"""Decoding of "list bucket" responses and key iteration.

Listing gives a weak, per-call guarantee only: at some instant during a
``list_keys(prev_key)`` call, the returned keys were exactly the first keys
greater than ``prev_key``. Successive pages are separate snapshots, so keys
written or deleted while paging may or may not be seen.
"""

from __future__ import annotations

from typing import Iterator
from xml.etree import ElementTree as ET

from objstore.domain.errors import ProtocolError
from objstore.infra.storage.client import Bucket

LIST_BUCKET_RESULT = "ListBucketResult"


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{namespace}local".
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            yield child


def decode_list_page(body: bytes) -> list[str]:
    """Return the keys of a ``ListBucketResult`` document in document order.

    Raises:
        ProtocolError: If the body is not XML or its root is not
            ``ListBucketResult``.
    """
    text = body.decode("utf-8", errors="replace")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ProtocolError(
            f"Invalid data from server ({exc}): {text}", body
        ) from exc

    root_name = _local_name(root.tag)
    if root_name != LIST_BUCKET_RESULT:
        raise ProtocolError(
            f"Invalid data from server: root element {root_name}: {text}", body
        )

    keys: list[str] = []
    for contents in _children(root, "Contents"):
        for key in _children(contents, "Key"):
            keys.append(key.text or "")
    return keys


def iter_keys(bucket: Bucket, start: str = "") -> Iterator[str]:
    """Yield every key greater than ``start``, one page at a time.

    Each page is its own snapshot; see the module docstring.
    """
    prev_key = start
    while True:
        keys = bucket.list_keys(prev_key)
        if not keys:
            return
        yield from keys
        prev_key = keys[-1]
