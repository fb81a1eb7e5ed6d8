"""Object storage abstraction layer.

This module provides a protocol-based bucket abstraction and its S3 REST
implementation, for AWS S3 and other S3-compatible services.
"""

from .client import Bucket, ObjectHead
from .listing import decode_list_page, iter_keys
from .s3_bucket import S3Bucket, open_bucket, open_bucket_from_settings

__all__ = [
    "Bucket",
    "ObjectHead",
    "S3Bucket",
    "decode_list_page",
    "iter_keys",
    "open_bucket",
    "open_bucket_from_settings",
]
