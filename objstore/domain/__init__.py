"""
Domain layer package housing key rules and the error taxonomy.
"""

from typing import Final

# S3 rejects keys whose UTF-8 encoding is longer than this.
MAX_KEY_BYTES: Final[int] = 1024
