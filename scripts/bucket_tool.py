#!/usr/bin/env python3
"""Inspect and modify objects in the configured bucket.

Usage:
  .venv/bin/python scripts/bucket_tool.py list --start photos/
  .venv/bin/python scripts/bucket_tool.py get notes.txt > notes.txt
  .venv/bin/python scripts/bucket_tool.py put notes.txt ./notes.txt
  .venv/bin/python scripts/bucket_tool.py head notes.txt
  .venv/bin/python scripts/bucket_tool.py delete notes.txt

The bucket, region and credentials come from S3_* environment variables or a
.env file in the working directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from objstore.common.config import get_settings
from objstore.common.logging import setup_logging
from objstore.domain.errors import StorageError
from objstore.infra.storage import Bucket, iter_keys, open_bucket_from_settings

logger = logging.getLogger("objstore.cli")


def run(bucket: Bucket, args: argparse.Namespace) -> int:
    if args.command == "list":
        count = 0
        for key in iter_keys(bucket, args.start):
            print(key)
            count += 1
            if args.limit is not None and count >= args.limit:
                break
        return 0
    if args.command == "get":
        sys.stdout.buffer.write(bucket.get_object(args.key))
        return 0
    if args.command == "head":
        head = bucket.head_object(args.key)
        print(f"size_bytes={head.size_bytes}")
        print(f"etag={head.etag or '-'}")
        print(f"content_type={head.content_type or '-'}")
        print(f"last_modified={head.last_modified.isoformat() if head.last_modified else '-'}")
        return 0
    if args.command == "put":
        with open(args.path, "rb") as data:
            bucket.put(args.key, data)
        logger.info("stored %s", args.key)
        return 0
    if args.command == "delete":
        bucket.delete_object(args.key)
        logger.info("deleted %s", args.key)
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Work with objects in an S3 bucket")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List keys in order")
    list_cmd.add_argument(
        "--start",
        default="",
        help="List keys strictly greater than this one (default: from the start)",
    )
    list_cmd.add_argument(
        "--limit", type=int, default=None, help="Stop after N keys"
    )

    for name, help_text in (
        ("get", "Write an object's contents to stdout"),
        ("head", "Show an object's metadata"),
        ("delete", "Delete an object"),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("key")

    put_cmd = commands.add_parser("put", help="Upload a local file")
    put_cmd.add_argument("key")
    put_cmd.add_argument("path")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    try:
        bucket = open_bucket_from_settings(settings)
        return run(bucket, args)
    except (StorageError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
