"""CLI entry point for ossclient."""

import argparse
import logging
import sys
from pathlib import Path

from ossclient.client import DEFAULT_PART_SIZE, OSSClient
from ossclient.config import ClientConfig, load_config
from ossclient.errors import OSSError
from ossclient.logging_config import configure_logging
from ossclient.models import (
    AbortMultipartUploadRequest,
    InitiateMultipartUploadRequest,
    ListMultipartUploadsRequest,
    ListPartsRequest,
)

logger = logging.getLogger("ossclient")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="ossclient",
        description="ossclient - multipart uploads against an S3-compatible service",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config, default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log format: 'text' (human-readable) or 'json' (structured)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("initiate", help="Start a multipart upload and print its upload id")
    p.add_argument("bucket")
    p.add_argument("key")

    p = sub.add_parser("upload", help="Upload a local file with a multipart upload")
    p.add_argument("bucket")
    p.add_argument("key")
    p.add_argument("path", type=Path)
    p.add_argument(
        "--part-size",
        type=int,
        default=DEFAULT_PART_SIZE,
        help=f"Part size in bytes (default: {DEFAULT_PART_SIZE})",
    )

    p = sub.add_parser("list-uploads", help="List in-progress multipart uploads")
    p.add_argument("bucket")
    p.add_argument("--prefix", default=None)
    p.add_argument("--max-uploads", type=int, default=None)

    p = sub.add_parser("list-parts", help="List the parts of a multipart upload")
    p.add_argument("bucket")
    p.add_argument("key")
    p.add_argument("upload_id")
    p.add_argument("--max-parts", type=int, default=None)

    p = sub.add_parser("abort", help="Abort a multipart upload")
    p.add_argument("bucket")
    p.add_argument("key")
    p.add_argument("upload_id")

    return parser.parse_args(argv)


def run_command(client: OSSClient, args: argparse.Namespace) -> None:
    """Execute the selected sub-command and print its result to stdout."""
    if args.command == "initiate":
        result = client.initiate_multipart_upload(
            InitiateMultipartUploadRequest(args.bucket, args.key)
        )
        print(result.upload_id)
    elif args.command == "upload":
        result = client.upload_file(args.bucket, args.key, args.path, part_size=args.part_size)
        print(result.etag)
    elif args.command == "list-uploads":
        listing = client.list_multipart_uploads(
            ListMultipartUploadsRequest(
                args.bucket, prefix=args.prefix, max_uploads=args.max_uploads
            )
        )
        for upload in listing.uploads:
            print(f"{upload.key}\t{upload.upload_id}")
    elif args.command == "list-parts":
        listing = client.list_parts(
            ListPartsRequest(args.bucket, args.key, args.upload_id, max_parts=args.max_parts)
        )
        for part in listing.parts:
            print(f"{part.part_number}\t{part.size}\t{part.etag}")
    elif args.command == "abort":
        client.abort_multipart_upload(
            AbortMultipartUploadRequest(args.bucket, args.key, args.upload_id)
        )


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the ossclient CLI.

    Loads configuration, applies CLI overrides and runs one sub-command.
    Exits with status 1 on configuration or operation failure.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].
    """
    args = parse_args(argv)

    # Use a basic stderr logger for config-loading errors
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    if args.config is None:
        config = ClientConfig()
    else:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            logger.error("Config file not found: %s", args.config)
            sys.exit(1)
        except Exception as exc:
            logger.error("Failed to load config: %s", exc)
            sys.exit(1)

    if args.log_level is not None:
        config.observability.log_level = args.log_level
    if args.log_format is not None:
        config.observability.log_format = args.log_format

    configure_logging(
        level=config.observability.log_level,
        fmt=config.observability.log_format,
    )

    with OSSClient(config) as client:
        try:
            run_command(client, args)
        except (OSSError, OSError) as exc:
            logger.error("%s failed: %s", args.command, exc)
            sys.exit(1)


if __name__ == "__main__":
    main()
