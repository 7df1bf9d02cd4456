#!/usr/bin/env python3
"""CLI to list, and optionally abort, stale in-progress S3 multipart uploads."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from multipart_cleaner import __version__
from multipart_cleaner.config import (
    DEFAULT_OLDER_THAN,
    DEFAULT_OUTPUT_FORMAT,
    build_config,
    default_region,
    load_credentials_from_env,
)
from multipart_cleaner.models import BucketListingError, ConfigurationError
from multipart_cleaner.reports import write_report
from multipart_cleaner.storage import ClientConstructionError, create_s3_client
from multipart_cleaner.sweeper import run_sweep

EPILOG = """\
examples:
  # List uploads older than 7 days in all buckets (default)
  AWS_ACCESS_KEY_ID=ak AWS_SECRET_ACCESS_KEY=sk multipart-cleaner

  # List uploads older than 3 days in one bucket
  multipart-cleaner --bucket=my-bucket --olderThan=3d

  # Abort uploads older than 72 hours in one bucket
  multipart-cleaner --bucket=my-bucket --olderThan=72h --doDelete

  # JSON output
  multipart-cleaner --fmt=json
"""


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the multipart upload sweep."""
    parser = argparse.ArgumentParser(
        prog="multipart-cleaner",
        description=(
            "Find in-progress multipart uploads older than a threshold in S3 buckets "
            "and optionally abort them. Credentials come from AWS_ACCESS_KEY_ID and "
            "AWS_SECRET_ACCESS_KEY."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--bucket",
        default="",
        help="Bucket name. Empty means all buckets.",
    )
    parser.add_argument(
        "--olderThan",
        "--older-than",
        dest="older_than",
        default=DEFAULT_OLDER_THAN,
        help="Find uploads initiated before this age, e.g. '7d' (7 days) or '72h' (72 hours). Default: %(default)s",
    )
    parser.add_argument(
        "--doDelete",
        "--do-delete",
        dest="do_delete",
        action="store_true",
        help="Abort the stale uploads. Disabled by default (list only).",
    )
    parser.add_argument(
        "--fmt",
        default=DEFAULT_OUTPUT_FORMAT,
        help="Output format: table, json, csv. Default: %(default)s",
    )
    parser.add_argument(
        "--region",
        default=default_region(),
        help="Region for the S3 client (default: %(default)s).",
    )
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("AWS_ENDPOINT_URL"),
        help="Custom endpoint for S3-compatible services.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress for each bucket to stderr.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the sweep and print the report. Returns the process exit code."""
    args = parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = build_config(
            bucket=args.bucket,
            older_than=args.older_than,
            do_delete=args.do_delete,
            output_format=args.fmt,
        )
        credentials = load_credentials_from_env()
        s3 = create_s3_client(credentials, region=args.region, endpoint_url=args.endpoint_url)
        result = run_sweep(s3, config)
    except (ConfigurationError, ClientConstructionError, BucketListingError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for error in result.errors:
        print(f"❌ Error processing bucket {error.bucket}: {error.reason}", file=sys.stderr)

    write_report(result.records, config.output_format, sys.stdout)
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt as exc:  # pragma: no cover - manual abort
        raise SystemExit("\nAborted by user.") from exc
