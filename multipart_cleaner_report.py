#!/usr/bin/env python3
"""
List stale in-progress multipart uploads across S3 buckets and optionally abort them.

This is a thin wrapper around the multipart_cleaner package.
"""
from __future__ import annotations

from multipart_cleaner.cli import main

if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt as exc:  # pragma: no cover - manual abort
        raise SystemExit("\nAborted by user.") from exc
