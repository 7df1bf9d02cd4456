"""
Run configuration for the multipart upload cleaner.

Parses the age threshold, validates the output format, and loads credentials
from the environment. Everything here runs before the first S3 request.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Mapping, Optional

from multipart_cleaner.models import ConfigurationError

DEFAULT_OLDER_THAN = "7d"
DEFAULT_OUTPUT_FORMAT = "table"
DEFAULT_REGION = "us-east-1"

ACCESS_KEY_ENV = "AWS_ACCESS_KEY_ID"
SECRET_KEY_ENV = "AWS_SECRET_ACCESS_KEY"
SESSION_TOKEN_ENV = "AWS_SESSION_TOKEN"

EARLIEST_CUTOFF = datetime.min.replace(tzinfo=timezone.utc)

_AGE_PATTERN = re.compile(r"([0-9]+)([dh])")
_AGE_UNITS = {
    "d": lambda value: timedelta(days=value),
    "h": lambda value: timedelta(hours=value),
}


class OutputFormat(Enum):
    """Supported report formats"""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"


@dataclass(frozen=True)
class Credentials:
    """Static S3 credentials read from the environment."""

    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None


@dataclass(frozen=True)
class CleanerConfig:
    """Immutable settings for one cleaner run."""

    bucket: Optional[str]
    older_than: str
    cutoff: datetime
    delete_requested: bool
    output_format: OutputFormat


def parse_age(value: str) -> timedelta:
    """
    Parse an age threshold such as ``7d`` or ``72h``.

    Raises:
        ConfigurationError: If the value is not a positive integer followed by ``d`` or ``h``
    """
    match = _AGE_PATTERN.fullmatch(value or "")
    if match is None:
        raise ConfigurationError(
            f"Invalid time format '{value}', valid format is: number+unit, e.g. '7d' (7 days) or '72h' (72 hours)"
        )
    amount = int(match.group(1))
    if amount <= 0:
        raise ConfigurationError(f"Invalid time value '{match.group(1)}', must be a positive integer")
    try:
        return _AGE_UNITS[match.group(2)](amount)
    except OverflowError:
        return timedelta.max


def compute_cutoff(older_than: str, now: Optional[datetime] = None) -> datetime:
    """
    Return the instant before which uploads count as stale.

    Ages reaching past the earliest representable date clamp to that date.
    """
    age = parse_age(older_than)
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        return now - age
    except OverflowError:
        return EARLIEST_CUTOFF


def parse_output_format(value: str) -> OutputFormat:
    """Resolve a case-insensitive format name."""
    try:
        return OutputFormat((value or "").lower())
    except ValueError as exc:
        valid = ", ".join(fmt.value for fmt in OutputFormat)
        raise ConfigurationError(f"Invalid format '{value}', valid options are: {valid}") from exc


def build_config(
    *,
    bucket: Optional[str] = None,
    older_than: str = DEFAULT_OLDER_THAN,
    do_delete: bool = False,
    output_format: str = DEFAULT_OUTPUT_FORMAT,
    now: Optional[datetime] = None,
) -> CleanerConfig:
    """Validate raw settings and freeze them, computing the cutoff once."""
    fmt = parse_output_format(output_format)
    cutoff = compute_cutoff(older_than, now)
    return CleanerConfig(
        bucket=bucket or None,
        older_than=older_than,
        cutoff=cutoff,
        delete_requested=do_delete,
        output_format=fmt,
    )


def load_credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Read the access key pair from the environment.

    Raises:
        ConfigurationError: If either the access key or the secret key is missing
    """
    if environ is None:
        environ = os.environ
    access_key = environ.get(ACCESS_KEY_ENV, "")
    secret_key = environ.get(SECRET_KEY_ENV, "")
    if not access_key or not secret_key:
        raise ConfigurationError(f"Environment variables {ACCESS_KEY_ENV} and {SECRET_KEY_ENV} must be set")
    session_token = environ.get(SESSION_TOKEN_ENV) or None
    return Credentials(access_key_id=access_key, secret_access_key=secret_key, session_token=session_token)


def default_region(environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the region from AWS_REGION, then AWS_DEFAULT_REGION, then us-east-1."""
    if environ is None:
        environ = os.environ
    return environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION
