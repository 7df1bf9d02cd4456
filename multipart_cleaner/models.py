"""Shared data models and errors for the multipart upload cleaner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List


class ConfigurationError(ValueError):
    """Raised when run configuration is invalid. Reported before any scan."""


class BucketListingError(RuntimeError):
    """Raised when the bucket list itself cannot be fetched."""


class BucketScanError(RuntimeError):
    """Raised when multipart uploads for one bucket cannot be listed."""

    def __init__(self, bucket: str, reason: str) -> None:
        super().__init__(f"Failed to list multipart uploads in bucket {bucket}: {reason}")
        self.bucket = bucket
        self.reason = reason


class DeletionOutcome(Enum):
    """Result of an abort attempt for one upload."""

    NOT_ATTEMPTED = "not_attempted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadRecord:
    """One in-progress multipart upload discovered during a scan."""

    bucket: str
    key: str
    upload_id: str
    size: int
    started_at: datetime
    eligible_for_deletion: bool
    deletion_outcome: DeletionOutcome = DeletionOutcome.NOT_ATTEMPTED

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"Upload size must be non-negative, got {self.size}")
        if self.deletion_outcome is not DeletionOutcome.NOT_ATTEMPTED and not self.eligible_for_deletion:
            raise ValueError(f"Upload {self.bucket}/{self.key} has a deletion outcome but is not eligible for deletion")

    @property
    def deleted(self) -> bool:
        return self.deletion_outcome is DeletionOutcome.SUCCEEDED


@dataclass
class SweepResult:
    """Records collected by a sweep plus the per-bucket failures it recovered from."""

    records: List[UploadRecord] = field(default_factory=list)
    errors: List[BucketScanError] = field(default_factory=list)


@dataclass(frozen=True)
class SweepSummary:
    """Aggregate counts and sizes for a report footer."""

    total_files: int = 0
    total_size: int = 0
    eligible_files: int = 0
    eligible_size: int = 0
    deleted_files: int = 0
    deleted_size: int = 0


__all__ = [
    "BucketListingError",
    "BucketScanError",
    "ConfigurationError",
    "DeletionOutcome",
    "SweepResult",
    "SweepSummary",
    "UploadRecord",
]
