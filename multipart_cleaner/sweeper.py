"""Scan buckets for stale multipart uploads and optionally abort them."""

from __future__ import annotations

import logging
from datetime import datetime

from botocore.exceptions import BotoCoreError, ClientError

from multipart_cleaner.classifier import is_eligible
from multipart_cleaner.config import CleanerConfig
from multipart_cleaner.models import (
    BucketListingError,
    BucketScanError,
    DeletionOutcome,
    SweepResult,
    UploadRecord,
)
from multipart_cleaner.storage import (
    MalformedPageError,
    abort_upload,
    iter_upload_pages,
    list_bucket_names,
    sum_part_sizes,
)


def _process_upload(s3, bucket: str, upload: dict, *, cutoff: datetime, delete_requested: bool) -> UploadRecord:
    key = upload["Key"]
    upload_id = upload["UploadId"]
    started_at = upload["Initiated"]
    eligible = is_eligible(started_at, cutoff)
    size = sum_part_sizes(s3, bucket, key, upload_id)

    outcome = DeletionOutcome.NOT_ATTEMPTED
    if eligible and delete_requested:
        if abort_upload(s3, bucket, key, upload_id):
            outcome = DeletionOutcome.SUCCEEDED
        else:
            outcome = DeletionOutcome.FAILED

    return UploadRecord(
        bucket=bucket,
        key=key,
        upload_id=upload_id,
        size=size,
        started_at=started_at,
        eligible_for_deletion=eligible,
        deletion_outcome=outcome,
    )


def scan_bucket(s3, bucket: str, *, cutoff: datetime, delete_requested: bool) -> list[UploadRecord]:
    """
    Walk every listing page of one bucket and classify each upload.

    Aborts run inline, so uploads on earlier pages may already be aborted when
    a later page fails.

    Raises:
        BucketScanError: If a listing call fails or returns an unusable page
    """
    records: list[UploadRecord] = []
    try:
        for page in iter_upload_pages(s3, bucket):
            for upload in page.uploads:
                records.append(_process_upload(s3, bucket, upload, cutoff=cutoff, delete_requested=delete_requested))
    except (ClientError, BotoCoreError, MalformedPageError) as exc:
        raise BucketScanError(bucket, str(exc)) from exc
    return records


def _resolve_buckets(s3, config: CleanerConfig) -> list[str]:
    if config.bucket:
        return [config.bucket]
    try:
        return list_bucket_names(s3)
    except (ClientError, BotoCoreError, KeyError) as exc:
        raise BucketListingError(f"Failed to list buckets: {exc}") from exc


def run_sweep(s3, config: CleanerConfig) -> SweepResult:
    """
    Scan the configured bucket, or every bucket, and collect upload records.

    A bucket that fails to list contributes no records; its error is kept in
    the result and the sweep moves on to the next bucket.

    Raises:
        BucketListingError: If the bucket list cannot be fetched
    """
    result = SweepResult()
    buckets = _resolve_buckets(s3, config)
    logging.info("Scanning %d bucket(s) for uploads initiated before %s", len(buckets), config.cutoff.isoformat())

    for idx, bucket in enumerate(buckets, 1):
        logging.info("[%d/%d] Scanning: %s", idx, len(buckets), bucket)
        try:
            records = scan_bucket(s3, bucket, cutoff=config.cutoff, delete_requested=config.delete_requested)
        except BucketScanError as exc:
            logging.warning("Error processing bucket %s: %s", bucket, exc.reason)
            result.errors.append(exc)
            continue
        logging.info("  Found %d in-progress upload(s) in %s", len(records), bucket)
        result.records.extend(records)

    return result
