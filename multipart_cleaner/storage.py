"""
S3 operations used by the multipart upload sweep.

Thin wrappers over a boto3 S3 client: bucket listing, paged multipart upload
listing, part-size lookup, and abort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from multipart_cleaner.config import DEFAULT_REGION, Credentials

_UPLOAD_FIELDS = ("Key", "UploadId", "Initiated")


class ClientConstructionError(RuntimeError):
    """Raised when a boto3 S3 client cannot be built."""


class MalformedPageError(RuntimeError):
    """Raised when a listing page has an incomplete upload entry or no usable continuation markers."""


@dataclass(frozen=True)
class PageToken:
    """Continuation markers for list_multipart_uploads."""

    key_marker: str
    upload_id_marker: str = ""

    def as_request_params(self) -> dict:
        params = {"KeyMarker": self.key_marker}
        if self.upload_id_marker:
            params["UploadIdMarker"] = self.upload_id_marker
        return params


@dataclass
class UploadPage:
    """Raw upload descriptors from one listing call plus the token for the next call."""

    uploads: list[dict] = field(default_factory=list)
    next_token: Optional[PageToken] = None


def create_s3_client(
    credentials: Credentials,
    *,
    region: str = DEFAULT_REGION,
    endpoint_url: Optional[str] = None,
):
    """
    Create an S3 client bound to static credentials.

    Raises:
        ClientConstructionError: If boto3 rejects the credentials, region, or endpoint
    """
    kwargs = {
        "region_name": region,
        "aws_access_key_id": credentials.access_key_id,
        "aws_secret_access_key": credentials.secret_access_key,
    }
    if credentials.session_token:
        kwargs["aws_session_token"] = credentials.session_token
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    try:
        return boto3.client("s3", **kwargs)
    except (BotoCoreError, ValueError) as exc:
        raise ClientConstructionError(f"Failed to create S3 client: {exc}") from exc


def list_bucket_names(s3) -> list[str]:
    """
    List the names of all buckets visible to the client.

    Raises:
        ClientError: If the API call fails
        KeyError: If the response is missing the 'Buckets' key
    """
    response = s3.list_buckets()
    return [bucket["Name"] for bucket in response["Buckets"]]


def fetch_upload_page(s3, bucket: str, token: Optional[PageToken] = None) -> UploadPage:
    """
    Fetch one page of in-progress multipart uploads.

    Raises:
        ClientError: If the API call fails
        MalformedPageError: If an upload lacks Key, UploadId or Initiated, or a
            truncated page has no new continuation markers
    """
    params = {"Bucket": bucket}
    if token is not None:
        params.update(token.as_request_params())
    response = s3.list_multipart_uploads(**params)

    uploads = response.get("Uploads")
    if uploads is None:
        uploads = []
    for upload in uploads:
        missing = [name for name in _UPLOAD_FIELDS if upload.get(name) is None]
        if missing:
            raise MalformedPageError(
                f"list_multipart_uploads returned an upload without {', '.join(missing)} for bucket {bucket}"
            )
    if not response.get("IsTruncated"):
        return UploadPage(uploads=uploads)

    key_marker = response.get("NextKeyMarker")
    if not key_marker:
        raise MalformedPageError(f"list_multipart_uploads reported a truncated page without NextKeyMarker for bucket {bucket}")
    next_token = PageToken(key_marker=key_marker, upload_id_marker=response.get("NextUploadIdMarker") or "")
    if next_token == token:
        raise MalformedPageError(f"list_multipart_uploads returned the same continuation markers twice for bucket {bucket}")
    return UploadPage(uploads=uploads, next_token=next_token)


def iter_upload_pages(s3, bucket: str, start: Optional[PageToken] = None) -> Iterator[UploadPage]:
    """Yield listing pages lazily until one arrives without a continuation token."""
    token = start
    while True:
        page = fetch_upload_page(s3, bucket, token)
        yield page
        if page.next_token is None:
            return
        token = page.next_token


def sum_part_sizes(s3, bucket: str, key: str, upload_id: str) -> int:
    """
    Sum the sizes of the parts uploaded so far.

    Lookup failures are not reported: the sum covers whatever pages were read
    before the error, which is 0 when the first call fails.
    """
    total = 0
    paginator = s3.get_paginator("list_parts")
    try:
        for page in paginator.paginate(Bucket=bucket, Key=key, UploadId=upload_id):
            for part in page.get("Parts") or []:
                size = part.get("Size")
                if size:
                    total += size
    except (ClientError, BotoCoreError) as exc:
        logging.info("Could not list parts for s3://%s/%s (%s): %s", bucket, key, upload_id, exc)
    return total


def abort_upload(s3, bucket: str, key: str, upload_id: str) -> bool:
    """
    Abort a multipart upload.

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        s3.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)
    except (ClientError, BotoCoreError) as exc:
        logging.warning("Failed to abort s3://%s/%s (%s): %s", bucket, key, upload_id, exc)
        return False
    logging.info("Aborted s3://%s/%s (%s)", bucket, key, upload_id)
    return True
