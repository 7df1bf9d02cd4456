"""Pytest configuration and shared fixtures for the multipart upload cleaner."""

import sys
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest


@pytest.fixture(autouse=True)
def mock_aws_env(monkeypatch):
    """Auto-use fixture that provides mock credentials and a fixed region.

    Tests that exercise missing-credential handling delete these variables
    themselves with monkeypatch.delenv.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.delenv("AWS_SESSION_TOKEN", raising=False)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.setenv("AWS_REGION", "us-east-1")


@pytest.fixture(name="s3_mock")
def fixture_s3_mock():
    """Create a mock S3 client; list_parts pagination returns no parts by default."""
    s3 = mock.Mock()
    s3.get_paginator.return_value.paginate.return_value = []
    return s3
