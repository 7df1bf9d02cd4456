"""Expose helper fixtures to every test module."""

from tests.conftest_helpers import (  # noqa: F401  pylint: disable=unused-import
    client_error,
    fixed_now,
    make_record,
    make_upload,
    uploads_page,
)
