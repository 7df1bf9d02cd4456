"""
Report generation for multipart upload sweeps.

Renders collected upload records as a text table with a statistics footer,
as a JSON document, or as CSV.
"""

from __future__ import annotations

import csv
import json
import unicodedata
from datetime import datetime
from typing import Sequence, TextIO

from multipart_cleaner.classifier import as_utc
from multipart_cleaner.config import OutputFormat
from multipart_cleaner.models import DeletionOutcome, SweepSummary, UploadRecord

__all__ = [
    "CSV_HEADER",
    "display_width",
    "format_bytes",
    "summarise",
    "truncate_display",
    "write_csv",
    "write_json",
    "write_report",
    "write_table",
]

CSV_HEADER = ["Bucket", "Key", "Size", "ModTime", "ShouldDelete", "DeleteSuccess"]
KEY_COLUMN_WIDTH = 120
TABLE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_CSV_DELETE_SUCCESS = {
    DeletionOutcome.NOT_ATTEMPTED: "not_executed",
    DeletionOutcome.SUCCEEDED: "true",
    DeletionOutcome.FAILED: "false",
}

_SIZE_UNITS = [("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)]


def format_bytes(size: int) -> str:
    """Format a byte count using 1024-based units, e.g. ``1.50 KB``."""
    for unit, factor in _SIZE_UNITS:
        if size >= factor:
            return f"{size / factor:.2f} {unit}"
    return f"{size} B"


def _rfc3339(moment: datetime) -> str:
    return as_utc(moment).strftime("%Y-%m-%dT%H:%M:%SZ")


def _char_width(char: str) -> int:
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def display_width(text: str) -> int:
    """Terminal cell width, counting wide East Asian characters as two cells."""
    return sum(_char_width(char) for char in text)


def truncate_display(text: str, max_width: int) -> str:
    """Cut text to ``max_width`` cells, ending with ``...`` when anything was dropped."""
    if display_width(text) <= max_width:
        return text
    kept = []
    used = 0
    for char in text:
        width = _char_width(char)
        if used + width > max_width - 3:
            break
        kept.append(char)
        used += width
    return "".join(kept) + "..."


def summarise(records: Sequence[UploadRecord]) -> SweepSummary:
    """Return total, eligible, and deleted counts and sizes."""
    eligible = [r for r in records if r.eligible_for_deletion]
    deleted = [r for r in records if r.deleted]
    return SweepSummary(
        total_files=len(records),
        total_size=sum(r.size for r in records),
        eligible_files=len(eligible),
        eligible_size=sum(r.size for r in eligible),
        deleted_files=len(deleted),
        deleted_size=sum(r.size for r in deleted),
    )


def _status_label(record: UploadRecord) -> str:
    if record.deletion_outcome is DeletionOutcome.SUCCEEDED:
        return "✅ Deleted"
    if record.deletion_outcome is DeletionOutcome.FAILED:
        return "❌ Delete failed"
    if record.eligible_for_deletion:
        return "🎯 Will delete"
    return "🔍 Won't delete"


def _pad(text: str, width: int) -> str:
    return text + " " * (width - display_width(text))


def _render_grid(header: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    widths = [display_width(cell) for cell in header]
    for row in rows:
        widths = [max(width, display_width(cell)) for width, cell in zip(widths, row)]
    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(cells):
        return "| " + " | ".join(_pad(cell, width) for cell, width in zip(cells, widths)) + " |"

    lines = [border, line(header), border]
    lines.extend(line(row) for row in rows)
    lines.append(border)
    return lines


def write_table(records: Sequence[UploadRecord], stream: TextIO) -> None:
    """Write a human readable table followed by a statistics block."""
    if not records:
        print("No in-progress multipart uploads found", file=stream)
        return

    rows = [
        [
            record.bucket,
            truncate_display(record.key, KEY_COLUMN_WIDTH),
            format_bytes(record.size),
            as_utc(record.started_at).strftime(TABLE_TIME_FORMAT),
            _status_label(record),
        ]
        for record in records
    ]
    for text in _render_grid(["Bucket", "Key", "Size", "Mod Time", "Status"], rows):
        print(text, file=stream)

    summary = summarise(records)
    stats = [
        ["Total files", f"{summary.total_files}"],
        ["Total size", format_bytes(summary.total_size)],
        ["Files to delete", f"{summary.eligible_files}"],
        ["Size to delete", format_bytes(summary.eligible_size)],
        ["Files deleted", f"{summary.deleted_files}"],
        ["Size deleted", format_bytes(summary.deleted_size)],
    ]
    print(file=stream)
    for text in _render_grid(["Statistics", "Value"], stats):
        print(text, file=stream)


def _record_to_json(record: UploadRecord) -> dict:
    payload = {
        "bucket": record.bucket,
        "key": record.key,
        "upload_id": record.upload_id,
        "size": record.size,
        "mod_time": _rfc3339(record.started_at),
        "should_delete": record.eligible_for_deletion,
    }
    if record.deletion_outcome is not DeletionOutcome.NOT_ATTEMPTED:
        payload["delete_success"] = record.deletion_outcome is DeletionOutcome.SUCCEEDED
    return payload


def write_json(records: Sequence[UploadRecord], stream: TextIO) -> None:
    """Write ``{"files": [...], "total": N}``."""
    document = {"files": [_record_to_json(record) for record in records], "total": len(records)}
    stream.write(json.dumps(document, indent=2, ensure_ascii=False))
    stream.write("\n")


def write_csv(records: Sequence[UploadRecord], stream: TextIO) -> None:
    """Write one CSV row per record under the fixed header."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(
            [
                record.bucket,
                record.key,
                str(record.size),
                _rfc3339(record.started_at),
                "true" if record.eligible_for_deletion else "false",
                _CSV_DELETE_SUCCESS[record.deletion_outcome],
            ]
        )


_WRITERS = {
    OutputFormat.TABLE: write_table,
    OutputFormat.JSON: write_json,
    OutputFormat.CSV: write_csv,
}


def write_report(records: Sequence[UploadRecord], output_format: OutputFormat, stream: TextIO) -> None:
    """Render records in the requested format."""
    _WRITERS[output_format](records, stream)
