"""Age classification for in-progress multipart uploads."""

from datetime import datetime, timezone


def as_utc(moment: datetime) -> datetime:
    """Normalize a timestamp to aware UTC."""
    # botocore returns aware timestamps; naive values are treated as UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def is_eligible(started_at: datetime, cutoff: datetime) -> bool:
    """
    Decide whether an upload is stale enough to abort.

    The comparison is strict: an upload initiated exactly at the cutoff is kept.
    """
    return as_utc(started_at) < as_utc(cutoff)
