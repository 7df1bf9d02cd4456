"""
Multipart upload cleaner package.

Scan S3 buckets for stale in-progress multipart uploads and optionally abort them.
"""

__version__ = "0.1.0"

from . import classifier, config, models, reports, storage, sweeper  # noqa: E402
from .config import CleanerConfig, OutputFormat, build_config  # noqa: E402
from .models import DeletionOutcome, SweepResult, UploadRecord  # noqa: E402
from .sweeper import run_sweep, scan_bucket  # noqa: E402

__all__ = [
    "CleanerConfig",
    "DeletionOutcome",
    "OutputFormat",
    "SweepResult",
    "UploadRecord",
    "__version__",
    "build_config",
    "classifier",
    "config",
    "models",
    "reports",
    "run_sweep",
    "scan_bucket",
    "storage",
    "sweeper",
]
