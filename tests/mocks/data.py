"""Centralized mock data builders for tests."""
from __future__ import annotations

from typing import Dict

LOGS_BUCKET = "storage-logs"
PROCESSED_BUCKET = "storage-logs-processed"
ERRORS_BUCKET = "storage-logs-errors"
USAGE_BUCKET = "storage-logs-usage"

PREFIXED_LOG = "PROJECT_myproj_BUCKET_mybucket_storage_2023_05_01_00_00_00_abc123_v0"
DEFAULT_LOG = "mybucket_storage_2023_05_01_07_00_00_04a1f9b2c_v0"
USAGE_LOG = "somebucket_usage_2023_05_01_00_00_00_xyz_v0"
UNRECOGNIZED_LOG = "not-a-log-file.txt"


def make_storage_log(
    *,
    bucket: str = "mybucket",
    storage_byte_hours: int | str = 2400,
    header: str = '"bucket","storage_byte_hours"',
) -> bytes:
    return f'{header}\n"{bucket}","{storage_byte_hours}"\n'.encode("utf-8")


def make_config_values(**overrides) -> Dict:
    values = {
        "dataset": "storage",
        "table": "storage_stats",
        "logsBucket": LOGS_BUCKET,
        "processedBucket": PROCESSED_BUCKET,
        "errorsBucket": ERRORS_BUCKET,
        "usageLogsBucket": USAGE_BUCKET,
    }
    values.update(overrides)
    return values
