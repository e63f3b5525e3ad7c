"""Parser for daily storage log content."""
from datetime import date, datetime, timezone
from typing import Optional

import structlog

from storage_stats.errors import MalformedLog
from storage_stats.models.schemas import BillingRecord, daily_bytes
from storage_stats.pipeline.classifier import Classification

logger = structlog.get_logger()

# Warehouse columns are signed 64-bit integers
MAX_STORAGE_BYTE_HOURS = 2**63 - 1


def parse_log_date(date_string: str) -> date:
    """Convert a `YYYY_MM_DD` name component to a calendar date."""
    try:
        return date.fromisoformat(date_string.replace("_", "-"))
    except ValueError as e:
        raise MalformedLog(f"Invalid log date: {date_string}") from e


def parse_storage_byte_hours(content: bytes) -> int:
    """Read the byte-hours value from storage log content.

    The first line is a CSV header and the second holds the data row
    `"bucket","storage_byte_hours"`.

    Args:
        content: Raw object bytes

    Returns:
        Storage byte-hours as a non-negative integer
    """
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedLog("Storage log is not UTF-8 text") from e

    lines = text.split("\n")
    if len(lines) < 2:
        raise MalformedLog(f"Storage log has {len(lines)} line(s), expected a header and a data row")

    fields = lines[1].replace('"', "").split(",")
    if len(fields) < 2:
        raise MalformedLog("Storage log data row has no storage_byte_hours field")

    value = fields[1].strip()
    if not value.isascii() or not value.isdigit():
        raise MalformedLog(f"storage_byte_hours is not a non-negative integer: {value!r}")

    storage_byte_hours = int(value)
    if storage_byte_hours > MAX_STORAGE_BYTE_HOURS:
        raise MalformedLog(f"storage_byte_hours exceeds the 64-bit column range: {value}")
    return storage_byte_hours


def parse_storage_log(
    classification: Classification,
    content: bytes,
    filename: str,
    update_time: Optional[datetime] = None,
) -> BillingRecord:
    """Build the billing record for a storage log.

    Args:
        classification: Classification of the object name
        content: Raw object bytes
        filename: Object name, stored with the record
        update_time: Ingest timestamp, defaults to now in UTC

    Returns:
        BillingRecord ready for insertion
    """
    if not classification.logged_bucket or not classification.date_string:
        raise MalformedLog(f"Invalid storage log file: {filename}")

    log_date = parse_log_date(classification.date_string)
    storage_byte_hours = parse_storage_byte_hours(content)

    record = BillingRecord(
        project_id=classification.project_id,
        bucket=classification.logged_bucket,
        storage_byte_hours=storage_byte_hours,
        bytes=daily_bytes(storage_byte_hours),
        date=log_date,
        update_time=update_time or datetime.now(timezone.utc),
        filename=filename,
    )
    logger.debug("Storage log parsed",
                 file=filename,
                 bucket=record.bucket,
                 storage_byte_hours=record.storage_byte_hours)
    return record
