"""Filename classifier for logs delivered by the storage logging service."""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LogType(Enum):
    """Enum for log file types."""
    STORAGE = "storage"
    USAGE = "usage"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a log object name.

    Only STORAGE classifications carry a bucket and date. project_id is
    None for logs delivered under the default naming scheme.
    """
    log_type: LogType
    project_id: Optional[str] = None
    logged_bucket: Optional[str] = None
    date_string: Optional[str] = None

    @property
    def is_usage(self) -> bool:
        return self.log_type is LogType.USAGE


# Character classes of the name fields
PROJECT_CHARS = r"[a-z0-9\-]+"
BUCKET_CHARS = r"[a-z0-9\-_.]+"
USAGE_NAME_CHARS = r"[a-zA-Z0-9\-_.]+"
DATE = r"[0-9]{4}_[0-9]{2}_[0-9]{2}"
TIME = r"[0-9]{2}_[0-9]{2}_[0-9]{2}"
TOKEN = r"[a-z0-9]+"


def _log_name_pattern(prefix: str, kind: str) -> "re.Pattern[str]":
    """Compile `<prefix>_<kind>_<date>_<time>_<token>_v0`, matched against the whole name."""
    return re.compile(rf"{prefix}_{kind}_(?P<date>{DATE})_{TIME}_{TOKEN}_v0")


PREFIXED_STORAGE_LOG = _log_name_pattern(
    rf"PROJECT_(?P<project>{PROJECT_CHARS})_BUCKET_(?P<bucket>{BUCKET_CHARS})", "storage"
)
DEFAULT_STORAGE_LOG = _log_name_pattern(rf"(?P<bucket>{BUCKET_CHARS})", "storage")
USAGE_LOG = _log_name_pattern(rf"(?P<name>{USAGE_NAME_CHARS})", "usage")

UNRECOGNIZED = Classification(LogType.UNRECOGNIZED)


def classify(object_id: str) -> Classification:
    """Classify a log object by its name.

    Patterns are tried in order and the first match wins: prefixed storage
    log, default storage log, usage log. Anything else is UNRECOGNIZED.

    Args:
        object_id: Object name in the logs bucket

    Returns:
        Classification for the object
    """
    match = PREFIXED_STORAGE_LOG.fullmatch(object_id)
    if match:
        return Classification(
            LogType.STORAGE,
            project_id=match.group("project"),
            logged_bucket=match.group("bucket"),
            date_string=match.group("date"),
        )

    match = DEFAULT_STORAGE_LOG.fullmatch(object_id)
    if match:
        return Classification(
            LogType.STORAGE,
            logged_bucket=match.group("bucket"),
            date_string=match.group("date"),
        )

    if USAGE_LOG.fullmatch(object_id):
        return Classification(LogType.USAGE)

    return UNRECOGNIZED
