"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

for path in (SRC_PATH, PROJECT_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from tests.mocks import data as mock_data
from tests.mocks.clients import FakeS3Client, RecordingSink

INGEST_TIME = datetime(2023, 5, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture()
def s3_client():
    return FakeS3Client()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def ingest_time():
    return INGEST_TIME


@pytest.fixture()
def pipeline(s3_client, sink):
    from storage_stats.ingestors.s3_ingestor import S3Ingestor
    from storage_stats.loaders.s3_loader import S3Loader
    from storage_stats.pipeline.orchestrator import Pipeline

    ingestor = S3Ingestor(
        logs_bucket=mock_data.LOGS_BUCKET,
        processed_bucket=mock_data.PROCESSED_BUCKET,
        s3_client=s3_client,
    )
    loader = S3Loader(
        logs_bucket=mock_data.LOGS_BUCKET,
        processed_bucket=mock_data.PROCESSED_BUCKET,
        errors_bucket=mock_data.ERRORS_BUCKET,
        usage_logs_bucket=mock_data.USAGE_BUCKET,
        s3_client=s3_client,
    )
    return Pipeline(ingestor, loader, sink, clock=lambda: INGEST_TIME)
