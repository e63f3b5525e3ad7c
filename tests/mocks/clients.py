"""Fake storage and warehouse clients."""
from __future__ import annotations

import io
from typing import Dict, List, Optional, Tuple

from botocore.exceptions import ClientError

from storage_stats.errors import IngestionFailed


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client calls the pipeline makes."""

    def __init__(self, objects: Optional[Dict[Tuple[str, str], bytes]] = None):
        self.objects: Dict[Tuple[str, str], bytes] = dict(objects or {})
        self.calls: List[Tuple[str, dict]] = []
        self.failures: Dict[str, ClientError] = {}

    def put(self, bucket: str, key: str, body: bytes = b"") -> None:
        self.objects[(bucket, key)] = body

    def fail(self, operation: str, code: str = "InternalError") -> None:
        self.failures[operation] = client_error(code, operation)

    def operations(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, kwargs: dict) -> None:
        self.calls.append((name, kwargs))
        if name in self.failures:
            raise self.failures[name]

    def head_object(self, **kwargs):
        self._record("head_object", kwargs)
        if (kwargs["Bucket"], kwargs["Key"]) not in self.objects:
            raise client_error("404", "HeadObject")
        return {"ContentLength": len(self.objects[(kwargs["Bucket"], kwargs["Key"])])}

    def get_object(self, **kwargs):
        self._record("get_object", kwargs)
        try:
            body = self.objects[(kwargs["Bucket"], kwargs["Key"])]
        except KeyError:
            raise client_error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(body)}

    def copy_object(self, **kwargs):
        self._record("copy_object", kwargs)
        source = (kwargs["CopySource"]["Bucket"], kwargs["CopySource"]["Key"])
        if source not in self.objects:
            raise client_error("NoSuchKey", "CopyObject")
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = self.objects[source]

    def delete_object(self, **kwargs):
        self._record("delete_object", kwargs)
        self.objects.pop((kwargs["Bucket"], kwargs["Key"]), None)


class RecordingSink:
    """Warehouse sink that keeps inserted records in memory."""

    def __init__(self, error: Optional[str] = None):
        self.records = []
        self.error = error

    def insert(self, record) -> None:
        if self.error:
            raise IngestionFailed(self.error)
        self.records.append(record)


class FakeBigQueryClient:
    def __init__(self, errors=None, exception=None, project="default-project"):
        self.project = project
        self.errors = errors or []
        self.exception = exception
        self.inserted = []

    def insert_rows_json(self, table, rows):
        if self.exception:
            raise self.exception
        self.inserted.append((table, rows))
        return self.errors
