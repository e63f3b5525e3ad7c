"""S3-compatible reader for incoming log objects."""
from __future__ import annotations

from typing import Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from storage_stats.errors import DownloadFailed

logger = structlog.get_logger()

MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def is_missing_object(error: ClientError) -> bool:
    """Whether a client error reports that the object does not exist."""
    code = str(error.response.get("Error", {}).get("Code", ""))
    return code in MISSING_OBJECT_CODES


class S3Ingestor:
    """Fetch log objects and check whether they were already processed."""

    def __init__(
        self,
        logs_bucket: str,
        processed_bucket: str,
        s3_client=None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.logs_bucket = logs_bucket
        self.processed_bucket = processed_bucket
        self.s3 = s3_client or boto3.client("s3", endpoint_url=endpoint_url)

    def already_processed(self, object_id: str) -> bool:
        """Check for a copy of the object in the processed bucket.

        Args:
            object_id: Object name in the logs bucket

        Returns:
            True if the processed bucket holds an object with the same name
        """
        try:
            self.s3.head_object(Bucket=self.processed_bucket, Key=object_id)
        except ClientError as e:
            if is_missing_object(e):
                return False
            raise
        return True

    def download(self, object_id: str) -> bytes:
        """Download a log object from the logs bucket."""
        logger.info("Downloading S3 object", bucket=self.logs_bucket, key=object_id)
        try:
            response = self.s3.get_object(Bucket=self.logs_bucket, Key=object_id)
            return response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise DownloadFailed(f"Failed to download {object_id}: {e}") from e
