"""S3-compatible router that moves log objects to their terminal bucket."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from storage_stats.errors import RelocationFailed

logger = structlog.get_logger()


class Destination(Enum):
    """Terminal buckets a log object can be moved to."""
    PROCESSED = "processed"
    ERRORS = "errors"
    USAGE = "usage"


class S3Loader:
    """Move log objects out of the logs bucket."""

    def __init__(
        self,
        logs_bucket: str,
        processed_bucket: str,
        errors_bucket: str,
        usage_logs_bucket: str,
        s3_client=None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.logs_bucket = logs_bucket
        self.buckets: Dict[Destination, str] = {
            Destination.PROCESSED: processed_bucket,
            Destination.ERRORS: errors_bucket,
            Destination.USAGE: usage_logs_bucket,
        }
        self.s3 = s3_client or boto3.client("s3", endpoint_url=endpoint_url)

    def move_source(self, key: str, destination: Destination) -> str:
        """Copy the object to the destination bucket, then delete the source.

        A failed delete after a successful copy leaves the object in both
        buckets.

        Returns the destination bucket name.
        """
        target_bucket = self.buckets[destination]
        logger.info("Moving S3 object",
                    key=key,
                    source=self.logs_bucket,
                    destination=target_bucket)
        try:
            self.s3.copy_object(
                Bucket=target_bucket,
                CopySource={"Bucket": self.logs_bucket, "Key": key},
                Key=key,
            )
        except (ClientError, BotoCoreError) as e:
            raise RelocationFailed(f"Failed to copy {key} to {target_bucket}: {e}") from e

        self.delete_source(key)
        return target_bucket

    def delete_source(self, key: str) -> None:
        """Delete the object from the logs bucket."""
        logger.info("Deleting S3 object", bucket=self.logs_bucket, key=key)
        try:
            self.s3.delete_object(Bucket=self.logs_bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise RelocationFailed(f"Failed to delete {key} from {self.logs_bucket}: {e}") from e
