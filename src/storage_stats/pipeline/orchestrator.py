"""Per-object pipeline orchestrator."""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional

import structlog

from storage_stats.config import PipelineConfig
from storage_stats.errors import DownloadFailed, IngestionFailed, MalformedLog
from storage_stats.ingestors.s3_ingestor import S3Ingestor
from storage_stats.loaders.s3_loader import Destination, S3Loader
from storage_stats.models.schemas import BillingRecord
from storage_stats.pipeline.classifier import Classification, classify
from storage_stats.pipeline.parser import parse_storage_log

logger = structlog.get_logger()

# Errors in the fresh path that are compensated by moving the object to the errors bucket
RECOVERABLE_ERRORS = (DownloadFailed, MalformedLog, IngestionFailed)


class Outcome(Enum):
    """Terminal state of a processed object."""
    PROCESSED = "processed"
    ERRORED = "errored"
    USAGE_ARCHIVED = "usage_archived"
    DUPLICATE_DELETED = "duplicate_deleted"


@dataclass
class ProcessingResult:
    object_id: str
    outcome: Outcome
    classification: Classification
    record: Optional[BillingRecord] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "object_id": self.object_id,
            "outcome": self.outcome.value,
            "log_type": self.classification.log_type.value,
            "record": self.record.to_json_row() if self.record else None,
            "error": self.error,
        }


class Pipeline:
    """Classify, ingest and relocate one log object per call."""

    def __init__(
        self,
        ingestor: S3Ingestor,
        loader: S3Loader,
        sink,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize pipeline.

        Args:
            ingestor: Reads objects and answers the already-processed check
            loader: Moves and deletes objects in the logs bucket
            sink: Warehouse sink exposing insert(record)
            clock: Returns the ingest timestamp, defaults to now in UTC
        """
        self.ingestor = ingestor
        self.loader = loader
        self.sink = sink
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "Pipeline":
        """Build a pipeline with live storage and warehouse clients."""
        ingestor = S3Ingestor(
            logs_bucket=config.logs_bucket,
            processed_bucket=config.processed_bucket,
            endpoint_url=config.s3_endpoint_url,
        )
        loader = S3Loader(
            logs_bucket=config.logs_bucket,
            processed_bucket=config.processed_bucket,
            errors_bucket=config.errors_bucket,
            usage_logs_bucket=config.usage_logs_bucket,
            s3_client=ingestor.s3,
        )
        return cls(ingestor, loader, build_sink(config))

    def process_object(self, object_id: str) -> ProcessingResult:
        """Take one log object to its terminal state.

        Usage logs go straight to the usage bucket. Everything else is
        checked against the processed bucket, then downloaded, parsed and
        inserted. Download, parse and insert failures move the object to
        the errors bucket. Failures of the moves themselves propagate.

        Args:
            object_id: Object name in the logs bucket

        Returns:
            ProcessingResult describing where the object ended up
        """
        classification = classify(object_id)
        logger.info("Log classified", file=object_id, type=classification.log_type.value)

        if classification.is_usage:
            self.loader.move_source(object_id, Destination.USAGE)
            return ProcessingResult(object_id, Outcome.USAGE_ARCHIVED, classification)

        if self.ingestor.already_processed(object_id):
            logger.info("Log already processed, deleting source", file=object_id)
            self.loader.delete_source(object_id)
            return ProcessingResult(object_id, Outcome.DUPLICATE_DELETED, classification)

        start_time = time.time()
        try:
            record = self._ingest(object_id, classification)
        except RECOVERABLE_ERRORS as e:
            logger.error("Failed to process log",
                         file=object_id,
                         error_type=type(e).__name__,
                         error=str(e))
            self.loader.move_source(object_id, Destination.ERRORS)
            return ProcessingResult(object_id, Outcome.ERRORED, classification, error=str(e))

        self.loader.move_source(object_id, Destination.PROCESSED)
        logger.info("Log processed successfully",
                    file=object_id,
                    bucket=record.bucket,
                    bytes=record.bytes,
                    processing_time=f"{time.time() - start_time:.2f}s")
        return ProcessingResult(object_id, Outcome.PROCESSED, classification, record=record)

    def _ingest(self, object_id: str, classification: Classification) -> BillingRecord:
        """Download, parse and insert. Raises one of RECOVERABLE_ERRORS on failure."""
        content = self.ingestor.download(object_id)
        record = parse_storage_log(classification, content, object_id, update_time=self.clock())
        self.sink.insert(record)
        return record


def build_sink(config: PipelineConfig):
    """Create the warehouse sink selected by the configuration."""
    if config.warehouse_backend == "sql":
        from storage_stats.loaders.warehouse_loader import WarehouseLoader

        return WarehouseLoader(
            database_url=config.database_url,
            table_name=config.table,
            dataset=config.dataset,
        )

    from storage_stats.loaders.bigquery_loader import BigQueryLoader

    return BigQueryLoader(
        dataset=config.dataset,
        table=config.table,
        project_id=config.gcp_project,
        credentials_path=config.credentials_path,
    )
