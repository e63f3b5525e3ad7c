"""BigQuery sink for billing records."""
from typing import Optional

import structlog
from google.api_core.exceptions import GoogleAPIError
from google.cloud import bigquery
from google.oauth2 import service_account

from storage_stats.errors import IngestionFailed
from storage_stats.models.schemas import BillingRecord

logger = structlog.get_logger()


class BigQueryLoader:
    """Stream billing records into a BigQuery table."""

    def __init__(
        self,
        dataset: str,
        table: str,
        project_id: Optional[str] = None,
        credentials_path: Optional[str] = None,
        client=None,
    ):
        if client is None:
            credentials = None
            if credentials_path:
                credentials = service_account.Credentials.from_service_account_file(
                    credentials_path
                )
            client = bigquery.Client(credentials=credentials, project=project_id)
        self.client = client

        # Construct table reference
        project = project_id or self.client.project
        self.table_ref = f"{project}.{dataset}.{table}"

    def insert(self, record: BillingRecord) -> None:
        """Append one row with a streaming insert."""
        try:
            errors = self.client.insert_rows_json(self.table_ref, [record.to_json_row()])
        except GoogleAPIError as e:
            raise IngestionFailed(f"BigQuery insert failed for {record.filename}: {e}") from e

        if errors:
            raise IngestionFailed(f"BigQuery rejected row for {record.filename}: {errors}")

        logger.info("Row inserted", table=self.table_ref, file=record.filename)
