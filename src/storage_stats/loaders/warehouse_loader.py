"""SQL warehouse sink for billing records."""
from typing import Optional

import structlog
from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError

from storage_stats.errors import IngestionFailed
from storage_stats.models.database_models import (
    build_storage_stats_table,
    create_storage_stats_table,
    get_engine,
    resolve_schema,
)
from storage_stats.models.schemas import BillingRecord

logger = structlog.get_logger()


class WarehouseLoader:
    """Append billing records to a SQL table."""

    def __init__(
        self,
        database_url: str,
        table_name: str,
        dataset: Optional[str] = None,
        engine=None,
    ):
        """Initialize loader.

        Args:
            database_url: SQLAlchemy connection string
            table_name: Table to append rows to
            dataset: Schema holding the table, ignored by SQLite
            engine: Existing engine to reuse instead of creating one
        """
        self.engine = engine or get_engine(database_url)
        self.table_name = table_name
        self.dataset = dataset
        schema = resolve_schema(self.engine.dialect.name, dataset)
        self.metadata = MetaData()
        self.table = build_storage_stats_table(self.metadata, table_name, schema=schema)

    def create_tables(self):
        """Create the schema and table if they don't exist."""
        with self.engine.begin() as conn:
            create_storage_stats_table(conn, self.table_name, self.dataset)
        logger.info("Warehouse table created/verified", table=self.table.fullname)

    def insert(self, record: BillingRecord) -> None:
        """Append one row. Duplicates are not checked here."""
        try:
            with self.engine.begin() as conn:
                conn.execute(self.table.insert(), [record.to_row()])
        except (SQLAlchemyError, OverflowError) as e:
            logger.error("Failed to insert row",
                         table=self.table.fullname,
                         file=record.filename,
                         error=str(e))
            raise IngestionFailed(f"Failed to insert {record.filename}: {e}") from e

        logger.info("Row inserted", table=self.table.fullname, file=record.filename)

    def close(self):
        """Dispose the engine's connection pool."""
        self.engine.dispose()
        logger.info("Database connection closed")
