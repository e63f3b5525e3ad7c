"""Warehouse table definition using SQLAlchemy."""
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.schema import CreateSchema

DEFAULT_TABLE_NAME = "storage_stats"

# Dialects without named schemas; the dataset is ignored for these
SCHEMALESS_DIALECTS = {"sqlite"}


def resolve_schema(dialect_name: str, dataset: Optional[str]) -> Optional[str]:
    """Schema holding the table: the configured dataset where the dialect supports it."""
    if dialect_name in SCHEMALESS_DIALECTS:
        return None
    return dataset or None


def build_storage_stats_table(
    metadata: MetaData,
    table_name: str = DEFAULT_TABLE_NAME,
    schema: Optional[str] = None,
) -> Table:
    """Define the append-only storage stats table.

    Args:
        metadata: MetaData collection to register the table on
        table_name: Name of the table
        schema: Optional schema (the configured dataset)

    Returns:
        SQLAlchemy Table
    """
    return Table(
        table_name,
        metadata,
        Column("project_id", String(255), nullable=True),
        Column("bucket", String(255), nullable=False),
        Column("storage_byte_hours", BigInteger, nullable=False),
        Column("bytes", BigInteger, nullable=False),
        Column("date", Date, nullable=False),
        Column("update_time", DateTime(timezone=True), nullable=False),
        Column("filename", Text, nullable=False),
        Index(f"idx_{table_name}_date", "date"),
        Index(f"idx_{table_name}_bucket", "bucket"),
        schema=schema,
    )


def create_storage_stats_table(conn, table_name: str, dataset: Optional[str] = None) -> Table:
    """Create the schema and table the loader writes to, if missing.

    Args:
        conn: Open connection; the caller owns the transaction
        table_name: Name of the table
        dataset: Configured dataset, used as the schema where supported

    Returns:
        The created (or existing) Table
    """
    schema = resolve_schema(conn.dialect.name, dataset)
    table = build_storage_stats_table(MetaData(), table_name, schema=schema)
    if schema:
        conn.execute(CreateSchema(schema, if_not_exists=True))
    table.create(conn, checkfirst=True)
    return table


def drop_storage_stats_table(conn, table_name: str, dataset: Optional[str] = None) -> None:
    """Drop the table, leaving the schema in place."""
    schema = resolve_schema(conn.dialect.name, dataset)
    table = build_storage_stats_table(MetaData(), table_name, schema=schema)
    table.drop(conn, checkfirst=True)


def get_engine(database_url: str):
    """Create database engine."""
    return create_engine(database_url, echo=False)
