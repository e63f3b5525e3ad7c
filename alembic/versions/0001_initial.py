"""Initial schema.

Creates the storage stats table at the dataset and table named by the
pipeline configuration, so the loader and the migration agree on its location.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""
from alembic import op

from storage_stats.config import load_config
from storage_stats.models.database_models import (
    create_storage_stats_table,
    drop_storage_stats_table,
)

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    config = load_config()
    create_storage_stats_table(op.get_bind(), config.table, config.dataset)


def downgrade() -> None:
    config = load_config()
    drop_storage_stats_table(op.get_bind(), config.table, config.dataset)
