"""Runtime configuration for the storage stats pipeline."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storage_stats.errors import ConfigError

# Environment variable for each option, keyed by field name
ENV_VARS = {
    "dataset": "BQ_DATASET",
    "table": "BQ_TABLE",
    "logs_bucket": "LOGS_BUCKET",
    "processed_bucket": "PROCESSED_BUCKET",
    "errors_bucket": "ERRORS_BUCKET",
    "usage_logs_bucket": "USAGE_LOGS_BUCKET",
    "warehouse_backend": "WAREHOUSE_BACKEND",
    "gcp_project": "GCP_PROJECT",
    "credentials_path": "GOOGLE_APPLICATION_CREDENTIALS",
    "database_url": "DATABASE_URL",
    "s3_endpoint_url": "S3_ENDPOINT_URL",
}


class PipelineConfig(BaseModel):
    """Dataset, table and bucket names, fixed for the process lifetime."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    dataset: str = Field(..., min_length=1)
    table: str = Field(..., min_length=1)
    logs_bucket: str = Field(..., alias="logsBucket", min_length=1)
    processed_bucket: str = Field(..., alias="processedBucket", min_length=1)
    errors_bucket: str = Field(..., alias="errorsBucket", min_length=1)
    usage_logs_bucket: str = Field(..., alias="usageLogsBucket", min_length=1)

    warehouse_backend: Literal["bigquery", "sql"] = Field("bigquery", alias="warehouseBackend")
    gcp_project: Optional[str] = Field(None, alias="gcpProject")
    credentials_path: Optional[str] = Field(None, alias="credentialsPath")
    database_url: Optional[str] = Field(None, alias="databaseUrl")
    s3_endpoint_url: Optional[str] = Field(None, alias="s3EndpointUrl")

    @field_validator("warehouse_backend", mode="before")
    def normalize_backend(cls, v):
        """Accept backend names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_mapping(cls, values: Dict) -> "PipelineConfig":
        """Build a config, converting validation errors to ConfigError."""
        try:
            config = cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid pipeline configuration: {e}") from e

        if config.warehouse_backend == "sql" and not config.database_url:
            raise ConfigError("databaseUrl is required for the sql warehouse backend")
        return config

    @classmethod
    def from_file(cls, path: str | Path) -> "PipelineConfig":
        """Load configuration from a JSON file.

        Args:
            path: Path to a JSON object using the camelCase option names

        Returns:
            PipelineConfig instance
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file is not valid JSON: {config_path}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a JSON object: {config_path}")
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "PipelineConfig":
        """Load configuration from environment variables.

        A local .env file is read first when present. Variables already set
        in the environment take precedence.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        values = {}
        for field_name, env_var in ENV_VARS.items():
            value = environ.get(env_var)
            if value:
                values[field_name] = value
        return cls.from_mapping(values)


def load_config() -> PipelineConfig:
    """Load from STORAGE_STATS_CONFIG when set, otherwise from the environment."""
    load_dotenv()
    config_file = os.getenv("STORAGE_STATS_CONFIG")
    if config_file:
        return PipelineConfig.from_file(config_file)
    return PipelineConfig.from_env()
