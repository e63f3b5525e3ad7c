"""Pydantic models for data validation."""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def daily_bytes(storage_byte_hours: int) -> int:
    """Average bytes stored over a day, rounding halves up."""
    average = Decimal(storage_byte_hours) / Decimal(24)
    return int(average.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class BillingRecord(BaseModel):
    """One day of storage for a logged bucket, as written to the warehouse."""

    model_config = ConfigDict(frozen=True)

    project_id: Optional[str] = None
    bucket: str = Field(..., min_length=1)
    storage_byte_hours: int = Field(..., ge=0)
    bytes: int = Field(..., ge=0)
    date: date
    update_time: datetime
    filename: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_bytes(self):
        """Ensure bytes is the rounded daily average of the byte-hours."""
        expected = daily_bytes(self.storage_byte_hours)
        if self.bytes != expected:
            raise ValueError(
                f"bytes must equal round(storage_byte_hours / 24) = {expected}, got {self.bytes}"
            )
        return self

    def to_row(self) -> Dict:
        """Row with native date/datetime values, for SQL inserts."""
        return {
            "project_id": self.project_id,
            "bucket": self.bucket,
            "storage_byte_hours": self.storage_byte_hours,
            "bytes": self.bytes,
            "date": self.date,
            "update_time": self.update_time,
            "filename": self.filename,
        }

    def to_json_row(self) -> Dict:
        """Row with ISO formatted dates, for JSON streaming inserts."""
        row = self.to_row()
        row["date"] = self.date.isoformat()
        row["update_time"] = self.update_time.isoformat()
        return row
