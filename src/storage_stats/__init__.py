"""Storage log ingestion pipeline for bucket billing statistics."""

__version__ = "0.1.0"
