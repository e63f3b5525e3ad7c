"""Exceptions raised by the storage stats pipeline."""


class PipelineError(Exception):
    """Base exception for pipeline failures."""


class ConfigError(PipelineError):
    """Raised when required configuration is missing or invalid."""


class MalformedLog(PipelineError):
    """Raised when a file name or its content is not a storage log."""


class DownloadFailed(PipelineError):
    """Raised when the source object cannot be fetched."""


class IngestionFailed(PipelineError):
    """Raised when the warehouse rejects a row."""


class RelocationFailed(PipelineError):
    """Raised when a move or delete in the object store fails."""
