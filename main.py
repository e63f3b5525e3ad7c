"""Cloud entrypoint for storage log notifications."""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Dict, Optional

import structlog

from storage_stats.config import load_config
from storage_stats.pipeline.orchestrator import Pipeline

logger = structlog.get_logger()


def configure_logging() -> None:
    """Configure structured JSON logging filtered by LOG_LEVEL."""
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


@lru_cache(maxsize=1)
def get_pipeline() -> Pipeline:
    """Build the pipeline once per process."""
    configure_logging()
    return Pipeline.from_config(load_config())


def handle_notification(data: Dict, context=None, pipeline: Optional[Pipeline] = None) -> Dict:
    """Process the object named by a Pub/Sub object notification.

    Args:
        data: Pub/Sub message with an `attributes.objectId` entry
        context: Event context supplied by the runtime, unused
        pipeline: Pipeline to use instead of the process-wide one

    Returns:
        Processing result as a dictionary
    """
    attributes = (data or {}).get("attributes") or {}
    object_id = attributes.get("objectId")
    if not object_id:
        raise ValueError("Notification has no objectId attribute")

    pipeline = pipeline or get_pipeline()
    result = pipeline.process_object(object_id)
    logger.info("Notification handled", file=object_id, outcome=result.outcome.value)
    return result.to_dict()
