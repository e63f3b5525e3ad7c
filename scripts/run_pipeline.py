"""Run the storage log pipeline for a single object, outside the cloud runtime."""
import argparse
import json
import sys
from pathlib import Path

# Add project root and src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from main import configure_logging, handle_notification
from storage_stats.config import PipelineConfig, load_config
from storage_stats.pipeline.orchestrator import Pipeline


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Process one storage or usage log object from the logs bucket"
    )
    parser.add_argument(
        "object_id",
        help="Object name in the logs bucket"
    )
    parser.add_argument(
        "--config",
        help="JSON config file (default: STORAGE_STATS_CONFIG or environment variables)"
    )
    parser.add_argument(
        "--create-table",
        action="store_true",
        help="Create the warehouse table first (sql backend only)"
    )

    args = parser.parse_args()

    configure_logging()
    config = PipelineConfig.from_file(args.config) if args.config else load_config()
    pipeline = Pipeline.from_config(config)

    if args.create_table:
        if config.warehouse_backend != "sql":
            print("--create-table is only supported for the sql backend")
            sys.exit(1)
        pipeline.sink.create_tables()

    try:
        result = handle_notification(
            {"attributes": {"objectId": args.object_id}},
            pipeline=pipeline,
        )
    finally:
        if config.warehouse_backend == "sql":
            pipeline.sink.close()
    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
