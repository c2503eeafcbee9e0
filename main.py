"""
StackDigest - StackExchange questions pipeline

CLI entry point for the load and report jobs.
"""

import argparse
import logging
import os
import sys

from src.orchestrator import PipelineOrchestrator
from src.utils.storage import MongoStore
import config.settings as settings


def setup_logging(log_level: str, log_file: str):
    """Configure logging for the entire application."""
    os.makedirs(os.path.dirname(log_file), exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8")
        ]
    )


def non_negative_int(value: str) -> int:
    """argparse type for counts; string defaults are checked too."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="StackDigest - load StackExchange questions into MongoDB and report on them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replace the questions collection from Posts.xml
  python main.py load --source data/Posts.xml

  # Generate informe1.pdf and informe2.pdf
  python main.py report --output-dir data/out

Connection settings default to MONGO_URI / MONGO_DB_NAME / MONGO_COLLECTION.
        """
    )

    parser.add_argument(
        "--mongo-uri",
        default=settings.MONGO_URI,
        help="MongoDB connection string (default: $MONGO_URI)"
    )
    parser.add_argument(
        "--db-name",
        default=settings.MONGO_DB_NAME,
        help=f"Database name (default: {settings.MONGO_DB_NAME})"
    )
    parser.add_argument(
        "--collection",
        default=settings.MONGO_COLLECTION,
        help=f"Questions collection (default: {settings.MONGO_COLLECTION})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    load_parser = subparsers.add_parser("load", help="Load Posts.xml into MongoDB")
    load_parser.add_argument(
        "--source",
        default=str(settings.POSTS_XML_PATH),
        help=f"Posts.xml path (default: {settings.POSTS_XML_PATH})"
    )
    load_parser.add_argument(
        "--limit",
        type=non_negative_int,
        default=str(settings.MAX_QUESTIONS),
        help=f"Maximum questions to load (default: {settings.MAX_QUESTIONS})"
    )
    load_parser.add_argument(
        "--on-malformed",
        default=settings.ON_MALFORMED_RECORD,
        choices=["abort", "skip"],
        help="What to do with a record that fails integer parsing (default: abort)"
    )

    report_parser = subparsers.add_parser("report", help="Generate PDF reports from MongoDB")
    report_parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Report directory (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level, str(settings.LOG_ROOT / f"{args.command}.log"))
    logger = logging.getLogger(__name__)

    def store_factory():
        return MongoStore(args.mongo_uri, args.db_name, timeout_ms=settings.MONGO_TIMEOUT_MS)

    try:
        if args.command == "load":
            orchestrator = PipelineOrchestrator(
                store_factory=store_factory,
                collection_name=args.collection,
                max_questions=args.limit,
                on_malformed=args.on_malformed
            )
            inserted = orchestrator.run_load(args.source)
            print(f"✅ Loaded {inserted} questions into {args.db_name}.{args.collection}")
        else:
            orchestrator = PipelineOrchestrator(
                store_factory=store_factory,
                collection_name=args.collection,
                output_dir=args.output_dir
            )
            written = orchestrator.run_report()
            print("✅ Reports generated:")
            for path in written.values():
                print(f"  {path}")

        logger.info(f"{args.command} job completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Job interrupted by user")
        print("\n⚠️  Job interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"{args.command} job failed: {e}", exc_info=True)
        print(f"\n❌ {args.command} job failed: {e}")
        print(f"Check {settings.LOG_ROOT / (args.command + '.log')} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
