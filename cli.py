"""
CLI utility for downloading novels from linovelib.

Usage:
    python cli.py crawl <novel_id>          # Download a novel, its chapters and images
    python cli.py list <novel_id>           # List the files saved for a novel

Exit status of ``crawl``: 0 when the whole chapter chain was downloaded,
1 when the chain ended without pointing back at the catalog, 2 on error.
"""
import argparse
import logging
import sys

from config import settings
from crawler.exceptions import CrawlError
from crawler.orchestrator import Orchestrator
from crawler.pipelines import FilePipeline

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def apply_overrides(args):
    """Copy command line options onto the settings object."""
    if args.data_dir:
        settings.data_dir = args.data_dir
    if args.retries is not None:
        settings.retry_times = args.retries
    if args.log_level:
        settings.log_level = args.log_level


def cmd_crawl(args) -> int:
    """Download a novel."""
    orchestrator = Orchestrator.from_settings(settings)

    try:
        result = orchestrator.run(args.novel_id)
    except CrawlError as e:
        logger.error(f"Crawl of novel {args.novel_id} aborted: {e}")
        print(f"✗ Crawl aborted: {e}")
        return 2
    finally:
        orchestrator.fetcher.close()

    print(
        f"\nNovel {result.novel_id}: {result.chapters} chapters, "
        f"{result.images} images ({result.images_skipped} skipped)"
    )

    if result.completed:
        print("✓ Crawl completed")
        return 0

    print("✗ Chapter chain ended before reaching the catalog")
    return 1


def cmd_list(args) -> int:
    """List the artifacts saved for a novel."""
    pipeline = FilePipeline.from_settings(settings)
    try:
        names = pipeline.list_artifacts(args.novel_id)
    except CrawlError as e:
        print(f"Error: {e}")
        return 2

    for name in names:
        print(name)

    print(f"\nTotal: {len(names)} files in {pipeline.novel_dir(args.novel_id)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="linovelib novel downloader"
    )
    parser.add_argument(
        "--data-dir",
        help=f"Output directory (default: {settings.data_dir})"
    )
    parser.add_argument(
        "--retries",
        type=int,
        help=f"Retries for transient fetch failures (default: {settings.retry_times})"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help=f"Logging level (default: {settings.log_level})"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Crawl command
    crawl_parser = subparsers.add_parser("crawl", help="Download a novel")
    crawl_parser.add_argument("novel_id", help="Novel identifier, as it appears in the site's URLs")
    crawl_parser.set_defaults(func=cmd_crawl)

    # List command
    list_parser = subparsers.add_parser("list", help="List files saved for a novel")
    list_parser.add_argument("novel_id", help="Novel identifier")
    list_parser.set_defaults(func=cmd_list)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    apply_overrides(args)
    configure_logging(settings.log_level)

    return args.func(args)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Crawl interrupted")
        sys.exit(130)
