#!/usr/bin/env python3
"""
Command line entry point: scrape a single listing page.
"""
import argparse
import asyncio
import sys

from .config import config
from .core import ScrapeError, run_scrape
from .export import save_output_rows
from .utils import init_logger, now_iso

DEFAULT_URL = "https://www.bayut.sa/en/property/details-87607079.html"


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Scrape one property listing page with its gallery images")
    ap.add_argument("url", nargs="?", default=DEFAULT_URL, help="Listing detail page URL")
    ap.add_argument("--output-dir", default=config.OUTPUT_DIR,
                    help="Directory for <id>.json and images/<id>/ (default from env LISTING_OUTPUT_DIR or .)")
    ap.add_argument("--headless", action="store_true", help="Run without UI")
    ap.add_argument("--concurrency", type=int, default=config.DOWNLOAD_CONCURRENCY,
                    help=f"Parallel image downloads (1-{config.MAX_DOWNLOAD_CONCURRENCY})")
    ap.add_argument("--out", type=str, default="",
                    help="Also export the record to CSV/XLSX")

    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Set both console and file log level.")
    ap.add_argument("--log-console", choices=lvl_choices, default=config.LOG_LEVEL,
                    help="Console log level (default from env LOG_LEVEL or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default="DEBUG",
                    help="File log level.")
    ap.add_argument("--log-file-path", default=config.LOG_FILE_PATH,
                    help="Path to log file (default from env LOG_FILE_PATH or listing_scraper.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(f">>> Run started at {now_iso()}")

    config.DOWNLOAD_CONCURRENCY = args.concurrency
    try:
        record, path = asyncio.run(run_scrape(
            args.url,
            output_dir=args.output_dir,
            headless=True if args.headless else None,
            settings=config,
        ))
    except (ScrapeError, ValueError) as e:
        logger.error(f"Scrape failed: {e}")
        return 1

    if args.out:
        save_output_rows([record], args.out)

    logger.info(f">>> Done: {len(record.images)} images, record at {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
