"""
Core scraping orchestration and browser management.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from playwright.async_api import async_playwright, Error as PlaywrightError

from .config import Config, config
from .downloader import download_images
from .export import build_record, write_record
from .extractors import extract_fields
from .gallery import collect_gallery_urls
from .models import ListingRecord
from .utils import listing_id_from_url

logger = logging.getLogger("listing_scraper.core")


class ScrapeError(RuntimeError):
    """A precondition for the whole job failed; no record is written."""


async def scrape_page(page, url: str, settings: Config = config) -> Tuple[Dict[str, object], List[str]]:
    """
    Load ``url`` in ``page`` and read every field plus the gallery URLs.

    Navigation failure is fatal; everything after it degrades to absent values.
    """
    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=settings.NAVIGATION_TIMEOUT_MS)
    except PlaywrightError as e:
        raise ScrapeError(f"Could not open listing page {url}: {e}") from e

    fields = await extract_fields(page, settings)
    image_urls = await collect_gallery_urls(page, settings)
    return fields, image_urls


async def run_scrape(
    url: str,
    output_dir: Optional[str] = None,
    headless: Optional[bool] = None,
    settings: Config = config,
) -> Tuple[ListingRecord, Path]:
    """
    Scrape one listing, download its images and write ``<id>.json``.

    The browser is closed as soon as page work is done, on every path, and
    before downloads start.
    """
    settings.validate()
    listing_id = listing_id_from_url(url)
    if not listing_id:
        logger.error(f"Could not extract property ID from URL: {url}")
        raise ScrapeError(f"Could not extract property ID from URL: {url}")

    out_dir = Path(output_dir if output_dir is not None else settings.OUTPUT_DIR)
    is_headless = settings.HEADLESS if headless is None else headless
    logger.info(f">>> Scraping property with ID: {listing_id}")

    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=is_headless)
        except PlaywrightError as e:
            raise ScrapeError(f"Could not launch browser: {e}") from e
        logger.info(f">>> Headless mode: {is_headless}")
        try:
            page = await browser.new_page()
            fields, image_urls = await scrape_page(page, url, settings)
        finally:
            await browser.close()

    images_dir = out_dir / settings.IMAGES_DIRNAME / listing_id
    images = await download_images(image_urls, images_dir, settings)

    record = build_record(listing_id, url, fields, images)
    path = write_record(record, out_dir)
    return record, path
