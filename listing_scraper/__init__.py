"""
Property Listing Scraper Package
"""
from .models import ListingRecord, GalleryAsset, LookupDescriptor
from .core import run_scrape, scrape_page, ScrapeError
from .resolver import resolve
from .gallery import GalleryScraper, collect_gallery_urls
from .downloader import download_images
from .export import build_record, write_record, save_output_rows
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "ListingRecord",
    "GalleryAsset",
    "LookupDescriptor",
    "run_scrape",
    "scrape_page",
    "ScrapeError",
    "resolve",
    "GalleryScraper",
    "collect_gallery_urls",
    "download_images",
    "build_record",
    "write_record",
    "save_output_rows",
    "init_logger",
    "now_iso"
]
