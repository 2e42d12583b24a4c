"""
Utility functions for logging, text cleanup and URL handling.
"""
import logging
import os
import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse


# Small thumbnail sizes served by the listing CDN and the size we ask for instead
LOW_RES_TOKENS = ("-400x300", "-120x90", "-240x180")
HIGH_RES_TOKEN = "-800x600"
LISTING_ID_PREFIX = "details-"
TRADEMARK_GLYPHS = ("™", "®", "℠")


def init_logger(
    name: str = "listing_scraper",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "listing_scraper.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def normalize_key(label: str) -> str:
    """
    Turn a details-list label into an attribute key.

    "TruCheck™ date" -> "trucheck_date". Applying it twice gives the same key.
    """
    if not label:
        return ""
    for glyph in TRADEMARK_GLYPHS:
        label = label.replace(glyph, "")
    return re.sub(r"\s+", "_", label.strip().lower())


def listing_id_from_url(url: str) -> str:
    """
    Derive the listing id from the last path segment of its URL.

    https://example.test/en/property/details-87607079.html -> "87607079".
    Returns "" when nothing usable is left.
    """
    if not url:
        return ""
    path = urlparse(url).path or url
    last = path.rstrip("/").split("/")[-1]
    stem = last.split(".")[0]
    if stem.startswith(LISTING_ID_PREFIX):
        stem = stem[len(LISTING_ID_PREFIX):]
    return stem.strip()


def canonicalize_image_url(url: str) -> str:
    """Rewrite known thumbnail size tokens to the high-resolution variant."""
    for token in LOW_RES_TOKENS:
        url = url.replace(token, HIGH_RES_TOKEN)
    return url


def image_extension(url: str, default: str = ".jpeg") -> str:
    """Return the file extension of the URL path, or ``default`` if it has none."""
    ext = os.path.splitext(urlparse(url).path)[1]
    return ext or default
