"""Shared pytest fixtures."""
import pytest

from listing_scraper.config import Config


@pytest.fixture
def fast_settings() -> Config:
    """Config with every settle delay removed so tests run instantly."""
    settings = Config()
    settings.DESCRIPTION_SETTLE_MS = 0
    settings.SCROLL_SETTLE_MS = 0
    settings.POST_SCROLL_WAIT_MS = 0
    settings.GALLERY_CLOSE_SETTLE_MS = 0
    settings.DOWNLOAD_CONCURRENCY = 4
    settings.HEADLESS = True
    return settings
