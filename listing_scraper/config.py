"""
Scraper configuration and settings management.
"""
import os


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Scraper configuration."""

    # Output
    OUTPUT_DIR: str = os.getenv("LISTING_OUTPUT_DIR", ".")
    IMAGES_DIRNAME: str = "images"
    DEFAULT_IMAGE_EXT: str = ".jpeg"

    # Browser
    HEADLESS: bool = _env_bool("HEADLESS")
    NAVIGATION_TIMEOUT_MS: int = 60_000
    CLICK_TIMEOUT_MS: int = 5_000

    # Description
    DESCRIPTION_SETTLE_MS: int = 500

    # Gallery
    GALLERY_OPEN_TIMEOUT_MS: int = 15_000
    NETWORK_IDLE_TIMEOUT_MS: int = 45_000
    IMAGE_ATTR_TIMEOUT_MS: int = 5_000
    SCROLL_MAX_ATTEMPTS: int = 20
    SCROLL_SETTLE_MS: int = 500
    POST_SCROLL_WAIT_MS: int = 2_000
    GALLERY_CLOSE_SETTLE_MS: int = 1_000

    # Downloads
    DOWNLOAD_CONCURRENCY: int = int(os.getenv("DOWNLOAD_CONCURRENCY", "4"))
    MAX_DOWNLOAD_CONCURRENCY: int = 8
    DOWNLOAD_TIMEOUT: float = 30.0
    USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE_PATH: str = os.getenv("LOG_FILE_PATH", "listing_scraper.log")

    def validate(self) -> None:
        """Validate configuration before a run."""
        if self.DOWNLOAD_CONCURRENCY < 1:
            raise ValueError(f"DOWNLOAD_CONCURRENCY must be positive, got {self.DOWNLOAD_CONCURRENCY}")
        if self.SCROLL_MAX_ATTEMPTS < 1:
            raise ValueError(f"SCROLL_MAX_ATTEMPTS must be positive, got {self.SCROLL_MAX_ATTEMPTS}")

    @property
    def download_workers(self) -> int:
        """Download fanout clamped to the allowed range."""
        return max(1, min(self.DOWNLOAD_CONCURRENCY, self.MAX_DOWNLOAD_CONCURRENCY))


# Global config instance
config = Config()
