"""
Gallery traversal: open the photo dialog, scroll its virtualized grid until it
stops moving, and collect de-duplicated high-resolution image URLs.
"""
import asyncio
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from .config import Config, config
from .models import GalleryAsset

logger = logging.getLogger("listing_scraper.gallery")


# Selectors
VIEW_GALLERY_SEL = 'div[role="button"][aria-label="View gallery"]'
GALLERY_DIALOG_SEL = 'div[aria-label="Gallery Dialog"]'
GALLERY_GRID_SEL = 'div[aria-label="Gallery dialog photo grid"]'
GALLERY_IMAGE_SEL = f"{GALLERY_GRID_SEL} picture img"
CLOSE_BUTTON_SEL = 'button[aria-label="Close button"]'
MAIN_IMAGE_SEL = 'div[aria-label="Property image"] picture img'

# In-page helpers evaluated against the grid element
GRID_METRICS_JS = "(el) => ({top: el.scrollTop, height: el.scrollHeight, step: el.clientHeight})"
GRID_SCROLL_TO_JS = "(el, top) => { const prev = el.scrollTop; el.scrollTop = top; return prev; }"

STOP_END_REACHED = "end_reached"
STOP_HEIGHT_EXCEEDED = "height_exceeded"


class GalleryState(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    SCROLLING = "scrolling"
    DRAINING = "draining"
    CLOSING = "closing"
    DONE = "done"
    SINGLE_IMAGE_FALLBACK = "single_image_fallback"


def scroll_stop_reason(prev_top: float, top: float, target: float, height: float, step: float) -> Optional[str]:
    """
    Decide whether the grid scroll loop should stop.

    Stops when the grid did not move and the next target is already past the
    content height, or when the target has run two steps past the height.
    """
    if top == prev_top and target > height:
        return STOP_END_REACHED
    if target > height + step * 2:
        return STOP_HEIGHT_EXCEEDED
    return None


def dedupe_image_urls(raw_urls: Iterable[Optional[str]]) -> List[str]:
    """Canonicalize image URLs and drop repeats, keeping first-seen order."""
    unique: Dict[str, GalleryAsset] = {}
    for raw in raw_urls:
        if not raw:
            continue
        asset = GalleryAsset.from_raw(raw)
        unique.setdefault(asset.canonical_url, asset)
    return list(unique)


class GalleryScraper:
    """Walks the listing gallery on a single page. Create one per job."""

    def __init__(self, page, settings: Config = config):
        self.page = page
        self.settings = settings
        self.state = GalleryState.CLOSED
        self.scroll_iterations = 0

    def _set_state(self, state: GalleryState) -> None:
        logger.debug(f"Gallery state {self.state.value} -> {state.value}")
        self.state = state

    async def collect(self) -> List[str]:
        """Return ordered unique image URLs; never raises, degrades to []."""
        try:
            return await self._collect()
        except Exception:
            logger.exception("Gallery scraping failed, continuing without images")
            self._set_state(GalleryState.DONE)
            return []

    async def _collect(self) -> List[str]:
        opener = self.page.locator(VIEW_GALLERY_SEL).first
        if await opener.count() == 0 or not await opener.is_visible():
            return await self._single_image()

        self._set_state(GalleryState.OPENING)
        logger.info('>>> Clicking "View gallery" button...')
        await opener.click(timeout=self.settings.CLICK_TIMEOUT_MS)
        await self.page.locator(GALLERY_DIALOG_SEL).wait_for(
            state="visible", timeout=self.settings.GALLERY_OPEN_TIMEOUT_MS
        )
        self._set_state(GalleryState.OPEN)
        logger.info(">>> Gallery dialog is now visible")
        await self._wait_network_idle("gallery opened")

        self._set_state(GalleryState.SCROLLING)
        grid = self.page.locator(GALLERY_GRID_SEL).first
        if await grid.count() > 0:
            await self._scroll_grid(grid)
            await asyncio.sleep(self.settings.POST_SCROLL_WAIT_MS / 1000)
            await self._wait_network_idle("gallery scrolling")

        self._set_state(GalleryState.DRAINING)
        urls = dedupe_image_urls(await self._read_grid_sources())
        logger.info(f">>> Collected {len(urls)} unique image URLs")

        self._set_state(GalleryState.CLOSING)
        await self._close()
        self._set_state(GalleryState.DONE)
        return urls

    async def _single_image(self) -> List[str]:
        self._set_state(GalleryState.SINGLE_IMAGE_FALLBACK)
        logger.info('>>> No "View gallery" button visible, scraping main image only')
        urls: List[str] = []
        img = self.page.locator(MAIN_IMAGE_SEL).first
        if await img.count() > 0:
            src = await img.get_attribute("src", timeout=self.settings.IMAGE_ATTR_TIMEOUT_MS)
            if src and "thumb" not in src:
                urls = dedupe_image_urls([src])
        logger.info(f">>> Main image URL: {urls[0] if urls else 'N/A'}")
        return urls

    async def _wait_network_idle(self, label: str) -> None:
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.settings.NETWORK_IDLE_TIMEOUT_MS)
            logger.info(f">>> Network idle after {label}")
        except PlaywrightTimeout as e:
            logger.warning(f"Network did not go idle after {label}, proceeding anyway: {e}")

    async def _scroll_grid(self, grid) -> None:
        """
        Scroll the grid one viewport at a time so lazily rendered images get
        materialized, then return to the top.
        """
        metrics = await grid.evaluate(GRID_METRICS_JS)
        step = metrics["step"]
        target = 0
        logger.info(">>> Scrolling gallery to load all images...")
        for attempt in range(self.settings.SCROLL_MAX_ATTEMPTS):
            self.scroll_iterations = attempt + 1
            prev_top = await grid.evaluate(GRID_SCROLL_TO_JS, target)
            target += step
            await asyncio.sleep(self.settings.SCROLL_SETTLE_MS / 1000)

            metrics = await grid.evaluate(GRID_METRICS_JS)
            reason = scroll_stop_reason(prev_top, metrics["top"], target, metrics["height"], step)
            if reason:
                logger.debug(f"Gallery scroll stopped after {attempt + 1} steps: {reason}")
                break
        else:
            logger.debug(f"Gallery scroll hit the {self.settings.SCROLL_MAX_ATTEMPTS} step limit")
        await grid.evaluate(GRID_SCROLL_TO_JS, 0)

    async def _read_grid_sources(self) -> List[Optional[str]]:
        images = await self.page.locator(GALLERY_IMAGE_SEL).all()
        logger.info(f">>> Found {len(images)} image elements in gallery")
        sources: List[Optional[str]] = []
        for img in images:
            src = await self._read_attribute(img, "src")
            if not src:
                src = await self._read_attribute(img, "data-src")
            if not src:
                logger.debug("Skipping gallery image with empty src/data-src")
                continue
            sources.append(src)
        return sources

    async def _read_attribute(self, img, name: str) -> Optional[str]:
        try:
            return await img.get_attribute(name, timeout=self.settings.IMAGE_ATTR_TIMEOUT_MS)
        except PlaywrightError as e:
            logger.warning(f"Could not read {name} for a gallery image: {e}")
            return None

    async def _close(self) -> None:
        try:
            button = self.page.locator(CLOSE_BUTTON_SEL).first
            if await button.count() > 0 and await button.is_visible():
                logger.info(">>> Closing gallery dialog...")
                await button.click(timeout=self.settings.CLICK_TIMEOUT_MS)
                await asyncio.sleep(self.settings.GALLERY_CLOSE_SETTLE_MS / 1000)
        except PlaywrightError as e:
            logger.warning(f"Could not close gallery dialog: {e}")


async def collect_gallery_urls(page, settings: Config = config) -> List[str]:
    return await GalleryScraper(page, settings).collect()
