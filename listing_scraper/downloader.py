"""
Concurrent image downloads with per-image failure tolerance.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import httpx

from .config import Config, config
from .utils import image_extension

logger = logging.getLogger("listing_scraper.downloader")


def image_filename(index: int, url: str, default_ext: str = ".jpeg") -> str:
    """File name for the URL at 1-based position ``index`` of the input list."""
    return f"image_{index}{image_extension(url, default_ext)}"


async def _download_one(
    client: httpx.AsyncClient,
    semaphore: asyncio.Semaphore,
    url: str,
    dest: Path,
    index: int,
    total: int,
) -> Optional[Path]:
    async with semaphore:
        logger.info(f">>> Downloading image {index}/{total}: {url}")
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Error downloading image {url}: {e}")
            return None
        if not response.is_success:
            logger.warning(f"Failed to download image from {url}: HTTP Status {response.status_code}")
            return None
        dest.write_bytes(response.content)
        logger.info(f">>> Successfully downloaded: {dest.name}")
        return dest


async def download_images(
    urls: Sequence[str],
    dest_dir: Path,
    settings: Config = config,
    client: Optional[httpx.AsyncClient] = None,
) -> List[str]:
    """
    Download ``urls`` into ``dest_dir`` and return the written paths.

    File names are fixed from each URL's input position before any request is
    made, so a failed URL leaves a gap in the numbering. The returned paths
    follow input order, not completion order.
    """
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    if not urls:
        logger.info(">>> No image URLs collected to download")
        return []

    logger.info(f">>> Attempting to download {len(urls)} images")
    semaphore = asyncio.Semaphore(settings.download_workers)
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            timeout=settings.DOWNLOAD_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": settings.USER_AGENT},
        )
    try:
        jobs = [
            _download_one(
                client,
                semaphore,
                url,
                dest_dir / image_filename(i, url, settings.DEFAULT_IMAGE_EXT),
                i,
                len(urls),
            )
            for i, url in enumerate(urls, 1)
        ]
        results = await asyncio.gather(*jobs, return_exceptions=True)
    finally:
        if owns_client:
            await client.aclose()

    # Every download has finished by now; a write failure is fatal for the job
    for result in results:
        if isinstance(result, BaseException):
            raise result

    written = [str(p) for p in results if p is not None]
    logger.info(f">>> All image downloads attempted: {len(written)}/{len(urls)} succeeded")
    return written
