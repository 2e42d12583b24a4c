"""
Field extractors for a listing detail page.

Every extractor returns None (or an empty mapping) instead of raising when the
page does not carry the field.
"""
import asyncio
import logging
from typing import Dict, Optional

from playwright.async_api import Error as PlaywrightError

from .config import Config, config
from .models import LookupDescriptor
from .resolver import resolve
from .utils import normalize_key

logger = logging.getLogger("listing_scraper.extractors")


# Selectors
TITLE = [LookupDescriptor('div[aria-label="Property overview"] h1')]
PRICE = [LookupDescriptor('span[aria-label="Price"]')]
DESCRIPTION = [LookupDescriptor('div[aria-label="Property description"]')]
DESCRIPTION_EXPAND_SEL = 'div[role="button"][aria-label="View More"]'
LOCATION = [
    LookupDescriptor('div.e4fd45f0[aria-label="Property header"]'),
    LookupDescriptor('div[aria-label="Property header"]'),
]
AGENT_NAME = [LookupDescriptor('a[aria-label="Agent name"]')]
AGENCY_NAME = [LookupDescriptor('h3[aria-label="Agency name"]')]

DETAILS_ITEM_SEL = 'ul[aria-label="Property details"] li'
DETAIL_LABEL = [
    LookupDescriptor("span.ed0db22a"),
    LookupDescriptor("div.ed0db22a"),
]
DETAIL_VALUE = [
    LookupDescriptor("span[aria-label]"),
    LookupDescriptor("span._2fdf7fc5"),
]
# The inspection-date row keeps its value in a separately labelled span
TRUCHECK_LABEL_MARKER = "TruCheck"
TRUCHECK_VALUE = [LookupDescriptor('span[aria-label="Trucheck date"]')]


async def extract_title(page) -> Optional[str]:
    return await resolve(page, TITLE)


async def extract_price(page) -> Optional[str]:
    return await resolve(page, PRICE)


async def extract_location(page) -> Optional[str]:
    return await resolve(page, LOCATION)


async def extract_agent_name(page) -> Optional[str]:
    return await resolve(page, AGENT_NAME)


async def extract_agency_name(page) -> Optional[str]:
    return await resolve(page, AGENCY_NAME)


async def extract_description(page, settings: Config = config) -> Optional[str]:
    """
    Read the description, expanding it first when a "View More" toggle is shown.

    The toggle is best-effort: if it cannot be clicked, or the text cannot be
    read again afterwards, the collapsed text is returned.
    """
    description = await resolve(page, DESCRIPTION)

    try:
        toggle = page.locator(DESCRIPTION_EXPAND_SEL).first
        if await toggle.count() == 0 or not await toggle.is_visible():
            return description
        logger.info('>>> Clicking "View More" for description...')
        await toggle.click(timeout=settings.CLICK_TIMEOUT_MS)
    except PlaywrightError as e:
        logger.warning(f"Could not expand description, keeping collapsed text: {e}")
        return description

    await asyncio.sleep(settings.DESCRIPTION_SETTLE_MS / 1000)
    expanded = await resolve(page, DESCRIPTION)
    return expanded or description


async def extract_attributes(page) -> Dict[str, str]:
    """
    Collect label/value pairs from the property details list.

    Rows missing either a label or a value are dropped. Keys are normalized
    with ``normalize_key``.
    """
    attributes: Dict[str, str] = {}
    try:
        items = await page.locator(DETAILS_ITEM_SEL).all()
    except PlaywrightError as e:
        logger.warning(f"Could not read property details list: {e}")
        return attributes

    for item in items:
        label = await resolve(item, DETAIL_LABEL)
        value = await resolve(item, DETAIL_VALUE)
        if label and TRUCHECK_LABEL_MARKER in label and not value:
            value = await resolve(item, TRUCHECK_VALUE)
        if not label or not value:
            continue
        key = normalize_key(label)
        if key:
            attributes[key] = value

    logger.debug(f"Extracted {len(attributes)} attributes")
    return attributes


async def extract_fields(page, settings: Config = config) -> Dict[str, object]:
    """Run every field extractor in turn; the page is never used concurrently."""
    return {
        "title": await extract_title(page),
        "price": await extract_price(page),
        "description": await extract_description(page, settings),
        "attributes": await extract_attributes(page),
        "location": await extract_location(page),
        "agent_name": await extract_agent_name(page),
        "agency_name": await extract_agency_name(page),
    }
