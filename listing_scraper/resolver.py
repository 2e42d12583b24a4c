"""
Ordered-fallback selector resolution.

Markup for the same field differs between builds of the listing page, so each
field is described by a list of candidate lookups, most specific first. The
first candidate that yields a non-empty value wins.
"""
import logging
from typing import Optional, Sequence

from playwright.async_api import Error as PlaywrightError

from .models import LookupDescriptor

logger = logging.getLogger("listing_scraper.resolver")

READ_TIMEOUT_MS = 5_000


async def read_value(locator, descriptor: LookupDescriptor, timeout_ms: int = READ_TIMEOUT_MS) -> Optional[str]:
    """Read text or an attribute from a single-element locator; None if empty."""
    if descriptor.attribute:
        raw = await locator.get_attribute(descriptor.attribute, timeout=timeout_ms)
    else:
        raw = await locator.text_content(timeout=timeout_ms)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


async def resolve(
    scope,
    candidates: Sequence[LookupDescriptor],
    timeout_ms: int = READ_TIMEOUT_MS,
) -> Optional[str]:
    """
    Return the first non-empty value produced by ``candidates`` inside ``scope``.

    ``scope`` is a Playwright page or locator. A candidate that matches nothing,
    reads empty, or raises is skipped; None is returned when all of them miss.
    """
    for descriptor in candidates:
        try:
            loc = scope.locator(descriptor.selector).first
            if await loc.count() == 0:
                continue
            value = await read_value(loc, descriptor, timeout_ms)
        except PlaywrightError as e:
            logger.debug(f"Lookup failed for {descriptor.selector!r}: {e}")
            continue
        if value:
            return value
    return None
