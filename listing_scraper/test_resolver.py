"""
Tests for ordered-fallback selector resolution.
"""
import pytest

from listing_scraper.fakes import FakeElement, FakePage
from listing_scraper.models import LookupDescriptor
from listing_scraper.resolver import resolve


@pytest.mark.asyncio
async def test_first_non_empty_candidate_wins():
    first = FakeElement(text="  ")
    second = FakeElement(text=" Villa in Riyadh ")
    third = FakeElement(text="Legacy title")
    page = FakePage({"h1.new": [first], "h1.mid": [second], "h1.old": [third]})

    value = await resolve(page, [
        LookupDescriptor("h1.missing"),
        LookupDescriptor("h1.new"),
        LookupDescriptor("h1.mid"),
        LookupDescriptor("h1.old"),
    ])

    assert value == "Villa in Riyadh"
    assert third.reads == 0


@pytest.mark.asyncio
async def test_attribute_lookup():
    page = FakePage({"img": [FakeElement(attrs={"src": "https://cdn.test/a.jpg"})]})
    assert await resolve(page, [LookupDescriptor("img", attribute="src")]) == "https://cdn.test/a.jpg"


@pytest.mark.asyncio
async def test_lookup_error_falls_through_to_next_candidate():
    broken = FakeElement(attr_errors={"data-src"})
    page = FakePage({
        "img.lazy": [broken],
        "img.plain": [FakeElement(attrs={"data-src": "https://cdn.test/b.jpg"})],
    })

    value = await resolve(page, [
        LookupDescriptor("img.lazy", attribute="data-src"),
        LookupDescriptor("img.plain", attribute="data-src"),
    ])

    assert value == "https://cdn.test/b.jpg"


@pytest.mark.asyncio
async def test_all_candidates_missing_returns_none():
    page = FakePage({"span": [FakeElement(text=None)]})
    assert await resolve(page, [LookupDescriptor("span"), LookupDescriptor("div")]) is None
    assert await resolve(page, []) is None


@pytest.mark.asyncio
async def test_resolve_within_scope_only_sees_children():
    item = FakeElement(children={"span.label": [FakeElement(text="Bedrooms")]})
    page = FakePage({"li": [item], "span.label": [FakeElement(text="Outside")]})

    scope = page.locator("li").first
    assert await resolve(scope, [LookupDescriptor("span.label")]) == "Bedrooms"
