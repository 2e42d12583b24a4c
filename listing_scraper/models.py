"""
Data models for the listing scraper.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .utils import canonicalize_image_url


@dataclass(frozen=True)
class LookupDescriptor:
    """One candidate way of locating a field: a selector plus what to read from it."""

    selector: str
    attribute: Optional[str] = None  # None reads the element's text content


@dataclass(frozen=True)
class GalleryAsset:
    """An image reference found in the gallery, before and after resolution rewrite."""

    raw_url: str
    canonical_url: str

    @classmethod
    def from_raw(cls, raw_url: str) -> "GalleryAsset":
        return cls(raw_url=raw_url, canonical_url=canonicalize_image_url(raw_url))


@dataclass
class ListingRecord:
    """Represents a scraped listing with all extracted data."""

    id: str
    source_url: str

    # Page fields, None when extraction failed
    title: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    agent_name: Optional[str] = None
    agency_name: Optional[str] = None

    attributes: Dict[str, str] = field(default_factory=dict)

    # Local paths of downloaded images
    images: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
