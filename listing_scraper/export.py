"""
Record assembly and export utilities for the listing scraper.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pandas as pd

from .models import ListingRecord

logger = logging.getLogger("listing_scraper.export")

RECORD_FIELDS = ("title", "price", "description", "location", "agent_name", "agency_name")


def build_record(
    listing_id: str,
    source_url: str,
    fields: Mapping[str, object],
    images: List[str],
) -> ListingRecord:
    """Merge extractor output and downloaded image paths into one record."""
    record = ListingRecord(id=listing_id, source_url=source_url)
    for name in RECORD_FIELDS:
        value = fields.get(name)
        setattr(record, name, value.strip() if isinstance(value, str) and value.strip() else None)
    attributes = fields.get("attributes") or {}
    record.attributes = {k: v for k, v in dict(attributes).items() if k and v}
    record.images = list(images)
    return record


def record_path(output_dir: Path, listing_id: str) -> Path:
    return Path(output_dir) / f"{listing_id}.json"


def write_record(record: ListingRecord, output_dir: Path) -> Path:
    """Write the record as pretty-printed JSON; errors propagate to the caller."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = record_path(output_dir, record.id)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f">>> Data saved to {path}")
    return path


def record_to_row(record: ListingRecord) -> Dict[str, Optional[str]]:
    return {
        "id": record.id,
        "title": record.title,
        "price": record.price,
        "location": record.location,
        "agent_name": record.agent_name,
        "agency_name": record.agency_name,
        "description": record.description,
        "attributes_json": json.dumps(record.attributes, ensure_ascii=False),
        "images": "|".join(record.images),
        "source_url": record.source_url,
    }


def save_output_rows(records: List[ListingRecord], out_path: str) -> pd.DataFrame:
    """Save records to a CSV or Excel file, chosen by extension."""
    df = pd.DataFrame([record_to_row(r) for r in records])
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)
    logger.info(f">>> Saved {len(df)} rows to {out_path}")
    return df
