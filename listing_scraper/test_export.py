"""
Tests for record assembly and export.
"""
import json

import pandas as pd

from listing_scraper.export import build_record, save_output_rows, write_record
from listing_scraper.models import ListingRecord


def test_build_record_trims_and_drops_empty_values():
    fields = {
        "title": "  Villa ",
        "price": "",
        "description": None,
        "attributes": {"bedrooms": "4", "": "x", "type": ""},
    }

    record = build_record("42", "https://example.test/details-42.html", fields, ["images/42/image_1.jpg"])

    assert record.id == "42"
    assert record.title == "Villa"
    assert record.price is None
    assert record.description is None
    assert record.agent_name is None
    assert record.attributes == {"bedrooms": "4"}
    assert record.images == ["images/42/image_1.jpg"]


def test_write_record_creates_directory(tmp_path):
    record = ListingRecord(id="42", source_url="https://example.test/details-42.html", title="شقة")

    path = write_record(record, tmp_path / "out")

    assert path == tmp_path / "out" / "42.json"
    text = path.read_text(encoding="utf-8")
    assert "شقة" in text
    assert "\n  " in text
    assert set(json.loads(text)) == {
        "id", "source_url", "title", "price", "description", "location",
        "agent_name", "agency_name", "attributes", "images",
    }


def test_save_output_rows_csv(tmp_path):
    record = ListingRecord(
        id="42",
        source_url="https://example.test/details-42.html",
        attributes={"bedrooms": "4"},
        images=["a.jpg", "b.jpg"],
    )
    out = tmp_path / "listing.csv"

    df = save_output_rows([record], str(out))

    assert len(df) == 1
    loaded = pd.read_csv(out, dtype=str)
    assert loaded.loc[0, "id"] == "42"
    assert loaded.loc[0, "images"] == "a.jpg|b.jpg"
    assert json.loads(loaded.loc[0, "attributes_json"]) == {"bedrooms": "4"}
