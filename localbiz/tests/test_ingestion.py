import json
from pathlib import Path

import pandas as pd

from localbiz.providers.config import ProviderDataConfig
from localbiz.providers.ingest import CANONICAL_COLUMNS, _normalize_rating, run_ingestion

RAW_EXPORT = [
    {
        "provider_id": "re-9",
        "business_name": "Bonita Realty",
        "category": "Real-Estate",
        "tags": ["Buy", "sell", "buy"],
        "google_rating": "4.6/5",
        "isMember": True,
        "service_areas": "Bonita; Chula Vista",
        "business_hours": {"mon": "9am-5pm"},
    },
    {
        "provider_id": "hs-9",
        "business_name": "Quick Fix",
        "category": "home-services",
        "tags": "plumbing|asap",
        "google_rating": 7,
        "published": False,
    },
    {
        "provider_id": "ps-9",
        "business_name": "Ledger Pros",
        "category": "professional-services",
        "isMember": "no",
        "is_featured": "Yes ",
        "published": "false ",
    },
    {
        "provider_id": "xx-1",
        "business_name": "",
        "category": "home-services",
    },
]


def test_run_ingestion_creates_non_empty_processed_file(tmp_path: Path):
    """
    End-to-end ingestion of a small provider export.

    Uses a temporary output directory so we don't pollute real data directories.
    """
    raw = tmp_path / "raw" / "providers.json"
    raw.parent.mkdir()
    raw.write_text(json.dumps(RAW_EXPORT), encoding="utf-8")
    cfg = ProviderDataConfig(
        raw_export_path=raw,
        processed_path=tmp_path / "processed" / "providers.csv",
    )

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"

    df = pd.read_csv(output_path, dtype={"id": str})
    assert list(df.columns) == CANONICAL_COLUMNS
    # Row without a name is dropped
    assert list(df["id"]) == ["re-9", "hs-9", "ps-9"]

    realty = df.iloc[0]
    assert realty["slug"] == "bonita-realty"
    assert realty["category_key"] == "real-estate"
    assert realty["tags"] == "buy, sell"
    assert realty["service_areas"] == "bonita, chula vista"
    assert realty["rating"] == 4.6
    assert bool(realty["is_member"])
    assert json.loads(realty["business_hours"]) == {"mon": "9am-5pm"}

    fix = df.iloc[1]
    assert fix["tags"] == "plumbing, asap"
    assert fix["rating"] == 5.0
    assert not bool(fix["published"])

    # String flags are parsed, not truthiness-cast
    ledger = df.iloc[2]
    assert not bool(ledger["is_member"])
    assert bool(ledger["is_featured"])
    assert not bool(ledger["published"])
    assert bool(realty["published"])


def test_rating_normalisation():
    assert _normalize_rating("3.8/5") == 3.8
    assert _normalize_rating(-2) == 0.0
    assert _normalize_rating("NEW") is None
    assert _normalize_rating(float("nan")) is None
    assert _normalize_rating(None) is None
