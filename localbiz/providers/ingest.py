from __future__ import annotations

import json
import re
from pathlib import Path
from typing import List

import pandas as pd

from .config import DEFAULT_PROVIDER_CONFIG, ProviderDataConfig
from .data_store import parse_bool


CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "slug",
    "category_key",
    "tags",
    "rating",
    "is_member",
    "is_featured",
    "description",
    "phone",
    "email",
    "website",
    "address",
    "specialties",
    "service_areas",
    "business_hours",
    "published",
]

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _slugify(name: str) -> str:
    return _SLUG_RE.sub("-", str(name).lower()).strip("-")


def _normalize_rating(rating: float | int | str | None) -> float | None:
    if rating is None:
        return None
    raw = str(rating).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value != value:  # NaN
        return None

    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _normalize_list(value: object) -> str:
    """Lists (JSON arrays) or delimited strings -> lowercase comma-joined tags."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        if isinstance(value, float) and pd.isna(value):
            return ""
        items = re.split(r"[,;|]", str(value))
    seen: list[str] = []
    for item in items:
        tag = item.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return ", ".join(seen)


def _normalize_hours(value: object) -> str:
    if isinstance(value, dict):
        return json.dumps({str(k): str(v) for k, v in value.items()}, sort_keys=True)
    if isinstance(value, str):
        return value
    return ""


def _read_export(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".json":
        with path.open(encoding="utf-8") as fh:
            records = json.load(fh)
        if isinstance(records, dict):
            records = records.get("data") or records.get("providers") or []
        return pd.DataFrame.from_records(records)
    return pd.read_csv(path)


def run_ingestion(config: ProviderDataConfig = DEFAULT_PROVIDER_CONFIG) -> Path:
    """
    Normalise a raw provider export into the canonical CSV.

    Steps:
    - Read the export (JSON records or CSV) from the hosted datastore dump.
    - Map raw fields into the canonical Provider schema.
    - Persist the cleaned dataset as CSV for the funnel to score against.
    """
    df = _read_export(config.raw_export_path)

    # Exports from different admin tools name a few columns differently.
    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    col_id = _first_present(["id", "provider_id", "uuid"])
    col_name = _first_present(["name", "business_name", "title"])
    col_category = _first_present(["category_key", "category", "category_slug"])
    col_rating = _first_present(["rating", "google_rating", "avg_rating"])
    col_member = _first_present(["is_member", "isMember", "member"])

    canonical = pd.DataFrame()
    canonical["id"] = df[col_id].astype(str) if col_id else df.index.astype(str)
    canonical["name"] = df[col_name].fillna("").astype(str) if col_name else ""
    canonical["slug"] = df["slug"] if "slug" in df.columns else canonical["name"].apply(_slugify)
    canonical["category_key"] = df[col_category].fillna("").astype(str).str.strip().str.lower() if col_category else ""

    for col in ("tags", "specialties", "service_areas"):
        canonical[col] = df[col].apply(_normalize_list) if col in df.columns else ""

    if col_rating:
        canonical["rating"] = df[col_rating].apply(_normalize_rating)
    else:
        canonical["rating"] = pd.NA

    canonical["is_member"] = df[col_member].apply(parse_bool) if col_member else False
    canonical["is_featured"] = df["is_featured"].apply(parse_bool) if "is_featured" in df.columns else False
    # Listings are published unless the export says otherwise
    canonical["published"] = (
        df["published"].apply(lambda v: parse_bool(v, default=True)) if "published" in df.columns else True
    )

    for col in ("description", "phone", "email", "website", "address"):
        canonical[col] = df[col] if col in df.columns else ""

    canonical["business_hours"] = df["business_hours"].apply(_normalize_hours) if "business_hours" in df.columns else ""

    # Rows without a name or category cannot be matched
    canonical = canonical.loc[(canonical["name"] != "") & (canonical["category_key"] != "")]
    canonical = canonical[CANONICAL_COLUMNS]

    output_path = config.processed_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canonical.to_csv(output_path, index=False)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Processed data saved to: {path}")
