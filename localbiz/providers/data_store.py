from __future__ import annotations

import json
import logging

import pandas as pd

from .config import DEFAULT_PROVIDER_CONFIG, ProviderDataConfig
from .models import Provider

logger = logging.getLogger(__name__)

LIST_COLUMNS = ("tags", "specialties", "service_areas")
BOOL_COLUMNS = ("is_member", "is_featured", "published")

_df: pd.DataFrame | None = None


def _split_list(value: object) -> list[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def parse_bool(value: object, default: bool = False) -> bool:
    """Coerce an export flag such as ``1`` or ``"yes "`` to a bool."""
    if isinstance(value, bool):
        return value
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ("1", "true", "yes", "y")


def _parse_hours(value: object) -> dict[str, str]:
    if not isinstance(value, str) or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {str(k): str(v) for k, v in parsed.items()}


def _load(config: ProviderDataConfig) -> pd.DataFrame:
    df = pd.read_csv(config.processed_path, dtype={"id": str})

    for col in LIST_COLUMNS:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].apply(_split_list)

    for col in BOOL_COLUMNS:
        if col not in df.columns:
            df[col] = col == "published"
        df[col] = df[col].apply(parse_bool)

    if "business_hours" not in df.columns:
        df["business_hours"] = ""
    df["business_hours"] = df["business_hours"].apply(_parse_hours)

    # Only published listings are visible to the funnel
    df = df.loc[df["published"]].reset_index(drop=True)
    logger.info("Loaded %d published providers from %s", len(df), config.processed_path)
    return df


def get_dataframe(config: ProviderDataConfig = DEFAULT_PROVIDER_CONFIG) -> pd.DataFrame:
    """Return the in-memory provider DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load(config)
    return _df


def clear_data_store() -> None:
    global _df
    _df = None


def _row_to_provider(row: pd.Series) -> Provider:
    def _opt(col: str) -> str | None:
        value = row.get(col)
        return str(value) if value is not None and pd.notna(value) and str(value) else None

    rating = row.get("rating")
    return Provider(
        id=str(row["id"]),
        name=str(row["name"]),
        slug=_opt("slug") or "",
        category_key=str(row["category_key"]),
        tags=row["tags"],
        rating=float(rating) if rating is not None and pd.notna(rating) else None,
        is_member=row["is_member"],
        is_featured=row["is_featured"],
        description=_opt("description"),
        phone=_opt("phone"),
        email=_opt("email"),
        website=_opt("website"),
        address=_opt("address"),
        specialties=row["specialties"],
        service_areas=row["service_areas"],
        business_hours=row["business_hours"],
        published=row["published"],
    )


def get_providers(category: str) -> list[Provider]:
    """All published providers of ``category``, in dataset order."""
    df = get_dataframe()
    subset = df.loc[df["category_key"] == category]
    return [_row_to_provider(row) for _, row in subset.iterrows()]
