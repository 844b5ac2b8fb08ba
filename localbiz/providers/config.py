from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class ProviderDataConfig:
    """
    Locations of the provider export and the canonical dataset built from it.
    """

    raw_export_path: Path = field(
        default_factory=lambda: Path(os.getenv("PROVIDERS_RAW_EXPORT", str(_DATA_DIR / "raw" / "providers.json")))
    )
    processed_path: Path = field(
        default_factory=lambda: Path(os.getenv("PROVIDERS_CSV", str(_DATA_DIR / "providers.csv")))
    )


DEFAULT_PROVIDER_CONFIG = ProviderDataConfig()
