from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SyncConfig:
    url: str = os.getenv("SUPABASE_URL", "")
    service_key: str = os.getenv("SUPABASE_SERVICE_KEY", "")
    table: str = "funnel_responses"
    user_column: str = "user_email"
    timeout: float = 5.0
    enabled: bool = os.getenv("FUNNEL_SYNC_ENABLED", "true").lower() != "false"


DEFAULT_SYNC_CONFIG = SyncConfig()
