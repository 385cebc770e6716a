from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class AppConfig:
    max_page_size: int = int(os.getenv("CATALOG_MAX_PAGE_SIZE", "100"))
    seed_demo_data: bool = _env_flag("CATALOG_SEED_DEMO", "true")


DEFAULT_APP_CONFIG = AppConfig()
