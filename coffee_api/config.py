from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_BUNDLED_CSV = Path(__file__).resolve().parent / "data" / "coffee_places.csv"


@dataclass(frozen=True)
class ServiceConfig:
    data_path: Path = Path(os.getenv("COFFEE_DATA_PATH", str(_BUNDLED_CSV)))
    cache_ttl: float = float(os.getenv("COFFEE_CACHE_TTL", "300"))
    log_level: str = os.getenv("COFFEE_LOG_LEVEL", "INFO").upper()
    host: str = os.getenv("COFFEE_HOST", "127.0.0.1")
    port: int = int(os.getenv("COFFEE_PORT", "4000"))

    @property
    def cache_enabled(self) -> bool:
        return self.cache_ttl > 0


DEFAULT_SERVICE_CONFIG = ServiceConfig()
