"""
Runtime settings for the office records workbench.

Values come from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Tuple


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass
class Settings:
    data_dir: Path = field(default_factory=lambda: Path("data"))
    export_dir: Path = field(default_factory=lambda: Path("exports"))
    surveys: Tuple[str, ...] = ("ssn_m25",)
    log_level: str = "INFO"
    slow_operation_seconds: float = 1.0
    server_port: int = 7860

    @classmethod
    def from_env(cls) -> "Settings":
        surveys = _split_list(os.getenv("RECORDS_SURVEYS", "ssn_m25")) or ("ssn_m25",)
        settings = cls(
            data_dir=Path(os.getenv("RECORDS_DATA_DIR", "data")),
            export_dir=Path(os.getenv("RECORDS_EXPORT_DIR", "exports")),
            surveys=surveys,
            log_level=os.getenv("RECORDS_LOG_LEVEL", "INFO").upper(),
            slow_operation_seconds=float(os.getenv("RECORDS_SLOW_OPERATION_SECONDS", "1.0")),
            server_port=int(os.getenv("RECORDS_SERVER_PORT", "7860")),
        )
        settings.export_dir.mkdir(parents=True, exist_ok=True)
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


__all__ = ["Settings", "get_settings"]
