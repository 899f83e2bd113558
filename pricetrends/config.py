from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


REPO_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = REPO_DIR / "data"
DEFAULT_FETCH_TIMEOUT = 10.0
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    sources: List[str] = field(default_factory=list)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    cpi_csv: Optional[Path] = None
    log_level: str = "INFO"


def _as_float(value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        out = float(value)
    except ValueError:
        return default
    return out if out > 0 else default


def get_settings() -> Settings:
    """Read settings from PRICE_TRENDS_* environment variables."""
    env = os.environ
    data_dir = Path(env["PRICE_TRENDS_DATA_DIR"]) if env.get("PRICE_TRENDS_DATA_DIR") else DEFAULT_DATA_DIR
    sources = [s.strip() for s in (env.get("PRICE_TRENDS_SOURCES") or "").split(",") if s.strip()]
    cpi_csv = Path(env["PRICE_TRENDS_CPI_CSV"]) if env.get("PRICE_TRENDS_CPI_CSV") else None
    return Settings(
        data_dir=data_dir,
        sources=sources,
        fetch_timeout=_as_float(env.get("PRICE_TRENDS_FETCH_TIMEOUT"), DEFAULT_FETCH_TIMEOUT),
        cpi_csv=cpi_csv,
        log_level=(env.get("PRICE_TRENDS_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    level = level or get_settings().log_level
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
