from __future__ import annotations

import io
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import pandas as pd
import requests

from pricetrends.config import Settings, get_settings
from pricetrends.filters import distinct_items, distinct_presidencies, year_range
from pricetrends.presidencies import PRESIDENCIES, annotate_presidencies


logger = logging.getLogger(__name__)

SOURCE_FILES = [
    "Bread.xlsx",
    "Milk.xlsx",
    "Eggs.xlsx",
    "Butter.xlsx",
    "Chicken.xlsx",
    "All_Uncooked_Ground_Beef.xlsx",
    "All_Uncooked_Beef_Steaks.xlsx",
    "Bacon.xlsx",
    "American_Processed_Cheese.xlsx",
    "Rice.xlsx",
    "Potatoes.xlsx",
    "Onions.xlsx",
    "Tomatoes.xlsx",
    "Lettuce.xlsx",
    "Bananas.xlsx",
    "Lemons.xlsx",
    "Strawberries.xlsx",
    "Sugar.xlsx",
    "Flour.xlsx",
    "Spaghetti_Cost_Per_Pound_453.6_Grams_In_U.S._City_Average.xlsx",
    "All_Soft_Drinks.xlsx",
    "Cola.xlsx",
    "Wine.xlsx",
    "Vodka.xlsx",
    "Gasoline.xlsx",
    "Electricity_Per_Kwh_In_U.S._City_Average.xlsx",
    "Tuna.xlsx",
    "Yogurt.xlsx",
    "Rolls.xlsx",
]

# Only these two spellings are recognised; anything else falls back to the first sheet.
DATA_SHEET_NAMES = ("data", "Data")
YEAR_COLUMN = "year"
PRICE_COLUMN = "average"


class SourceLoadError(Exception):
    """A single source could not be retrieved or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class LoadStatus(str, Enum):
    OK = "ok"
    NO_RESOURCES = "no_resources"
    ALL_FAILED = "all_failed"
    NO_VALID_ROWS = "no_valid_rows"


@dataclass
class SourceReport:
    source: str
    item: str
    sheet: Optional[str] = None
    rows_read: int = 0
    rows_kept: int = 0
    error: Optional[str] = None


@dataclass
class LoadResult:
    records: pd.DataFrame
    status: LoadStatus
    sources: List[SourceReport] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK


def empty_records() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": pd.Series(dtype="int64"),
            "item": pd.Series(dtype="object"),
            "price": pd.Series(dtype="float64"),
        }
    )


def is_remote(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def item_name_from_source(source: str) -> str:
    """`/data/All_Soft_Drinks.xlsx` -> `All Soft Drinks`."""
    path = urlparse(source).path if is_remote(source) else str(source)
    base = path.replace("\\", "/").rstrip("/").split("/")[-1]
    return base.split(".")[0].replace("_", " ")


def resolve_path(source: str, data_dir: Path) -> Path:
    path = Path(source)
    if path.is_absolute():
        return path
    return data_dir / path


def fetch_bytes(source: str, *, data_dir: Path, timeout: float) -> bytes:
    if is_remote(source):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.Timeout as exc:
            raise SourceLoadError(source, f"timed out after {timeout:g}s") from exc
        except requests.RequestException as exc:
            raise SourceLoadError(source, f"fetch failed: {exc}") from exc
        return resp.content
    path = resolve_path(source, data_dir)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceLoadError(source, f"cannot read {path}: {exc.strerror or exc}") from exc


def pick_sheet_name(sheet_names: Sequence[str]) -> Optional[str]:
    for name in DATA_SHEET_NAMES:
        if name in sheet_names:
            return name
    return sheet_names[0] if sheet_names else None


def read_source(source: str, *, data_dir: Path, timeout: float) -> Tuple[str, pd.DataFrame]:
    """Return (sheet name, rows) for the data sheet of one spreadsheet source."""
    raw = fetch_bytes(source, data_dir=data_dir, timeout=timeout)
    try:
        sheets: Dict[str, pd.DataFrame] = pd.read_excel(io.BytesIO(raw), sheet_name=None)
    except Exception as exc:
        raise SourceLoadError(source, f"unreadable workbook: {exc}") from exc
    names = [str(name) for name in sheets]
    logger.debug("Sheet names in %s: %s", source, names)
    sheet = pick_sheet_name(names)
    if sheet is None:
        raise SourceLoadError(source, "workbook has no sheets")
    if sheet in DATA_SHEET_NAMES:
        logger.info("Using '%s' sheet from %s", sheet, source)
    else:
        logger.warning("No 'data' sheet found in %s, using first sheet: %s", source, sheet)
    return sheet, sheets[sheet]


def find_column(columns: Iterable[object], wanted: str) -> Optional[object]:
    for col in columns:
        if str(col).strip().lower() == wanted:
            return col
    return None


def normalize_rows(frame: pd.DataFrame, item: str) -> Tuple[pd.DataFrame, int]:
    """Turn raw sheet rows into year/item/price records.

    Returns the records and the number of rows that were dropped. Blank rows
    are skipped silently; rows with a missing or non-numeric year or average
    are dropped with a warning.
    """
    frame = frame.dropna(how="all")
    if frame.empty:
        return empty_records(), 0

    year_col = find_column(frame.columns, YEAR_COLUMN)
    price_col = find_column(frame.columns, PRICE_COLUMN)
    if year_col is None or price_col is None:
        logger.warning("Could not find Year and Average columns for %s: %s", item, list(frame.columns))
        return empty_records(), len(frame)

    years = pd.to_numeric(frame[year_col], errors="coerce")
    prices = pd.to_numeric(frame[price_col], errors="coerce")
    valid = years.notna() & prices.notna() & years.between(1, 9999) & (years % 1 == 0)
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropped %d malformed row(s) for %s", dropped, item)

    out = pd.DataFrame(
        {
            "year": years[valid].astype("int64"),
            "item": item,
            "price": prices[valid].astype("float64"),
        }
    )
    return out.reset_index(drop=True), dropped


def load_price_records(
    sources: Optional[Sequence[str]] = None,
    *,
    data_dir: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> LoadResult:
    """Load every source and union the normalized records in source order.

    A source that cannot be fetched or parsed contributes no records; the
    remaining sources are still processed.
    """
    settings = get_settings()
    sources = list(sources) if sources is not None else get_sources(settings)
    data_dir = data_dir or settings.data_dir
    timeout = timeout if timeout is not None else settings.fetch_timeout

    if not sources:
        logger.error("No spreadsheet sources configured")
        return LoadResult(records=empty_records(), status=LoadStatus.NO_RESOURCES)

    frames: List[pd.DataFrame] = []
    reports: List[SourceReport] = []
    for source in sources:
        item = item_name_from_source(source)
        report = SourceReport(source=source, item=item)
        reports.append(report)
        try:
            sheet, raw = read_source(source, data_dir=data_dir, timeout=timeout)
        except SourceLoadError as exc:
            logger.error("Error reading spreadsheet %s: %s", source, exc.reason)
            report.error = exc.reason
            continue
        records, _ = normalize_rows(raw, item)
        report.sheet = sheet
        report.rows_read = int(len(raw))
        report.rows_kept = int(len(records))
        if not records.empty:
            frames.append(records)

    if not frames:
        failed = all(r.error is not None for r in reports)
        status = LoadStatus.ALL_FAILED if failed else LoadStatus.NO_VALID_ROWS
        logger.error("No data was loaded from %d spreadsheet(s) (%s)", len(sources), status.value)
        return LoadResult(records=empty_records(), status=status, sources=reports)

    combined = pd.concat(frames, ignore_index=True)
    logger.info("Loaded %d records from %d of %d spreadsheet(s)", len(combined), len(frames), len(sources))
    return LoadResult(records=combined, status=LoadStatus.OK, sources=reports)


def get_sources(settings: Optional[Settings] = None) -> List[str]:
    settings = settings or get_settings()
    return list(settings.sources) if settings.sources else list(SOURCE_FILES)


def source_signature(sources: Sequence[str], data_dir: Path) -> Tuple[Tuple[str, float], ...]:
    sig: List[Tuple[str, float]] = []
    for source in sources:
        if is_remote(source):
            sig.append((source, 0.0))
            continue
        path = resolve_path(source, data_dir)
        sig.append((source, path.stat().st_mtime if path.exists() else -1.0))
    return tuple(sig)


# ---------------- Public API (Streamlit + FastAPI) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(sources_sig: Tuple[Tuple[str, float], ...], data_dir: str, timeout: float) -> Dict[str, object]:
    result = load_price_records([name for name, _ in sources_sig], data_dir=Path(data_dir), timeout=timeout)
    records = annotate_presidencies(result.records, PRESIDENCIES)
    return {
        "files": [name for name, _ in sources_sig],
        "status": result.status,
        "sources": [asdict(r) for r in result.sources],
        "records": records,
        "items": distinct_items(records),
        "presidencies": distinct_presidencies(records),
        "year_range": year_range(records),
    }


def load_dashboard_data() -> Dict[str, object]:
    settings = get_settings()
    sources = get_sources(settings)
    sig = source_signature(sources, settings.data_dir)
    return _load_dashboard_data_cached(sig, str(settings.data_dir), settings.fetch_timeout)
