from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd


@dataclass(frozen=True)
class FilterCriteria:
    selected_items: List[str] = field(default_factory=list)
    selected_presidencies: List[str] = field(default_factory=list)
    year_start: Optional[int] = None
    year_end: Optional[int] = None

    def is_empty(self) -> bool:
        return (
            not self.selected_items
            and not self.selected_presidencies
            and self.year_start is None
            and self.year_end is None
        )


def _as_year(value: object) -> Optional[int]:
    # Blank, non-numeric and zero years all mean "unbounded".
    if value is None:
        return None
    try:
        year = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return None
    return year or None


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v) for v in values if v is not None and str(v) != ""]


def normalize_criteria(raw: dict) -> FilterCriteria:
    year_range_raw = raw.get("year_range") or {}
    year_start = raw.get("year_start", year_range_raw.get("start"))
    year_end = raw.get("year_end", year_range_raw.get("end"))
    return FilterCriteria(
        selected_items=_as_str_list(raw.get("selected_items")),
        selected_presidencies=_as_str_list(raw.get("selected_presidencies")),
        year_start=_as_year(year_start),
        year_end=_as_year(year_end),
    )


def apply_filters(records: pd.DataFrame, criteria: Optional[FilterCriteria]) -> pd.DataFrame:
    """Keep the records passing every active criterion, in input order.

    With nothing constrained the input frame itself is returned.
    """
    if criteria is None or criteria.is_empty():
        return records

    mask = pd.Series(True, index=records.index)
    if criteria.selected_items:
        mask &= records["item"].isin(set(criteria.selected_items))
    if criteria.year_start is not None:
        mask &= records["year"] >= criteria.year_start
    if criteria.year_end is not None:
        mask &= records["year"] <= criteria.year_end
    if criteria.selected_presidencies:
        presidency = records["presidency"] if "presidency" in records.columns else pd.Series(pd.NA, index=records.index)
        mask &= presidency.isin(set(criteria.selected_presidencies))
    return records[mask]


def _distinct(records: pd.DataFrame, col: str) -> List[str]:
    if records.empty or col not in records.columns:
        return []
    return sorted(str(x) for x in records[col].dropna().unique())


def distinct_items(records: pd.DataFrame) -> List[str]:
    return _distinct(records, "item")


def distinct_presidencies(records: pd.DataFrame) -> List[str]:
    return _distinct(records, "presidency")


def year_range(records: pd.DataFrame) -> Tuple[int, int]:
    if records.empty or "year" not in records.columns:
        return 0, 0
    return int(records["year"].min()), int(records["year"].max())


def search_items(items: Sequence[str], term: Optional[str]) -> List[str]:
    if not term or not term.strip():
        return list(items)
    q = term.strip().lower()
    return [item for item in items if q in item.lower()]
