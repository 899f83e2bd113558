from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from pricetrends.config import Settings, get_settings


logger = logging.getLogger(__name__)

# CPI-U, U.S. city average, all items, annual average (1982-84=100).
CPI_U_ANNUAL: Dict[int, float] = {
    1953: 26.7, 1954: 26.9, 1955: 26.8, 1956: 27.2, 1957: 28.1, 1958: 28.9, 1959: 29.1,
    1960: 29.6, 1961: 29.9, 1962: 30.2, 1963: 30.6, 1964: 31.0, 1965: 31.5, 1966: 32.4,
    1967: 33.4, 1968: 34.8, 1969: 36.7, 1970: 38.8, 1971: 40.5, 1972: 41.8, 1973: 44.4,
    1974: 49.3, 1975: 53.8, 1976: 56.9, 1977: 60.6, 1978: 65.2, 1979: 72.6, 1980: 82.4,
    1981: 90.9, 1982: 96.5, 1983: 99.6, 1984: 103.9, 1985: 107.6, 1986: 109.6, 1987: 113.6,
    1988: 118.3, 1989: 124.0, 1990: 130.7, 1991: 136.2, 1992: 140.3, 1993: 144.5, 1994: 148.2,
    1995: 152.4, 1996: 156.9, 1997: 160.5, 1998: 163.0, 1999: 166.6, 2000: 172.2, 2001: 177.1,
    2002: 179.9, 2003: 184.0, 2004: 188.9, 2005: 195.3, 2006: 201.6, 2007: 207.342,
    2008: 215.303, 2009: 214.537, 2010: 218.056, 2011: 224.939, 2012: 229.594, 2013: 232.957,
    2014: 236.736, 2015: 237.017, 2016: 240.007, 2017: 245.120, 2018: 251.107, 2019: 255.657,
    2020: 258.811, 2021: 270.970, 2022: 292.655, 2023: 304.702, 2024: 313.689,
}


@dataclass(frozen=True)
class PriceIndex:
    values: Dict[int, float] = field(default_factory=dict)

    def get(self, year: int) -> Optional[float]:
        value = self.values.get(int(year))
        return value if value else None

    @property
    def latest(self) -> Optional[float]:
        """Index value at the most recent known year."""
        if not self.values:
            return None
        return self.values[max(self.values)]

    @classmethod
    def default(cls) -> "PriceIndex":
        return cls(dict(CPI_U_ANNUAL))

    @classmethod
    def from_csv(cls, path: Path) -> "PriceIndex":
        df = pd.read_csv(path)
        cols = {str(c).strip().lower(): c for c in df.columns}
        year_col = cols.get("year")
        value_col = next((cols[k] for k in ("value", "cpi", "index") if k in cols), None)
        if year_col is None or value_col is None:
            raise ValueError(f"{path}: expected 'year' and 'value' columns, got {list(df.columns)}")
        df = df[[year_col, value_col]].apply(pd.to_numeric, errors="coerce").dropna()
        return cls({int(y): float(v) for y, v in zip(df[year_col], df[value_col])})


@lru_cache(maxsize=2)
def _load_price_index(cpi_csv: Optional[str]) -> PriceIndex:
    if cpi_csv is None:
        return PriceIndex.default()
    index = PriceIndex.from_csv(Path(cpi_csv))
    logger.info("Loaded %d price index values from %s", len(index.values), cpi_csv)
    return index


def load_price_index(settings: Optional[Settings] = None) -> PriceIndex:
    settings = settings or get_settings()
    return _load_price_index(str(settings.cpi_csv) if settings.cpi_csv else None)


def adjust_for_inflation(records: pd.DataFrame, index: PriceIndex) -> pd.DataFrame:
    """Restate prices in latest-year terms: price * latest / index[year].

    Records whose year has no index value keep their price. Not idempotent:
    apply at most once to a given set of records.
    """
    out = records.copy()
    latest = index.latest
    if out.empty or latest is None:
        return out
    at_year = out["year"].map(lambda y: index.get(y))
    known = at_year.notna()
    out.loc[known, "price"] = out.loc[known, "price"] * latest / at_year[known].astype(float)
    return out
