from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import pandas as pd


UNKNOWN_PRESIDENCY = "Unknown"
REGION_COLORS = ("rgba(200,200,200,0.1)", "rgba(200,200,200,0.15)")


@dataclass(frozen=True)
class Presidency:
    name: str
    start: int
    end: int

    def contains(self, year: int) -> bool:
        return self.start <= year <= self.end


# Sorted by start. Boundary years belong to both neighbours; lookups take the earlier term.
PRESIDENCIES: List[Presidency] = [
    Presidency("Eisenhower", 1953, 1961),
    Presidency("Kennedy", 1961, 1963),
    Presidency("Johnson", 1963, 1969),
    Presidency("Nixon", 1969, 1974),
    Presidency("Ford", 1974, 1977),
    Presidency("Carter", 1977, 1981),
    Presidency("Reagan", 1981, 1989),
    Presidency("Bush", 1989, 1993),
    Presidency("Clinton", 1993, 2001),
    Presidency("Bush", 2001, 2009),
    Presidency("Obama", 2009, 2017),
    Presidency("Trump", 2017, 2021),
    Presidency("Biden", 2021, 2024),
]


def presidency_for_year(year: int, presidencies: Sequence[Presidency] = PRESIDENCIES) -> str:
    """Name of the first listed presidency whose closed term contains `year`."""
    for presidency in presidencies:
        if presidency.contains(year):
            return presidency.name
    return UNKNOWN_PRESIDENCY


def annotate_presidencies(records: pd.DataFrame, presidencies: Sequence[Presidency] = PRESIDENCIES) -> pd.DataFrame:
    out = records.copy()
    if out.empty:
        out["presidency"] = pd.Series(dtype="object")
        return out
    lookup = {int(y): presidency_for_year(int(y), presidencies) for y in out["year"].unique()}
    out["presidency"] = out["year"].map(lookup)
    return out


def presidency_regions(presidencies: Sequence[Presidency] = PRESIDENCIES) -> List[Dict[str, Any]]:
    """Shaded chart regions, one per term, alternating between two shades."""
    return [
        {
            "xMin": p.start,
            "xMax": p.end,
            "backgroundColor": REGION_COLORS[idx % len(REGION_COLORS)],
            "label": p.name,
        }
        for idx, p in enumerate(presidencies)
    ]
