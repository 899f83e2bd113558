from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FilterCriteriaModel(BaseModel):
    selected_items: List[str] = Field(default_factory=list)
    selected_presidencies: List[str] = Field(default_factory=list)
    year_start: Optional[int] = None
    year_end: Optional[int] = None
    adjust_inflation: bool = False


class PresidencyModel(BaseModel):
    name: str
    start: int
    end: int


class MetaListResponse(BaseModel):
    values: List[str]


class MetaPresidenciesResponse(BaseModel):
    values: List[str]
    terms: List[PresidencyModel]


class YearRangeResponse(BaseModel):
    min: int
    max: int
