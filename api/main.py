from __future__ import annotations

from dataclasses import asdict
import logging
import math
from typing import Any, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import (
    FilterCriteriaModel,
    MetaListResponse,
    MetaPresidenciesResponse,
    PresidencyModel,
    YearRangeResponse,
)
from pricetrends.charts import price_chart, to_vega_spec
from pricetrends.config import configure_logging
from pricetrends.data import LoadStatus, load_dashboard_data
from pricetrends.filters import FilterCriteria, apply_filters, normalize_criteria, search_items
from pricetrends.inflation import adjust_for_inflation, load_price_index
from pricetrends.presidencies import PRESIDENCIES
from pricetrends.series import build_series, to_chart_payload


configure_logging()
app = FastAPI(title="Household Price Trends API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

NO_DATA_MESSAGES = {
    LoadStatus.NO_RESOURCES: "No spreadsheet sources are configured.",
    LoadStatus.ALL_FAILED: "No data was loaded: every spreadsheet failed to load.",
    LoadStatus.NO_VALID_ROWS: "No data was loaded: the spreadsheets contain no valid Year/Average rows.",
}


def _criteria_from_model(model: FilterCriteriaModel) -> FilterCriteria:
    return normalize_criteria(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        ),
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _no_data(data_ctx: Dict[str, Any]) -> JSONResponse | None:
    status = data_ctx.get("status")
    if status is LoadStatus.OK:
        return None
    return JSONResponse(
        status_code=503,
        content={"error": NO_DATA_MESSAGES.get(status, "No data was loaded."), "status": getattr(status, "value", None)},
    )


def _filtered_records(filters: FilterCriteriaModel, data_ctx: Dict[str, Any]) -> pd.DataFrame:
    records: pd.DataFrame = data_ctx.get("records", pd.DataFrame())
    out = apply_filters(records, _criteria_from_model(filters))
    if filters.adjust_inflation:
        out = adjust_for_inflation(out, load_price_index())
    return out


@app.get("/meta/items")
def meta_items(q: str = Query(default="")):
    try:
        data_ctx = load_dashboard_data()
        items = search_items(data_ctx.get("items", []), q)
        return _json(MetaListResponse(values=items).model_dump())
    except Exception as exc:
        logger.exception("meta_items failed")
        return _error(exc)


@app.get("/meta/presidencies")
def meta_presidencies():
    try:
        data_ctx = load_dashboard_data()
        terms = [PresidencyModel(**asdict(p)) for p in PRESIDENCIES]
        return _json(MetaPresidenciesResponse(values=data_ctx.get("presidencies", []), terms=terms).model_dump())
    except Exception as exc:
        logger.exception("meta_presidencies failed")
        return _error(exc)


@app.get("/meta/years")
def meta_years():
    try:
        data_ctx = load_dashboard_data()
        lo, hi = data_ctx.get("year_range", (0, 0))
        return _json(YearRangeResponse(min=lo, max=hi).model_dump())
    except Exception as exc:
        logger.exception("meta_years failed")
        return _error(exc)


@app.post("/chart")
def chart(filters: FilterCriteriaModel):
    try:
        data_ctx = load_dashboard_data()
        unavailable = _no_data(data_ctx)
        if unavailable is not None:
            return unavailable
        filtered = _filtered_records(filters, data_ctx)
        if filtered.empty:
            logger.warning("No data to display after filtering")
            return JSONResponse(status_code=404, content={"error": "No data matches the selected filters."})
        chart_series = build_series(filtered)
        payload = to_chart_payload(chart_series, PRESIDENCIES)
        payload["inflation_adjusted"] = filters.adjust_inflation
        payload["vega_spec"] = to_vega_spec(price_chart(chart_series, PRESIDENCIES, inflation_adjusted=filters.adjust_inflation))
        return _json(payload)
    except Exception as exc:
        logger.exception("chart failed")
        return _error(exc)


@app.get("/debug/sources")
def debug_sources():
    try:
        data_ctx = load_dashboard_data()
        status = data_ctx.get("status")
        return _json(
            {
                "status": getattr(status, "value", None),
                "row_count": int(len(data_ctx.get("records", pd.DataFrame()))),
                "sources": data_ctx.get("sources", []),
            }
        )
    except Exception as exc:
        logger.exception("debug_sources failed")
        return _error(exc)


@app.post("/export")
def export_records(filters: FilterCriteriaModel):
    data_ctx = load_dashboard_data()
    export_df = _filtered_records(filters, data_ctx)
    filename = "prices_adjusted.csv" if filters.adjust_inflation else "prices.csv"
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
