"""
Series builder skill.

Takes raw records + chart kind + axis columns and returns the chart-ready
series.  The renderer draws what it receives — no computation needed there.

Series contract:
- bar / line: one SeriesPoint(category, value) per record, input order.
- pie: one PieSlice(name, value) per distinct category, values summed,
  categories in first-seen order.

A malformed cell never aborts the chart: blank categories become "" (or the
pie fallback label) and unparseable values become 0.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from core import config
from core.models import ChartKind, Dataset, PieSlice, Series, SeriesPoint
from core.utils import field_value, stringify, to_number

logger = logging.getLogger("uvicorn.error")


def _build_points(dataset: Dataset, x: str, y: str) -> List[SeriesPoint]:
    return [
        SeriesPoint(
            category=stringify(field_value(r, x), default=""),
            value=to_number(field_value(r, y), default=0.0),
        )
        for r in dataset
    ]


def _build_slices(dataset: Dataset, x: str, y: str, fallback_label: str) -> List[PieSlice]:
    frame = pd.DataFrame({
        "name": [stringify(field_value(r, x), default=fallback_label) for r in dataset],
        "value": [to_number(field_value(r, y), default=0.0) for r in dataset],
    })
    totals = frame.groupby("name", sort=False)["value"].sum()
    return [PieSlice(name=str(name), value=float(value)) for name, value in totals.items()]


def build_series(
    dataset: Dataset,
    kind: ChartKind,
    x: Optional[str],
    y: Optional[str],
    *,
    fallback_label: Optional[str] = None,
) -> Series:
    """Transform *dataset* into the series for *kind*; empty when axes are unset."""
    if not x or not y or not dataset:
        return []

    kind = ChartKind(kind)
    if kind == ChartKind.pie:
        label = config.PIE_FALLBACK_LABEL if fallback_label is None else fallback_label
        series: Series = list(_build_slices(dataset, x, y, label))
    else:
        series = list(_build_points(dataset, x, y))

    logger.debug("Built %s series over %d rows -> %d entries", kind.value, len(dataset), len(series))
    return series


def series_values(series: Series) -> List[float]:
    return [float(item.value) for item in series]


def series_labels(series: Series) -> List[str]:
    return [item.name if isinstance(item, PieSlice) else item.category for item in series]
