"""
Column classification skill — assigns each column a coarse semantic type.

Only non-empty values are sampled.  A column is numeric when at least
NUMERIC_THRESHOLD of them parse as numbers, date-like when all of them parse
as calendar dates, and text otherwise.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import pandas as pd

from core import config
from core.models import ColumnType, Dataset
from core.utils import (
    column_names,
    column_values,
    is_blank,
    is_date_value,
    is_numeric_value,
)

logger = logging.getLogger("uvicorn.error")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_column(
    dataset: Dataset,
    column: str,
    *,
    numeric_threshold: float | None = None,
    date_threshold: float | None = None,
) -> ColumnType:
    """Classify one column of *dataset* as numeric, date, text or empty."""
    if numeric_threshold is None:
        numeric_threshold = config.NUMERIC_THRESHOLD
    if date_threshold is None:
        date_threshold = config.DATE_THRESHOLD

    present = pd.Series(
        [v for v in column_values(dataset, column) if not is_blank(v)],
        dtype=object,
    )
    if present.empty:
        return ColumnType.empty

    numeric_ratio = float(present.map(is_numeric_value).mean())
    if numeric_ratio >= numeric_threshold:
        return ColumnType.numeric

    date_ratio = float(present.map(is_date_value).mean())
    if date_ratio >= date_threshold:
        return ColumnType.date

    logger.debug(
        "Column %r classified as text (numeric=%.2f, date=%.2f)",
        column, numeric_ratio, date_ratio,
    )
    return ColumnType.text


def classify_columns(dataset: Dataset, **thresholds: float) -> Dict[str, ColumnType]:
    """Classify every canonical column, keeping column order."""
    return {c: classify_column(dataset, c, **thresholds) for c in column_names(dataset)}


def split_columns(types: Dict[str, ColumnType]) -> Tuple[List[str], List[str]]:
    """Return (numeric columns, category candidates) in column order.

    Category candidates are every non-numeric column that has values, so
    date-like columns can serve as the X axis.
    """
    numeric = [c for c, t in types.items() if t == ColumnType.numeric]
    category = [c for c, t in types.items() if t in (ColumnType.text, ColumnType.date)]
    return numeric, category
