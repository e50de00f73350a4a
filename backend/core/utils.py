"""
Shared value helpers for loosely-typed records.

Pure functions — no I/O, no side effects.
"""

from __future__ import annotations

import math
import re
import warnings
from datetime import date, datetime
from typing import Any, List, Mapping

import numpy as np
import pandas as pd

from .models import Dataset, Record


# ---------------------------------------------------------------------------
# Record access
# ---------------------------------------------------------------------------

def column_names(dataset: Dataset) -> List[str]:
    """Canonical column list: the keys of the first record."""
    if not dataset or not isinstance(dataset[0], Mapping):
        return []
    return [str(k) for k in dataset[0].keys()]


def field_value(record: Record, column: str) -> Any:
    """Null-safe accessor; missing keys and non-mapping rows read as None."""
    if not isinstance(record, Mapping):
        return None
    return record.get(column)


def column_values(dataset: Dataset, column: str) -> List[Any]:
    return [field_value(r, column) for r in dataset]


def is_blank(val: Any) -> bool:
    """True for None, NaN/NaT/NA and the empty string."""
    if val is None:
        return True
    if isinstance(val, str):
        return val == ""
    if isinstance(val, (list, tuple, dict, set)):
        return False
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Permissive numeric parsing
# ---------------------------------------------------------------------------

def numeric_value(val: Any) -> float:
    """Parse a single value as a number; NaN when it is not one.

    Whitespace-only strings read as 0 and integer literals may carry a
    ``0x``/``0o``/``0b`` prefix.  Non-finite values are not numbers.
    """
    parsed = _parse_numeric(val)
    return parsed if math.isfinite(parsed) else np.nan


def _parse_numeric(val: Any) -> float:
    if val is None:
        return np.nan
    if isinstance(val, (bool, np.bool_)):
        return float(val)
    if isinstance(val, (int, float, np.number)):
        try:
            return float(val)
        except OverflowError:
            return np.nan
    if not isinstance(val, str):
        return np.nan

    text = val.strip()
    if not text:
        return 0.0
    if "_" in text:
        return np.nan

    lower = text.lower()
    if lower[:2] in ("0x", "0o", "0b"):
        try:
            return float(int(text, 0))
        except (ValueError, OverflowError):
            return np.nan
    if lower.lstrip("+-") in ("nan", "inf", "infinity"):
        return np.nan

    try:
        return float(text)
    except ValueError:
        return np.nan


def is_numeric_value(val: Any) -> bool:
    return not math.isnan(numeric_value(val))


def to_number(val: Any, default: float = 0.0) -> float:
    """Numeric coercion with a fallback for anything unparseable."""
    parsed = numeric_value(val)
    return default if math.isnan(parsed) else parsed


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_RELATIVE_DATES = {"now", "today", "tomorrow", "yesterday"}
_DIGIT_GROUP = re.compile(r"\d+")


def is_date_value(val: Any) -> bool:
    """True when the value is (or parses as) a calendar date.

    Strings need either two digit groups ("2024-01-05", "Jan 5, 2024") or a
    four-digit year ("May 2024"); bare tokens like "Jan" or "1st" and
    relative keywords like "now" are not dates.
    """
    if isinstance(val, (datetime, date)):
        return True
    if not isinstance(val, str):
        return False
    text = val.strip()
    if not text or text.lower() in _RELATIVE_DATES:
        return False
    groups = _DIGIT_GROUP.findall(text)
    if len(groups) < 2 and not any(len(g) == 4 for g in groups):
        return False
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(ts)


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def stringify(val: Any, default: str = "") -> str:
    """Render a cell as a label; blanks fall back to *default*."""
    if is_blank(val):
        return default
    if isinstance(val, (bool, np.bool_)):
        return "true" if val else "false"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    if isinstance(val, (datetime, date)):
        return val.isoformat()
    return str(val)


def example_values(values: List[Any], k: int = 3) -> List[str]:
    """Return up to *k* unique non-blank example values as short strings."""
    seen: List[str] = []
    for v in values:
        if is_blank(v):
            continue
        s = stringify(v)[:80]
        if s not in seen:
            seen.append(s)
        if len(seen) >= k:
            break
    return seen


# ---------------------------------------------------------------------------
# DataFrame safety
# ---------------------------------------------------------------------------

def df_json_safe(df: pd.DataFrame) -> pd.DataFrame:
    """Replace +/-inf -> NaN, then NaN -> None so JSON serialization works."""
    if df.empty:
        return df
    tmp = df.replace([np.inf, -np.inf], np.nan)
    tmp = tmp.astype(object)
    return tmp.where(pd.notna(tmp), None)


def df_to_records_safe(df: pd.DataFrame) -> list[dict]:
    """Convert DataFrame to list of dicts with JSON-safe values."""
    return df_json_safe(df).to_dict(orient="records")