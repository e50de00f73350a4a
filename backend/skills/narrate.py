"""
Narration skill — derives short factual observations from a built series.

Deterministic heuristics only:
- pie: share of the largest slice.
- bar / line: an exceptional maximum, then the overall trend direction.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from core import config
from core.models import ChartKind, Series
from skills.build_view import series_labels, series_values

logger = logging.getLogger("uvicorn.error")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_insights(
    series: Series,
    kind: ChartKind,
    category_label: Optional[str] = None,
    *,
    exceptional_factor: Optional[float] = None,
    trend_min_points: Optional[int] = None,
) -> List[str]:
    """Return 0-2 insight sentences; exceptional value first, trend second."""
    if not series:
        return []

    if ChartKind(kind) == ChartKind.pie:
        insights = _pie_insights(series)
    else:
        insights = _cartesian_insights(
            series,
            config.EXCEPTIONAL_FACTOR if exceptional_factor is None else exceptional_factor,
            config.TREND_MIN_POINTS if trend_min_points is None else trend_min_points,
        )

    logger.debug("Insights for %s by %r: %s", ChartKind(kind).value, category_label, insights)
    return insights


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _pie_insights(series: Series) -> List[str]:
    values = series_values(series)
    labels = series_labels(series)
    total = sum(values)
    if total == 0 or not math.isfinite(total):
        return []

    # max() keeps the first of equal entries
    top = max(range(len(values)), key=lambda i: values[i])
    share = 100.0 * values[top] / total
    return [f"{labels[top]} accounts for {share:.1f}% of the total"]


def _cartesian_insights(series: Series, factor: float, min_points: int) -> List[str]:
    values = series_values(series)
    labels = series_labels(series)
    insights: List[str] = []

    peak = max(values)
    avg = sum(values) / len(values)
    if peak > factor * avg:
        insights.append(f"{labels[values.index(peak)]} shows exceptional performance")

    if len(values) > min_points:
        # a flat series (last == first) reads as decreasing
        trend = "increasing" if values[-1] > values[0] else "decreasing"
        insights.append(f"Overall trend appears to be {trend}")

    return insights
