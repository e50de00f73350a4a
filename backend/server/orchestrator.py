"""
Chart orchestrator — runs the deterministic chart pipeline.

classify -> suggest axes -> build series -> narrate, then attaches the
presentation fields (title, subtitle, palette) the renderer needs.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from core import config
from core.models import AxisSelection, ChartKind, ChartResult, Dataset
from core.utils import column_names
from skills.build_view import build_series
from skills.classify import classify_columns, split_columns
from skills.narrate import generate_insights
from skills.recommend import suggest_axes

logger = logging.getLogger("uvicorn.error")


def chart_title(source_label: str, kind: ChartKind) -> str:
    if not source_label:
        return "Data Visualization"
    return f"{source_label} - {kind.value.capitalize()} Chart"


def chart_subtitle(axes: AxisSelection) -> str:
    return f"{axes.x} vs {axes.y}" if axes.resolved else "Chart Analysis"


def chart_colors(kind: ChartKind, n_entries: int, palette: Optional[List[str]] = None) -> List[str]:
    """Pie slices cycle through the palette; bar and line use a single colour."""
    palette = palette or config.CHART_COLORS
    if not palette:
        return []
    if kind == ChartKind.pie:
        return [palette[i % len(palette)] for i in range(n_entries)]
    if kind == ChartKind.line:
        return [palette[1 % len(palette)]]
    return [palette[0]]


def generate_chart(
    dataset: Dataset,
    kind: ChartKind = ChartKind.bar,
    x: Optional[str] = None,
    y: Optional[str] = None,
    *,
    source_label: str = "",
) -> ChartResult:
    """Run the full pipeline for one (dataset, kind, selection) tuple."""
    kind = ChartKind(kind)
    columns = column_names(dataset)
    types = classify_columns(dataset)
    numeric, category = split_columns(types)

    axes = suggest_axes(columns, numeric, category, AxisSelection(x=x, y=y))
    series = build_series(dataset, kind, axes.x, axes.y)
    insights = generate_insights(series, kind, axes.x)

    logger.info(
        "Chart %s for %r: x=%r y=%r entries=%d insights=%d",
        kind.value, source_label, axes.x, axes.y, len(series), len(insights),
    )

    return ChartResult(
        kind=kind,
        axes=axes,
        column_types=types,
        series=series,
        insights=insights,
        title=chart_title(source_label, kind),
        subtitle=chart_subtitle(axes),
        colors=chart_colors(kind, len(series)),
    )
