"""
Deterministic axis recommendation — no LLM.

suggest_axes() fills the category (X) and value (Y) columns the caller has
not picked yet.  An existing choice is never replaced.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from core.models import AxisSelection


def _first_in_order(columns: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    wanted = set(candidates)
    for c in columns:
        if c in wanted:
            return c
    # candidates that are not in the canonical column list still count
    return candidates[0] if candidates else None


def suggest_axes(
    columns: List[str],
    numeric_columns: List[str],
    text_columns: List[str],
    current: Optional[AxisSelection] = None,
) -> AxisSelection:
    """Return *current* with unset axes filled from the candidate lists."""
    current = current or AxisSelection()
    x = current.x
    y = current.y

    if not x and text_columns:
        x = _first_in_order(columns, text_columns)
    if not y and numeric_columns:
        y = _first_in_order(columns, numeric_columns)

    return AxisSelection(x=x or None, y=y or None)
