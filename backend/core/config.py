"""
Named configuration constants.

Every value can be overridden through the environment (or a ``.env`` file).
"""

from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# Ingestion caps the dataset before it reaches the core
MAX_ROWS = int(os.getenv("MAX_ROWS", "100"))
PREVIEW_ROWS = int(os.getenv("PREVIEW_ROWS", "5"))

# Type classification thresholds (fraction of non-empty values)
NUMERIC_THRESHOLD = float(os.getenv("NUMERIC_THRESHOLD", "0.8"))
DATE_THRESHOLD = float(os.getenv("DATE_THRESHOLD", "1.0"))

# Insight heuristics
EXCEPTIONAL_FACTOR = float(os.getenv("EXCEPTIONAL_FACTOR", "2.0"))
TREND_MIN_POINTS = int(os.getenv("TREND_MIN_POINTS", "3"))

PIE_FALLBACK_LABEL = os.getenv("PIE_FALLBACK_LABEL", "Unknown")

CHART_COLORS: List[str] = _env_list("CHART_COLORS", [
    "hsl(var(--chart-1))",
    "hsl(var(--chart-2))",
    "hsl(var(--chart-3))",
    "hsl(var(--chart-4))",
    "hsl(var(--chart-5))",
])
