"""
Core Pydantic models for the chart insight engine.

All domain types live here so every module shares the same vocabulary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

# A record is one row as a name -> scalar mapping; rows need not share keys.
Record = Mapping[str, Any]
Dataset = Sequence[Record]


# ---------------------------------------------------------------------------
# Column types & profile
# ---------------------------------------------------------------------------

class ColumnType(str, Enum):
    numeric = "numeric"
    date = "date"
    text = "text"
    empty = "empty"


class ColumnInfo(BaseModel):
    name: str
    type: ColumnType = ColumnType.empty
    non_empty: int = 0
    examples: List[str] = Field(default_factory=list)


class DataProfile(BaseModel):
    table_name: str
    row_count: int
    columns: List[ColumnInfo]
    preview_rows: List[Dict[str, str]] = Field(default_factory=list)
    truncated: bool = False


# ---------------------------------------------------------------------------
# Chart kinds, axes and series
# ---------------------------------------------------------------------------

class ChartKind(str, Enum):
    bar = "bar"
    line = "line"
    pie = "pie"


class AxisSelection(BaseModel):
    x: Optional[str] = None     # category column
    y: Optional[str] = None     # value column

    @property
    def resolved(self) -> bool:
        return bool(self.x) and bool(self.y)


class SeriesPoint(BaseModel):
    category: str
    value: float


class PieSlice(BaseModel):
    name: str
    value: float


Series = List[Union[SeriesPoint, PieSlice]]


class ChartResult(BaseModel):
    kind: ChartKind
    axes: AxisSelection
    column_types: Dict[str, ColumnType] = Field(default_factory=dict)
    series: List[Union[SeriesPoint, PieSlice]] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    title: str = ""
    subtitle: str = ""
    colors: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# API request / response models
# ---------------------------------------------------------------------------

class ChartRequest(BaseModel):
    table: Optional[str] = None
    kind: ChartKind = ChartKind.bar
    x: Optional[str] = None
    y: Optional[str] = None


class UploadResponse(BaseModel):
    ok: bool = True
    table: str
    rows: int
    columns: List[str]
    profile: DataProfile
