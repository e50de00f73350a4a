"""
Dataset profiling skill.

Builds the preview DataProfile shown after upload: counts, column types,
example values and the first few rows.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from core import config
from core.models import ColumnInfo, DataProfile, Dataset
from core.utils import column_names, column_values, example_values, field_value, is_blank, stringify
from skills.classify import classify_columns


def preview_rows(dataset: Dataset, columns: List[str], limit: int) -> List[Dict[str, str]]:
    """First *limit* rows rendered as strings, blanks as ""."""
    return [
        {c: stringify(field_value(r, c)) for c in columns}
        for r in list(dataset)[:limit]
    ]


def build_profile(
    dataset: Dataset,
    table_name: str,
    *,
    preview_limit: Optional[int] = None,
    truncated: bool = False,
) -> DataProfile:
    """
    Build a DataProfile from a list of records.

    The canonical column list comes from the first record; each column is
    typed with classify_columns().  *truncated* is reported by ingestion, which
    is the only place rows are dropped.
    """
    limit = config.PREVIEW_ROWS if preview_limit is None else preview_limit
    columns = column_names(dataset)
    types = classify_columns(dataset)

    infos: List[ColumnInfo] = []
    for c in columns:
        values = column_values(dataset, c)
        infos.append(ColumnInfo(
            name=c,
            type=types[c],
            non_empty=sum(1 for v in values if not is_blank(v)),
            examples=example_values(values, 3),
        ))

    return DataProfile(
        table_name=table_name,
        row_count=len(dataset),
        columns=infos,
        preview_rows=preview_rows(dataset, columns, limit),
        truncated=truncated,
    )
