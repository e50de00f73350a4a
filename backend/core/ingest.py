"""
File ingestion — decodes an uploaded file into a capped list of records.

CSV cells stay strings, Excel cells keep their types, JSON is taken as-is,
and XML rows are the repeated children of the root element.
"""

from __future__ import annotations

import io
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from . import config
from .utils import df_to_records_safe

logger = logging.getLogger("uvicorn.error")

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls", "json", "xml")


class IngestError(ValueError):
    """Raised when an uploaded file cannot be turned into records."""


def file_extension(filename: str) -> str:
    return (filename.rsplit(".", 1)[1].lower() if "." in filename else "").strip()


# ---------------------------------------------------------------------------
# Per-format readers
# ---------------------------------------------------------------------------

def _read_csv(content: bytes) -> List[Dict[str, Any]]:
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise IngestError(f"Error parsing CSV: {e}") from e
    return df_to_records_safe(df)


def _read_excel(content: bytes) -> List[Dict[str, Any]]:
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0)
    except Exception as e:
        raise IngestError("Failed to parse Excel file") from e

    # Blank cells are left out of the row, like a sparse sheet export
    records = df_to_records_safe(df)
    return [{k: v for k, v in r.items() if v is not None} for r in records]


def _read_json(content: bytes) -> List[Dict[str, Any]]:
    try:
        data = json.loads(content.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise IngestError("Failed to parse JSON file: Invalid JSON format") from e

    rows = data if isinstance(data, list) else [data]
    if not all(isinstance(r, dict) for r in rows):
        raise IngestError("Failed to parse JSON file: rows must be objects")
    return rows


def _read_xml(content: bytes) -> List[Dict[str, Any]]:
    try:
        df = pd.read_xml(io.BytesIO(content), parser="lxml")
    except Exception as e:
        raise IngestError("Failed to parse XML file: Invalid XML format") from e
    return df_to_records_safe(df)


_READERS: Dict[str, Callable[[bytes], List[Dict[str, Any]]]] = {
    "csv": _read_csv,
    "xlsx": _read_excel,
    "xls": _read_excel,
    "json": _read_json,
    "xml": _read_xml,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_dataset(
    content: bytes,
    filename: str,
    *,
    max_rows: Optional[int] = None,
) -> Tuple[List[Dict[str, Any]], bool]:
    """Decode *content* by the extension of *filename*.

    Returns the capped records and whether any rows were dropped.
    """
    ext = file_extension(filename)
    reader = _READERS.get(ext)
    if reader is None:
        raise IngestError(
            "Please upload a CSV, Excel (.xlsx, .xls), JSON (.json), or XML (.xml) file"
        )

    limit = config.MAX_ROWS if max_rows is None else max_rows
    records = reader(content)
    truncated = len(records) > limit
    if truncated:
        logger.info("Dataset %r truncated from %d to %d rows", filename, len(records), limit)
    return records[:limit], truncated


def load_dataset(
    content: bytes,
    filename: str,
    *,
    max_rows: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Decode *content* and cap the row count."""
    records, _ = read_dataset(content, filename, max_rows=max_rows)
    return records
