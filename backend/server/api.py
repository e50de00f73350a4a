"""
Chart API routes — mounted as a sub-router on the main FastAPI app.

POST /api/charts builds the series + insights for a stored table.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from core.models import ChartRequest
from core.storage import get_session, get_session_meta
from server.orchestrator import generate_chart

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["charts"])


def _require_session_id(request: Request) -> str:
    sid = request.headers.get("X-Session-Id")
    if not sid:
        raise HTTPException(status_code=400, detail="Missing X-Session-Id header.")
    return sid


def _parse_created_at(meta: dict) -> float:
    created = meta.get("created_at") if isinstance(meta, dict) else None
    if isinstance(created, str) and created:
        try:
            return datetime.fromisoformat(created.replace("Z", "+00:00")).timestamp()
        except ValueError:
            return 0.0
    return 0.0


def _pick_table_name(sess: dict, meta_store: dict, requested: Optional[str] = None) -> str:
    """Pick the explicitly requested table or the most recent upload."""
    if requested:
        if requested not in sess:
            raise HTTPException(status_code=404, detail=f"Table '{requested}' not found")
        return requested

    if not sess:
        raise HTTPException(status_code=400, detail="No tables uploaded.")

    if meta_store:
        return max(sess.keys(), key=lambda name: _parse_created_at(meta_store.get(name, {})))

    return next(reversed(sess.keys()))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/charts")
async def create_chart(request: Request, body: ChartRequest):
    """Build a chart description (series, insights, title, palette) for a table."""
    sid = _require_session_id(request)
    sess = get_session(sid)
    meta_store = get_session_meta(sid)

    table_name = _pick_table_name(sess, meta_store, body.table)
    source_label = meta_store.get(table_name, {}).get("file_name", table_name)

    try:
        result = generate_chart(
            sess[table_name],
            body.kind,
            body.x,
            body.y,
            source_label=source_label,
        )
        # rendering here keeps serialization failures inside the 400 path
        return JSONResponse(content={"table": table_name, **result.model_dump(mode="json")})
    except Exception:
        logger.exception("Chart generation failed for %r", table_name)
        raise HTTPException(status_code=400, detail="Request failed")
