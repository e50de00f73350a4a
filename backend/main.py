from fastapi import FastAPI, UploadFile, File, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from core.ingest import IngestError, file_extension, read_dataset
from core.models import UploadResponse
from core.storage import get_session, get_session_hashes, get_session_meta, unique_table_name
from server.api import router as chart_router
from skills.profile import build_profile
from dotenv import load_dotenv
import logging
import hashlib
import json
from datetime import datetime, timezone

logger = logging.getLogger("uvicorn.error")
load_dotenv()
app = FastAPI(title="Chart Insights", description="Turn small tables into charts with insights")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount the chart API router
app.include_router(chart_router)


def require_session_id(request: Request) -> str:
    sid = request.headers.get("X-Session-Id")
    if not sid:
        raise HTTPException(status_code=400, detail="Missing X-Session-Id header.")
    return sid


def _sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _log_response(ctx: str, payload) -> None:
    """Pretty-print JSON-able payloads; fall back to str()."""
    try:
        logger.info("%s response: %s", ctx, json.dumps(payload, indent=2, default=str))
    except (TypeError, ValueError):
        logger.info("%s response (non-serializable): %s", ctx, str(payload))


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/upload")
async def upload(request: Request, file: UploadFile = File(...)):
    sid = require_session_id(request)
    content = await file.read()

    filename = file.filename or "table.csv"

    # duplicate detection (by content hash)
    file_hash = _sha256_bytes(content)
    sess_hashes = get_session_hashes(sid)
    if file_hash in sess_hashes:
        dup_resp = {
            "ok": False,
            "duplicate": True,
            "table": sess_hashes[file_hash],
            "detail": "Duplicate upload: this file was already uploaded for this session.",
        }
        _log_response("UPLOAD (duplicate)", dup_resp)
        return JSONResponse(status_code=409, content=dup_resp)

    try:
        records, truncated = read_dataset(content, filename)
    except IngestError as e:
        logger.warning("Failed to ingest %r: %s", filename, e)
        raise HTTPException(status_code=400, detail=str(e))

    sess = get_session(sid)
    meta_store = get_session_meta(sid)
    name = unique_table_name(sid, filename)

    profile = build_profile(records, name, truncated=truncated)
    sess[name] = records
    sess_hashes[file_hash] = name
    meta_store[name] = {
        "file_name": filename,
        "file_ext": file_extension(filename),
        "file_size": len(content),
        "created_at": datetime.now(timezone.utc).isoformat(),
        "n_rows": profile.row_count,
        "n_cols": len(profile.columns),
        "columns": [c.name for c in profile.columns],
        "types": {c.name: c.type.value for c in profile.columns},
        "truncated": truncated,
    }

    resp = UploadResponse(
        table=name,
        rows=profile.row_count,
        columns=[c.name for c in profile.columns],
        profile=profile,
    ).model_dump(mode="json")
    _log_response("UPLOAD", resp)
    return resp


@app.get("/tables")
async def tables(request: Request):
    sid = require_session_id(request)
    sess = get_session(sid)
    meta_store = get_session_meta(sid)

    tables_info = [{"name": name, **meta_store.get(name, {})} for name in sess]
    return {"tables": tables_info}


@app.get("/table/{table_name}/preview")
async def table_preview(request: Request, table_name: str):
    """Preview a stored table: counts, column types and the first rows."""
    sid = require_session_id(request)
    sess = get_session(sid)

    if table_name not in sess:
        raise HTTPException(status_code=404, detail=f"Table '{table_name}' not found")

    truncated = get_session_meta(sid).get(table_name, {}).get("truncated", False)
    profile = build_profile(sess[table_name], table_name, truncated=truncated)
    return profile.model_dump(mode="json")
