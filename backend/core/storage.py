"""
In-memory session storage for uploaded datasets.

Nothing is persisted; a restart clears every session.
"""

from __future__ import annotations

from typing import Any, Dict, List

# session_id -> {table_name: [record, ...]}
SESSIONS: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}

# session_id -> {content hash: table_name}
SESS_HASHES: Dict[str, Dict[str, str]] = {}

# session_id -> {table_name: metadata}
SESS_META: Dict[str, Dict[str, dict]] = {}


def get_session(session_id: str) -> Dict[str, List[Dict[str, Any]]]:
    if session_id not in SESSIONS:
        SESSIONS[session_id] = {}
    return SESSIONS[session_id]


def get_session_hashes(session_id: str) -> Dict[str, str]:
    if session_id not in SESS_HASHES:
        SESS_HASHES[session_id] = {}
    return SESS_HASHES[session_id]


def get_session_meta(session_id: str) -> Dict[str, dict]:
    """Return (and lazily init) the metadata map for this session."""
    if session_id not in SESS_META:
        SESS_META[session_id] = {}
    return SESS_META[session_id]


def unique_table_name(session_id: str, filename: str) -> str:
    """Derive a table name from *filename* that is free in this session."""
    sess = get_session(session_id)
    base = filename.rsplit(".", 1)[0] if filename else "table"
    base = base or "table"
    name = base
    i = 1
    while name in sess:
        i += 1
        name = f"{base}_{i}"
    return name


def clear_sessions() -> None:
    SESSIONS.clear()
    SESS_HASHES.clear()
    SESS_META.clear()
