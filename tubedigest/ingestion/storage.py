"""Supabase storage helpers for the processed-video history."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast

from supabase import Client, create_client

from tubedigest.config import settings

HISTORY_TABLE = "history"


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
    )


def save_history(client: Client, entry: dict[str, Any]) -> dict[str, Any]:
    """Insert or replace the history entry for ``entry["video_id"]`` (last write wins).

    The stored row is stamped with ``processed_at`` and returned.
    """
    row = {**entry, "processed_at": datetime.now(UTC).isoformat()}
    client.table(HISTORY_TABLE).upsert(row, on_conflict="video_id").execute()
    return row


def list_history(client: Client, limit: int = 50) -> list[dict[str, Any]]:
    """Return history entries, most recently processed first."""
    result = (
        client.table(HISTORY_TABLE)
        .select("*")
        .order("processed_at", desc=True)
        .limit(limit)
        .execute()
    )
    return cast(list[dict[str, Any]], result.data)


def get_history(client: Client, video_id: str) -> dict[str, Any] | None:
    result = client.table(HISTORY_TABLE).select("*").eq("video_id", video_id).execute()
    rows = cast(list[dict[str, Any]], result.data)
    return rows[0] if rows else None


def delete_history(client: Client, video_id: str) -> bool:
    """Delete the entry for *video_id*; returns False if there was none."""
    result = client.table(HISTORY_TABLE).delete().eq("video_id", video_id).execute()
    return bool(result.data)
