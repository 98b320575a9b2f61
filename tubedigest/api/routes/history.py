"""History endpoints: save, list, fetch and delete processed videos."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response

from tubedigest.api.models import HistoryEntry, SaveHistoryRequest
from tubedigest.ingestion.storage import (
    delete_history,
    get_history,
    get_supabase_client,
    list_history,
    save_history,
)

router = APIRouter()


@router.get("/api/history", response_model=list[HistoryEntry])
async def list_entries(limit: int = 50) -> list[HistoryEntry]:
    """List history entries, most recent first."""
    client = get_supabase_client()
    return [HistoryEntry(**row) for row in list_history(client, limit=limit)]


@router.post("/api/history", response_model=HistoryEntry)
async def save_entry(request: SaveHistoryRequest) -> HistoryEntry:
    """Store a processed video; an existing entry for the same video is replaced."""
    client = get_supabase_client()
    row = save_history(client, request.model_dump(mode="json"))
    return HistoryEntry(**row)


@router.get("/api/history/{video_id}", response_model=HistoryEntry)
async def get_entry(video_id: str) -> HistoryEntry:
    client = get_supabase_client()
    row = get_history(client, video_id)
    if row is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return HistoryEntry(**row)


@router.delete("/api/history/{video_id}", status_code=204)
async def delete_entry(video_id: str) -> Response:
    client = get_supabase_client()
    if not delete_history(client, video_id):
        raise HTTPException(status_code=404, detail="History entry not found")
    return Response(status_code=204)
