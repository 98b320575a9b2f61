"""Pydantic request/response schemas for the TubeDigest API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from tubedigest.pipeline_config import TranscriptSource


class ProcessRequest(BaseModel):
    """Request body for the /api/process endpoint."""

    url: str


class VideoMetadataResponse(BaseModel):
    title: str
    author_name: str
    author_url: str
    thumbnail_url: str
    thumbnail_width: int
    thumbnail_height: int


class SegmentResponse(BaseModel):
    text: str
    offset_ms: float
    duration_ms: float


class UtteranceResponse(BaseModel):
    speaker: str
    text: str
    start_ms: int
    end_ms: int


class ProcessResponse(BaseModel):
    """Response body for /api/process.

    ``success`` is False when metadata resolved but no transcript could be
    acquired; ``metadata`` is still returned so the caller can show it.
    """

    success: bool
    video_id: str
    metadata: VideoMetadataResponse
    transcript: str | None = None
    transcript_source: TranscriptSource | None = None
    has_speakers: bool = False
    raw_segments: list[SegmentResponse] = []
    utterances: list[UtteranceResponse] | None = None
    error: str | None = None


class GenerateRequest(BaseModel):
    """Request body for the summarize / key-points / outline endpoints."""

    transcript: str
    video_title: str = ""


class HistoryEntry(BaseModel):
    """A stored history record (at most one per video)."""

    video_id: str
    url: str
    metadata: dict[str, Any]
    transcript: str | None = None
    transcript_source: TranscriptSource | None = None
    has_speakers: bool = False
    summary: str = ""
    key_points: str = ""
    processed_at: str | None = None


class SaveHistoryRequest(BaseModel):
    """Request body for POST /api/history."""

    video_id: str
    url: str
    metadata: VideoMetadataResponse
    transcript: str
    transcript_source: TranscriptSource
    has_speakers: bool = False
    summary: str = ""
    key_points: str = ""
