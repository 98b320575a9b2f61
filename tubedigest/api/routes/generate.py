"""Generation endpoints: stream a summary, key points or an outline."""

from __future__ import annotations

import asyncio

from anthropic import APIStatusError
from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from tubedigest.api.models import GenerateRequest
from tubedigest.errors import GenerationError
from tubedigest.generation.generation import open_stream, prepare_generation
from tubedigest.pipeline_config import OutputKind

router = APIRouter()


async def _stream(request: GenerateRequest, kind: OutputKind) -> StreamingResponse:
    if not request.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is required")

    try:
        # Long transcripts run the concurrent per-chunk pass here, before streaming starts.
        final_request = await prepare_generation(request.transcript, request.video_title, kind)
        # The final call is opened before the 200 is sent so its failures still map to 503.
        deltas = await asyncio.to_thread(open_stream, final_request)
    except (GenerationError, APIStatusError) as exc:
        # Return 503 so the browser receives a proper JSON response with CORS headers intact.
        raise HTTPException(status_code=503, detail=f"Failed to generate {kind.value}: {exc}") from exc

    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")


@router.post("/api/summarize")
async def summarize(request: GenerateRequest) -> StreamingResponse:
    return await _stream(request, OutputKind.SUMMARY)


@router.post("/api/key-points")
async def key_points(request: GenerateRequest) -> StreamingResponse:
    return await _stream(request, OutputKind.KEY_POINTS)


@router.post("/api/outline")
async def outline(request: GenerateRequest) -> StreamingResponse:
    return await _stream(request, OutputKind.OUTLINE)
