"""Process endpoint: resolve a URL, fetch metadata and acquire the transcript."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from tubedigest.api.models import (
    ProcessRequest,
    ProcessResponse,
    SegmentResponse,
    UtteranceResponse,
    VideoMetadataResponse,
)
from tubedigest.errors import InvalidIdentifierError, MetadataFetchError, VideoNotFoundError
from tubedigest.ingestion.pipeline import process_video

router = APIRouter()


@router.post("/api/process", response_model=ProcessResponse)
async def process(request: ProcessRequest) -> ProcessResponse:
    """Acquire a transcript for the video at ``request.url``.

    - Invalid URL -> 400.
    - Video not found / metadata failure -> 404 / 502; no transcript is attempted.
    - Transcript failure -> 200 with ``success=false``, the error message and
      the already-fetched metadata.
    """
    try:
        processed = await process_video(request.url)
    except InvalidIdentifierError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except VideoNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail="Could not find video. Please check the URL and try again.",
        ) from exc
    except MetadataFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    metadata = VideoMetadataResponse(**asdict(processed.metadata))
    transcript = processed.transcript
    if transcript is None:
        return ProcessResponse(
            success=False,
            video_id=processed.video_id,
            metadata=metadata,
            error=processed.error,
        )

    return ProcessResponse(
        success=True,
        video_id=processed.video_id,
        metadata=metadata,
        transcript=transcript.text,
        transcript_source=transcript.source,
        has_speakers=transcript.has_speakers,
        raw_segments=[SegmentResponse(**asdict(s)) for s in transcript.segments],
        utterances=(
            [UtteranceResponse(**asdict(u)) for u in transcript.utterances]
            if transcript.utterances
            else None
        ),
    )
