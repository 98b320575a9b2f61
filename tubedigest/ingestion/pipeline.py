"""Transcript acquisition: captions first, then audio download + transcription.

The two tiers run strictly in sequence because the audio tier is far more
expensive. When both fail, the caption error is what the caller sees; the
audio-tier error is only logged (and chained as ``__cause__``).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from tubedigest.config import settings
from tubedigest.errors import TubeDigestError
from tubedigest.ingestion.audio import AudioExtractor
from tubedigest.ingestion.captions import fetch_captions
from tubedigest.ingestion.formatting import format_transcript_into_paragraphs
from tubedigest.ingestion.metadata import fetch_video_metadata
from tubedigest.ingestion.models import (
    AudioPayload,
    ProcessedVideo,
    TranscriptResult,
    TranscriptSegment,
)
from tubedigest.ingestion.transcriber import transcribe_audio
from tubedigest.ingestion.video_id import resolve_video_id
from tubedigest.pipeline_config import TranscriptSource

logger = logging.getLogger(__name__)

CaptionFetcher = Callable[[str, str], list[TranscriptSegment]]
Transcriber = Callable[[AudioPayload], TranscriptResult]


class TranscriptAcquirer:
    """Runs the caption tier and, if it fails, the audio tier for one video.

    All collaborators are injectable; the defaults are the real caption,
    yt-dlp and AssemblyAI implementations. The audio tier is disabled when
    no AssemblyAI key is configured.
    """

    def __init__(
        self,
        caption_fetcher: CaptionFetcher = fetch_captions,
        audio_extractor: AudioExtractor | None = None,
        transcriber: Transcriber = transcribe_audio,
        *,
        audio_enabled: bool | None = None,
        caption_language: str | None = None,
        paragraph_length: int = 400,
    ) -> None:
        self.caption_fetcher = caption_fetcher
        self.audio_extractor = audio_extractor or AudioExtractor()
        self.transcriber = transcriber
        self.audio_enabled = (
            audio_enabled if audio_enabled is not None else bool(settings.assemblyai_api_key)
        )
        self.caption_language = caption_language or settings.caption_language
        self.paragraph_length = paragraph_length

    async def acquire(self, video_id: str) -> TranscriptResult:
        """Return the normalized transcript for *video_id*.

        Raises:
            TubeDigestError: The caption-tier error, when both tiers failed.
        """
        try:
            segments = await asyncio.to_thread(
                self.caption_fetcher, video_id, self.caption_language
            )
        except TubeDigestError as caption_error:
            logger.info("Captions unavailable for %s: %s", video_id, caption_error)
            return await self._acquire_from_audio(video_id, caption_error)

        logger.info("Using captions for %s (%d segments)", video_id, len(segments))
        return TranscriptResult(
            text=format_transcript_into_paragraphs(segments, self.paragraph_length),
            segments=segments,
            source=TranscriptSource.CAPTIONS,
        )

    async def _acquire_from_audio(
        self, video_id: str, caption_error: TubeDigestError
    ) -> TranscriptResult:
        if not self.audio_enabled:
            logger.warning(
                "ASSEMBLYAI_API_KEY not set - audio fallback skipped for %s", video_id
            )
            raise caption_error

        try:
            payload = await asyncio.to_thread(self.audio_extractor.extract, video_id)
            result = await asyncio.to_thread(self.transcriber, payload)
        except Exception as audio_error:
            logger.warning(
                "Audio fallback failed for %s: %s (reporting caption error: %s)",
                video_id,
                audio_error,
                caption_error,
            )
            raise caption_error from audio_error

        logger.info("Using AssemblyAI transcript for %s", video_id)
        return result


async def process_video(url: str, acquirer: TranscriptAcquirer | None = None) -> ProcessedVideo:
    """Resolve *url*, fetch metadata, then acquire the transcript.

    Metadata failures are terminal and propagate. A transcript failure does
    not raise: the returned ``ProcessedVideo`` keeps the metadata and carries
    the error message instead.

    Raises:
        InvalidIdentifierError: *url* does not contain a video ID.
        VideoNotFoundError: The video does not exist.
        MetadataFetchError: Metadata could not be retrieved.
    """
    video_id = resolve_video_id(url)
    metadata = await asyncio.to_thread(fetch_video_metadata, video_id)

    acquirer = acquirer or TranscriptAcquirer()
    try:
        transcript = await acquirer.acquire(video_id)
    except TubeDigestError as exc:
        return ProcessedVideo(video_id=video_id, metadata=metadata, error=str(exc))

    return ProcessedVideo(video_id=video_id, metadata=metadata, transcript=transcript)
