"""Audio tier, step 2: transcribe audio with AssemblyAI speaker diarization."""

from __future__ import annotations

import logging
from typing import Any

import assemblyai as aai  # type: ignore[import-untyped]

from tubedigest.config import settings
from tubedigest.errors import EmptyTranscriptError, TranscriptionError
from tubedigest.ingestion.models import (
    AudioPayload,
    SpeakerUtterance,
    TranscriptResult,
    TranscriptSegment,
)
from tubedigest.pipeline_config import TranscriptSource

logger = logging.getLogger(__name__)


def format_speaker_text(utterances: list[SpeakerUtterance]) -> str:
    """Render utterances as ``**Speaker X:** text`` paragraphs."""
    return "\n\n".join(f"**Speaker {u.speaker}:** {u.text}" for u in utterances)


def build_transcript_result(transcript: Any) -> TranscriptResult:
    """Normalize a completed AssemblyAI transcript.

    Each word becomes one segment. Speaker labels are only kept when more
    than one distinct speaker was detected.

    Raises:
        TranscriptionError: The transcript reports an error status.
        EmptyTranscriptError: The transcript completed without any text.
    """
    if transcript.status == aai.TranscriptStatus.error:
        raise TranscriptionError(transcript.error or None)

    if not transcript.text:
        raise EmptyTranscriptError()

    utterances = [
        SpeakerUtterance(speaker=u.speaker, text=u.text, start_ms=u.start, end_ms=u.end)
        for u in transcript.utterances or []
    ]
    has_speakers = len({u.speaker for u in utterances}) > 1

    segments = [
        TranscriptSegment(text=w.text, offset_ms=w.start, duration_ms=w.end - w.start)
        for w in transcript.words or []
    ]

    return TranscriptResult(
        text=format_speaker_text(utterances) if has_speakers else transcript.text,
        segments=segments,
        source=TranscriptSource.ASSEMBLYAI,
        utterances=utterances if has_speakers else None,
        has_speakers=has_speakers,
    )


def transcribe_audio(payload: AudioPayload) -> TranscriptResult:
    """Transcribe an audio payload via the AssemblyAI SDK.

    The SDK accepts bytes directly, so no temp file is written.

    Raises:
        TranscriptionError: Bad audio content or an infrastructure failure
            (invalid API key, network, provider outage).
        EmptyTranscriptError: The service returned no text.
    """
    aai.settings.api_key = settings.assemblyai_api_key
    transcriber = aai.Transcriber()
    # speaker_labels=True enables diarization; without it the API returns a single
    # flat text block attributed to no speaker.
    config = aai.TranscriptionConfig(
        speech_models=settings.assemblyai_speech_models,
        speaker_labels=True,
    )

    logger.info("Submitting %d bytes of audio to AssemblyAI", payload.size_bytes)
    try:
        transcript = transcriber.transcribe(payload.data, config=config)
    except Exception as exc:
        raise TranscriptionError(f"Transcription service unavailable: {exc}") from exc

    result = build_transcript_result(transcript)
    logger.info(
        "Transcribed %d words (%s)",
        len(result.segments),
        "multiple speakers" if result.has_speakers else "single speaker",
    )
    return result
