"""Data models for the acquisition pipeline."""

from __future__ import annotations

from dataclasses import dataclass

from tubedigest.pipeline_config import TranscriptSource


@dataclass
class TranscriptSegment:
    """One timed piece of transcript text. Times are in milliseconds."""

    text: str
    offset_ms: float = 0.0
    duration_ms: float = 0.0


@dataclass
class SpeakerUtterance:
    """A diarized speaker turn as returned by the transcription service."""

    speaker: str
    text: str
    start_ms: int
    end_ms: int


@dataclass
class TranscriptResult:
    """Normalized output of the acquisition cascade.

    ``utterances`` is only set when diarization found two or more distinct
    speakers, in which case ``has_speakers`` is True and ``text`` carries
    ``**Speaker X:**`` markers.
    """

    text: str
    segments: list[TranscriptSegment]
    source: TranscriptSource
    utterances: list[SpeakerUtterance] | None = None
    has_speakers: bool = False


@dataclass(frozen=True)
class AudioPayload:
    """Raw audio bytes for one video. Never cached or persisted."""

    data: bytes
    duration_seconds: float | None = None
    estimated_size_bytes: int | None = None
    strategy: str = ""

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass
class VideoMetadata:
    """oEmbed metadata for a video."""

    title: str
    author_name: str
    author_url: str
    thumbnail_url: str
    thumbnail_width: int
    thumbnail_height: int


@dataclass
class ProcessedVideo:
    """Outcome of processing one URL.

    Metadata is always present; on transcript failure ``transcript`` is None
    and ``error`` holds the message to show.
    """

    video_id: str
    metadata: VideoMetadata
    transcript: TranscriptResult | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.transcript is not None
