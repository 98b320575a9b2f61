"""Exception taxonomy for transcript acquisition and generation.

Every exception carries a user-facing default message so callers can show
``str(exc)`` directly.
"""

from __future__ import annotations


class TubeDigestError(Exception):
    """Base class for all errors raised by the pipeline."""

    default_message = "Something went wrong while processing the video"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidIdentifierError(TubeDigestError):
    default_message = "Invalid YouTube URL. Please check the URL and try again."


class VideoNotFoundError(TubeDigestError):
    default_message = "Video not found"


class MetadataFetchError(TubeDigestError):
    default_message = "Failed to fetch video metadata"


# --- Caption tier ---


class NoTranscriptAvailableError(TubeDigestError):
    default_message = "No transcript available for this video"


class CaptionFetchError(TubeDigestError):
    default_message = "Failed to fetch transcript"


# --- Audio tier ---


class DurationExceededError(TubeDigestError):
    """Video is longer than the audio tier accepts. Never triggers further fallback."""

    default_message = "Video is too long for transcription"


class ExtractionError(TubeDigestError):
    default_message = "Failed to extract audio from video"


class VideoUnavailableError(ExtractionError):
    default_message = "Video is private or unavailable"


class AgeRestrictedError(ExtractionError):
    default_message = "Video requires age verification"


class RegionBlockedError(ExtractionError):
    default_message = "Video is not available in your region"


class TranscriptionError(TubeDigestError):
    default_message = "Transcription failed"


class EmptyTranscriptError(TranscriptionError):
    default_message = "No transcript text returned"


# --- Generation ---


class GenerationError(TubeDigestError):
    default_message = "Failed to generate output"
