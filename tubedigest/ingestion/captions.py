"""Caption tier: fetch platform-native captions with youtube-transcript-api."""

from __future__ import annotations

import logging

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from tubedigest.errors import (
    CaptionFetchError,
    NoTranscriptAvailableError,
    VideoUnavailableError,
)
from tubedigest.ingestion.formatting import decode_entities
from tubedigest.ingestion.models import TranscriptSegment

logger = logging.getLogger(__name__)


def _fetch_preferred(api: YouTubeTranscriptApi, video_id: str, language: str) -> list:
    """Fetch captions in *language*; an empty list if that language is missing."""
    try:
        return list(api.fetch(video_id, languages=[language]))
    except NoTranscriptFound:
        logger.info("No '%s' captions for %s, trying any language", language, video_id)
        return []


def _fetch_any(api: YouTubeTranscriptApi, video_id: str) -> list:
    """Fetch the first caption track listed for the video, whatever its language."""
    for transcript in api.list(video_id):
        snippets = list(transcript.fetch())
        if snippets:
            return snippets
    return []


def fetch_captions(
    video_id: str,
    language: str = "en",
    api: YouTubeTranscriptApi | None = None,
) -> list[TranscriptSegment]:
    """Fetch caption segments for *video_id*.

    Tries *language* first and falls back to any available track. Text is
    entity-decoded and times are converted from seconds to milliseconds.

    Raises:
        NoTranscriptAvailableError: The video has no usable captions.
        VideoUnavailableError: The video is private, removed or otherwise unavailable.
        CaptionFetchError: Any other retrieval failure.
    """
    api = api or YouTubeTranscriptApi()

    try:
        snippets = _fetch_preferred(api, video_id, language)
        if not snippets:
            snippets = _fetch_any(api, video_id)
    except (NoTranscriptFound, TranscriptsDisabled) as exc:
        raise NoTranscriptAvailableError() from exc
    except VideoUnavailable as exc:
        raise VideoUnavailableError("Video is unavailable") from exc
    except CouldNotRetrieveTranscript as exc:
        raise CaptionFetchError() from exc
    except Exception as exc:
        # Network failures and unexpected payloads from the caption endpoint.
        raise CaptionFetchError() from exc

    if not snippets:
        raise NoTranscriptAvailableError()

    return [
        TranscriptSegment(
            text=decode_entities(snippet.text),
            offset_ms=float(snippet.start) * 1000,
            duration_ms=float(snippet.duration) * 1000,
        )
        for snippet in snippets
    ]
