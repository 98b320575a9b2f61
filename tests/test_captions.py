"""Tests for the caption tier and paragraph formatting (no network required)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from youtube_transcript_api import NoTranscriptFound, TranscriptsDisabled, VideoUnavailable

from tubedigest.errors import CaptionFetchError, NoTranscriptAvailableError, VideoUnavailableError
from tubedigest.ingestion.captions import fetch_captions
from tubedigest.ingestion.formatting import decode_entities, format_transcript_into_paragraphs
from tubedigest.ingestion.models import TranscriptSegment

VIDEO_ID = "dQw4w9WgXcQ"


def _snippet(text: str, start: float, duration: float) -> SimpleNamespace:
    return SimpleNamespace(text=text, start=start, duration=duration)


def _no_transcript_found() -> NoTranscriptFound:
    return NoTranscriptFound(VIDEO_ID, ["en"], MagicMock())


# ---------------------------------------------------------------------------
# fetch_captions
# ---------------------------------------------------------------------------


class TestFetchCaptions:
    def test_preferred_language(self) -> None:
        api = MagicMock()
        api.fetch.return_value = [
            _snippet("Hello &amp; welcome", 0.0, 1.5),
            _snippet("it&#39;s great", 1.5, 2.25),
        ]

        segments = fetch_captions(VIDEO_ID, language="en", api=api)

        api.fetch.assert_called_once_with(VIDEO_ID, languages=["en"])
        api.list.assert_not_called()
        assert segments == [
            TranscriptSegment(text="Hello & welcome", offset_ms=0.0, duration_ms=1500.0),
            TranscriptSegment(text="it's great", offset_ms=1500.0, duration_ms=2250.0),
        ]

    def test_falls_back_to_any_language(self) -> None:
        api = MagicMock()
        api.fetch.side_effect = _no_transcript_found()
        track = MagicMock()
        track.fetch.return_value = [_snippet("Hola", 2.0, 1.0)]
        api.list.return_value = [track]

        segments = fetch_captions(VIDEO_ID, api=api)

        assert len(segments) == 1
        assert segments[0].text == "Hola"
        assert segments[0].offset_ms == 2000.0

    def test_empty_preferred_result_falls_back(self) -> None:
        api = MagicMock()
        api.fetch.return_value = []
        track = MagicMock()
        track.fetch.return_value = [_snippet("Bonjour", 0.0, 1.0)]
        api.list.return_value = [track]

        segments = fetch_captions(VIDEO_ID, api=api)
        assert segments[0].text == "Bonjour"

    def test_no_tracks_raises_no_transcript(self) -> None:
        api = MagicMock()
        api.fetch.return_value = []
        api.list.return_value = []

        with pytest.raises(NoTranscriptAvailableError, match="No transcript available"):
            fetch_captions(VIDEO_ID, api=api)

    def test_transcripts_disabled(self) -> None:
        api = MagicMock()
        api.fetch.side_effect = _no_transcript_found()
        api.list.side_effect = TranscriptsDisabled(VIDEO_ID)

        with pytest.raises(NoTranscriptAvailableError):
            fetch_captions(VIDEO_ID, api=api)

    def test_video_unavailable(self) -> None:
        api = MagicMock()
        api.fetch.side_effect = VideoUnavailable(VIDEO_ID)

        with pytest.raises(VideoUnavailableError, match="unavailable"):
            fetch_captions(VIDEO_ID, api=api)

    def test_unexpected_failure_is_generic(self) -> None:
        api = MagicMock()
        api.fetch.side_effect = ConnectionError("boom")

        with pytest.raises(CaptionFetchError, match="Failed to fetch transcript"):
            fetch_captions(VIDEO_ID, api=api)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestDecodeEntities:
    def test_named_and_numeric(self) -> None:
        raw = "&lt;b&gt; &quot;hi&quot; &amp; &#39;bye&#39; &#65; &apos;x&apos;"
        assert decode_entities(raw) == "<b> \"hi\" & 'bye' A 'x'"

    def test_trims(self) -> None:
        assert decode_entities("  padded  ") == "padded"


class TestFormatTranscriptIntoParagraphs:
    def test_empty(self) -> None:
        assert format_transcript_into_paragraphs([]) == ""

    def test_short_input_single_paragraph(self) -> None:
        segments = [
            TranscriptSegment(text="Hello there."),
            TranscriptSegment(text="This is short"),
            TranscriptSegment(text="and unfinished"),
        ]
        result = format_transcript_into_paragraphs(segments)
        assert result == "Hello there. This is short and unfinished"
        assert "\n\n" not in result

    def test_breaks_after_length_and_sentence_end(self) -> None:
        long_sentence = "word " * 20 + "end."
        segments = [TranscriptSegment(text=long_sentence) for _ in range(3)]
        result = format_transcript_into_paragraphs(segments, target_paragraph_length=150)

        paragraphs = result.split("\n\n")
        # first paragraph closes once two segments push it past 150 chars
        assert len(paragraphs) == 2
        assert all(p.endswith("end.") for p in paragraphs)

    def test_no_break_without_sentence_end(self) -> None:
        segments = [TranscriptSegment(text="x" * 50 + " no punctuation") for _ in range(20)]
        result = format_transcript_into_paragraphs(segments, target_paragraph_length=100)
        assert "\n\n" not in result

    def test_collapses_whitespace_and_decodes(self) -> None:
        segments = [
            TranscriptSegment(text="Tom &amp;\n  Jerry"),
            TranscriptSegment(text="   "),
            TranscriptSegment(text="run\tfast!"),
        ]
        assert format_transcript_into_paragraphs(segments) == "Tom & Jerry run fast!"

    def test_trailing_partial_paragraph_kept(self) -> None:
        segments = [
            TranscriptSegment(text="a" * 400 + "."),
            TranscriptSegment(text="tail without end"),
        ]
        result = format_transcript_into_paragraphs(segments)
        assert result.split("\n\n") == ["a" * 400 + ".", "tail without end"]
