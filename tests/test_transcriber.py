"""Tests for AssemblyAI transcript normalization (SDK calls are mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import assemblyai as aai  # type: ignore[import-untyped]
import pytest

from tubedigest.errors import EmptyTranscriptError, TranscriptionError
from tubedigest.ingestion.models import AudioPayload, SpeakerUtterance
from tubedigest.ingestion.transcriber import (
    build_transcript_result,
    format_speaker_text,
    transcribe_audio,
)
from tubedigest.pipeline_config import TranscriptSource


def _word(text: str, start: int, end: int) -> SimpleNamespace:
    return SimpleNamespace(text=text, start=start, end=end)


def _utterance(speaker: str, text: str, start: int, end: int) -> SimpleNamespace:
    return SimpleNamespace(speaker=speaker, text=text, start=start, end=end)


def _transcript(**overrides: object) -> MagicMock:
    transcript = MagicMock()
    transcript.status = aai.TranscriptStatus.completed
    transcript.error = None
    transcript.text = "Hello there. Hi."
    transcript.words = [
        _word("Hello", 0, 400),
        _word("there.", 400, 900),
        _word("Hi.", 1200, 1500),
    ]
    transcript.utterances = [
        _utterance("A", "Hello there.", 0, 900),
        _utterance("B", "Hi.", 1200, 1500),
    ]
    for key, value in overrides.items():
        setattr(transcript, key, value)
    return transcript


class TestFormatSpeakerText:
    def test_markers_and_paragraphs(self) -> None:
        utterances = [
            SpeakerUtterance("A", "Hello.", 0, 100),
            SpeakerUtterance("B", "Hi.", 100, 200),
        ]
        assert format_speaker_text(utterances) == "**Speaker A:** Hello.\n\n**Speaker B:** Hi."


class TestBuildTranscriptResult:
    def test_two_speakers_marked(self) -> None:
        result = build_transcript_result(_transcript())

        assert result.source == TranscriptSource.ASSEMBLYAI
        assert result.has_speakers is True
        assert result.text.startswith("**Speaker A:** Hello there.")
        assert "**Speaker B:** Hi." in result.text
        assert result.utterances is not None
        assert [u.speaker for u in result.utterances] == ["A", "B"]

    def test_words_become_segments(self) -> None:
        result = build_transcript_result(_transcript())

        assert [s.text for s in result.segments] == ["Hello", "there.", "Hi."]
        assert result.segments[2].offset_ms == 1200
        assert result.segments[2].duration_ms == 300

    def test_single_speaker_is_plain_text(self) -> None:
        transcript = _transcript(
            utterances=[
                _utterance("A", "Hello there.", 0, 900),
                _utterance("A", "Hi.", 1200, 1500),
            ]
        )
        result = build_transcript_result(transcript)

        assert result.has_speakers is False
        assert result.utterances is None
        assert result.text == "Hello there. Hi."
        assert "**Speaker" not in result.text

    def test_no_utterances(self) -> None:
        result = build_transcript_result(_transcript(utterances=None))
        assert result.has_speakers is False
        assert result.text == "Hello there. Hi."

    def test_error_status(self) -> None:
        transcript = _transcript(status=aai.TranscriptStatus.error, error="audio too short")
        with pytest.raises(TranscriptionError, match="audio too short"):
            build_transcript_result(transcript)

    def test_error_status_without_detail(self) -> None:
        transcript = _transcript(status=aai.TranscriptStatus.error, error=None)
        with pytest.raises(TranscriptionError, match="Transcription failed"):
            build_transcript_result(transcript)

    def test_empty_text(self) -> None:
        with pytest.raises(EmptyTranscriptError, match="No transcript text returned"):
            build_transcript_result(_transcript(text=""))

    def test_empty_is_transcription_error(self) -> None:
        assert issubclass(EmptyTranscriptError, TranscriptionError)


class TestTranscribeAudio:
    def test_submits_bytes_with_diarization(self) -> None:
        payload = AudioPayload(data=b"\x00\x01audio")
        with patch("tubedigest.ingestion.transcriber.aai.Transcriber") as transcriber_cls:
            transcriber_cls.return_value.transcribe.return_value = _transcript()
            result = transcribe_audio(payload)

        call = transcriber_cls.return_value.transcribe.call_args
        assert call.args[0] == b"\x00\x01audio"
        assert call.kwargs["config"].speaker_labels is True
        assert result.has_speakers is True

    def test_service_failure_is_wrapped(self) -> None:
        payload = AudioPayload(data=b"audio")
        with patch("tubedigest.ingestion.transcriber.aai.Transcriber") as transcriber_cls:
            transcriber_cls.return_value.transcribe.side_effect = RuntimeError("401 Unauthorized")
            with pytest.raises(TranscriptionError, match="Transcription service unavailable"):
                transcribe_audio(payload)
