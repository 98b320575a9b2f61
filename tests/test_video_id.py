"""Tests for video ID extraction from YouTube URLs."""

from __future__ import annotations

import pytest

from tubedigest.errors import InvalidIdentifierError
from tubedigest.ingestion.video_id import extract_video_id, resolve_video_id

VIDEO_ID = "dQw4w9WgXcQ"


class TestExtractVideoId:
    @pytest.mark.parametrize(
        "url",
        [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtube.com/watch?v={VIDEO_ID}&t=123",
            f"https://www.youtube.com/watch?v={VIDEO_ID}&list=PLx0sYbCqOb8TBPRdmBHs5Iftvv9TPboYG",
            f"https://m.youtube.com/watch?feature=share&v={VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}?si=abcdef",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/embed/{VIDEO_ID}?autoplay=1",
            f"https://www.youtube.com/shorts/{VIDEO_ID}",
            f"https://www.youtube.com/shorts/{VIDEO_ID}?feature=share",
            f"youtube.com/watch?v={VIDEO_ID}",
        ],
    )
    def test_supported_url_shapes(self, url: str) -> None:
        assert extract_video_id(url) == VIDEO_ID

    def test_bare_id(self) -> None:
        assert extract_video_id(VIDEO_ID) == VIDEO_ID

    def test_surrounding_whitespace_ignored(self) -> None:
        assert extract_video_id(f"  https://youtu.be/{VIDEO_ID}\n") == VIDEO_ID

    def test_ids_with_dash_and_underscore(self) -> None:
        assert extract_video_id("https://youtu.be/a-b_c-d_e-f") == "a-b_c-d_e-f"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "https://www.youtube.com/",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/watch?v=waytoolongvideoid",
            "https://youtu.be/abc",
            "https://example.com/page",
            "https://www.youtube.com/channel/UCuAXFkgsw1L7xaCfnd5JJOw",
            "dQw4w9WgXc!",
        ],
    )
    def test_invalid_inputs(self, url: str) -> None:
        assert extract_video_id(url) is None


class TestResolveVideoId:
    def test_returns_id(self) -> None:
        assert resolve_video_id(f"https://youtu.be/{VIDEO_ID}") == VIDEO_ID

    def test_raises_on_invalid(self) -> None:
        with pytest.raises(InvalidIdentifierError, match="Invalid YouTube URL"):
            resolve_video_id("https://example.com/nothing-here")
