"""Tests for oEmbed metadata lookup (HTTP client is mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from tubedigest.errors import MetadataFetchError, VideoNotFoundError
from tubedigest.ingestion.metadata import OEMBED_URL, fetch_video_metadata

VIDEO_ID = "dQw4w9WgXcQ"

OEMBED_PAYLOAD = {
    "title": "Never Gonna Give You Up",
    "author_name": "Rick Astley",
    "author_url": "https://www.youtube.com/@RickAstleyYT",
    "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
    "thumbnail_width": 480,
    "thumbnail_height": 360,
    "type": "video",
}


def _client(status_code: int, payload: object = None) -> MagicMock:
    request = httpx.Request("GET", OEMBED_URL)
    response = httpx.Response(status_code, json=payload, request=request)
    client = MagicMock(spec=httpx.Client)
    client.get.return_value = response
    return client


class TestFetchVideoMetadata:
    def test_success(self) -> None:
        client = _client(200, OEMBED_PAYLOAD)
        metadata = fetch_video_metadata(VIDEO_ID, client=client)

        assert metadata.title == "Never Gonna Give You Up"
        assert metadata.author_name == "Rick Astley"
        assert metadata.thumbnail_width == 480
        assert metadata.thumbnail_height == 360

        _, kwargs = client.get.call_args
        assert kwargs["params"]["url"] == f"https://www.youtube.com/watch?v={VIDEO_ID}"
        assert kwargs["params"]["format"] == "json"

    def test_not_found(self) -> None:
        with pytest.raises(VideoNotFoundError):
            fetch_video_metadata(VIDEO_ID, client=_client(404))

    def test_server_error(self) -> None:
        with pytest.raises(MetadataFetchError, match="HTTP 500"):
            fetch_video_metadata(VIDEO_ID, client=_client(500))

    def test_unauthorized_is_not_not_found(self) -> None:
        with pytest.raises(MetadataFetchError) as excinfo:
            fetch_video_metadata(VIDEO_ID, client=_client(401))
        assert not isinstance(excinfo.value, VideoNotFoundError)

    def test_missing_fields(self) -> None:
        with pytest.raises(MetadataFetchError, match="Unexpected metadata response"):
            fetch_video_metadata(VIDEO_ID, client=_client(200, {"title": "x"}))

    def test_transport_error(self) -> None:
        client = MagicMock(spec=httpx.Client)
        client.get.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(MetadataFetchError, match="Failed to fetch video metadata"):
            fetch_video_metadata(VIDEO_ID, client=client)

    def test_default_client_uses_configured_timeout(self) -> None:
        response = httpx.Response(
            200, json=OEMBED_PAYLOAD, request=httpx.Request("GET", OEMBED_URL)
        )
        with patch("tubedigest.ingestion.metadata.httpx.get", return_value=response) as get:
            fetch_video_metadata(VIDEO_ID)
        assert "timeout" in get.call_args.kwargs
