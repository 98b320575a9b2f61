"""Video metadata lookup through the public oEmbed endpoint."""

from __future__ import annotations

import httpx

from tubedigest.config import settings
from tubedigest.errors import MetadataFetchError, VideoNotFoundError
from tubedigest.ingestion.models import VideoMetadata

OEMBED_URL = "https://www.youtube.com/oembed"


def fetch_video_metadata(video_id: str, client: httpx.Client | None = None) -> VideoMetadata:
    """Fetch title, author and thumbnail details for *video_id*.

    Raises:
        VideoNotFoundError: oEmbed answered 404.
        MetadataFetchError: Any other non-success status, transport failure or
            malformed payload.
    """
    params = {"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"}
    try:
        if client is None:
            response = httpx.get(OEMBED_URL, params=params, timeout=settings.metadata_timeout_seconds)
        else:
            response = client.get(OEMBED_URL, params=params)
    except httpx.HTTPError as exc:
        raise MetadataFetchError() from exc

    if response.status_code == 404:
        raise VideoNotFoundError()
    if not response.is_success:
        raise MetadataFetchError(f"Failed to fetch video metadata (HTTP {response.status_code})")

    try:
        data = response.json()
        return VideoMetadata(
            title=data["title"],
            author_name=data["author_name"],
            author_url=data["author_url"],
            thumbnail_url=data["thumbnail_url"],
            thumbnail_width=int(data["thumbnail_width"]),
            thumbnail_height=int(data["thumbnail_height"]),
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise MetadataFetchError("Unexpected metadata response") from exc
