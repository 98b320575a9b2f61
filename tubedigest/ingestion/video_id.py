"""Extract the canonical 11-character video ID from a YouTube URL."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from tubedigest.errors import InvalidIdentifierError

# Handles:
# - https://www.youtube.com/watch?v=VIDEO_ID (optionally with &t=123, &list=PL...)
# - https://youtu.be/VIDEO_ID
# - https://www.youtube.com/embed/VIDEO_ID
# - https://www.youtube.com/shorts/VIDEO_ID
# - legacy /v/, /vi/ and /u/<x>/ paths
_URL_RE = re.compile(
    r"^.*(?:(?:youtu\.be/|v/|vi/|u/\w/|embed/|shorts/)|(?:(?:watch)?\?vi?=|&vi?=))([^#&?]*).*"
)
_VIDEO_ID_RE = re.compile(r"[A-Za-z0-9_-]{11}")


def _is_video_id(candidate: str | None) -> bool:
    return candidate is not None and _VIDEO_ID_RE.fullmatch(candidate) is not None


def extract_video_id(url: str) -> str | None:
    """Return the video ID embedded in *url*, or ``None`` if there is none.

    A bare 11-character ID is accepted as-is. Otherwise the known URL shapes
    are matched first and the ``v`` query parameter is used as a fallback.
    No network access is performed.
    """
    url = url.strip()
    if _is_video_id(url):
        return url

    match = _URL_RE.match(url)
    if match and _is_video_id(match.group(1)):
        return match.group(1)

    # Fallback: standard watch URLs the pattern above did not catch
    try:
        query = parse_qs(urlparse(url).query)
    except ValueError:
        return None
    values = query.get("v")
    if values and _is_video_id(values[0]):
        return values[0]

    return None


def resolve_video_id(url: str) -> str:
    """Like :func:`extract_video_id` but raises ``InvalidIdentifierError`` on failure."""
    video_id = extract_video_id(url)
    if video_id is None:
        raise InvalidIdentifierError()
    return video_id
