"""Reflow caption segments into readable paragraphs."""

from __future__ import annotations

import html
import re

from tubedigest.ingestion.models import TranscriptSegment

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"[.!?]$")


def decode_entities(text: str) -> str:
    """Decode HTML entities (``&amp;``, ``&#39;``, ...) and trim the result."""
    return html.unescape(text).strip()


def format_transcript_into_paragraphs(
    segments: list[TranscriptSegment],
    target_paragraph_length: int = 400,
) -> str:
    """Join caption segments into paragraphs separated by blank lines.

    A paragraph closes once it is at least *target_paragraph_length*
    characters long and the segment just added ends a sentence. Whatever
    is left over at the end is emitted as the final paragraph.
    """
    paragraphs: list[str] = []
    current = ""

    for segment in segments:
        text = _WHITESPACE_RE.sub(" ", decode_entities(segment.text)).strip()
        if not text:
            continue

        current = f"{current} {text}" if current else text

        if _SENTENCE_END_RE.search(text) and len(current) >= target_paragraph_length:
            paragraphs.append(current.strip())
            current = ""

    if current.strip():
        paragraphs.append(current.strip())

    return "\n\n".join(paragraphs)
