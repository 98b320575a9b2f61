"""Split long transcripts into overlapping, sentence-aligned chunks.

Transcripts that fit comfortably in one model call are passed through as a
single chunk. Longer ones are cut into windows of roughly
``target_chunk_tokens``, preferring to end each window at a sentence
boundary, with a fixed overlap so that context carries across chunks.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from tubedigest.pipeline_config import DEFAULT_CHUNKING, ChunkingConfig

_SENTENCE_END_RE = re.compile(r"[.!?]\s+")


@dataclass
class TranscriptChunk:
    """One slice of a transcript."""

    text: str
    index: int
    total: int
    start_offset: int  # character offset in the original transcript


def estimate_tokens(text: str, config: ChunkingConfig = DEFAULT_CHUNKING) -> int:
    """Rough token estimate from character count."""
    return math.ceil(len(text) / config.chars_per_token)


def needs_chunking(transcript: str, config: ChunkingConfig = DEFAULT_CHUNKING) -> bool:
    """True iff *transcript* is strictly longer than the chunking threshold."""
    return len(transcript) > config.threshold_chars


def _find_boundary(transcript: str, start: int, end: int, config: ChunkingConfig) -> int:
    """Return the cut position for a window ``[start, end)``.

    Searches the last ``boundary_lookback_chars`` of the window plus
    ``boundary_lookahead_chars`` past it for the last sentence ending; keeps
    *end* when none is found.
    """
    search_start = max(start + config.target_chunk_chars - config.boundary_lookback_chars, start)
    region = transcript[search_start : end + config.boundary_lookahead_chars]

    last_match = None
    for last_match in _SENTENCE_END_RE.finditer(region):
        pass

    if last_match is None:
        return end
    return search_start + last_match.end()


def chunk_transcript(
    transcript: str, config: ChunkingConfig = DEFAULT_CHUNKING
) -> list[TranscriptChunk]:
    """Split *transcript* into chunks.

    Args:
        transcript: Full transcript text.
        config: Sizing rules; defaults to :data:`DEFAULT_CHUNKING`.

    Returns:
        Chunks with contiguous indices ``0..N-1``, each with ``total == N``.
        A transcript under the threshold yields exactly one chunk equal to
        the input.
    """
    if not needs_chunking(transcript, config):
        return [TranscriptChunk(text=transcript, index=0, total=1, start_offset=0)]

    chunks: list[TranscriptChunk] = []
    length = len(transcript)
    pos = 0

    while pos < length:
        end = min(pos + config.target_chunk_chars, length)
        if end < length:
            end = _find_boundary(transcript, pos, end, config)

        raw = transcript[pos:end]
        text = raw.strip()
        if text:
            # Offset of the first kept character, after leading whitespace
            start_offset = pos + len(raw) - len(raw.lstrip())
            chunks.append(
                TranscriptChunk(text=text, index=len(chunks), total=0, start_offset=start_offset)
            )

        if end >= length:
            break

        # Step back by the overlap, but always make forward progress
        next_pos = end - config.overlap_chars
        if next_pos <= pos:
            next_pos = end
        pos = next_pos

    for chunk in chunks:
        chunk.total = len(chunks)

    return chunks


def chunk_context_prefix(chunk: TranscriptChunk) -> str:
    """Prompt prefix telling the model which part of the transcript it sees."""
    if chunk.total == 1:
        return ""
    return f"[This is part {chunk.index + 1} of {chunk.total} of the transcript]\n\n"
