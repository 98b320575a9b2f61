"""Pipeline configuration: output/source enums and the ChunkingConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutputKind(str, Enum):
    """Kinds of document the generation step can produce from a transcript."""

    SUMMARY = "summary"
    KEY_POINTS = "keypoints"
    OUTLINE = "outline"


class TranscriptSource(str, Enum):
    """Which acquisition tier produced a transcript."""

    CAPTIONS = "captions"
    ASSEMBLYAI = "assemblyai"


@dataclass(frozen=True)
class ChunkingConfig:
    """Immutable sizing rules for splitting long transcripts.

    Sizes are expressed in estimated tokens and converted to characters
    with a fixed chars-per-token ratio (roughly 4 for English text).
    """

    chars_per_token: int = 4
    threshold_tokens: int = 25_000
    target_chunk_tokens: int = 20_000
    overlap_tokens: int = 500
    boundary_lookback_chars: int = 2_000
    boundary_lookahead_chars: int = 500

    @property
    def threshold_chars(self) -> int:
        return self.threshold_tokens * self.chars_per_token

    @property
    def target_chunk_chars(self) -> int:
        return self.target_chunk_tokens * self.chars_per_token

    @property
    def overlap_chars(self) -> int:
        return self.overlap_tokens * self.chars_per_token


DEFAULT_CHUNKING = ChunkingConfig()
