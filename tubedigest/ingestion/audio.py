"""Audio tier, step 1: download the raw audio track of a video.

Extraction runs through an ordered list of client strategies (yt-dlp
``player_client`` identities), then falls back to running the yt-dlp
command-line tool with browser cookies. The platform serves different
manifests to different declared clients and which ones work changes over
time, so the list is configurable rather than hard-coded.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import tempfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import yt_dlp

from tubedigest.config import settings
from tubedigest.errors import (
    AgeRestrictedError,
    DurationExceededError,
    ExtractionError,
    RegionBlockedError,
    VideoUnavailableError,
)
from tubedigest.ingestion.models import AudioPayload

logger = logging.getLogger(__name__)

# Max characters of yt-dlp stderr carried into error messages
MAX_DIAGNOSTIC_CHARS = 1200

_AGE_RE = re.compile(r"\bage\b|age[- ]restrict")

# yt-dlp output when --match-filter rejects the video
_FILTERED_MARKER = "does not pass filter"


@dataclass(frozen=True)
class ClientStrategy:
    """A named client identity used when requesting the download manifest."""

    name: str
    player_clients: tuple[str, ...]

    def ydl_options(self) -> dict[str, Any]:
        return {
            "format": "bestaudio/best",
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "extractor_args": {"youtube": {"player_client": list(self.player_clients)}},
        }


def build_client_strategies(names: Iterable[str]) -> list[ClientStrategy]:
    """One single-client strategy per name, keeping the given order."""
    return [ClientStrategy(name=name, player_clients=(name,)) for name in names]


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def classify_extraction_error(message: str) -> ExtractionError:
    """Map a raw extractor/downloader message to the most specific error."""
    lowered = message.lower()
    if "private" in lowered or "unavailable" in lowered:
        return VideoUnavailableError()
    if "not a bot" in lowered:
        # yt-dlp bot check, not an age gate
        return ExtractionError(f"Failed to extract audio: {message}")
    if _AGE_RE.search(lowered) or "sign in" in lowered:
        return AgeRestrictedError()
    if "region" in lowered or "country" in lowered:
        return RegionBlockedError()
    return ExtractionError(f"Failed to extract audio: {message}")


def _format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def _load_info(url: str, options: dict[str, Any], process: bool = True) -> dict[str, Any]:
    """Run yt-dlp metadata extraction (no download) and return the info dict."""
    with yt_dlp.YoutubeDL(options) as ydl:
        info = ydl.extract_info(url, download=False, process=process)
    if not info:
        raise ExtractionError("No video information returned")
    return dict(info)


def _download_stream(url: str, headers: dict[str, str], timeout: float) -> bytes:
    """Read a media URL fully into memory."""
    buffer = bytearray()
    with httpx.stream(
        "GET", url, headers=headers, timeout=timeout, follow_redirects=True
    ) as response:
        response.raise_for_status()
        for chunk in response.iter_bytes():
            buffer.extend(chunk)
    return bytes(buffer)


def _run_downloader(cmd: list[str], timeout: float) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as exc:
        raise ExtractionError(f"{cmd[0]} not installed") from exc
    except subprocess.TimeoutExpired as exc:
        raise ExtractionError(f"Audio download timed out after {timeout:.0f}s") from exc
    except OSError as exc:
        raise ExtractionError(f"Could not run {cmd[0]}: {exc}") from exc


class AudioExtractor:
    """Downloads audio for a video, trying each client strategy in turn.

    Strategies are attempted sequentially; any failure other than the
    duration limit is logged and the next one is tried. When all of them
    fail the yt-dlp command-line tool is invoked as a last resort.
    """

    def __init__(
        self,
        strategies: Sequence[ClientStrategy] | None = None,
        *,
        max_duration_seconds: float | None = None,
        ytdlp_binary: str | None = None,
        cookies_browser: str | None = None,
        download_timeout: float | None = None,
        ytdlp_timeout: float | None = None,
    ) -> None:
        self.strategies = list(
            strategies
            if strategies is not None
            else build_client_strategies(settings.audio_client_strategies)
        )
        self.max_duration_seconds = (
            max_duration_seconds
            if max_duration_seconds is not None
            else settings.max_audio_duration_seconds
        )
        self.ytdlp_binary = ytdlp_binary or settings.ytdlp_binary
        self.cookies_browser = (
            cookies_browser if cookies_browser is not None else settings.ytdlp_cookies_browser
        )
        self.download_timeout = download_timeout or settings.audio_download_timeout_seconds
        self.ytdlp_timeout = ytdlp_timeout or settings.ytdlp_timeout_seconds

    def extract(self, video_id: str) -> AudioPayload:
        """Return the audio payload for *video_id*.

        Raises:
            DurationExceededError: The video is longer than the configured maximum.
                Raised before any strategy is attempted when the duration is known;
                the downloader fallback applies the same limit through a match filter.
            ExtractionError: Every strategy and the downloader failed (may be one of
                the more specific VideoUnavailable/AgeRestricted/RegionBlocked errors).
        """
        url = watch_url(video_id)

        duration = self._probe_duration(url)
        self._check_duration(duration)

        for strategy in self.strategies:
            try:
                payload = self._extract_with_strategy(url, strategy, duration)
            except DurationExceededError:
                raise
            except Exception as exc:
                logger.warning(
                    "Audio strategy %r failed for %s: %s", strategy.name, video_id, exc
                )
                continue
            logger.info(
                "Audio for %s extracted with strategy %r (%d bytes)",
                video_id,
                strategy.name,
                payload.size_bytes,
            )
            return payload

        logger.warning(
            "All %d client strategies failed for %s; falling back to %s",
            len(self.strategies),
            video_id,
            self.ytdlp_binary,
        )
        return self._extract_with_downloader(video_id, url, duration)

    def _probe_duration(self, url: str) -> float | None:
        """Read the declared duration without resolving any stream formats."""
        options = {"quiet": True, "no_warnings": True, "noplaylist": True}
        try:
            info = _load_info(url, options, process=False)
        except Exception as exc:
            logger.warning("Duration probe failed for %s: %s", url, exc)
            return None
        duration = info.get("duration")
        return float(duration) if duration else None

    def _check_duration(self, duration: float | None) -> None:
        if duration is None or duration <= self.max_duration_seconds:
            return
        raise self._duration_error(duration)

    def _duration_error(self, duration: float | None) -> DurationExceededError:
        max_hours = self.max_duration_seconds / 3600
        actual = f" ({_format_duration(duration)})" if duration is not None else ""
        return DurationExceededError(
            f"Video is too long for transcription{actual}. "
            f"Maximum supported duration is {max_hours:g} hours. "
            "Try a shorter video or one with YouTube captions."
        )

    def _extract_with_strategy(
        self, url: str, strategy: ClientStrategy, duration: float | None
    ) -> AudioPayload:
        info = _load_info(url, strategy.ydl_options())

        if duration is None and info.get("duration"):
            duration = float(info["duration"])
            self._check_duration(duration)

        stream_url = info.get("url")
        if not stream_url:
            raise ExtractionError("No audio format available for this video")

        estimated_size = info.get("filesize") or info.get("filesize_approx")
        logger.info(
            "Downloading audio via %r: ~%s MB, duration: %s min",
            strategy.name,
            round(estimated_size / (1024 * 1024)) if estimated_size else "unknown",
            round(duration / 60) if duration else "unknown",
        )

        data = _download_stream(stream_url, info.get("http_headers") or {}, self.download_timeout)
        if not data:
            raise ExtractionError("Downloaded audio stream was empty")

        return AudioPayload(
            data=data,
            duration_seconds=duration,
            estimated_size_bytes=estimated_size,
            strategy=strategy.name,
        )

    def _downloader_command(self, url: str, output_path: str) -> list[str]:
        cmd = [
            self.ytdlp_binary,
            "-f",
            "bestaudio/best",
            "-o",
            output_path,
            "--no-playlist",
            "--no-warnings",
            # Skips the download when the declared duration is over the limit
            "--match-filter",
            f"duration <=? {self.max_duration_seconds:.0f}",
        ]
        clients = [c for s in self.strategies for c in s.player_clients]
        if clients:
            cmd.extend(["--extractor-args", f"youtube:player_client={','.join(clients)}"])
        if self.cookies_browser:
            cmd.extend(["--cookies-from-browser", self.cookies_browser])
        cmd.append(url)
        return cmd

    def _extract_with_downloader(
        self, video_id: str, url: str, duration: float | None
    ) -> AudioPayload:
        try:
            tmp_dir = tempfile.mkdtemp(prefix="tubedigest_")
        except OSError as exc:
            raise ExtractionError(f"Could not create a download directory: {exc}") from exc

        output_path = os.path.join(tmp_dir, f"{video_id}.audio")
        try:
            result = _run_downloader(self._downloader_command(url, output_path), self.ytdlp_timeout)
            output = f"{result.stdout or ''}\n{result.stderr or ''}"
            if result.returncode != 0:
                diagnostic = (result.stderr or result.stdout or "download failed").strip()
                diagnostic = diagnostic[-MAX_DIAGNOSTIC_CHARS:]
                logger.warning(
                    "%s exited with %d for %s: %s",
                    self.ytdlp_binary,
                    result.returncode,
                    video_id,
                    diagnostic,
                )
                raise classify_extraction_error(diagnostic)

            if _FILTERED_MARKER in output:
                raise self._duration_error(None)

            path = Path(output_path)
            try:
                data = path.read_bytes() if path.is_file() else b""
            except OSError as exc:
                raise ExtractionError(f"Could not read downloaded audio: {exc}") from exc
            if not data:
                raise ExtractionError(f"{self.ytdlp_binary} finished but produced no audio")

            return AudioPayload(
                data=data,
                duration_seconds=duration,
                estimated_size_bytes=len(data),
                strategy="downloader",
            )
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)
