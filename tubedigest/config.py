from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    assemblyai_api_key: str = ""  # Optional: audio fallback tier is skipped if absent

    # Supabase (history store)
    supabase_url: str = ""
    supabase_key: str = ""

    # App config
    llm_model: str = "claude-sonnet-4-20250514"

    # Caption tier
    caption_language: str = "en"

    # Audio tier
    max_audio_duration_seconds: int = 3 * 60 * 60
    audio_client_strategies: list[str] = ["ios", "android", "tv_embedded", "web"]
    audio_download_timeout_seconds: float = 300.0
    ytdlp_binary: str = "yt-dlp"
    ytdlp_cookies_browser: str = "chrome"
    ytdlp_timeout_seconds: float = 600.0

    # Transcription
    assemblyai_speech_models: list[str] = ["universal-3-pro"]

    # Metadata
    metadata_timeout_seconds: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
