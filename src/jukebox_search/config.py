"""Search configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class SearchConfig(BaseSettings):
    """All search configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Directories --
    tmp_path: Path = Path("/var/lib/jukebox/tmp")
    log_dir: Path = Path("/var/log/jukebox")

    # -- External tool --
    ytdlp_bin: str = "yt-dlp"
    tool_timeout: float = 120.0

    # -- YouTube Data API --
    yt_keys: list[str] = Field(default_factory=list)
    api_base_url: str = "https://www.googleapis.com/youtube/v3"
    http_timeout: float = 10.0

    # -- Behavior --
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("tool_timeout", "http_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value

    def ensure_dirs(self) -> None:
        """Create all required directories if they don't exist."""
        for d in (self.tmp_path, self.log_dir):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigError(f"Cannot create directory {d}: {e}") from e

    def warn_if_unconfigured(self) -> None:
        """Log a warning when no YouTube API key is registered."""
        if not self.yt_keys:
            logger.bind(stage="config").warning(
                "No YouTube API key registered, searches will use yt-dlp only"
            )

    def setup_logging(self) -> None:
        """Configure loguru for the search engine."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<10} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        level = "DEBUG" if self.debug else self.log_level.upper()
        logger.add(
            sys.stderr,
            format=log_format,
            level=level,
            filter=_default_extra,
        )

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "search.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
