"""Jukebox search -- resolve media URLs and text queries into track metadata.

Core modules:
    config    -- Search configuration via pydantic-settings (.env + env vars)
    cli       -- Click CLI entry point
    engine    -- Resolution facade: classify, dispatch per provider, normalize
    providers -- Fixed provider catalog and input classification
    ytdlp     -- yt-dlp subprocess wrapper with per-call working directories.
                 Metadata only, no media is downloaded.
    normalize -- Raw document -> canonical Track mapping (field synonyms,
                 seconds and ISO-8601 durations)
    schemas   -- pydantic models for yt-dlp info documents and API responses
    models    -- Track record, request kinds, shared constants

Subpackages:
    api -- YouTube Data API client with quota-aware key fallback
"""

from .engine import SearchEngine
from .models import Track

__all__ = ["SearchEngine", "Track"]
