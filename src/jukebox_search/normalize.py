"""Map raw provider documents onto the canonical Track record.

Two entry points, one per document shape:
    info_to_track  -- yt-dlp info documents (every provider)
    video_to_track -- YouTube Data API video resources

Neither raises on a bad duration: it is logged and recorded as zero.
"""

import math
from datetime import timedelta
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .models import YOUTUBE_WATCH_URL, Track
from .schemas import ApiVideo, InfoDocument

log = logger.bind(stage="normalize")

_TIMEDELTA = TypeAdapter(timedelta)


def parse_duration(raw: Any) -> int:
    """Parse a seconds count from a tool-native duration field.

    Accepts ints, floats and strings ("245", "245.7", '"245.7"'); the
    fractional part is dropped. Anything else becomes 0.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        if not math.isfinite(raw):
            log.warning(f"Non-finite duration {raw!r}, using 0")
            return 0
        seconds = int(raw)
        if seconds < 0:
            log.warning(f"Negative duration {raw!r}, using 0")
            return 0
        return seconds

    text = str(raw).strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    text = text.split(".", 1)[0]
    try:
        seconds = int(text)
    except ValueError:
        log.warning(f"Unparseable duration {raw!r}, using 0")
        return 0
    if seconds < 0:
        log.warning(f"Negative duration {raw!r}, using 0")
        return 0
    return seconds


def iso_duration_to_seconds(period: str | None) -> int:
    """Convert an ISO-8601 period ("PT4M5S", "P1DT2H") to whole seconds."""
    if not period:
        log.warning("Missing ISO-8601 duration, using 0")
        return 0
    try:
        delta = _TIMEDELTA.validate_python(period)
    except ValidationError:
        log.warning(f"Unparseable ISO-8601 duration {period!r}, using 0")
        return 0
    return max(int(delta.total_seconds()), 0)


def _first_present(*values: str | None) -> str | None:
    for value in values:
        if value is not None:
            return value
    return None


def info_to_track(doc: InfoDocument, source: str) -> Track:
    """Build a Track from a yt-dlp info document.

    Synonyms are resolved first-present-wins: title before track, artist
    before uploader. Album has no synonym.
    """
    if not doc.webpage_url:
        raise ValueError("info document has no webpage_url")
    return Track(
        url=doc.webpage_url,
        source=source,
        track=_first_present(doc.title, doc.track),
        artist=_first_present(doc.artist, doc.uploader),
        album=doc.album,
        album_art_url=doc.thumbnail,
        duration=parse_duration(doc.duration),
    )


def video_to_track(video: ApiVideo, source: str) -> Track:
    """Build a Track from a YouTube Data API video resource."""
    snippet = video.snippet
    medium = snippet.thumbnails.medium
    return Track(
        url=YOUTUBE_WATCH_URL + video.id,
        source=source,
        track=snippet.title,
        artist=snippet.channelTitle,
        album=None,
        album_art_url=medium.url if medium else None,
        duration=iso_duration_to_seconds(video.contentDetails.duration),
    )


def info_documents_to_tracks(docs: list[InfoDocument], source: str) -> list[Track]:
    """Normalize a batch, skipping documents that cannot yield a Track."""
    tracks = []
    for doc in docs:
        try:
            tracks.append(info_to_track(doc, source))
        except ValueError as e:
            log.warning(f"Skipping document from {source}: {e}")
    log.debug(f"Normalized {len(tracks)}/{len(docs)} documents from {source}")
    return tracks
